"""
Slack Business Logic Services

Core services for the daily horoscope broadcast:
- Profile, horoscope and sent-marker caching
- User profile resolution
- Workspace roster enumeration
"""

from .cache_service import SlackCacheService, SentMarker
from .user_service import SlackUserService

__all__ = ['SlackCacheService', 'SentMarker', 'SlackUserService']
