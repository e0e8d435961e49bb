"""
Scheduled Messages and Notifications

Handles time-based Slack interactions:
- Daily horoscope broadcast
"""

from .daily_horoscope import DailyHoroscopeJob

__all__ = ['DailyHoroscopeJob']
