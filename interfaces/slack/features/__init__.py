"""
Slack App Features

Extended Slack app capabilities:
- Scheduled messages and notifications
"""

__all__ = []
