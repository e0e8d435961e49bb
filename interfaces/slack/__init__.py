"""
Slack Integration Module

Daily horoscope bot for Slack:
- Profile and roster lookups with in-process caching
- LLM-generated horoscopes, cached per user per day
- Block Kit direct messages
- Weekday morning broadcast via APScheduler
"""

from .core_slack_orchestration import SlackInterface, create_slack_app

__all__ = ['SlackInterface', 'create_slack_app']
