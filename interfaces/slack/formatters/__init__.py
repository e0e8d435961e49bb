"""
Slack Content Formatters

Handles conversion of generated content to Slack Block Kit.
"""

from .horoscope_formatter import HoroscopeMessageFormatter

__all__ = ['HoroscopeMessageFormatter']
