"""
Slack Event and Interaction Handlers

Handles outbound message delivery for the daily horoscope.
"""

from .delivery_handler import SlackDeliveryHandler

__all__ = ['SlackDeliveryHandler']
