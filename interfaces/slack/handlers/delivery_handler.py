"""
Slack Delivery Handler

Sends one user their daily horoscope as a direct message:
- Users without a birthdate, or on the exclusion list, are skipped silently
- A generated horoscope is sent as quoted Block Kit content
- A failed generation gets a plain-text apology instead

Send errors are not caught here; the batch that called us decides what to do.
"""

import logging

from ..formatters.horoscope_formatter import HoroscopeMessageFormatter

logger = logging.getLogger(__name__)


class SlackDeliveryHandler:
    """Delivers the daily horoscope to a single user"""

    def __init__(self, app_client, user_service, horoscope_agent):
        self.app_client = app_client
        self.user_service = user_service
        self.horoscope_agent = horoscope_agent

    async def send_daily_horoscope_to_user(self, user_id: str) -> None:
        profile = await self.user_service.get_user_profile(user_id)

        birthdate = self.user_service.get_birthdate(profile)
        if not birthdate:
            logger.debug(f"DELIVERY: no birthdate for {user_id}, skipping")
            return

        if self.user_service.is_excluded(profile):
            logger.info(f"DELIVERY: {user_id} is on the exclusion list, skipping")
            return

        horoscope = await self.horoscope_agent.get_horoscope(user_id, birthdate)
        messages = self.horoscope_agent.agent_config

        # A user ID doubles as the ID of the DM channel with that user
        if horoscope:
            blocks = HoroscopeMessageFormatter.build_blocks(
                user_id, horoscope, messages['greeting'], messages['heading']
            )
            await self.app_client.chat_postMessage(
                channel=user_id,
                blocks=blocks,
                text=messages['notification_text']  # Fallback for notifications
            )
            logger.info(f"DELIVERY: horoscope sent to {user_id}")
        else:
            await self.app_client.chat_postMessage(
                channel=user_id,
                text=messages['fallback_message']
            )
            logger.warning(f"DELIVERY: horoscope unavailable, fallback sent to {user_id}")
