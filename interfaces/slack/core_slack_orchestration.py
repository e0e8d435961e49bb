import logging
from typing import Dict, Any, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from openai import AsyncOpenAI
from slack_bolt.async_app import AsyncApp
from slack_bolt.adapter.fastapi.async_handler import AsyncSlackRequestHandler
from slack_bolt.adapter.socket_mode.aiohttp import AsyncSocketModeHandler

from agents.horoscope_agent import HoroscopeAgent
from runtime.settings import HoroscopeSettings

from .services.cache_service import SlackCacheService
from .services.user_service import SlackUserService
from .handlers.delivery_handler import SlackDeliveryHandler
from .features.scheduled.daily_horoscope import DailyHoroscopeJob, JOB_ID

logger = logging.getLogger(__name__)


class SlackInterface:
    """
    Daily horoscope bot - wires the Slack app, caches, OpenAI and the scheduler
    """

    def __init__(self, settings: Optional[HoroscopeSettings] = None,
                 openai_client=None, scheduler=None):
        self.settings = settings or HoroscopeSettings.from_env()
        self.settings.require("slack_bot_token", "openai_api_key")
        if not self.settings.slack_app_token:
            # HTTP mode needs request signing; Socket Mode does not
            self.settings.require("slack_signing_secret")

        # Initialize Slack app
        self.app = AsyncApp(
            token=self.settings.slack_bot_token,
            signing_secret=self.settings.slack_signing_secret or None
        )

        # Process-lifetime caches shared by the services below
        self.cache_service = SlackCacheService()
        self.user_service = SlackUserService(
            self.cache_service,
            self.app.client,
            birthdate_field_key=self.settings.birthdate_field_key,
            exception_user_list=self.settings.exception_user_list
        )
        self.horoscope_agent = HoroscopeAgent(
            openai_client or AsyncOpenAI(api_key=self.settings.openai_api_key),
            self.cache_service,
            timezone=self.settings.timezone,
            model=self.settings.openai_model
        )
        self.delivery_handler = SlackDeliveryHandler(self.app.client, self.user_service, self.horoscope_agent)
        self.daily_job = DailyHoroscopeJob(
            self.user_service, self.delivery_handler, self.cache_service.sent_marker, self.settings
        )

        self.scheduler = scheduler or AsyncIOScheduler(timezone=self.settings.timezone)
        self.socket_mode_handler: Optional[AsyncSocketModeHandler] = None

        # Create FastAPI handler
        self.handler = AsyncSlackRequestHandler(self.app)

    async def start(self):
        """Connect Socket Mode (when an app token is configured), then start the scheduler"""
        # Connect first so a failed connection leaves no scheduler running
        if self.settings.slack_app_token:
            handler = AsyncSocketModeHandler(self.app, self.settings.slack_app_token)
            await handler.connect_async()
            self.socket_mode_handler = handler
            logger.info("⚡️ Connected to Slack in Socket Mode")

        self.daily_job.schedule(self.scheduler)
        if not self.scheduler.running:
            self.scheduler.start()
        logger.info("Daily horoscope scheduler started")

    async def stop(self):
        """Stop the scheduler and close Socket Mode"""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        if self.socket_mode_handler:
            await self.socket_mode_handler.close_async()
            self.socket_mode_handler = None
        logger.info("Daily horoscope scheduler stopped")

    def get_status(self) -> Dict[str, Any]:
        """Cache statistics and the next scheduled broadcast"""
        job = self.scheduler.get_job(JOB_ID)
        next_run = getattr(job, "next_run_time", None) if job else None
        return {
            "timezone": self.settings.timezone,
            "schedule": {
                "hour": self.settings.hour,
                "minute": self.settings.minute,
                "days_of_week": self.settings.days_of_week,
            },
            "next_run_time": next_run.isoformat() if next_run else None,
            "socket_mode": self.socket_mode_handler is not None,
            "cache": self.cache_service.get_cache_stats(),
        }

    def get_fastapi_handler(self):
        """Get FastAPI handler for webhook integration"""
        return self.handler


# For FastAPI integration
def create_slack_app(settings: Optional[HoroscopeSettings] = None) -> SlackInterface:
    """Create the horoscope Slack interface for FastAPI"""
    return SlackInterface(settings)
