"""
Runtime Settings

Environment-driven configuration for the daily horoscope bot:
- Slack and OpenAI credentials
- Birthdate profile field and excluded users
- Schedule (time zone, hour, minute, weekdays)
"""

import os
import datetime
import logging
from dataclasses import dataclass, field
from typing import List, Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Asia/Seoul"


def _split_names(raw: str) -> List[str]:
    return [name.strip() for name in raw.split(",") if name.strip()]


@dataclass
class HoroscopeSettings:
    """Configuration for the daily horoscope broadcast"""
    slack_bot_token: str = ""
    slack_signing_secret: str = ""
    slack_app_token: str = ""
    openai_api_key: str = ""
    openai_model: Optional[str] = None
    port: int = 3000

    # Slack custom profile field ID (e.g. "Xf0123ABCD") holding the birthdate
    birthdate_field_key: str = ""
    exception_user_list: List[str] = field(default_factory=list)

    timezone: str = DEFAULT_TIMEZONE
    hour: int = 10
    minute: int = 30
    days_of_week: str = "mon-fri"

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_env_files: bool = True) -> "HoroscopeSettings":
        """Build settings from environment variables (.env.local first, then .env)"""
        if load_env_files:
            load_dotenv('.env.local', override=True)
            load_dotenv()

        settings = cls(
            slack_bot_token=os.getenv("SLACK_BOT_TOKEN", ""),
            slack_signing_secret=os.getenv("SLACK_SIGNING_SECRET", ""),
            slack_app_token=os.getenv("SLACK_APP_TOKEN", ""),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL") or None,
            port=int(os.getenv("PORT", "3000")),
            birthdate_field_key=os.getenv("BIRTHDATE_FIELD_KEY", ""),
            exception_user_list=_split_names(os.getenv("EXCEPTION_USER_LIST", "")),
            timezone=os.getenv("HOROSCOPE_TIMEZONE", DEFAULT_TIMEZONE),
            hour=int(os.getenv("HOROSCOPE_HOUR", "10")),
            minute=int(os.getenv("HOROSCOPE_MINUTE", "30")),
            days_of_week=os.getenv("HOROSCOPE_DAYS", "mon-fri"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

        # Fail early on a bad zone name rather than at the first firing
        ZoneInfo(settings.timezone)

        if not settings.birthdate_field_key:
            logger.warning("BIRTHDATE_FIELD_KEY is not set - no user will receive a horoscope")

        return settings

    def require(self, *names: str) -> None:
        """Raise RuntimeError if any of the named settings is empty"""
        missing = [name for name in names if not getattr(self, name)]
        if missing:
            env_names = ", ".join(name.upper() for name in missing)
            raise RuntimeError(f"Missing required configuration: {env_names}")


def today_string(tz_name: str, now: Optional[datetime.datetime] = None) -> str:
    """
    Today's date as "YYYY-M-D" (no zero padding) in the given time zone.

    Used for both horoscope cache keys and sent markers, so it must never
    depend on the host time zone.
    """
    tz = ZoneInfo(tz_name)
    if now is None:
        current = datetime.datetime.now(tz)
    elif now.tzinfo is None:
        current = now.replace(tzinfo=tz)
    else:
        current = now.astimezone(tz)
    return f"{current.year}-{current.month}-{current.day}"
