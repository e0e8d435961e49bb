import os
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from interfaces.slack.services.cache_service import SlackCacheService
from interfaces.slack.services.user_service import SlackUserService
from runtime.settings import HoroscopeSettings

BIRTHDATE_FIELD = "Xf0BIRTHDAY"


def make_profile(real_name="Test User", birthdate="1990-05-12", display_name=""):
    """users.profile.get style profile dict"""
    fields = {}
    if birthdate is not None:
        fields[BIRTHDATE_FIELD] = {"value": birthdate, "alt": ""}
    return {
        "real_name": real_name,
        "display_name": display_name,
        "fields": fields,
    }


def make_completion(text):
    """Object shaped like an OpenAI chat completion response"""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))]
    )


def make_openai_client(text="Good things are coming your way today."):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion(text))
    return client


@pytest.fixture
def settings():
    return HoroscopeSettings(
        slack_bot_token="xoxb-test",
        slack_signing_secret="secret",
        openai_api_key="sk-test",
        birthdate_field_key=BIRTHDATE_FIELD,
        exception_user_list=["Boss Person"],
        timezone="Asia/Seoul",
    )


@pytest.fixture
def cache_service():
    return SlackCacheService()


@pytest.fixture
def slack_client():
    client = AsyncMock()
    client.users_profile_get.return_value = {"ok": True, "profile": make_profile()}
    client.users_list.return_value = {"ok": True, "members": [], "response_metadata": {"next_cursor": ""}}
    client.chat_postMessage.return_value = {"ok": True, "ts": "1234567890.123456"}
    return client


@pytest.fixture
def user_service(cache_service, slack_client, settings):
    return SlackUserService(
        cache_service,
        slack_client,
        birthdate_field_key=settings.birthdate_field_key,
        exception_user_list=settings.exception_user_list,
    )
