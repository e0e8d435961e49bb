"""Tests for profile resolution and roster enumeration."""

import asyncio

import pytest
from slack_sdk.errors import SlackApiError

from conftest import make_profile


# === Profile resolver ===

def test_profile_fetched_once_then_cached(user_service, slack_client):
    first = asyncio.run(user_service.get_user_profile("U1"))
    second = asyncio.run(user_service.get_user_profile("U1"))

    assert first is second
    assert first["real_name"] == "Test User"
    slack_client.users_profile_get.assert_awaited_once_with(user="U1")


def test_profile_failure_returns_none_and_is_not_cached(user_service, slack_client, cache_service):
    slack_client.users_profile_get.side_effect = SlackApiError("user_not_found", {"ok": False})

    assert asyncio.run(user_service.get_user_profile("U1")) is None
    assert cache_service.get_profile("U1") is None

    # Next call retries the lookup
    slack_client.users_profile_get.side_effect = None
    assert asyncio.run(user_service.get_user_profile("U1"))["real_name"] == "Test User"
    assert slack_client.users_profile_get.await_count == 2


def test_malformed_profile_response_returns_none(user_service, slack_client, cache_service):
    slack_client.users_profile_get.return_value = {"ok": True}

    assert asyncio.run(user_service.get_user_profile("U1")) is None
    assert cache_service.profile_cache == {}


def test_get_birthdate(user_service):
    assert user_service.get_birthdate(make_profile(birthdate="1990-05-12")) == "1990-05-12"
    assert user_service.get_birthdate(make_profile(birthdate="  ")) is None
    assert user_service.get_birthdate(make_profile(birthdate="")) is None
    assert user_service.get_birthdate(make_profile(birthdate=None)) is None
    assert user_service.get_birthdate(None) is None


def test_get_birthdate_when_slack_sends_fields_as_list(user_service):
    profile = make_profile()
    profile["fields"] = []
    assert user_service.get_birthdate(profile) is None

    profile["fields"] = None
    assert user_service.get_birthdate(profile) is None


def test_get_birthdate_without_configured_field(cache_service, slack_client):
    from interfaces.slack.services.user_service import SlackUserService

    service = SlackUserService(cache_service, slack_client)
    assert service.get_birthdate(make_profile()) is None


def test_is_excluded_matches_real_or_display_name(user_service):
    assert user_service.is_excluded(make_profile(real_name="Boss Person"))
    assert user_service.is_excluded(make_profile(real_name="B. Person", display_name="Boss Person"))
    assert not user_service.is_excluded(make_profile(real_name="Someone Else"))
    assert not user_service.is_excluded({"real_name": "", "display_name": ""})


# === Roster enumerator ===

def test_get_all_users_follows_cursor_and_filters(user_service, slack_client):
    slack_client.users_list.side_effect = [
        {
            "members": [
                {"id": "U1", "is_bot": False, "deleted": False},
                {"id": "B1", "is_bot": True, "deleted": False},
                {"id": "U2"},
            ],
            "response_metadata": {"next_cursor": "page2"},
        },
        {
            "members": [
                {"id": "U3", "is_bot": False, "deleted": True},
                {"id": "U4", "is_bot": False, "deleted": False},
            ],
            "response_metadata": {"next_cursor": "page3"},
        },
        {
            "members": [{"id": "U5", "is_bot": False, "deleted": False}],
            "response_metadata": {"next_cursor": ""},
        },
    ]

    users = asyncio.run(user_service.get_all_users())

    assert [u["id"] for u in users] == ["U1", "U2", "U4", "U5"]
    cursors = [call.kwargs["cursor"] for call in slack_client.users_list.await_args_list]
    assert cursors == [None, "page2", "page3"]
    assert all(call.kwargs["limit"] == 500 for call in slack_client.users_list.await_args_list)


def test_get_all_users_single_page_drops_bot(user_service, slack_client):
    slack_client.users_list.return_value = {
        "members": [
            {"id": "U1", "is_bot": False, "deleted": False},
            {"id": "B1", "is_bot": True, "deleted": False},
        ]
    }

    users = asyncio.run(user_service.get_all_users())

    assert [u["id"] for u in users] == ["U1"]
    slack_client.users_list.assert_awaited_once()


def test_get_all_users_handles_page_without_members(user_service, slack_client):
    slack_client.users_list.side_effect = [
        {"members": None, "response_metadata": {"next_cursor": "next"}},
        {"members": [{"id": "U1"}], "response_metadata": {}},
    ]

    assert [u["id"] for u in asyncio.run(user_service.get_all_users())] == ["U1"]


def test_get_all_users_propagates_api_errors(user_service, slack_client):
    slack_client.users_list.side_effect = SlackApiError("ratelimited", {"ok": False})

    with pytest.raises(SlackApiError):
        asyncio.run(user_service.get_all_users())


def test_cache_stats_reflect_fetched_profiles(user_service, cache_service):
    asyncio.run(user_service.get_user_profile("U1"))
    asyncio.run(user_service.get_user_profile("U2"))
    cache_service.sent_marker.roll_over("2024-5-3")
    cache_service.sent_marker.mark_sent("U1", "2024-5-3")

    stats = cache_service.get_cache_stats()

    assert stats["profile_cache_count"] == 2
    assert stats["horoscope_cache_count"] == 0
    assert stats["sent_marker_date"] == "2024-5-3"
    assert stats["sent_marker_count"] == 1
