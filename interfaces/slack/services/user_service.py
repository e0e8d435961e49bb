"""
Slack User Service

Resolves user profiles (with in-process caching) and enumerates the
workspace roster for the daily broadcast.
"""

import json
import logging
from typing import Dict, Any, Optional, List

from .cache_service import SlackCacheService

logger = logging.getLogger(__name__)

USERS_LIST_PAGE_SIZE = 500


class SlackUserService:
    """Service for Slack user profiles and the workspace roster"""

    def __init__(self, cache_service: SlackCacheService, slack_client=None,
                 birthdate_field_key: str = "", exception_user_list: Optional[List[str]] = None):
        self.cache_service = cache_service
        self.slack_client = slack_client
        self.birthdate_field_key = birthdate_field_key
        self.exception_user_list = list(exception_user_list or [])

    async def get_user_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a user's profile, fetching from Slack only on the first call.

        Failed lookups return None and are not cached, so the next call
        tries the API again.
        """
        cached = self.cache_service.get_profile(user_id)
        if cached is not None:
            logger.debug(f"PROFILE: cache hit for {user_id}")
            return cached

        try:
            response = await self.slack_client.users_profile_get(user=user_id)
            profile = response.get("profile")
            if not isinstance(profile, dict):
                logger.error(f"PROFILE: malformed users.profile.get response for {user_id}")
                return None

            logger.info(f"PROFILE: fetched {user_id} ({profile.get('real_name', '')})")
            logger.debug(f"PROFILE: fields for {user_id}: {json.dumps(profile.get('fields'), ensure_ascii=False)}")

            self.cache_service.store_profile(user_id, profile)
            return profile

        except Exception as e:
            logger.error(f"PROFILE: error fetching profile for {user_id}: {e}")
            return None

    def get_birthdate(self, profile: Optional[Dict[str, Any]]) -> Optional[str]:
        """Birthdate from the configured custom field, or None if unset"""
        if not profile or not self.birthdate_field_key:
            return None

        # Slack sends an empty list instead of an object when no custom fields are set
        fields = profile.get("fields")
        if not isinstance(fields, dict):
            return None

        entry = fields.get(self.birthdate_field_key) or {}
        value = entry.get("value") if isinstance(entry, dict) else None
        if not value or not str(value).strip():
            return None
        return str(value).strip()

    def is_excluded(self, profile: Dict[str, Any]) -> bool:
        """True if the user's real or display name is on the exclusion list"""
        names = {profile.get("real_name"), profile.get("display_name")}
        return any(name and name in self.exception_user_list for name in names)

    async def get_all_users(self) -> List[Dict[str, Any]]:
        """
        Enumerate every active human member of the workspace.

        Follows users.list cursors until Slack stops returning one. Bots and
        deleted accounts are dropped; order is whatever Slack returns.
        API errors propagate to the caller.
        """
        users: List[Dict[str, Any]] = []
        cursor = None
        pages = 0

        while True:
            response = await self.slack_client.users_list(cursor=cursor, limit=USERS_LIST_PAGE_SIZE)
            pages += 1

            for member in response.get("members") or []:
                if member.get("is_bot") or member.get("deleted"):
                    continue
                users.append(member)

            cursor = (response.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                break

        logger.info(f"ROSTER: {len(users)} eligible users across {pages} page(s)")
        return users
