"""
Slack Cache Service

In-memory caches used by the daily horoscope broadcast:
- User profiles, fetched once per process lifetime
- Generated horoscopes, keyed by user and date
- Sent markers, reset when the date rolls over

Nothing here is persisted and nothing is evicted. The process is expected
to restart regularly (e.g. daily deploys).
"""

import logging
from typing import Dict, Any, Optional, Set

logger = logging.getLogger(__name__)


def day_key(user_id: str, date_string: str) -> str:
    """Composite key used by both the horoscope cache and the sent marker"""
    return f"{user_id}:{date_string}"


class SentMarker:
    """Records which users were already handled for the current date"""

    def __init__(self):
        self.date: Optional[str] = None
        self._keys: Set[str] = set()

    def roll_over(self, date_string: str) -> bool:
        """Clear every marker if the date changed. Returns True when cleared."""
        if self.date == date_string:
            return False

        previous = self.date
        self._keys.clear()
        self.date = date_string
        if previous is not None:
            logger.info(f"SENT-MARKER: date changed {previous} -> {date_string}, markers cleared")
        return True

    def is_sent(self, user_id: str, date_string: str) -> bool:
        return day_key(user_id, date_string) in self._keys

    def mark_sent(self, user_id: str, date_string: str) -> None:
        self._keys.add(day_key(user_id, date_string))

    def __len__(self) -> int:
        return len(self._keys)


class SlackCacheService:
    """Centralized in-memory caches for the horoscope broadcast"""

    def __init__(self):
        self.profile_cache: Dict[str, Dict[str, Any]] = {}  # { 'USER_ID': profile }
        self.horoscope_cache: Dict[str, str] = {}  # { 'USER_ID:YYYY-M-D': text }
        self.sent_marker = SentMarker()

    # === Profiles ===

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.profile_cache.get(user_id)

    def store_profile(self, user_id: str, profile: Dict[str, Any]) -> None:
        self.profile_cache[user_id] = profile

    # === Horoscopes ===

    def get_horoscope(self, user_id: str, date_string: str) -> Optional[str]:
        return self.horoscope_cache.get(day_key(user_id, date_string))

    def store_horoscope(self, user_id: str, date_string: str, text: str) -> None:
        self.horoscope_cache[day_key(user_id, date_string)] = text

    # === Stats ===

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        return {
            "profile_cache_count": len(self.profile_cache),
            "horoscope_cache_count": len(self.horoscope_cache),
            "sent_marker_date": self.sent_marker.date,
            "sent_marker_count": len(self.sent_marker),
        }

