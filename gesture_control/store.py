"""
In-memory gesture event store, indexed by user.
"""
import logging
import threading
import time
from collections import defaultdict
from typing import Dict, List, Optional

from .errors import AuthenticationError
from .types import GestureEvent

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10


class GestureStore:
    """Keeps gesture events per user in insertion order."""

    def __init__(self):
        self._events: Dict[str, List[GestureEvent]] = defaultdict(list)
        self._lock = threading.Lock()

    def insert(self, user_id: Optional[str], gesture: str, action: str,
               timestamp: Optional[int] = None) -> GestureEvent:
        """
        Store a gesture event for a user.

        Args:
            user_id: Authenticated user id
            gesture: Gesture kind, e.g. "click"
            action: Action description, e.g. "clicked_at_10,20"
            timestamp: Epoch milliseconds, defaults to now

        Returns:
            The stored GestureEvent

        Raises:
            AuthenticationError: if user_id is not set
        """
        if not user_id:
            raise AuthenticationError()

        event = GestureEvent(
            gesture=gesture,
            action=action,
            timestamp=int(time.time() * 1000) if timestamp is None else timestamp,
            user_id=user_id,
        )
        with self._lock:
            self._events[user_id].append(event)
        logger.debug("Stored %s/%s for %s", gesture, action, user_id)
        return event

    def recent(self, user_id: Optional[str], limit: int = RECENT_LIMIT) -> List[GestureEvent]:
        """
        Return a user's most recent events, newest first.

        An unset user gets an empty list rather than an error.
        """
        if not user_id or limit <= 0:
            return []
        with self._lock:
            events = list(self._events.get(user_id, ()))
        # Stable sort keeps insertion order for equal timestamps
        events.sort(key=lambda e: e.timestamp)
        return events[::-1][:limit]

    def count(self, user_id: str) -> int:
        with self._lock:
            return len(self._events.get(user_id, ()))
