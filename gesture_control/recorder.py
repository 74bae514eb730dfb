"""
Fire-and-forget submission of gesture events.

The frame loop hands each accepted action to EventRecorder.submit() and
moves on. Each submission becomes an asyncio task whose result is a
PersistOutcome, so callers that care (shutdown, tests) can await it.
"""
import asyncio
import logging
from collections import Counter
from typing import Set

from .errors import AuthenticationError
from .types import GestureLogProto, PersistOutcome

logger = logging.getLogger(__name__)


class EventRecorder:
    """Dispatches gesture events to a gesture log without blocking."""

    def __init__(self, log: GestureLogProto):
        self.log = log
        self.outcomes: Counter = Counter()
        self._pending: Set[asyncio.Task] = set()

    def submit(self, gesture: str, action: str) -> "asyncio.Task[PersistOutcome]":
        """
        Schedule a gesture event for persistence. Must be called from a
        running event loop. Failures are never retried.

        Args:
            gesture: Gesture kind, e.g. "scroll"
            action: Action description, e.g. "scrolled_down"

        Returns:
            Task resolving to the PersistOutcome
        """
        task = asyncio.get_running_loop().create_task(self._persist(gesture, action))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _persist(self, gesture: str, action: str) -> PersistOutcome:
        try:
            await self.log.record(gesture, action)
        except AuthenticationError:
            logger.warning("Gesture %s/%s not logged: not authenticated", gesture, action)
            outcome = PersistOutcome.AUTH_FAILED
        except Exception as e:
            logger.warning("Gesture %s/%s not logged: %s", gesture, action, e)
            outcome = PersistOutcome.TRANSPORT_FAILED
        else:
            logger.debug("Gesture %s/%s logged", gesture, action)
            outcome = PersistOutcome.SUCCEEDED

        self.outcomes[outcome] += 1
        return outcome

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every submitted event to settle."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
