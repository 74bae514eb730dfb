"""
Gesture log clients: an in-process one backed by GestureStore and an
HTTP one talking to the backend server.
"""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import requests

from .errors import AuthenticationError, TransportError
from .store import RECENT_LIMIT, GestureStore
from .types import GestureEvent

logger = logging.getLogger(__name__)


class LocalGestureLog:
    """Writes straight into a GestureStore on behalf of one user."""

    def __init__(self, store: GestureStore, user_id: Optional[str] = None):
        self.store = store
        self.user_id = user_id

    async def record(self, gesture: str, action: str) -> None:
        self.store.insert(self.user_id, gesture, action)

    async def fetch_recent(self) -> List[GestureEvent]:
        return self.store.recent(self.user_id, RECENT_LIMIT)


class HttpGestureLog:
    """
    Client for the backend's /gestures endpoints.

    requests is blocking, so calls run on a single worker thread to keep
    the frame loop responsive. One worker means the shared Session is
    never used concurrently and gestures reach the server in submit order.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout_s: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout_s = timeout_s
        self.session = requests.Session()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="gesture-log")

    def _headers(self) -> dict:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _post_gesture(self, gesture: str, action: str) -> None:
        try:
            response = self.session.post(
                f"{self.base_url}/gestures",
                json={"gesture": gesture, "action": action},
                headers=self._headers(),
                timeout=self.timeout_s,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Gesture log unreachable: {e}") from e

        if response.status_code == 401:
            raise AuthenticationError()
        if not response.ok:
            raise TransportError(f"Gesture log returned {response.status_code}: {response.text}")

    def _get_recent(self) -> List[GestureEvent]:
        try:
            response = self.session.get(
                f"{self.base_url}/gestures/recent",
                headers=self._headers(),
                timeout=self.timeout_s,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Gesture log unreachable: {e}") from e

        if response.status_code == 401:
            return []
        if not response.ok:
            raise TransportError(f"Gesture log returned {response.status_code}: {response.text}")

        return [GestureEvent(**item) for item in response.json()]

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    async def record(self, gesture: str, action: str) -> None:
        """
        Log a gesture for the token's user.

        Raises:
            AuthenticationError: if the server rejects the token
            TransportError: on connection problems or other HTTP errors
        """
        await self._run(self._post_gesture, gesture, action)

    async def fetch_recent(self) -> List[GestureEvent]:
        """Latest gestures, newest first. Empty when not authenticated."""
        return await self._run(self._get_recent)

    def login(self, username: str, password: str) -> str:
        """Exchange credentials for a token and keep it for later calls."""
        try:
            response = self.session.post(
                f"{self.base_url}/auth/token",
                json={"username": username, "password": password},
                timeout=self.timeout_s,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Gesture log unreachable: {e}") from e

        if response.status_code == 401:
            raise AuthenticationError("Invalid username or password")
        if not response.ok:
            raise TransportError(f"Login failed with {response.status_code}: {response.text}")

        self.token = response.json()["access_token"]
        logger.info("Logged in to gesture log as %s", username)
        return self.token

    def close(self) -> None:
        """Finish queued requests, then release the worker and the HTTP session."""
        self._executor.shutdown(wait=True)
        self.session.close()
