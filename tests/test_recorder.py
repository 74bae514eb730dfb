"""
Test cases for gesture event submission and the gesture log clients.
"""
import sys
import threading
import time
import unittest
from pathlib import Path
from unittest.mock import MagicMock

import requests

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_control.errors import AuthenticationError, TransportError
from gesture_control.recorder import EventRecorder
from gesture_control.sinks import HttpGestureLog, LocalGestureLog
from gesture_control.store import GestureStore
from gesture_control.types import GestureEvent, GestureLogProto, PersistOutcome


class FailingLog:
    """Gesture log that raises the given exception on every record."""

    def __init__(self, error):
        self.error = error
        self.calls = 0

    async def record(self, gesture, action):
        self.calls += 1
        raise self.error

    async def fetch_recent(self):
        return []


class TestEventRecorder(unittest.IsolatedAsyncioTestCase):

    async def test_success(self):
        store = GestureStore()
        recorder = EventRecorder(LocalGestureLog(store, "alice"))

        outcome = await recorder.submit("scroll", "scrolled_down")

        self.assertEqual(outcome, PersistOutcome.SUCCEEDED)
        self.assertEqual(store.recent("alice")[0].action, "scrolled_down")

    async def test_auth_failure(self):
        recorder = EventRecorder(LocalGestureLog(GestureStore(), None))
        self.assertEqual(await recorder.submit("click", "clicked_at_1,2"), PersistOutcome.AUTH_FAILED)

    async def test_transport_failures_are_not_retried(self):
        for error in (TransportError("down"), ValueError("bad payload")):
            log = FailingLog(error)
            recorder = EventRecorder(log)

            self.assertEqual(await recorder.submit("scroll", "scrolled_up"), PersistOutcome.TRANSPORT_FAILED)
            self.assertEqual(log.calls, 1)

    async def test_submit_does_not_block(self):
        recorder = EventRecorder(FailingLog(AuthenticationError()))

        task = recorder.submit("mode_switch", "switched_to_scroll_mode")
        self.assertFalse(task.done())
        self.assertEqual(recorder.pending, 1)

        await recorder.drain()
        self.assertEqual(recorder.pending, 0)
        self.assertEqual(recorder.outcomes[PersistOutcome.AUTH_FAILED], 1)

    def test_logs_implement_protocol(self):
        self.assertIsInstance(LocalGestureLog(GestureStore()), GestureLogProto)
        self.assertIsInstance(HttpGestureLog("http://localhost:8000"), GestureLogProto)


def fake_response(status_code, json_data=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = ""
    response.json.return_value = json_data
    return response


class TestHttpGestureLog(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.log = HttpGestureLog("http://localhost:8000/", token="abc", timeout_s=1.0)
        self.log.session = MagicMock()

    def tearDown(self):
        self.log.close()

    async def test_record(self):
        self.log.session.post.return_value = fake_response(201)

        await self.log.record("click", "clicked_at_3,4")

        self.log.session.post.assert_called_once_with(
            "http://localhost:8000/gestures",
            json={"gesture": "click", "action": "clicked_at_3,4"},
            headers={"Authorization": "Bearer abc"},
            timeout=1.0,
        )

    async def test_record_unauthorized(self):
        self.log.session.post.return_value = fake_response(401)
        with self.assertRaises(AuthenticationError):
            await self.log.record("click", "clicked_at_3,4")

    async def test_record_server_error(self):
        self.log.session.post.return_value = fake_response(500)
        with self.assertRaises(TransportError):
            await self.log.record("click", "clicked_at_3,4")

    async def test_record_connection_error(self):
        self.log.session.post.side_effect = requests.exceptions.ConnectionError("refused")
        with self.assertRaises(TransportError):
            await self.log.record("scroll", "scrolled_up")

    async def test_fetch_recent(self):
        self.log.session.get.return_value = fake_response(200, [
            {"gesture": "scroll", "action": "scrolled_up", "timestamp": 2, "user_id": "alice"},
            {"gesture": "click", "action": "clicked_at_1,1", "timestamp": 1, "user_id": "alice"},
        ])

        events = await self.log.fetch_recent()

        self.assertEqual(events[0], GestureEvent("scroll", "scrolled_up", 2, "alice"))
        self.assertEqual(len(events), 2)

    async def test_fetch_recent_unauthenticated(self):
        self.log.session.get.return_value = fake_response(401)
        self.assertEqual(await self.log.fetch_recent(), [])

    async def test_no_token_sends_no_header(self):
        self.log.token = None
        self.log.session.get.return_value = fake_response(200, [])

        await self.log.fetch_recent()

        _, kwargs = self.log.session.get.call_args
        self.assertEqual(kwargs["headers"], {})

    async def test_records_are_sent_one_at_a_time_in_order(self):
        lock = threading.Lock()
        in_flight = 0
        peak = 0
        sent = []

        def slow_post(url, json, headers, timeout):
            nonlocal in_flight, peak
            with lock:
                in_flight += 1
                peak = max(peak, in_flight)
            time.sleep(0.02)
            with lock:
                in_flight -= 1
                sent.append(json["action"])
            return fake_response(201)

        self.log.session.post.side_effect = slow_post
        recorder = EventRecorder(self.log)
        actions = [f"scrolled_down_{i}" for i in range(8)]

        for action in actions:
            recorder.submit("scroll", action)
        await recorder.drain()

        self.assertEqual(peak, 1)
        self.assertEqual(sent, actions)
        self.assertEqual(recorder.outcomes[PersistOutcome.SUCCEEDED], 8)

    def test_login(self):
        self.log.session.post.return_value = fake_response(200, {"access_token": "xyz", "token_type": "bearer"})
        self.assertEqual(self.log.login("alice", "pw"), "xyz")
        self.assertEqual(self.log.token, "xyz")

        self.log.session.post.return_value = fake_response(401)
        with self.assertRaises(AuthenticationError):
            self.log.login("alice", "wrong")


if __name__ == '__main__':
    unittest.main()
