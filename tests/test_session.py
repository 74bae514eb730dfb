"""
Test cases for the detection loop with a fake camera and hand estimator.
"""
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import numpy as np

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_control.config import GesturesConfig
from gesture_control.controller_mock import MockController
from gesture_control.recorder import EventRecorder
from gesture_control.session import DetectionSession
from gesture_control.sinks import LocalGestureLog
from gesture_control.store import GestureStore
from gesture_control.types import ControllerProto, GestureKind, InteractionState, PersistOutcome
from tests.hands import FRAME_WH, full_hand, grab, point


def blank_frame():
    return np.zeros((FRAME_WH[1], FRAME_WH[0], 3), dtype=np.uint8)


class ScriptedEstimator:
    """Returns (or raises) a scripted result per frame."""

    def __init__(self, results):
        self.results = list(results)

    def __call__(self, frame):
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class SessionTestCase(unittest.IsolatedAsyncioTestCase):

    def make_session(self, results, times, user_id="alice", click_hits=True):
        self.store = GestureStore()
        self.controller = MockController(click_hits=click_hits)
        self.recorder = EventRecorder(LocalGestureLog(self.store, user_id))
        frames = [blank_frame() for _ in results]
        clock = iter(times)
        self.session = DetectionSession(
            frame_source=lambda: frames.pop(0) if frames else None,
            estimator=ScriptedEstimator(results),
            controller=self.controller,
            recorder=self.recorder,
            cfg=GesturesConfig(mode_switch_cooldown_ms=1000, click_cooldown_ms=500, click_threshold_px=50.0),
            viewport_wh=FRAME_WH,
            clock=lambda: next(clock),
        )
        return self.session


class TestDetectionSession(SessionTestCase):

    async def test_mode_switch_and_scroll_are_logged(self):
        session = self.make_session(
            [full_hand(), grab(index_tip=(300.0, 100.0)), grab(index_tip=(300.0, 160.0))],
            [10.0, 10.1, 10.2],
        )
        await session.run()
        await self.recorder.drain()

        self.assertEqual(session.mode, "scroll")
        self.assertEqual(self.controller.scrolls, [0.0, 60.0])
        actions = [e.action for e in self.store.recent("alice")]
        self.assertEqual(actions, ["scrolled_down", "scrolled_up", "switched_to_scroll_mode"])
        self.assertEqual(self.recorder.outcomes[PersistOutcome.SUCCEEDED], 3)

    async def test_click_is_logged_only_when_it_hits(self):
        session = self.make_session(
            [point(index_tip=(300.0, 100.0)), point(index_tip=(200.0, 100.0))],
            [1.0, 2.0],
            click_hits=False,
        )
        await session.run()
        await self.recorder.drain()

        # The first frame jumps from the initial (0, 0) position, so both flick
        self.assertEqual(self.controller.clicks, [(340.0, 100.0), (440.0, 100.0)])
        self.assertEqual(self.store.count("alice"), 0)
        # The attempt still starts the click cooldown
        self.assertEqual(session.processor.state.last_action_t, 2.0)

    async def test_click_hit(self):
        session = self.make_session(
            [point(index_tip=(300.0, 100.0)), point(index_tip=(200.0, 100.0))],
            [1.0, 2.0],
        )
        await session.run()
        await self.recorder.drain()

        events = self.store.recent("alice")
        self.assertEqual([e.gesture for e in events], ["click", "click"])
        self.assertEqual([e.action for e in events], ["clicked_at_440,100", "clicked_at_340,100"])

    async def test_unauthenticated_session_keeps_interacting(self):
        session = self.make_session([full_hand(), point(index_tip=(300.0, 120.0))], [10.0, 10.1], user_id=None)

        result = await session.step(blank_frame())
        self.assertEqual(result.command.kind, "mode_switch")
        await self.recorder.drain()

        self.assertEqual(self.recorder.outcomes[PersistOutcome.AUTH_FAILED], 1)
        self.assertEqual(session.mode, "scroll")

        result = await session.step(blank_frame())
        self.assertEqual(result.gesture, GestureKind.POINT)
        self.assertEqual(session.pointer, (340.0, 120.0))

    async def test_estimator_failure_skips_frame(self):
        session = self.make_session([RuntimeError("model exploded"), full_hand()], [10.0])
        await session.run()

        self.assertEqual(session.error_count, 1)
        self.assertEqual(session.frame_count, 1)
        self.assertEqual(session.mode, "scroll")

    async def test_failed_frame_clears_landmarks(self):
        session = self.make_session([full_hand(), RuntimeError("model exploded")], [10.0])

        await session.step(blank_frame())
        self.assertIsNotNone(session.landmarks)

        self.assertIsNone(await session.step(blank_frame()))
        self.assertIsNone(session.landmarks)

    async def test_failure_after_stop_is_not_counted(self):
        session = self.make_session([], [])

        def stop_then_fail(frame):
            session.stop()
            raise RuntimeError("camera closed")

        session.estimator = stop_then_fail
        with patch("gesture_control.session.logger") as logger:
            self.assertIsNone(await session.step(blank_frame()))
        logger.exception.assert_not_called()
        self.assertEqual(session.error_count, 0)

    async def test_no_hand(self):
        session = self.make_session([None], [1.0])
        result = await session.step(blank_frame())

        self.assertIsNone(result.pointer)
        self.assertIsNone(result.command)
        self.assertEqual(self.recorder.pending, 0)

    async def test_result_after_stop_is_discarded(self):
        session = self.make_session([], [])

        def stop_during_inference(frame):
            session.stop()
            return full_hand()

        session.estimator = stop_during_inference
        self.assertIsNone(await session.step(blank_frame()))
        self.assertIsNone(session.last_result)
        self.assertEqual(session.mode, "cursor")

    async def test_run_calls_on_frame_and_resets_state(self):
        session = self.make_session([full_hand(), None], [10.0, 10.1])
        session.processor.state = InteractionState(mode="scroll")
        seen = []

        await session.run(on_frame=seen.append)

        self.assertEqual(len(seen), 2)
        # Reset to cursor at start, then toggled once
        self.assertEqual(session.mode, "scroll")
        self.assertEqual(session.frame_count, 2)

    async def test_stop_from_on_frame(self):
        session = self.make_session([None, None, None], [1.0, 2.0, 3.0])
        await session.run(on_frame=lambda frame: session.stop())
        self.assertEqual(session.frame_count, 1)

    def test_mock_controller_protocol(self):
        self.assertIsInstance(MockController(), ControllerProto)


if __name__ == '__main__':
    unittest.main()
