"""
Main application for gesture control.
"""
import argparse
import asyncio
import logging
from typing import Optional

import cv2
import numpy as np

from .config import load_config
from .controller_browser import BrowserController
from .controller_mock import MockController
from .errors import AuthenticationError, TransportError
from .recorder import EventRecorder
from .session import DetectionSession
from .sinks import HttpGestureLog
from .tracker import HandsTracker

logger = logging.getLogger(__name__)


def sign_in(gesture_log: HttpGestureLog, username: Optional[str], password: Optional[str]) -> bool:
    """
    Log in to the gesture log backend. On failure the app keeps running,
    but gestures are not logged.

    Returns:
        True if a token was obtained
    """
    if not username or not password:
        logger.warning("⚠️  No API token or credentials configured, gestures will not be logged")
        return False

    try:
        gesture_log.login(username, password)
    except (AuthenticationError, TransportError) as e:
        logger.warning(f"⚠️  Sign-in as {username} failed, gestures will not be logged: {e}")
        return False
    return True


class GestureControlApp:
    """Main application class for gesture control."""

    def __init__(self, config_path: Optional[str] = None, use_browser: bool = False,
                 url: Optional[str] = None, server: Optional[str] = None, token: Optional[str] = None,
                 username: Optional[str] = None, password: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.tracker = HandsTracker(
            max_num_hands=self.config.mediapipe.max_num_hands,
            model_complexity=self.config.mediapipe.model_complexity,
            min_detection_conf=self.config.mediapipe.min_detection_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence
        )

        backend = self.config.backend
        self.base_url = server or backend.base_url
        self.url = url or f"{self.base_url}/demo"
        self.use_browser = use_browser

        if use_browser:
            self.controller = BrowserController()
        else:
            self.controller = MockController()

        self.gesture_log = HttpGestureLog(self.base_url, token or backend.token, backend.timeout_s)
        if not self.gesture_log.token:
            sign_in(self.gesture_log, username or backend.username, password or backend.password)
        self.recorder = EventRecorder(self.gesture_log)

        self.viewport_wh = (self.config.viewport.width, self.config.viewport.height)
        self.session = DetectionSession(
            frame_source=self._read_frame,
            estimator=self.tracker.process,
            controller=self.controller,
            recorder=self.recorder,
            cfg=self.config.gestures,
            viewport_wh=self.viewport_wh,
        )

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    def _read_frame(self) -> Optional[np.ndarray]:
        ret, frame = self.cap.read()
        if not ret:
            logger.error("Failed to read frame from camera")
            return None
        return frame

    def _draw_overlay(self, frame: np.ndarray) -> None:
        """Draw landmarks and status, show the window and handle the quit key."""
        session = self.session
        result = session.last_result
        display = self.config.display

        if session.landmarks and display.show_landmarks:
            frame = self.tracker.draw_landmarks(frame, session.landmarks)

        mode_text = f"Mode: {session.mode}"
        gesture_text = "No hand detected"
        if result is not None and result.pointer is not None:
            gesture_text = f"Gesture: {result.gesture.value}"
            if result.command is not None:
                gesture_text += f" | {result.command.action}"

            if display.show_pointer:
                # Pointer is in viewport space; map it back onto camera frame pixels
                height, width = frame.shape[:2]
                px = int(width - result.pointer[0] / self.viewport_wh[0] * width)
                py = int(result.pointer[1] / self.viewport_wh[1] * height)
                color = (0, 0, 255) if session.mode == "scroll" else (255, 0, 0)
                cv2.circle(frame, (px, py), 8, color, -1)

        cv2.putText(frame, mode_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        cv2.putText(frame, gesture_text, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 0), 2)

        # Add instructions
        cv2.putText(frame, "Full hand = Switch mode", (10, frame.shape[0] - 80), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, "Point + flick = Click | 3-finger grab = Scroll", (10, frame.shape[0] - 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, "Press 'q' to quit", (10, frame.shape[0] - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

        cv2.imshow(display.window_name, frame)

        if cv2.waitKey(1) & 0xFF == ord('q'):
            session.stop()

    async def run(self):
        """Run the main application loop."""
        logger.info(f"Starting {self.config.display.window_name}")

        if self.use_browser:
            await self.controller.start(self.url, self.viewport_wh)

        try:
            await self.session.run(on_frame=self._draw_overlay)
        finally:
            await self.recorder.drain()
            await self._report_recent()
            if self.use_browser:
                await self.controller.close()
            self.close()

    async def _report_recent(self) -> None:
        try:
            events = await self.gesture_log.fetch_recent()
        except Exception as e:
            logger.warning(f"Could not fetch recent gestures: {e}")
            return

        if not events:
            return
        logger.info("Recent gestures:")
        for event in events:
            logger.info(f"  {event.gesture} -> {event.action} at {event.timestamp}")

    def close(self):
        """Release the camera, windows and clients."""
        if self.cap.isOpened():
            self.cap.release()
        cv2.destroyAllWindows()
        self.tracker.close()
        self.gesture_log.close()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Control a browser page with hand gestures")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--browser", action="store_true", help="Drive a Playwright browser instead of the mock controller")
    parser.add_argument("--url", help="Page to open in browser mode (default: the backend's demo page)")
    parser.add_argument("--server", help="Gesture log backend URL")
    parser.add_argument("--token", help="Access token for the gesture log backend")
    parser.add_argument("--username", help="Sign in to the gesture log backend when no token is given")
    parser.add_argument("--password", help="Password for --username")
    return parser.parse_args(argv)


async def main(argv=None):
    """Entry point for the application."""
    args = parse_args(argv)

    app = GestureControlApp(
        config_path=args.config,
        use_browser=args.browser,
        url=args.url,
        server=args.server,
        token=args.token,
        username=args.username,
        password=args.password,
    )
    await app.run()


def cli():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


if __name__ == "__main__":
    cli()
