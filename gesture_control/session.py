"""
Detection session: the per-frame loop tying camera, hand tracking,
gesture interaction, controller and gesture log together.
"""
import asyncio
import logging
import time
from typing import Callable, Optional, Tuple

import numpy as np

from .config import GesturesConfig
from .gestures import GestureProcessor
from .recorder import EventRecorder
from .types import (
    ClickCommand,
    Command,
    ControllerProto,
    FrameResult,
    Landmarks,
    ModeSwitchCommand,
    ScrollCommand,
)

logger = logging.getLogger(__name__)

# Returns the next frame, or None once the stream has ended
FrameSource = Callable[[], Optional[np.ndarray]]
# Returns the landmarks of one hand in frame pixels, or None
Estimator = Callable[[np.ndarray], Optional[Landmarks]]


class DetectionSession:
    """
    Runs hand detection and gesture interaction once per frame.

    Frames are handled strictly one after another. Gesture events are
    handed to the recorder and not awaited, so a slow or failing backend
    never holds up the next frame.
    """

    def __init__(self, frame_source: FrameSource, estimator: Estimator,
                 controller: ControllerProto, recorder: EventRecorder,
                 cfg: GesturesConfig, viewport_wh: Tuple[int, int],
                 clock: Callable[[], float] = time.time):
        self.frame_source = frame_source
        self.estimator = estimator
        self.controller = controller
        self.recorder = recorder
        self.processor = GestureProcessor(cfg, viewport_wh)
        self.clock = clock

        self.landmarks: Optional[Landmarks] = None
        self.last_result: Optional[FrameResult] = None
        self.frame_count = 0
        self.error_count = 0
        self._stopped = False

    @property
    def mode(self) -> str:
        return self.processor.mode

    @property
    def pointer(self) -> Optional[Tuple[float, float]]:
        return self.last_result.pointer if self.last_result else None

    def stop(self) -> None:
        """End the loop after the current frame. In-flight inference is not aborted."""
        self._stopped = True

    async def step(self, frame: np.ndarray) -> Optional[FrameResult]:
        """
        Process a single frame.

        Returns:
            The FrameResult, or None if the frame was skipped
        """
        try:
            landmarks = await asyncio.to_thread(self.estimator, frame)
        except Exception:
            if self._stopped:
                return None
            self.error_count += 1
            self.landmarks = None
            logger.exception("Hand detection failed, skipping frame")
            return None

        if self._stopped:
            # Session ended while inference was running
            return None

        self.frame_count += 1
        frame_wh = (frame.shape[1], frame.shape[0])
        result = self.processor.process_frame(landmarks, self.clock(), frame_wh)
        self.landmarks = landmarks
        self.last_result = result

        if result.command is not None:
            try:
                await self._perform(result.command)
            except Exception:
                self.error_count += 1
                logger.exception(f"Failed to perform {result.command.kind}")

        return result

    async def _perform(self, command: Command) -> None:
        if isinstance(command, ModeSwitchCommand):
            logger.info(f"🔁 Switched to {command.mode} mode")
        elif isinstance(command, ScrollCommand):
            await self.controller.scroll(command.dy_px)
        elif isinstance(command, ClickCommand):
            if not await self.controller.click_at(command.x, command.y):
                # Nothing under the pointer, nothing to log
                return

        self.recorder.submit(command.kind, command.action)

    async def run(self, on_frame: Optional[Callable[[np.ndarray], None]] = None) -> None:
        """
        Run until stop() is called or the frame source runs dry.

        Args:
            on_frame: Called after each processed frame, e.g. to draw an overlay
        """
        self.processor.reset()
        self._stopped = False
        logger.info("Detection session started")

        while not self._stopped:
            frame = self.frame_source()
            if frame is None:
                logger.info("Frame source ended")
                break

            await self.step(frame)

            if on_frame is not None:
                on_frame(frame)

            # Let pending gesture log tasks progress
            await asyncio.sleep(0)

        self._stopped = True
        logger.info(f"Detection session ended after {self.frame_count} frames ({self.error_count} errors)")
