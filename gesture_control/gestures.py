"""
Gesture interaction: turns classified hand shapes into mode switches,
scrolls and clicks.
"""
import math
from dataclasses import replace
from typing import Optional, Tuple

from .config import GesturesConfig
from .landmarks import classify, pointer_landmark
from .types import (
    ClickCommand,
    FrameResult,
    GestureKind,
    InteractionState,
    Landmarks,
    ModeSwitchCommand,
    ScrollCommand,
)


def to_screen(point: Tuple[float, float], frame_wh: Tuple[int, int],
              viewport_wh: Tuple[int, int]) -> Tuple[float, float]:
    """
    Map a frame pixel position to viewport coordinates.

    The camera image is mirrored horizontally so the pointer follows the
    hand the way a mirror would.

    Args:
        point: (x, y) in frame pixels
        frame_wh: Frame dimensions (width, height)
        viewport_wh: Viewport dimensions (width, height)

    Returns:
        (x, y) in viewport pixels
    """
    frame_width, frame_height = frame_wh
    viewport_width, viewport_height = viewport_wh
    x, y = point
    # (1 - x / w) * vw, written so whole-pixel inputs stay exact
    screen_x = (frame_width - x) * viewport_width / frame_width
    screen_y = y * viewport_height / frame_height
    return screen_x, screen_y


def process_frame(landmarks: Optional[Landmarks], state: InteractionState, t_now: float,
                  frame_wh: Tuple[int, int], viewport_wh: Tuple[int, int],
                  cfg: GesturesConfig) -> FrameResult:
    """
    Process one frame of hand landmarks.

    This is a pure function: the returned FrameResult carries the next
    InteractionState, and at most one command to carry out.

    Args:
        landmarks: Hand landmarks in frame pixels (None if no hand detected)
        state: Interaction state after the previous frame
        t_now: Current timestamp in seconds
        frame_wh: Frame dimensions (width, height)
        viewport_wh: Viewport dimensions (width, height)
        cfg: Gesture thresholds

    Returns:
        FrameResult with the new state, gesture, pointer and command
    """
    if landmarks is None:
        return FrameResult(state=state)

    gesture = classify(landmarks)
    x, y = to_screen(pointer_landmark(landmarks), frame_wh, viewport_wh)
    since_action_ms = (t_now - state.last_action_t) * 1000

    command = None
    last_action_t = state.last_action_t
    mode = state.mode

    if gesture is GestureKind.FULL_HAND:
        if since_action_ms > cfg.mode_switch_cooldown_ms:
            mode = "scroll" if state.mode == "cursor" else "cursor"
            last_action_t = t_now
            command = ModeSwitchCommand(mode=mode)
    elif gesture is GestureKind.GRAB and state.mode == "scroll":
        command = ScrollCommand(dy_px=y - state.last_position[1])
    elif gesture is GestureKind.POINT and state.mode == "cursor":
        dx = x - state.last_position[0]
        dy = y - state.last_position[1]
        if math.hypot(dx, dy) > cfg.click_threshold_px and since_action_ms > cfg.click_cooldown_ms:
            last_action_t = t_now
            command = ClickCommand(x=x, y=y)

    new_state = replace(state, mode=mode, last_position=(x, y), last_action_t=last_action_t)
    return FrameResult(state=new_state, gesture=gesture, pointer=(x, y), command=command)


class GestureProcessor:
    """
    Holds the interaction state of one detection session and feeds it
    through process_frame.
    """

    def __init__(self, cfg: GesturesConfig, viewport_wh: Tuple[int, int]):
        """Initialize gesture processor with thresholds and viewport size."""
        self.cfg = cfg
        self.viewport_wh = viewport_wh
        self.state = InteractionState()

    def reset(self) -> None:
        """Return to cursor mode with no history."""
        self.state = InteractionState()

    def process_frame(self, landmarks: Optional[Landmarks], t_now: float,
                      frame_wh: Tuple[int, int]) -> FrameResult:
        """
        Process a frame and advance the session state.

        Args:
            landmarks: Hand landmarks (None if no hand detected)
            t_now: Current timestamp in seconds
            frame_wh: Frame dimensions (width, height)

        Returns:
            FrameResult for this frame
        """
        result = process_frame(landmarks, self.state, t_now, frame_wh, self.viewport_wh, self.cfg)
        self.state = result.state
        return result

    @property
    def mode(self) -> str:
        return self.state.mode
