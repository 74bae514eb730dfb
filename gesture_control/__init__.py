"""
Gesture Control

Reads webcam frames, detects hand landmarks using MediaPipe, and turns
hand shapes into clicks, scrolling and a cursor/scroll mode switch in a
browser page. Each recognized action is logged per authenticated user.
"""

__version__ = "0.1.0"

from .types import (
    ClickCommand,
    ControllerProto,
    FrameResult,
    GestureEvent,
    GestureKind,
    GestureLogProto,
    InteractionState,
    ModeSwitchCommand,
    PersistOutcome,
    ScrollCommand,
)
from .config import load_config, Cfg
from .errors import AuthenticationError, GestureControlError, TransportError
from .controller_mock import MockController
from .gestures import GestureProcessor, process_frame, to_screen
from .landmarks import classify, is_full_hand, is_grab, is_point
from .recorder import EventRecorder
from .store import GestureStore

__all__ = [
    "ClickCommand",
    "ControllerProto",
    "FrameResult",
    "GestureEvent",
    "GestureKind",
    "GestureLogProto",
    "InteractionState",
    "ModeSwitchCommand",
    "PersistOutcome",
    "ScrollCommand",
    "load_config",
    "Cfg",
    "AuthenticationError",
    "GestureControlError",
    "TransportError",
    "MockController",
    "GestureProcessor",
    "process_frame",
    "to_screen",
    "classify",
    "is_full_hand",
    "is_grab",
    "is_point",
    "EventRecorder",
    "GestureStore",
]
