"""
Type definitions for the gesture control system.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Literal, Optional, Protocol, Tuple, Union, runtime_checkable


# 21 (x, y) keypoints in frame pixel coordinates for a single hand
Landmarks = List[Tuple[float, float]]

Mode = Literal["cursor", "scroll"]


class GestureKind(Enum):
    """Hand shapes recognized from a single frame."""
    FULL_HAND = "full_hand"
    GRAB = "grab"
    POINT = "point"
    NONE = "none"


@dataclass(frozen=True)
class InteractionState:
    """Interaction state carried from one frame to the next."""
    mode: Mode = "cursor"
    last_position: Tuple[float, float] = (0.0, 0.0)  # screen space
    last_action_t: float = 0.0  # seconds, last accepted click or mode switch


@dataclass(frozen=True)
class ModeSwitchCommand:
    """Command to switch to the given mode."""
    mode: Mode

    @property
    def kind(self) -> str:
        return "mode_switch"

    @property
    def action(self) -> str:
        return f"switched_to_{self.mode}_mode"


@dataclass(frozen=True)
class ScrollCommand:
    """Command to scroll by a pixel delta."""
    dy_px: float

    @property
    def kind(self) -> str:
        return "scroll"

    @property
    def direction(self) -> Literal["up", "down"]:
        return "down" if self.dy_px > 0 else "up"

    @property
    def action(self) -> str:
        return f"scrolled_{self.direction}"


@dataclass(frozen=True)
class ClickCommand:
    """Command to activate whatever element sits at a screen position."""
    x: float
    y: float

    @property
    def kind(self) -> str:
        return "click"

    @property
    def action(self) -> str:
        return f"clicked_at_{_js_round(self.x)},{_js_round(self.y)}"


Command = Union[ModeSwitchCommand, ScrollCommand, ClickCommand]


@dataclass(frozen=True)
class FrameResult:
    """Outcome of processing one frame."""
    state: InteractionState
    gesture: GestureKind = GestureKind.NONE
    pointer: Optional[Tuple[float, float]] = None  # None when no hand
    command: Optional[Command] = None


@dataclass(frozen=True)
class GestureEvent:
    """A logged gesture, owned by the store once created."""
    gesture: str
    action: str
    timestamp: int  # epoch milliseconds
    user_id: str

    def to_dict(self) -> dict:
        return {
            "gesture": self.gesture,
            "action": self.action,
            "timestamp": self.timestamp,
            "user_id": self.user_id,
        }


class PersistOutcome(Enum):
    """Result of submitting a gesture event to the log."""
    SUCCEEDED = "succeeded"
    AUTH_FAILED = "auth_failed"
    TRANSPORT_FAILED = "transport_failed"


@runtime_checkable
class ControllerProto(Protocol):
    """Abstract protocol for controllers that execute gesture commands."""

    async def scroll(self, dy_px: float) -> None:
        """Scroll the page vertically by the given pixel delta."""
        ...

    async def click_at(self, x: float, y: float) -> bool:
        """Activate the topmost element at (x, y). Returns False if there is none."""
        ...


@runtime_checkable
class GestureLogProto(Protocol):
    """Abstract protocol for the gesture event log."""

    async def record(self, gesture: str, action: str) -> None:
        """Store a gesture event for the current user."""
        ...

    async def fetch_recent(self) -> List[GestureEvent]:
        """Return the current user's latest events, newest first."""
        ...


def _js_round(value: float) -> int:
    # half rounds up, matching the browser's Math.round
    return math.floor(value + 0.5)
