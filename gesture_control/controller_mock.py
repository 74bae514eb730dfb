"""
Mock controller implementation for testing gesture commands.
"""
import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)


class MockController:
    """Mock controller that logs actions instead of executing them."""

    def __init__(self, click_hits: bool = True):
        """
        Initialize the mock controller.

        Args:
            click_hits: Whether clicks land on an element
        """
        self.click_hits = click_hits
        self.scrolls: List[float] = []
        self.clicks: List[Tuple[float, float]] = []

    async def scroll(self, dy_px: float) -> None:
        """Record scroll command instead of executing it."""
        self.scrolls.append(dy_px)
        logger.info(f"[MockController] Scroll: dy_px={dy_px:.1f} (call #{self.scroll_count})")

    async def click_at(self, x: float, y: float) -> bool:
        """Record click command instead of executing it."""
        self.clicks.append((x, y))
        logger.info(f"[MockController] Click at ({x:.0f}, {y:.0f}) (call #{self.click_count})")
        return self.click_hits

    @property
    def scroll_count(self) -> int:
        return len(self.scrolls)

    @property
    def click_count(self) -> int:
        return len(self.clicks)

    def reset_counters(self) -> None:
        """Reset recorded actions for testing."""
        self.scrolls.clear()
        self.clicks.clear()
