"""
Browser controller that carries out gesture commands in a Playwright page.
"""
import logging
from typing import Optional, Tuple

from playwright.async_api import async_playwright, Browser, Page, Playwright

logger = logging.getLogger(__name__)

CLICK_AT_POINT_JS = """
([x, y]) => {
    const element = document.elementFromPoint(x, y);
    if (element && typeof element.click === 'function') {
        element.click();
        return true;
    }
    return false;
}
"""

SCROLL_BY_JS = "(dy) => window.scrollBy(0, dy)"


class BrowserController:
    """Scrolls and clicks inside a Chromium page driven by Playwright."""

    def __init__(self, page: Optional[Page] = None):
        self.page = page
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def start(self, url: str, viewport_wh: Tuple[int, int], headless: bool = False) -> None:
        """
        Launch Chromium and open the page to control.

        Args:
            url: Page to open
            viewport_wh: Viewport size the pointer is mapped onto
            headless: Run without a browser window
        """
        width, height = viewport_wh
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=headless)
        self.page = await self._browser.new_page(viewport={"width": width, "height": height})
        await self.page.goto(url)
        logger.info(f"🌐 Browser opened at {url} ({width}x{height})")

    async def scroll(self, dy_px: float) -> None:
        await self.page.evaluate(SCROLL_BY_JS, dy_px)

    async def click_at(self, x: float, y: float) -> bool:
        """Click the topmost element under (x, y). Returns False if there is none."""
        hit = await self.page.evaluate(CLICK_AT_POINT_JS, [x, y])
        if hit:
            logger.info(f"🖱️  Click at ({x:.0f}, {y:.0f})")
        return bool(hit)

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
