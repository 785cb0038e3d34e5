"""Playwright-backed implementation of BrowserAdapter."""

from __future__ import annotations

import logging
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from rwaprobe.exceptions import BrowserLaunchError

logger = logging.getLogger(__name__)


class PlaywrightAdapter:
    """Chromium with one context per run; checks share its single page."""

    def __init__(self) -> None:
        self._pw: Any = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise BrowserLaunchError("Browser not launched; call launch() first.")
        return self._page

    async def launch(
        self,
        base_url: str,
        headless: bool = True,
        slow_mo: int = 0,
        viewport: tuple[int, int] = (1280, 720),
        default_timeout_ms: float = 30_000,
    ) -> None:
        try:
            self._pw = await async_playwright().start()
            # The app tags elements with data-test, not data-testid.
            self._pw.selectors.set_test_id_attribute("data-test")
            self._browser = await self._pw.chromium.launch(
                headless=headless,
                slow_mo=slow_mo,
                args=["--no-sandbox", "--disable-dev-shm-usage"],
            )
            width, height = viewport
            self._context = await self._browser.new_context(
                base_url=base_url,
                viewport={"width": width, "height": height},
                locale="en-US",
            )
            self._context.set_default_timeout(default_timeout_ms)
            self._page = await self._context.new_page()
        except Exception as exc:
            await self.close()
            raise BrowserLaunchError(f"Failed to start Playwright Chromium: {exc}") from exc
        logger.info("Browser launched (headless=%s, base_url=%s).", headless, base_url)

    async def close(self) -> None:
        for handle in (self._context, self._browser):
            if handle is not None:
                await handle.close()
        if self._pw is not None:
            await self._pw.stop()
        self._pw = self._browser = self._context = self._page = None
        logger.info("Browser closed.")

    async def reset_session(self) -> None:
        """Clear cookies and make sure a check left us an open page."""
        if self._context is None:
            return
        await self._context.clear_cookies()
        if self._page is not None and not self._page.is_closed():
            return
        open_pages = self._context.pages
        self._page = open_pages[0] if open_pages else await self._context.new_page()
        logger.debug("Page was closed; now on %s.", self._page.url or "a new tab")
