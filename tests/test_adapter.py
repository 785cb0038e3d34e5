"""Tests for the Playwright adapter's session handling (mock context)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from rwaprobe.browser.playwright_adapter import PlaywrightAdapter
from rwaprobe.exceptions import BrowserLaunchError


def _page(closed: bool = False) -> MagicMock:
    page = MagicMock()
    page.is_closed.return_value = closed
    page.url = "http://rwa.test/"
    return page


def _adapter(page, pages=()) -> tuple[PlaywrightAdapter, MagicMock]:
    context = MagicMock()
    context.clear_cookies = AsyncMock()
    context.new_page = AsyncMock(return_value=_page())
    context.pages = list(pages)
    adapter = PlaywrightAdapter()
    adapter._context = context
    adapter._page = page
    return adapter, context


def test_page_before_launch_raises():
    with pytest.raises(BrowserLaunchError):
        PlaywrightAdapter().page


@pytest.mark.asyncio
async def test_reset_session_keeps_live_page():
    live = _page()
    adapter, context = _adapter(live)
    await adapter.reset_session()
    context.clear_cookies.assert_awaited_once()
    assert adapter.page is live


@pytest.mark.asyncio
async def test_reset_session_switches_to_open_page():
    other = _page()
    adapter, context = _adapter(_page(closed=True), pages=[other])
    await adapter.reset_session()
    assert adapter.page is other
    context.new_page.assert_not_awaited()


@pytest.mark.asyncio
async def test_reset_session_opens_new_page_when_all_closed():
    adapter, context = _adapter(_page(closed=True))
    await adapter.reset_session()
    context.new_page.assert_awaited_once()
    assert adapter.page is context.new_page.return_value


@pytest.mark.asyncio
async def test_close_releases_handles():
    adapter, context = _adapter(_page())
    context.close = AsyncMock()
    await adapter.close()
    context.close.assert_awaited_once()
    with pytest.raises(BrowserLaunchError):
        adapter.page
