"""Playwright-backed probes and selection strategies."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING

from rwaprobe.exceptions import ControlNotFoundError
from rwaprobe.outcome.poller import poll
from rwaprobe.outcome.resolver import resolve
from rwaprobe.outcome.types import (
    Outcome,
    PollConfig,
    Probe,
    ResolvedLocator,
    SelectorSpec,
    Strategy,
)

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page

logger = logging.getLogger(__name__)


def _compile(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern, re.IGNORECASE)


# --- probes ---

def visible(locator: Locator, label: str, outcome: Outcome = Outcome.SUCCESS) -> Probe:
    """Fires when the first element of *locator* is visible."""

    async def check() -> bool:
        return await locator.first.is_visible()

    return Probe(label, check, outcome)


def hidden(locator: Locator, label: str, outcome: Outcome = Outcome.SUCCESS) -> Probe:
    async def check() -> bool:
        return not await locator.first.is_visible()

    return Probe(label, check, outcome)


def enabled(locator: Locator, label: str, outcome: Outcome = Outcome.SUCCESS) -> Probe:
    """Fires when the first element of *locator* is visible and enabled."""

    async def check() -> bool:
        target = locator.first
        return await target.is_visible() and await target.is_enabled()

    return Probe(label, check, outcome)


def disabled(locator: Locator, label: str, outcome: Outcome = Outcome.SUCCESS) -> Probe:
    async def check() -> bool:
        return not await locator.first.is_enabled()

    return Probe(label, check, outcome)


def text_visible(
    page: Page,
    pattern: str | re.Pattern[str],
    label: str,
    outcome: Outcome = Outcome.SUCCESS,
) -> Probe:
    regex = _compile(pattern)

    async def check() -> bool:
        return await page.get_by_text(regex).first.is_visible()

    return Probe(label, check, outcome)


def url_matches(
    page: Page,
    pattern: str | re.Pattern[str],
    label: str,
    outcome: Outcome = Outcome.SUCCESS,
) -> Probe:
    regex = _compile(pattern)

    async def check() -> bool:
        return regex.search(page.url) is not None

    return Probe(label, check, outcome)


def url_not_matching(
    page: Page,
    pattern: str | re.Pattern[str],
    label: str,
    outcome: Outcome = Outcome.SUCCESS,
) -> Probe:
    regex = _compile(pattern)

    async def check() -> bool:
        return regex.search(page.url) is None

    return Probe(label, check, outcome)


def title_matches(
    page: Page,
    pattern: str | re.Pattern[str],
    label: str,
    outcome: Outcome = Outcome.SUCCESS,
) -> Probe:
    regex = _compile(pattern)

    async def check() -> bool:
        return regex.search(await page.title()) is not None

    return Probe(label, check, outcome)


# --- strategies ---

def locator_strategy(locator: Locator, name: str) -> Strategy:
    return Strategy(name=name, count=locator.count, target=locator)


def css_spec(page: Page, primary: str, *fallbacks: str) -> SelectorSpec:
    """Build a :class:`SelectorSpec` from plain CSS / Playwright selector strings."""
    return SelectorSpec(
        primary=locator_strategy(page.locator(primary), primary),
        fallbacks=tuple(locator_strategy(page.locator(sel), sel) for sel in fallbacks),
    )


async def require_control(
    spec: SelectorSpec,
    config: PollConfig,
    *,
    label: str,
    enabled: bool = False,
    cancel: asyncio.Event | None = None,
) -> ResolvedLocator:
    """Resolve *spec* on every sweep until the winner is visible (and enabled).

    Raises :class:`ControlNotFoundError` naming every strategy tried.
    """
    chosen: list[ResolvedLocator] = []
    require_enabled = enabled

    async def ready() -> bool:
        resolved = await resolve(spec)
        if not resolved.found:
            return False
        target = resolved.target.first
        if not await target.is_visible():
            return False
        if require_enabled and not await target.is_enabled():
            return False
        chosen.append(resolved)
        return True

    result = await poll([Probe(label, ready)], config, cancel=cancel)
    if not result.is_success:
        raise ControlNotFoundError(label, config.timeout_ms, spec.names())
    logger.debug("Control %r resolved via %r.", label, chosen[-1].strategy.name)
    return chosen[-1]
