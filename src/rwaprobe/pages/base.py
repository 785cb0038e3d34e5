"""Shared plumbing for page objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rwaprobe.outcome.poller import require_success
from rwaprobe.outcome.probes import disabled, hidden, locator_strategy, require_control
from rwaprobe.outcome.types import PollConfig, PollResult, Probe, ResolvedLocator, SelectorSpec
from rwaprobe.settings import AppSettings

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page


class BasePage:
    """Holds the page handle and the timing settings every wait is built from."""

    def __init__(self, page: Page, settings: AppSettings) -> None:
        self.page = page
        self._settings = settings

    def _config(self, timeout_ms: float | None = None) -> PollConfig:
        return self._settings.poll_config(timeout_ms)

    async def _expect(
        self, probes: list[Probe], action: str, timeout_ms: float | None = None
    ) -> PollResult:
        return await require_success(probes, self._config(timeout_ms), action=action)

    async def _expect_visible(
        self, locator: Locator, label: str, timeout_ms: float | None = None
    ) -> ResolvedLocator:
        spec = SelectorSpec(primary=locator_strategy(locator, label))
        return await require_control(spec, self._config(timeout_ms), label=label)

    async def _expect_enabled(
        self, locator: Locator, label: str, timeout_ms: float | None = None
    ) -> ResolvedLocator:
        spec = SelectorSpec(primary=locator_strategy(locator, label))
        return await require_control(spec, self._config(timeout_ms), label=label, enabled=True)

    async def _expect_disabled(
        self, locator: Locator, label: str, timeout_ms: float | None = None
    ) -> None:
        await self._expect([disabled(locator, f"{label} disabled")], f"expect {label} disabled", timeout_ms)

    async def _expect_hidden(
        self, locator: Locator, label: str, timeout_ms: float | None = None
    ) -> None:
        await self._expect([hidden(locator, f"{label} hidden")], f"expect {label} hidden", timeout_ms)

    async def _expect_control(
        self, spec: SelectorSpec, label: str, timeout_ms: float | None = None, enabled: bool = False
    ) -> ResolvedLocator:
        return await require_control(spec, self._config(timeout_ms), label=label, enabled=enabled)

    async def _click(self, spec: SelectorSpec, label: str, timeout_ms: float | None = None) -> ResolvedLocator:
        """Wait for the first workable strategy of *spec* to be enabled, then click it."""
        resolved = await self._expect_control(spec, label, timeout_ms, enabled=True)
        await resolved.target.first.click()
        return resolved
