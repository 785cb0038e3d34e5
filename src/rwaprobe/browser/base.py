"""Protocol definition for browser adapters."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class BrowserAdapter(Protocol):
    """What the runner needs from a browser: one live page per run."""

    @property
    def page(self) -> Any:
        """The live page checks interact with."""
        ...

    async def launch(
        self,
        base_url: str,
        headless: bool = True,
        slow_mo: int = 0,
        viewport: tuple[int, int] = (1280, 720),
        default_timeout_ms: float = 30_000,
    ) -> None:
        """Start the browser with *base_url* as the root for relative navigation."""
        ...

    async def close(self) -> None:
        ...

    async def reset_session(self) -> None:
        """Start the next check signed out, on a usable page."""
        ...
