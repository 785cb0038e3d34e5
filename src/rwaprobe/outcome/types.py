"""Value types shared by the outcome poller and the locator resolver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

# Floor for a non-positive poll interval so a bad config cannot spin the loop.
MIN_INTERVAL_MS = 10.0


class Outcome(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Probe:
    """A read-only asynchronous check tagged with the outcome it indicates.

    ``check`` is a zero-argument coroutine function. Whatever it observes
    (page, API context) is bound when the probe is built.
    """

    label: str
    check: Callable[[], Awaitable[bool]]
    outcome: Outcome = Outcome.SUCCESS

    def __post_init__(self) -> None:
        if self.outcome is Outcome.TIMEOUT:
            raise ValueError("A probe signals SUCCESS or ERROR, never TIMEOUT.")


def success(label: str, check: Callable[[], Awaitable[bool]]) -> Probe:
    return Probe(label, check, Outcome.SUCCESS)


def error(label: str, check: Callable[[], Awaitable[bool]]) -> Probe:
    return Probe(label, check, Outcome.ERROR)


@dataclass(frozen=True)
class PollConfig:
    """Deadline and sweep cadence for one poll, all in milliseconds."""

    timeout_ms: float
    interval_ms: float = 200.0
    probe_timeout_ms: float | None = None

    @property
    def effective_interval_ms(self) -> float:
        return self.interval_ms if self.interval_ms > 0 else MIN_INTERVAL_MS


@dataclass(frozen=True)
class PollResult:
    """Terminal, classified result of a poll."""

    outcome: Outcome
    label: str | None = None
    elapsed_ms: float = 0.0
    sweeps: int = 0

    @property
    def is_success(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.outcome is Outcome.ERROR

    @property
    def is_timeout(self) -> bool:
        return self.outcome is Outcome.TIMEOUT


@dataclass(frozen=True)
class Strategy:
    """One way of selecting elements: a name plus an async match counter.

    ``target`` carries whatever the caller acts on once the strategy wins
    (typically a Playwright ``Locator``).
    """

    name: str
    count: Callable[[], Awaitable[int]]
    target: Any = None


@dataclass(frozen=True)
class SelectorSpec:
    """A primary strategy followed by ordered fallbacks."""

    primary: Strategy
    fallbacks: tuple[Strategy, ...] = ()

    @property
    def candidates(self) -> tuple[Strategy, ...]:
        return (self.primary, *self.fallbacks)

    def names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.candidates)


@dataclass(frozen=True)
class ResolvedLocator:
    """Point-in-time choice of strategy. Re-resolve if the page may have changed."""

    strategy: Strategy
    count: int
    index: int = 0

    @property
    def is_primary(self) -> bool:
        return self.index == 0

    @property
    def found(self) -> bool:
        return self.count > 0

    @property
    def target(self) -> Any:
        return self.strategy.target
