"""Custom exception hierarchy for rwaprobe."""

from __future__ import annotations


class RwaProbeError(Exception):
    """Base exception for all rwaprobe errors."""


class ConfigurationError(RwaProbeError):
    """Raised when settings are invalid or missing."""


class BrowserLaunchError(RwaProbeError):
    """Raised when the browser fails to start."""


class OutcomeError(RwaProbeError):
    """Raised when a known failure indicator fired after an action."""

    def __init__(self, action: str, indicator: str | None = None, message: str = "") -> None:
        self.action = action
        self.indicator = indicator
        super().__init__(message or f"{action} failed: {indicator or 'failure indicator'} observed")


class ControlNotFoundError(OutcomeError):
    """Raised when a control required for an interaction never became usable."""

    def __init__(self, label: str, timeout_ms: float, candidates: tuple[str, ...]) -> None:
        self.label = label
        self.timeout_ms = timeout_ms
        self.candidates = candidates
        super().__init__(
            action=label,
            message=(
                f"expected control {label!r} visible within {timeout_ms:.0f}ms, "
                f"found none of: {', '.join(candidates)}"
            ),
        )


class IndeterminateOutcomeError(RwaProbeError):
    """Raised when neither success nor failure was observed before the deadline.

    Kept apart from :class:`OutcomeError` so reports can tell a slow or flaky
    environment from a genuine regression.
    """

    def __init__(self, action: str, timeout_ms: float) -> None:
        self.action = action
        self.timeout_ms = timeout_ms
        super().__init__(
            f"{action}: neither success nor failure observed within {timeout_ms:.0f}ms"
        )


class PollCancelledError(RwaProbeError):
    """Raised when a poll is stopped through its cancel event."""


class ApiError(RwaProbeError):
    """Raised when the API answers with an unexpected status."""

    def __init__(self, method: str, path: str, status: int, body: str = "") -> None:
        self.method = method
        self.path = path
        self.status = status
        self.body = body
        super().__init__(f"{method} {path} returned {status}: {body[:200]}")


class AuthenticationError(ApiError):
    """Raised when API login is rejected or a session is missing."""
