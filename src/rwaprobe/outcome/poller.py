"""Bounded-time, multi-signal outcome polling.

Every sweep fans all probes out concurrently and fans them back in before a
decision is made, so the result only ever changes at sweep boundaries:

* an ``ERROR`` probe that settles true ends the poll with ``Error``;
* a ``SUCCESS`` probe that settles true ends it with ``Success`` once every
  ``ERROR`` probe of the same sweep has settled false (slower ``SUCCESS``
  probes are cancelled rather than awaited);
* otherwise the poll sleeps for the interval and sweeps again until the
  deadline, then reports ``Timeout``.

A probe that raises counts as false for that sweep.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, Sequence

from rwaprobe.exceptions import (
    IndeterminateOutcomeError,
    OutcomeError,
    PollCancelledError,
)
from rwaprobe.outcome.types import Outcome, PollConfig, PollResult, Probe

logger = logging.getLogger(__name__)


async def _evaluate(probe: Probe, timeout_s: float | None) -> bool:
    try:
        if timeout_s is None:
            return bool(await probe.check())
        return bool(await asyncio.wait_for(probe.check(), timeout_s))
    except Exception as exc:
        logger.debug("Probe %r raised %s: %s", probe.label, type(exc).__name__, exc)
        return False


async def _sweep(probes: Sequence[Probe], timeout_s: float | None) -> Probe | None:
    """Run one concurrent evaluation round and return the probe that decides it."""
    tasks = {
        asyncio.ensure_future(_evaluate(probe, timeout_s)): index
        for index, probe in enumerate(probes)
    }
    pending = set(tasks)
    hits: list[int] = []
    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            hits.extend(tasks[task] for task in done if task.result())
            hits.sort()

            errors = [i for i in hits if probes[i].outcome is Outcome.ERROR]
            if errors:
                return probes[errors[0]]

            errors_pending = any(
                probes[tasks[task]].outcome is Outcome.ERROR for task in pending
            )
            if hits and not errors_pending:
                return probes[hits[0]]
        return None
    finally:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


def _check_cancel(cancel: asyncio.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise PollCancelledError("Poll cancelled by caller.")


async def _pause(delay_s: float, cancel: asyncio.Event | None) -> None:
    if cancel is None:
        await asyncio.sleep(delay_s)
        return
    try:
        await asyncio.wait_for(cancel.wait(), delay_s)
    except asyncio.TimeoutError:
        return
    raise PollCancelledError("Poll cancelled by caller.")


async def poll(
    probes: Iterable[Probe],
    config: PollConfig,
    *,
    cancel: asyncio.Event | None = None,
) -> PollResult:
    """Sweep *probes* until one fires or ``config.timeout_ms`` elapses.

    Probes are evaluated at least once even with a zero timeout. Setting
    *cancel* stops the poll at the next suspension point with
    :class:`PollCancelledError`.
    """
    probe_list = tuple(probes)
    if not probe_list:
        raise ValueError("poll() needs at least one probe.")

    interval_s = config.effective_interval_ms / 1000
    probe_timeout_s = (
        config.probe_timeout_ms / 1000 if config.probe_timeout_ms else None
    )
    started = time.monotonic()
    deadline = started + max(config.timeout_ms, 0) / 1000
    sweeps = 0

    while True:
        _check_cancel(cancel)
        sweeps += 1
        fired = await _sweep(probe_list, probe_timeout_s)
        now = time.monotonic()
        elapsed_ms = (now - started) * 1000

        if fired is not None:
            logger.debug(
                "Poll resolved %s via %r after %.0fms (%d sweep(s)).",
                fired.outcome.value,
                fired.label,
                elapsed_ms,
                sweeps,
            )
            return PollResult(fired.outcome, fired.label, elapsed_ms, sweeps)

        remaining = deadline - now
        if remaining <= 0:
            logger.debug("Poll timed out after %.0fms (%d sweep(s)).", elapsed_ms, sweeps)
            return PollResult(Outcome.TIMEOUT, None, elapsed_ms, sweeps)

        await _pause(min(interval_s, remaining), cancel)


async def require_success(
    probes: Iterable[Probe],
    config: PollConfig,
    *,
    action: str,
    cancel: asyncio.Event | None = None,
) -> PollResult:
    """Poll and turn anything but ``Success`` into a classified exception."""
    result = await poll(probes, config, cancel=cancel)
    if result.is_error:
        raise OutcomeError(action, result.label)
    if result.is_timeout:
        raise IndeterminateOutcomeError(action, config.timeout_ms)
    return result
