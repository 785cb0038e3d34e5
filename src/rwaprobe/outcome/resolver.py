"""Choose the first selection strategy that currently matches anything."""

from __future__ import annotations

import logging

from rwaprobe.outcome.types import ResolvedLocator, SelectorSpec, Strategy

logger = logging.getLogger(__name__)


async def _safe_count(strategy: Strategy) -> int:
    try:
        return max(int(await strategy.count()), 0)
    except Exception as exc:
        logger.debug("Strategy %r lookup failed: %s", strategy.name, exc)
        return 0


async def resolve(spec: SelectorSpec) -> ResolvedLocator:
    """Return the primary if it matches, else the first matching fallback.

    Never raises. When nothing matches the primary comes back with a count
    of 0 and the caller decides how to fail.
    """
    for index, strategy in enumerate(spec.candidates):
        count = await _safe_count(strategy)
        if count > 0:
            if index:
                logger.debug(
                    "Primary %r matched nothing; using fallback %r (%d match(es)).",
                    spec.primary.name,
                    strategy.name,
                    count,
                )
            return ResolvedLocator(strategy=strategy, count=count, index=index)

    logger.debug("No strategy matched among %s.", ", ".join(spec.names()))
    return ResolvedLocator(strategy=spec.primary, count=0, index=0)
