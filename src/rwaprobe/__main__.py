"""Entry point: ``python -m rwaprobe``."""

from __future__ import annotations

import asyncio
import logging
import sys

from rwaprobe.exceptions import ConfigurationError, RwaProbeError
from rwaprobe.runner import SmokeRunner
from rwaprobe.settings import AppSettings


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quiet noisy libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)


async def _async_main(config_path: str | None) -> bool:
    settings = AppSettings.from_yaml(config_path)
    metrics = await SmokeRunner(settings).run()
    return metrics.all_passed


def main() -> None:
    _configure_logging()
    config_path = sys.argv[1] if len(sys.argv) > 1 else None
    try:
        passed = asyncio.run(_async_main(config_path))
    except ConfigurationError as exc:
        logging.error("%s", exc)
        sys.exit(2)
    except RwaProbeError as exc:
        logging.error("Run aborted: %s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logging.info("Interrupted by user.")
        sys.exit(130)
    sys.exit(0 if passed else 1)


if __name__ == "__main__":
    main()
