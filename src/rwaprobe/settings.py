"""Pydantic-based settings loaded from YAML with env-var overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings

from rwaprobe.exceptions import ConfigurationError
from rwaprobe.outcome.types import PollConfig

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class AppSettings(BaseSettings):
    """Run configuration with YAML + env var support.

    Env vars are prefixed with ``RWAPROBE_``.
    Example: ``RWAPROBE_TEST_PASSWORD=s3cret``
    """

    model_config = {"env_prefix": "RWAPROBE_"}

    # --- application under test ---
    base_url: str = "http://localhost:3000"
    api_url: str = "http://localhost:3001"

    # --- credentials ---
    test_password: str = ""

    # --- browser ---
    headless: bool = True
    slow_mo: int = 0  # ms between Playwright actions
    viewport_width: int = 1280
    viewport_height: int = 720

    # --- timing (ms) ---
    timeout_ms: int = 30_000
    expect_timeout_ms: int = 15_000
    login_timeout_ms: int = 8_000
    poll_interval_ms: int = 200
    # Cap on one probe evaluation; a slower probe counts as false for that sweep.
    probe_timeout_ms: int = 250

    # --- test data ---
    database_path: str = ".rwa/data/database.json"

    @field_validator("base_url", "api_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("poll_interval_ms", "probe_timeout_ms")
    @classmethod
    def _positive_ms(cls, v: int, info: ValidationInfo) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be greater than zero")
        return v

    def poll_config(self, timeout_ms: float | None = None) -> PollConfig:
        """Return a :class:`PollConfig` using the expect timeout by default."""
        return PollConfig(
            timeout_ms=self.expect_timeout_ms if timeout_ms is None else timeout_ms,
            interval_ms=self.poll_interval_ms,
            probe_timeout_ms=self.probe_timeout_ms,
        )

    def require_password(self) -> str:
        if not self.test_password:
            raise ConfigurationError(
                "Missing test password: set RWAPROBE_TEST_PASSWORD or test_password in settings.yaml."
            )
        return self.test_password

    # ---- factory ----

    @classmethod
    def from_yaml(cls, path: str | Path | None = None) -> "AppSettings":
        """Load settings from a YAML file, then overlay env vars.

        Env vars (``RWAPROBE_*``) take priority over YAML values.
        """
        if path is None:
            path = _PROJECT_ROOT / "settings.yaml"
        path = Path(path)
        raw: dict[str, Any] = {}
        if path.exists():
            with open(path) as fh:
                raw = yaml.safe_load(fh) or {}
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{path} must contain a mapping, got {type(raw).__name__}.")

        # Let env vars override YAML: remove YAML keys that have an env override
        prefix = "RWAPROBE_"
        for key in list(raw.keys()):
            env_key = f"{prefix}{key.upper()}"
            if env_key in os.environ:
                del raw[key]

        return cls(**raw)
