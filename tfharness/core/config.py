"""Process-wide defaults for the plan helper, resolved from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from tfharness.domain.models import ExecutionMode

DEFAULT_BINARY = "terraform"
PLAN_FILE_SUFFIX = ".tfplan"
PLAN_FILE_TOKEN_LENGTH = 10


@dataclass(frozen=True)
class HarnessSettings:
    binary: str = DEFAULT_BINARY
    execution_mode: ExecutionMode = ExecutionMode.IN_PLACE


SETTINGS: HarnessSettings = HarnessSettings()


def _get_value(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name)
    return value.strip() if value is not None and value.strip() else None


def _build_settings(environ: Mapping[str, str]) -> HarnessSettings:
    binary = _get_value(environ, "TFHARNESS_BINARY") or DEFAULT_BINARY
    mode = _get_value(environ, "TFHARNESS_EXECUTION_MODE")
    return HarnessSettings(
        binary=binary,
        execution_mode=ExecutionMode.parse(mode or ExecutionMode.IN_PLACE.value),
    )


def configure(environ: Mapping[str, str] | None = None) -> HarnessSettings:
    """Initialise settings from *environ*, defaulting to ``os.environ``."""

    global SETTINGS

    SETTINGS = _build_settings(os.environ if environ is None else environ)
    return SETTINGS


configure()


__all__ = [
    "DEFAULT_BINARY",
    "PLAN_FILE_SUFFIX",
    "PLAN_FILE_TOKEN_LENGTH",
    "SETTINGS",
    "HarnessSettings",
    "configure",
]
