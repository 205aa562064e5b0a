from __future__ import annotations

import pytest

from tfharness import PlanHelper
from tfharness.core import config
from tfharness.domain.models import ExecutionMode


def test_defaults_when_environment_is_empty() -> None:
    try:
        settings = config.configure({})
    finally:
        config.configure()

    assert settings.binary == "terraform"
    assert settings.execution_mode is ExecutionMode.IN_PLACE


def test_settings_feed_plan_helper_defaults() -> None:
    config.configure(
        {
            "TFHARNESS_BINARY": "/opt/bin/tofu",
            "TFHARNESS_EXECUTION_MODE": "isolated",
        }
    )
    try:
        helper = PlanHelper()
    finally:
        config.configure()

    assert helper.binary == "/opt/bin/tofu"
    assert helper.execution_mode is ExecutionMode.ISOLATED
    assert helper.command_options().binary == "/opt/bin/tofu"


def test_blank_values_fall_back_to_defaults() -> None:
    try:
        settings = config.configure(
            {"TFHARNESS_BINARY": "  ", "TFHARNESS_EXECUTION_MODE": ""}
        )
    finally:
        config.configure()

    assert settings.binary == "terraform"
    assert settings.execution_mode is ExecutionMode.IN_PLACE


def test_invalid_execution_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        config.configure({"TFHARNESS_EXECUTION_MODE": "remote"})
    config.configure()


def test_configure_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TFHARNESS_BINARY", "tofu")
    try:
        settings = config.configure()
    finally:
        monkeypatch.delenv("TFHARNESS_BINARY")
        config.configure()

    assert settings.binary == "tofu"
