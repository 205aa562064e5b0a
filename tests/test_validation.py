"""Tests for execution-mode parameter validation."""

from __future__ import annotations

import pytest

from tfharness.domain.models import ExecutionMode, MissingParametersError
from tfharness.domain.validation import (
    REQUIRED_PARAMETERS,
    ensure_required_parameters,
    missing_parameters,
)


def test_required_parameters_table_covers_every_mode() -> None:
    assert set(REQUIRED_PARAMETERS) == set(ExecutionMode)
    assert REQUIRED_PARAMETERS[ExecutionMode.IN_PLACE] == ("configuration_directory",)
    assert REQUIRED_PARAMETERS[ExecutionMode.ISOLATED] == (
        "configuration_directory",
        "source_directory",
    )


@pytest.mark.parametrize(
    ("mode", "parameters", "expected"),
    [
        (ExecutionMode.IN_PLACE, {}, ["configuration_directory"]),
        (ExecutionMode.IN_PLACE, {"configuration_directory": "/tmp/proj"}, []),
        (
            ExecutionMode.ISOLATED,
            {"configuration_directory": "/tmp/proj"},
            ["source_directory"],
        ),
        (
            ExecutionMode.ISOLATED,
            {"source_directory": "/src"},
            ["configuration_directory"],
        ),
        (
            ExecutionMode.ISOLATED,
            {"configuration_directory": None, "source_directory": None},
            ["configuration_directory", "source_directory"],
        ),
    ],
)
def test_missing_parameters_names_exactly_the_absent_ones(
    mode, parameters, expected
) -> None:
    assert missing_parameters(mode, parameters) == expected


def test_ensure_required_parameters_is_silent_when_satisfied() -> None:
    ensure_required_parameters(
        ExecutionMode.ISOLATED,
        {"configuration_directory": "", "source_directory": "/src"},
    )


def test_single_missing_parameter_message() -> None:
    with pytest.raises(MissingParametersError) as excinfo:
        ensure_required_parameters(ExecutionMode.IN_PLACE, {})

    assert str(excinfo.value) == "Required parameter: `configuration_directory` missing."


def test_multiple_missing_parameter_messages() -> None:
    two = MissingParametersError(["a", "b"])
    three = MissingParametersError(["a", "b", "c"])

    assert str(two) == "Required parameters: `a` and `b` missing."
    assert str(three) == "Required parameters: `a`, `b` and `c` missing."
    assert three.parameters == ("a", "b", "c")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("in_place", ExecutionMode.IN_PLACE),
        ("In-Place", ExecutionMode.IN_PLACE),
        ("isolated", ExecutionMode.ISOLATED),
        (ExecutionMode.ISOLATED, ExecutionMode.ISOLATED),
    ],
)
def test_execution_mode_parse(raw, expected) -> None:
    assert ExecutionMode.parse(raw) is expected


def test_execution_mode_parse_rejects_unknown_values() -> None:
    with pytest.raises(ValueError, match="in_place, isolated"):
        ExecutionMode.parse("sandboxed")
