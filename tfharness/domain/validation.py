"""Required-parameter checks keyed by execution mode."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from .models import ExecutionMode, InvalidParameterError, MissingParametersError

REQUIRED_PARAMETERS: Mapping[ExecutionMode, tuple[str, ...]] = MappingProxyType(
    {
        ExecutionMode.IN_PLACE: ("configuration_directory",),
        ExecutionMode.ISOLATED: ("configuration_directory", "source_directory"),
    }
)


def required_parameters(mode: ExecutionMode) -> tuple[str, ...]:
    return REQUIRED_PARAMETERS.get(mode, ())


def missing_parameters(
    mode: ExecutionMode, parameters: Mapping[str, Any]
) -> list[str]:
    """Return required names whose value is absent or ``None``."""

    return [
        name for name in required_parameters(mode) if parameters.get(name) is None
    ]


def ensure_required_parameters(
    mode: ExecutionMode, parameters: Mapping[str, Any]
) -> None:
    missing = missing_parameters(mode, parameters)
    if missing:
        raise MissingParametersError(missing)


def ensure_vars_mapping(parameters: Mapping[str, Any]) -> None:
    """Reject a ``vars`` parameter that is present but not a mapping."""

    value = parameters.get("vars")
    if value is not None and not isinstance(value, Mapping):
        raise InvalidParameterError(
            f"Parameter `vars` must be a mapping of variable names to values, "
            f"got {type(value).__name__}"
        )


__all__ = [
    "REQUIRED_PARAMETERS",
    "ensure_required_parameters",
    "ensure_vars_mapping",
    "missing_parameters",
    "required_parameters",
]
