"""Mutable accumulator handed to variable-capture callbacks."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


class VarCaptor:
    """Collect Terraform variable overrides set by caller code."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._vars: dict[str, Any] = dict(initial or {})

    def var(self, name: str, value: Any) -> None:
        """Set ``name`` to ``value``, replacing any earlier entry."""

        self._vars[name] = value

    def to_mapping(self) -> Mapping[str, Any]:
        """Return a read-only snapshot of the captured variables."""

        return MappingProxyType(dict(self._vars))

    def __repr__(self) -> str:
        return f"VarCaptor({self._vars!r})"


__all__ = ["VarCaptor"]
