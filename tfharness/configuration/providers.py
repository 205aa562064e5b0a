"""Configuration providers supplying baseline plan parameters."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from tfharness.domain.models import InvalidParameterError


@runtime_checkable
class ConfigurationProvider(Protocol):
    """Protocol for resolving caller overrides into a full parameter set."""

    def resolve(self, parameters: Mapping[str, Any]) -> dict[str, Any]:
        """Return the parameters to plan with, given caller *parameters*."""


class IdentityProvider:
    """Provider that returns the caller's parameters unchanged."""

    def resolve(self, parameters: Mapping[str, Any]) -> dict[str, Any]:
        return dict(parameters)


_IDENTITY = IdentityProvider()


def identity_provider() -> IdentityProvider:
    return _IDENTITY


def _merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {**base, **overrides}
    base_vars = base.get("vars")
    override_vars = overrides.get("vars")
    if isinstance(base_vars, Mapping) and isinstance(override_vars, Mapping):
        merged["vars"] = {**base_vars, **override_vars}
    return merged


@dataclass
class InMemoryProvider:
    """Provider overlaying caller overrides on a fixed set of defaults.

    The ``vars`` mapping is merged key by key so callers can override a single
    variable without restating the rest.
    """

    defaults: Mapping[str, Any] = field(default_factory=dict)

    def resolve(self, parameters: Mapping[str, Any]) -> dict[str, Any]:
        return _merge(self.defaults, parameters)


@dataclass
class EnvironmentProvider:
    """Provider reading defaults from prefixed environment variables.

    ``TFHARNESS_CONFIGURATION_DIRECTORY=/srv/infra`` becomes the
    ``configuration_directory`` parameter. Values are kept as strings, except
    ``TFHARNESS_VARS``, which must hold a JSON object of variable values.
    """

    prefix: str = "TFHARNESS_"
    environ: Mapping[str, str] | None = None

    def defaults(self) -> dict[str, Any]:
        environ = os.environ if self.environ is None else self.environ
        defaults: dict[str, Any] = {
            key[len(self.prefix) :].lower(): value
            for key, value in environ.items()
            if key.startswith(self.prefix) and len(key) > len(self.prefix)
        }
        if "vars" in defaults:
            defaults["vars"] = self._decode_vars(defaults["vars"])
        return defaults

    def _decode_vars(self, raw: str) -> dict[str, Any]:
        name = f"{self.prefix}VARS"
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidParameterError(
                f"{name} must be a JSON object of variable values: {exc}"
            ) from exc
        if not isinstance(decoded, dict):
            raise InvalidParameterError(
                f"{name} must be a JSON object of variable values, "
                f"got {type(decoded).__name__}"
            )
        return decoded

    def resolve(self, parameters: Mapping[str, Any]) -> dict[str, Any]:
        return _merge(self.defaults(), parameters)


@dataclass
class ChainedProvider:
    """Provider threading parameters through a sequence of providers."""

    providers: Sequence[ConfigurationProvider]

    def resolve(self, parameters: Mapping[str, Any]) -> dict[str, Any]:
        resolved = dict(parameters)
        for provider in self.providers:
            resolved = provider.resolve(resolved)
        return resolved


__all__ = [
    "ChainedProvider",
    "ConfigurationProvider",
    "EnvironmentProvider",
    "IdentityProvider",
    "InMemoryProvider",
    "identity_provider",
]
