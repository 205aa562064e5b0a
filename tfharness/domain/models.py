"""Core types shared by the plan helper layers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .contracts import ChangeContract, ResourceChangeContract


class ExecutionMode(str, Enum):
    """How the configuration directory is prepared before planning."""

    IN_PLACE = "in_place"
    ISOLATED = "isolated"

    @classmethod
    def parse(cls, value: ExecutionMode | str) -> ExecutionMode:
        if isinstance(value, cls):
            return value
        normalised = str(value).strip().lower().replace("-", "_")
        for member in cls:
            if member.value == normalised:
                return member
        accepted = ", ".join(member.value for member in cls)
        raise ValueError(
            f"Unknown execution mode '{value}'; expected one of: {accepted}"
        )


class HarnessError(RuntimeError):
    """Base class for failures raised by the plan helper."""


class MissingParametersError(HarnessError):
    """Raised when parameters required by the execution mode are absent."""

    def __init__(self, parameters: Sequence[str]) -> None:
        self.parameters = tuple(parameters)
        super().__init__(_describe_missing(self.parameters))


class InvalidParameterError(HarnessError):
    """Raised when a parameter value cannot be used to build a command."""


class PlanDecodeError(HarnessError):
    """Raised when rendered plan output does not decode to a JSON object."""


class CommandError(HarnessError):
    """Raised when an external tool invocation exits unsuccessfully."""

    def __init__(
        self, command: Sequence[str], returncode: int, stderr: str = ""
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command '{' '.join(self.command)}' exited with status {returncode}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


def _describe_missing(parameters: Sequence[str]) -> str:
    quoted = [f"`{parameter}`" for parameter in parameters]
    if len(quoted) == 1:
        return f"Required parameter: {quoted[0]} missing."
    joined = f"{', '.join(quoted[:-1])} and {quoted[-1]}"
    return f"Required parameters: {joined} missing."


@dataclass(frozen=True)
class PlanModel:
    """Decoded representation of ``terraform show -json`` output.

    ``content`` holds the decoded structure verbatim; the accessors below are
    conveniences over the documented JSON plan format and never mutate it.
    """

    content: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.content)

    @property
    def format_version(self) -> str | None:
        return self.content.get("format_version")

    @property
    def terraform_version(self) -> str | None:
        return self.content.get("terraform_version")

    @property
    def variables(self) -> dict[str, Any]:
        raw = self.content.get("variables") or {}
        return {
            name: entry.get("value") if isinstance(entry, Mapping) else entry
            for name, entry in raw.items()
        }

    @property
    def resource_changes(self) -> list[ResourceChangeContract]:
        return [
            ResourceChangeContract.model_validate(entry)
            for entry in self.content.get("resource_changes") or []
        ]

    @property
    def output_changes(self) -> dict[str, ChangeContract]:
        raw = self.content.get("output_changes") or {}
        return {name: ChangeContract.model_validate(entry) for name, entry in raw.items()}

    def resource_changes_matching(
        self,
        *,
        type: str | None = None,
        name: str | None = None,
        index: Any = None,
        module_address: str | None = None,
    ) -> list[ResourceChangeContract]:
        """Return resource changes whose attributes equal every given filter."""

        matches: list[ResourceChangeContract] = []
        for change in self.resource_changes:
            if type is not None and change.type != type:
                continue
            if name is not None and change.name != name:
                continue
            if index is not None and change.index != index:
                continue
            if module_address is not None and change.module_address != module_address:
                continue
            matches.append(change)
        return matches

    def resource_change(self, address: str) -> ResourceChangeContract | None:
        for change in self.resource_changes:
            if change.address == address:
                return change
        return None


__all__ = [
    "CommandError",
    "ExecutionMode",
    "HarnessError",
    "InvalidParameterError",
    "MissingParametersError",
    "PlanDecodeError",
    "PlanModel",
]
