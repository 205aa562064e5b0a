"""Translate parameter mappings into Terraform invocations and run them."""

from __future__ import annotations

import json

# Bandit: subprocess usage is limited to the terraform CLI with curated args.
import subprocess  # nosec B404
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import IO, Any, ClassVar

import structlog
from structlog.typing import FilteringBoundLogger

from tfharness.core import config
from tfharness.domain.models import CommandError


class OptionKind(Enum):
    FLAG = "flag"
    BOOLEAN = "boolean"
    VALUE = "value"
    REPEATED = "repeated"
    MAPPING = "mapping"


@dataclass(frozen=True)
class OptionSpec:
    """How a single parameter renders onto the command line."""

    switch: str
    kind: OptionKind = OptionKind.VALUE
    # Render ``-var name=value`` as two arguments instead of ``-switch=name=value``.
    separate: bool = False

    def render(self, value: Any) -> list[str]:
        if value is None:
            return []
        if self.kind is OptionKind.FLAG:
            return [self.switch] if parse_bool(value) else []
        if self.kind is OptionKind.BOOLEAN:
            return [f"{self.switch}={format_value(parse_bool(value))}"]
        if self.kind is OptionKind.VALUE:
            return [f"{self.switch}={format_value(value)}"]
        if self.kind is OptionKind.REPEATED:
            items = [value] if isinstance(value, (str, bytes)) else list(value)
            return [f"{self.switch}={format_value(item)}" for item in items]
        if not isinstance(value, Mapping):
            raise TypeError(
                f"{self.switch} expects a mapping of names to values, "
                f"got {type(value).__name__}"
            )
        rendered: list[str] = []
        for key, item in value.items():
            pair = f"{key}={format_value(item)}"
            if self.separate:
                rendered.extend([self.switch, pair])
            else:
                rendered.append(f"{self.switch}={pair}")
        return rendered


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def parse_bool(value: Any) -> bool:
    """Interpret ``value`` as a boolean, reading strings such as ``"false"``."""

    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in _TRUE_VALUES:
            return True
        if normalised in _FALSE_VALUES:
            return False
        raise ValueError(f"Cannot interpret '{value}' as a boolean")
    return bool(value)


def format_value(value: Any) -> str:
    """Format a parameter value the way Terraform expects on the command line."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, Mapping):
        return json.dumps(dict(value), separators=(",", ":"))
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value), separators=(",", ":"))
    return str(value)


def _flag(switch: str) -> OptionSpec:
    return OptionSpec(switch, OptionKind.FLAG)


def _boolean(switch: str) -> OptionSpec:
    return OptionSpec(switch, OptionKind.BOOLEAN)


def _value(switch: str) -> OptionSpec:
    return OptionSpec(switch, OptionKind.VALUE)


def _repeated(switch: str) -> OptionSpec:
    return OptionSpec(switch, OptionKind.REPEATED)


@dataclass
class CommandOptions:
    """Execution options shared by every command in a pipeline run."""

    binary: str = field(default_factory=lambda: config.SETTINGS.binary)
    logger: FilteringBoundLogger = field(
        default_factory=lambda: structlog.get_logger(__name__)
    )
    stdin: IO[str] | None = None
    stdout: IO[str] | None = None
    stderr: IO[str] | None = None
    # ``stdin`` is read once and replayed to every command sharing these options.
    stdin_payload: str | None = None

    def read_input(self) -> str | None:
        if self.stdin_payload is None and self.stdin is not None:
            self.stdin_payload = self.stdin.read()
        return self.stdin_payload

    def with_stdout(self, stream: IO[str]) -> CommandOptions:
        return replace(self, stdout=stream)


@dataclass
class TerraformCommand:
    """Base class for a Terraform subcommand with a static option table."""

    options: CommandOptions = field(default_factory=CommandOptions)

    subcommand: ClassVar[str] = ""
    switches: ClassVar[Mapping[str, OptionSpec]] = {}
    positional: ClassVar[tuple[str, ...]] = ()

    def build_command(self, parameters: Mapping[str, Any]) -> list[str]:
        argv = [self.options.binary]
        chdir = parameters.get("chdir")
        if chdir is not None:
            argv.append(f"-chdir={chdir}")
        argv.append(self.subcommand)
        for name, spec in self.switches.items():
            argv.extend(spec.render(parameters.get(name)))
        for name in self.positional:
            value = parameters.get(name)
            if value is not None:
                argv.append(format_value(value))
        return argv

    def success_codes(self, parameters: Mapping[str, Any]) -> frozenset[int]:
        return frozenset({0})

    def execute(self, parameters: Mapping[str, Any]) -> subprocess.CompletedProcess[str]:
        argv = self.build_command(parameters)
        logger = self.options.logger
        logger.info("terraform.command.started", command=argv)

        completed = subprocess.run(  # nosec B603
            argv,
            input=self.options.read_input(),
            capture_output=True,
            text=True,
            check=False,
        )
        _relay(completed.stdout, self.options.stdout or sys.stdout)
        _relay(completed.stderr, self.options.stderr or sys.stderr)

        if completed.returncode not in self.success_codes(parameters):
            logger.error(
                "terraform.command.failed",
                command=argv,
                returncode=completed.returncode,
            )
            raise CommandError(argv, completed.returncode, completed.stderr or "")

        logger.info(
            "terraform.command.completed",
            command=argv,
            returncode=completed.returncode,
        )
        return completed


def _relay(output: str | None, stream: IO[str]) -> None:
    if output:
        stream.write(output)
        stream.flush()


class InitCommand(TerraformCommand):
    subcommand = "init"
    switches = {
        "backend": _boolean("-backend"),
        "backend_config": OptionSpec("-backend-config", OptionKind.MAPPING),
        "force_copy": _flag("-force-copy"),
        "from_module": _value("-from-module"),
        "get": _boolean("-get"),
        "input": _boolean("-input"),
        "lock": _boolean("-lock"),
        "lock_timeout": _value("-lock-timeout"),
        "no_color": _flag("-no-color"),
        "plugin_dir": _repeated("-plugin-dir"),
        "reconfigure": _flag("-reconfigure"),
        "migrate_state": _flag("-migrate-state"),
        "upgrade": _flag("-upgrade"),
    }


class PlanCommand(TerraformCommand):
    subcommand = "plan"
    switches = {
        "compact_warnings": _flag("-compact-warnings"),
        "destroy": _flag("-destroy"),
        "detailed_exitcode": _flag("-detailed-exitcode"),
        "input": _boolean("-input"),
        "lock": _boolean("-lock"),
        "lock_timeout": _value("-lock-timeout"),
        "no_color": _flag("-no-color"),
        "out": _value("-out"),
        "parallelism": _value("-parallelism"),
        "refresh": _boolean("-refresh"),
        "refresh_only": _flag("-refresh-only"),
        "replace": _repeated("-replace"),
        "state": _value("-state"),
        "target": _repeated("-target"),
        "vars": OptionSpec("-var", OptionKind.MAPPING, separate=True),
        "var_file": _repeated("-var-file"),
    }

    def success_codes(self, parameters: Mapping[str, Any]) -> frozenset[int]:
        # -detailed-exitcode reports "changes present" as status 2.
        if parse_bool(parameters.get("detailed_exitcode")):
            return frozenset({0, 2})
        return frozenset({0})


class ShowCommand(TerraformCommand):
    subcommand = "show"
    switches = {
        "json": _flag("-json"),
        "no_color": _flag("-no-color"),
    }
    positional = ("path",)


__all__ = [
    "CommandOptions",
    "InitCommand",
    "OptionKind",
    "OptionSpec",
    "PlanCommand",
    "ShowCommand",
    "TerraformCommand",
    "format_value",
    "parse_bool",
]
