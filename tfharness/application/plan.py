"""Run init, plan and show against a Terraform configuration and decode the result.

The helper exists for tests that assert on the effects of an infrastructure
change. ``PlanHelper.execute`` resolves parameters, validates them for the
execution mode, then runs clean, init, plan, show and plan-file removal in
that order. Any failure aborts the remaining steps; in particular a failed
``show`` leaves the plan file behind in the configuration directory.
"""

from __future__ import annotations

import io
import json
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any
from uuid import uuid4

import structlog
from structlog.typing import FilteringBoundLogger

from tfharness.configuration.providers import (
    ConfigurationProvider,
    identity_provider,
)
from tfharness.configuration.var_captor import VarCaptor
from tfharness.core import config
from tfharness.domain.models import ExecutionMode, PlanDecodeError, PlanModel
from tfharness.domain.validation import (
    ensure_required_parameters,
    ensure_vars_mapping,
)
from tfharness.infrastructure.commands import (
    CommandOptions,
    InitCommand,
    PlanCommand,
    ShowCommand,
)

VarsCallback = Callable[[VarCaptor], object]


def generate_plan_file_name() -> str:
    """Return a fresh ``<hex token>.tfplan`` file name."""

    return f"{uuid4().hex[: config.PLAN_FILE_TOKEN_LENGTH]}{config.PLAN_FILE_SUFFIX}"


def decode_plan(contents: str) -> PlanModel:
    """Decode ``terraform show -json`` output into a :class:`PlanModel`."""

    decoded = json.loads(contents)
    if not isinstance(decoded, Mapping):
        raise PlanDecodeError(
            f"Expected a JSON object from terraform show, got {type(decoded).__name__}"
        )
    return PlanModel(decoded)


@dataclass(frozen=True)
class PlanHelper:
    """Produce a :class:`PlanModel` for a Terraform configuration."""

    configuration_provider: ConfigurationProvider = field(
        default_factory=identity_provider
    )
    binary: str | None = None
    logger: FilteringBoundLogger = field(
        default_factory=lambda: structlog.get_logger(__name__)
    )
    stdin: IO[str] | None = None
    stdout: IO[str] | None = None
    stderr: IO[str] | None = None
    execution_mode: ExecutionMode | str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "binary", self.binary or config.SETTINGS.binary)
        object.__setattr__(
            self,
            "execution_mode",
            ExecutionMode.parse(self.execution_mode or config.SETTINGS.execution_mode),
        )

    def execute(
        self,
        overrides: Mapping[str, Any] | None = None,
        capture_vars: VarsCallback | None = None,
    ) -> PlanModel:
        """Plan the configuration and return the decoded plan.

        ``capture_vars`` receives a :class:`VarCaptor` seeded with the resolved
        ``vars``; whatever it sets replaces the ``vars`` parameter.
        """

        parameters = self.resolve_parameters(overrides or {}, capture_vars)
        ensure_required_parameters(self.execution_mode, parameters)

        options = self.command_options()
        self.clean(parameters)
        self.init(parameters, options)
        plan_file = self.plan(parameters, options)
        plan_contents = self.show(parameters, plan_file, options)
        self.remove(parameters, plan_file)
        return decode_plan(plan_contents)

    def resolve_parameters(
        self,
        overrides: Mapping[str, Any],
        capture_vars: VarsCallback | None = None,
    ) -> dict[str, Any]:
        parameters = self.configuration_provider.resolve(overrides)
        ensure_vars_mapping(parameters)
        if capture_vars is None:
            return parameters

        captor = VarCaptor(parameters.get("vars") or {})
        capture_vars(captor)
        return {**parameters, "vars": dict(captor.to_mapping())}

    def clean(self, parameters: Mapping[str, Any]) -> None:
        if self.execution_mode is not ExecutionMode.ISOLATED:
            return

        directory = Path(parameters["configuration_directory"])
        self.logger.info("plan_helper.clean", configuration_directory=str(directory))
        shutil.rmtree(directory, ignore_errors=True)
        directory.mkdir(parents=True, exist_ok=True)

    def init(
        self, parameters: Mapping[str, Any], options: CommandOptions | None = None
    ) -> None:
        command = InitCommand(options or self.command_options())
        command.execute(self.init_parameters(parameters))

    def plan(
        self, parameters: Mapping[str, Any], options: CommandOptions | None = None
    ) -> str:
        plan_parameters = self.plan_parameters(parameters)
        PlanCommand(options or self.command_options()).execute(plan_parameters)
        return plan_parameters["out"]

    def show(
        self,
        parameters: Mapping[str, Any],
        plan_file: str,
        options: CommandOptions | None = None,
    ) -> str:
        captured = io.StringIO()
        show_options = (options or self.command_options()).with_stdout(captured)
        ShowCommand(show_options).execute(self.show_parameters(parameters, plan_file))
        return captured.getvalue()

    def remove(self, parameters: Mapping[str, Any], plan_file: str) -> None:
        path = Path(parameters["configuration_directory"]) / plan_file
        path.unlink(missing_ok=True)
        self.logger.info("plan_helper.plan_file_removed", path=str(path))

    def init_parameters(self, parameters: Mapping[str, Any]) -> dict[str, Any]:
        init_parameters = {
            **parameters,
            "chdir": parameters["configuration_directory"],
            "input": False,
        }
        if self.execution_mode is ExecutionMode.ISOLATED:
            init_parameters["from_module"] = parameters["source_directory"]
        return init_parameters

    def plan_parameters(self, parameters: Mapping[str, Any]) -> dict[str, Any]:
        plan_parameters = {
            **parameters,
            "chdir": parameters["configuration_directory"],
            "out": parameters.get("plan_file_name") or generate_plan_file_name(),
            "input": False,
        }
        if parameters.get("state_file"):
            plan_parameters["state"] = parameters["state_file"]
        return plan_parameters

    def show_parameters(
        self, parameters: Mapping[str, Any], plan_file: str
    ) -> dict[str, Any]:
        return {
            **parameters,
            "chdir": parameters["configuration_directory"],
            "path": plan_file,
            "no_color": True,
            "json": True,
        }

    def command_options(self) -> CommandOptions:
        return CommandOptions(
            binary=self.binary,
            logger=self.logger,
            stdin=self.stdin,
            stdout=self.stdout,
            stderr=self.stderr,
        )


__all__ = ["PlanHelper", "VarsCallback", "decode_plan", "generate_plan_file_name"]
