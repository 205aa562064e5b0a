"""Command-line entry point for producing Terraform plan models."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.table import Table
from structlog.typing import FilteringBoundLogger

from tfharness.application.plan import PlanHelper
from tfharness.configuration.providers import EnvironmentProvider
from tfharness.configuration.var_captor import VarCaptor
from tfharness.domain.models import ExecutionMode, HarnessError, PlanModel


def _build_logger(verbose: bool) -> FilteringBoundLogger:
    level = logging.INFO if verbose else logging.WARNING
    return structlog.wrap_logger(
        structlog.PrintLogger(sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def _parse_var(raw: str) -> tuple[str, str]:
    name, separator, value = raw.partition("=")
    if not separator or not name.strip():
        raise click.BadParameter(f"expected NAME=VALUE, got '{raw}'", param_hint="--var")
    return name.strip(), value


def _render_summary(plan: PlanModel, console: Console) -> None:
    table = Table(title="Resource changes")
    table.add_column("Address")
    table.add_column("Actions")
    for change in plan.resource_changes:
        table.add_row(change.address, ", ".join(change.change.actions))
    console.print(table)
    if plan.output_changes:
        outputs = Table(title="Output changes")
        outputs.add_column("Output")
        outputs.add_column("Actions")
        for name, change in sorted(plan.output_changes.items()):
            outputs.add_row(name, ", ".join(change.actions))
        console.print(outputs)


@click.group()
def cli() -> None:
    """Terraform plan helpers for infrastructure tests."""


@cli.command("plan")
@click.argument(
    "configuration_directory", type=click.Path(file_okay=False, path_type=Path)
)
@click.option(
    "--source-directory",
    type=click.Path(file_okay=False, path_type=Path),
    help="Module copied into the configuration directory in isolated mode.",
)
@click.option(
    "--state-file", type=click.Path(path_type=Path), help="State file to plan against."
)
@click.option("--plan-file-name", help="Plan file name; generated when omitted.")
@click.option("--var", "variables", multiple=True, help="Terraform variable as NAME=VALUE.")
@click.option(
    "--mode",
    type=click.Choice([mode.value for mode in ExecutionMode]),
    default=None,
    help="Execution mode (default from TFHARNESS_EXECUTION_MODE or in_place).",
)
@click.option("--binary", default=None, help="Terraform binary to invoke.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "summary"]),
    default="json",
    show_default=True,
)
@click.option("--verbose", is_flag=True, help="Log each terraform invocation to stderr.")
def plan_command(
    configuration_directory: Path,
    source_directory: Path | None,
    state_file: Path | None,
    plan_file_name: str | None,
    variables: Sequence[str],
    mode: str | None,
    binary: str | None,
    output_format: str,
    verbose: bool,
) -> None:
    """Plan CONFIGURATION_DIRECTORY and print the decoded plan."""

    parsed_vars = [_parse_var(raw) for raw in variables]
    overrides: dict[str, object] = {
        "configuration_directory": str(configuration_directory),
    }
    if source_directory is not None:
        overrides["source_directory"] = str(source_directory)
    if state_file is not None:
        overrides["state_file"] = str(state_file)
    if plan_file_name:
        overrides["plan_file_name"] = plan_file_name

    def capture(captor: VarCaptor) -> None:
        for name, value in parsed_vars:
            captor.var(name, value)

    helper = PlanHelper(
        configuration_provider=EnvironmentProvider(),
        binary=binary,
        logger=_build_logger(verbose),
        execution_mode=mode,
        stdout=sys.stderr,
    )
    try:
        plan = helper.execute(overrides, capture if parsed_vars else None)
    except HarnessError as exc:
        raise click.ClickException(str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Unable to decode plan output: {exc}") from exc

    if output_format == "json":
        click.echo(json.dumps(plan.to_dict(), indent=2))
    else:
        _render_summary(plan, Console())


def main() -> None:  # pragma: no cover - console script
    cli()


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
