"""Adapters around the Terraform command-line tool."""

from . import commands
from .commands import (
    CommandOptions,
    InitCommand,
    PlanCommand,
    ShowCommand,
    TerraformCommand,
)

__all__ = [
    "commands",
    "CommandOptions",
    "InitCommand",
    "PlanCommand",
    "ShowCommand",
    "TerraformCommand",
]
