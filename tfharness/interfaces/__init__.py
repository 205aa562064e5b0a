"""Command-line surface for the plan helper."""

from .cli import cli

__all__ = ["cli"]
