"""Shared process-wide settings."""

from . import config

__all__ = ["config"]
