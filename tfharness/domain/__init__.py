"""Domain entities and invariants for the plan helper."""

from . import contracts, models, validation

__all__ = ["contracts", "models", "validation"]
