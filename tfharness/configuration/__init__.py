"""Parameter providers and variable capture."""

from .providers import (
    ChainedProvider,
    ConfigurationProvider,
    EnvironmentProvider,
    IdentityProvider,
    InMemoryProvider,
    identity_provider,
)
from .var_captor import VarCaptor

__all__ = [
    "ChainedProvider",
    "ConfigurationProvider",
    "EnvironmentProvider",
    "IdentityProvider",
    "InMemoryProvider",
    "VarCaptor",
    "identity_provider",
]
