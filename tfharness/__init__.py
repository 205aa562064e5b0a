"""Test-support helpers that turn Terraform plans into assertable models."""

from .application.plan import PlanHelper, decode_plan
from .configuration.providers import (
    ChainedProvider,
    ConfigurationProvider,
    EnvironmentProvider,
    IdentityProvider,
    InMemoryProvider,
    identity_provider,
)
from .configuration.var_captor import VarCaptor
from .domain.models import (
    CommandError,
    ExecutionMode,
    HarnessError,
    InvalidParameterError,
    MissingParametersError,
    PlanDecodeError,
    PlanModel,
)

__all__ = [
    "ChainedProvider",
    "CommandError",
    "ConfigurationProvider",
    "EnvironmentProvider",
    "ExecutionMode",
    "HarnessError",
    "IdentityProvider",
    "InMemoryProvider",
    "InvalidParameterError",
    "MissingParametersError",
    "PlanDecodeError",
    "PlanHelper",
    "PlanModel",
    "VarCaptor",
    "decode_plan",
    "identity_provider",
]
