"""Dependency resolution: request models, parsing, strategies and the resolver."""

from .errors import ConfigurationError, RegistryError, RequiredDependencyMissing
from .models import (
    ConstraintMode,
    DependencyRequest,
    OutcomeKind,
    ResolutionAttempt,
    ResolutionResult,
    ResolutionStatus,
    StrategyKind,
    StrategyOutcome,
    VersionConstraint,
)
from .resolver import Resolver, default_strategies

__all__ = [
    "ConfigurationError",
    "RegistryError",
    "RequiredDependencyMissing",
    "ConstraintMode",
    "DependencyRequest",
    "OutcomeKind",
    "ResolutionAttempt",
    "ResolutionResult",
    "ResolutionStatus",
    "StrategyKind",
    "StrategyOutcome",
    "VersionConstraint",
    "Resolver",
    "default_strategies",
]
