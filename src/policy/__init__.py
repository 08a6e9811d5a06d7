"""Generator policy registry and its categories."""

from .defaults import builtin_categories
from .errors import (
    DependencyUnresolved,
    InvalidCandidate,
    PolicyError,
    RegistryFrozen,
    ReselectionForbidden,
    UnknownCategory,
)
from .models import UNSET, Category, Placement, Reselection, Severity
from .registry import PolicyRegistry

__all__ = [
    "builtin_categories",
    "DependencyUnresolved",
    "InvalidCandidate",
    "PolicyError",
    "RegistryFrozen",
    "ReselectionForbidden",
    "UnknownCategory",
    "UNSET",
    "Category",
    "Placement",
    "Reselection",
    "Severity",
    "PolicyRegistry",
]
