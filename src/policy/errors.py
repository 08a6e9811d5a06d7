"""Errors surfaced synchronously by the policy registry."""

from __future__ import annotations

from typing import Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from resolution.models import ResolutionResult


class PolicyError(Exception):
    """Base class for policy registry failures."""


class UnknownCategory(PolicyError):
    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Unknown policy category '{category}'")


class InvalidCandidate(PolicyError):
    def __init__(self, category: str, candidate: str, allowed: Iterable[str]):
        self.category = category
        self.candidate = candidate
        self.allowed = tuple(allowed)
        super().__init__(
            f"'{candidate}' is not a valid {category} choice; "
            f"supported: {', '.join(self.allowed)}"
        )


class ReselectionForbidden(PolicyError):
    def __init__(self, category: str, current: Optional[str] = None):
        self.category = category
        self.current = current
        super().__init__(
            f"'{category}' was already set to '{current}' and can only be chosen once"
        )


class RegistryFrozen(PolicyError):
    def __init__(self, category: Optional[str] = None):
        self.category = category
        super().__init__("Policy registry is frozen; configuration phase is over")


class DependencyUnresolved(PolicyError):
    """The package behind a selection could not be resolved.

    ``fatal`` reflects the category's severity: callers abort startup for
    fatal errors and log a warning otherwise.
    """

    def __init__(self, category: str, candidate: str, package: str,
                 result: "ResolutionResult", fatal: bool = False):
        self.category = category
        self.candidate = candidate
        self.package = package
        self.result = result
        self.fatal = fatal
        super().__init__(
            f"The {package} package for {category} '{candidate}' was not found "
            f"({result.status.value})"
        )
