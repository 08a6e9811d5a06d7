"""Exceptions raised by the resolution layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ResolutionResult


class ConfigurationError(ValueError):
    """Malformed dependency request or unsupported argument shape."""


class RegistryError(RuntimeError):
    """A package index failed internally (not a simple absence)."""


class RequiredDependencyMissing(RuntimeError):
    """A required dependency could not be satisfied by any strategy."""

    def __init__(self, result: "ResolutionResult"):
        self.result = result
        super().__init__(
            f"Could not find '{result.request.name}' as either a library or package"
        )
