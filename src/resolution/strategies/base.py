"""Base class and shared helpers for resolution strategies."""

from abc import ABC, abstractmethod
from types import ModuleType
from typing import Optional

from ..models import DependencyRequest, StrategyKind, StrategyOutcome


class ResolutionStrategy(ABC):
    """One mechanism for satisfying a dependency request.

    ``attempt`` never raises for ordinary misses: it returns a tagged
    StrategyOutcome so the resolver can walk its chain with a plain loop.
    """

    @property
    @abstractmethod
    def kind(self) -> StrategyKind:
        """Return the strategy kind."""

    def applies(self, request: DependencyRequest) -> bool:  # pylint: disable=unused-argument
        """Return True if this strategy should be tried for ``request``."""
        return True

    @abstractmethod
    def attempt(self, request: DependencyRequest) -> StrategyOutcome:
        """Try to satisfy ``request``.

        Returns:
            StrategyOutcome: SUCCESS with a location, or a RECOVERABLE/FATAL failure
        """


def module_name_for(name: str) -> str:
    """Map a dependency name onto an importable module name."""
    return name.strip().replace('-', '_')


def module_location(module: ModuleType, fallback: Optional[str] = None) -> str:
    """Best description of where ``module`` was loaded from."""
    path = getattr(module, '__file__', None)
    if path:
        return str(path)
    search = getattr(module, '__path__', None)
    if search:
        for entry in search:
            return str(entry)
    return fallback or f"<built-in {module.__name__}>"
