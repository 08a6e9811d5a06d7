"""Lookup inside the embedded ("frozen") framework directory."""

import importlib
import importlib.machinery
import importlib.util
import os
import sys
from typing import Callable, Optional

from ..models import DependencyRequest, StrategyKind, StrategyOutcome
from .base import ResolutionStrategy, module_location, module_name_for


def prefix_predicate(prefix: str) -> Callable[[str], bool]:
    """Build the default framework-internal naming predicate."""
    def _matches(name: str) -> bool:
        return bool(prefix) and name.startswith(prefix)
    return _matches


class FrameworkLocalStrategy(ResolutionStrategy):
    """Load a module from the embedded framework copy.

    Every failure is recoverable: a miss here only means the generic
    strategies should be used instead.
    """

    def __init__(self, root: Optional[str] = None,
                 predicate: Optional[Callable[[str], bool]] = None):
        self.root = os.path.abspath(root) if root else None
        self.predicate = predicate

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.FRAMEWORK_LOCAL

    def applies(self, request: DependencyRequest) -> bool:
        if request.is_framework_internal:
            return True
        return bool(self.root and self.predicate and self.predicate(request.name))

    def _is_local(self, module) -> bool:
        location = module_location(module, "")
        return bool(location) and os.path.abspath(location).startswith(self.root + os.sep)

    def attempt(self, request: DependencyRequest) -> StrategyOutcome:
        if not self.root:
            return StrategyOutcome.recoverable("no embedded framework root configured")
        if not os.path.isdir(self.root):
            return StrategyOutcome.recoverable(f"framework root {self.root} does not exist")

        module_name = module_name_for(request.name)
        top = module_name.partition('.')[0]
        try:
            spec = importlib.machinery.PathFinder.find_spec(top, [self.root])
        except (ImportError, ValueError) as e:
            return StrategyOutcome.recoverable(f"{type(e).__name__}: {e}")
        if spec is None or spec.loader is None:
            return StrategyOutcome.recoverable(f"'{top}' not found under {self.root}")

        previous = sys.modules.get(top)
        try:
            if previous is None or not self._is_local(previous):
                module = importlib.util.module_from_spec(spec)
                sys.modules[top] = module
                spec.loader.exec_module(module)
            module = importlib.import_module(module_name)
        except Exception as e:  # pylint: disable=broad-exception-caught
            if previous is not None:
                sys.modules[top] = previous
            else:
                sys.modules.pop(top, None)
            return StrategyOutcome.recoverable(f"{type(e).__name__}: {e}")
        return StrategyOutcome.success(module_location(module, self.root))
