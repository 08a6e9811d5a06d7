"""Plain module or file load with no version semantics."""

import importlib
import importlib.util
import os
import re
import sys
from typing import Callable

from ..models import DependencyRequest, StrategyKind, StrategyOutcome
from .base import ResolutionStrategy, module_location, module_name_for


def looks_like_path(name: str) -> bool:
    """Return True when ``name`` refers to a file rather than a module."""
    return name.endswith('.py') or '/' in name or os.sep in name


def file_module_name(path: str) -> str:
    """Name to register a loaded file under in sys.modules.

    The basename is used unless a module from another location already
    holds it; then a name derived from the full path is used instead.
    """
    name = os.path.splitext(os.path.basename(path))[0]
    existing = sys.modules.get(name)
    if existing is None or os.path.abspath(module_location(existing)) == path:
        return name
    return "_frameboot_file" + re.sub(r'\W', '_', os.path.splitext(path)[0])


class RawPathStrategy(ResolutionStrategy):
    """Import the name directly from sys.path, or execute a ``.py`` file."""

    def __init__(self, importer: Callable = importlib.import_module):
        self.importer = importer

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.RAW_PATH

    def attempt(self, request: DependencyRequest) -> StrategyOutcome:
        if looks_like_path(request.name):
            return self._load_file(request.name)
        module_name = module_name_for(request.name)
        try:
            module = self.importer(module_name)
        except ImportError as e:
            return StrategyOutcome.recoverable(f"{type(e).__name__}: {e}")
        except Exception as e:  # pylint: disable=broad-exception-caught
            return StrategyOutcome.fatal(f"{module_name} failed while loading: {type(e).__name__}: {e}")
        return StrategyOutcome.success(module_location(module))

    def _load_file(self, name: str) -> StrategyOutcome:
        path = os.path.abspath(os.path.expanduser(name))
        if not path.endswith('.py'):
            path += '.py'
        if not os.path.isfile(path):
            return StrategyOutcome.recoverable(f"no such file: {path}")

        module_name = file_module_name(path)
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            return StrategyOutcome.recoverable(f"cannot load {path} as a module")

        previous = sys.modules.get(module_name)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:  # pylint: disable=broad-exception-caught
            if previous is not None:
                sys.modules[module_name] = previous
            else:
                sys.modules.pop(module_name, None)
            if isinstance(e, ImportError):
                return StrategyOutcome.recoverable(f"{type(e).__name__}: {e}")
            return StrategyOutcome.fatal(f"{path} failed while loading: {type(e).__name__}: {e}")
        return StrategyOutcome.success(path)
