"""Shared fixtures: scripted strategies, a fake package index, temp modules."""

import importlib
import sys
from typing import Dict, List, Optional, Union

import pytest

from constants import Constants
from resolution.errors import RegistryError
from resolution.models import DependencyRequest, StrategyKind, StrategyOutcome
from resolution.resolver import Resolver
from resolution.strategies import InstalledPackage, PackageIndex, ResolutionStrategy


class ScriptedStrategy(ResolutionStrategy):
    """Strategy returning a fixed outcome and recording every request it sees."""

    def __init__(self, kind: StrategyKind, outcome: StrategyOutcome, applies: Optional[bool] = None):
        self._kind = kind
        self.outcome = outcome
        self._applies = applies
        self.calls: List[str] = []

    @property
    def kind(self) -> StrategyKind:
        return self._kind

    def applies(self, request: DependencyRequest) -> bool:
        if self._applies is None:
            return request.is_framework_internal
        return self._applies

    def attempt(self, request: DependencyRequest) -> StrategyOutcome:
        self.calls.append(request.name)
        return self.outcome


class FakeIndex(PackageIndex):
    """In-memory package index; values may be exceptions to raise."""

    def __init__(self, packages: Optional[Dict[str, Union[InstalledPackage, Exception]]] = None):
        self.packages = packages or {}
        self.lookups: List[str] = []

    def find(self, name: str) -> Optional[InstalledPackage]:
        self.lookups.append(name)
        value = self.packages.get(name)
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def fake_index():
    return FakeIndex()


@pytest.fixture
def broken_index():
    return FakeIndex({"broken": RegistryError("metadata directory unreadable")})


TEMP_PREFIX = "fbt_"


@pytest.fixture(autouse=True)
def restore_modules():
    """Drop temp modules (named fbt_*) imported during a test."""
    yield
    for name in [n for n in sys.modules if n.startswith(TEMP_PREFIX)]:
        sys.modules.pop(name, None)


@pytest.fixture
def module_dir(tmp_path, monkeypatch):
    """A directory on sys.path; returns a writer for modules placed in it."""
    libdir = tmp_path / "lib"
    libdir.mkdir()
    monkeypatch.syspath_prepend(str(libdir))

    def write(name: str, body: str = "VALUE = 1\n"):
        path = libdir / f"{name}.py"
        path.write_text(body, encoding="utf-8")
        importlib.invalidate_caches()
        return path

    write.path = libdir
    return write


class AvailableStrategy(ResolutionStrategy):
    """Succeeds only for the names it was given; everything else is a miss."""

    def __init__(self, names=(), kind: StrategyKind = StrategyKind.RAW_PATH):
        self.names = set(names)
        self._kind = kind
        self.calls: List[str] = []

    @property
    def kind(self) -> StrategyKind:
        return self._kind

    def attempt(self, request: DependencyRequest) -> StrategyOutcome:
        self.calls.append(request.name)
        if request.name in self.names:
            return StrategyOutcome.success(f"/plugins/{request.name}.py")
        return StrategyOutcome.recoverable(f"no module named '{request.name}'")


@pytest.fixture
def available():
    """Resolver factory: ``available("a", "b")`` resolves exactly those names."""
    def build(*names):
        strategy = AvailableStrategy(names)
        resolver = Resolver([strategy])
        resolver.available = strategy
        return resolver

    return build


@pytest.fixture(autouse=True)
def restore_constants():
    """CLI overrides mutate Constants; put the defaults back after each test."""
    saved = {k: v for k, v in vars(Constants).items() if k.isupper()}
    yield
    for key, value in saved.items():
        setattr(Constants, key, value)
