"""Versioned package registry strategy backed by installed distributions."""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from packaging.utils import canonicalize_name
from packaging.version import InvalidVersion

from ..errors import RegistryError
from ..models import DependencyRequest, StrategyKind, StrategyOutcome
from .base import ResolutionStrategy, module_location, module_name_for

logger = logging.getLogger(__name__)


@dataclass
class InstalledPackage:
    """A distribution known to a package index."""
    name: str
    version: str
    location: str
    top_level: List[str] = field(default_factory=list)


class PackageIndex:
    """Lookup interface for versioned packages.

    ``find`` returns None when the package is absent and raises RegistryError
    when the index itself is broken.
    """

    def find(self, name: str) -> Optional[InstalledPackage]:
        raise NotImplementedError


class MetadataPackageIndex(PackageIndex):
    """Index over the distributions installed in the running interpreter."""

    def __init__(self) -> None:
        self._module_map: Optional[Dict[str, List[str]]] = None

    def _modules_for(self, dist_name: str) -> List[str]:
        """Reverse lookup of importable top-level names for a distribution."""
        if self._module_map is None:
            mapping: Dict[str, List[str]] = {}
            for module, dists in importlib.metadata.packages_distributions().items():
                for dist in dists:
                    mapping.setdefault(canonicalize_name(dist), []).append(module)
            self._module_map = mapping
        return sorted(self._module_map.get(canonicalize_name(dist_name), []))

    def find(self, name: str) -> Optional[InstalledPackage]:
        try:
            dist = importlib.metadata.distribution(name)
        except importlib.metadata.PackageNotFoundError:
            return None
        except (OSError, ValueError) as e:
            raise RegistryError(f"could not read metadata for '{name}': {e}") from e

        try:
            version = dist.version
            top_text = dist.read_text('top_level.txt')
            location = str(dist.locate_file(''))
        except (OSError, ValueError, KeyError) as e:
            raise RegistryError(f"could not read metadata for '{name}': {e}") from e
        if not version:
            raise RegistryError(f"distribution '{name}' has no version in its metadata")

        top_level = [line.strip() for line in (top_text or '').splitlines() if line.strip()]
        if not top_level:
            top_level = self._modules_for(name) or [module_name_for(name)]
        return InstalledPackage(name=name, version=version, location=location, top_level=top_level)


class PackageRegistryStrategy(ResolutionStrategy):
    """Activate a package through the index, enforcing the version constraint."""

    def __init__(self, index: Optional[PackageIndex] = None,
                 importer: Callable = importlib.import_module):
        self.index = index if index is not None else MetadataPackageIndex()
        self.importer = importer

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.PACKAGE_REGISTRY

    def attempt(self, request: DependencyRequest) -> StrategyOutcome:
        canonical = canonicalize_name(request.name)
        try:
            package = self.index.find(canonical)
        except RegistryError as e:
            return StrategyOutcome.fatal(str(e))
        if package is None:
            return StrategyOutcome.recoverable(f"no package named '{canonical}' is installed")

        if request.constraint is not None:
            try:
                allowed = request.constraint.allows(package.version)
            except InvalidVersion:
                return StrategyOutcome.fatal(
                    f"installed '{canonical}' reports an invalid version '{package.version}'")
            if not allowed:
                return StrategyOutcome.recoverable(
                    f"installed version {package.version} of '{canonical}' "
                    f"does not satisfy '{request.constraint}'")

        errors = []
        for module_name in package.top_level:
            try:
                module = self.importer(module_name)
            except ImportError as e:
                errors.append(f"{module_name}: {e}")
                continue
            except Exception as e:  # pylint: disable=broad-exception-caught
                return StrategyOutcome.fatal(
                    f"'{canonical}' failed while loading {module_name}: {type(e).__name__}: {e}")
            return StrategyOutcome.success(module_location(module, package.location), package.version)

        return StrategyOutcome.recoverable(
            f"'{canonical}' {package.version} is installed but not importable ({'; '.join(errors)})")
