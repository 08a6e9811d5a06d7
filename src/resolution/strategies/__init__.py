"""Resolution strategies, in default chain order."""

from .base import ResolutionStrategy
from .framework_local import FrameworkLocalStrategy, prefix_predicate
from .package_registry import (
    InstalledPackage,
    MetadataPackageIndex,
    PackageIndex,
    PackageRegistryStrategy,
)
from .raw_path import RawPathStrategy

__all__ = [
    "ResolutionStrategy",
    "FrameworkLocalStrategy",
    "prefix_predicate",
    "InstalledPackage",
    "MetadataPackageIndex",
    "PackageIndex",
    "PackageRegistryStrategy",
    "RawPathStrategy",
]
