"""Data models for dependency requests and resolution outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from packaging.specifiers import SpecifierSet


class StrategyKind(Enum):
    """Mechanisms able to satisfy a dependency request, in chain order."""
    FRAMEWORK_LOCAL = "framework-local"
    PACKAGE_REGISTRY = "package-registry"
    RAW_PATH = "raw-path"


class OutcomeKind(Enum):
    """Classification of a single strategy attempt."""
    SUCCESS = "success"
    RECOVERABLE = "recoverable"
    FATAL = "fatal"


class ResolutionStatus(Enum):
    """Terminal state of a resolution."""
    RESOLVED = "resolved"
    EXHAUSTED = "exhausted"
    ABORTED = "aborted"


class ConstraintMode(Enum):
    """Version constraint flavour derived from the raw text."""
    ANY = "any"
    EXACT = "exact"
    RANGE = "range"


@dataclass(frozen=True)
class VersionConstraint:
    """Normalized version constraint.

    ``raw`` keeps the text as written for logging; ``specifier`` is the
    PEP 440 form used for matching.
    """
    raw: str
    mode: ConstraintMode
    specifier: SpecifierSet

    def allows(self, version: str) -> bool:
        """Return True if ``version`` satisfies the constraint.

        Exact pins also accept pre-releases, ranges only when they name one.
        """
        if self.mode == ConstraintMode.ANY:
            return True
        prereleases = True if self.mode == ConstraintMode.EXACT else None
        return self.specifier.contains(version, prereleases=prereleases)

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class DependencyRequest:
    """Resolution input across sources."""
    name: str
    constraint: Optional[VersionConstraint] = None
    is_framework_internal: bool = False
    source: str = "api"  # "api" | "config" | "requirements" | "cli" | "policy"
    raw_token: Optional[str] = None


@dataclass(frozen=True)
class StrategyOutcome:
    """Tagged result of one strategy: SUCCESS carries a location, failures a reason."""
    kind: OutcomeKind
    location: Optional[str] = None
    reason: Optional[str] = None
    version: Optional[str] = None

    @classmethod
    def success(cls, location: str, version: Optional[str] = None) -> "StrategyOutcome":
        return cls(OutcomeKind.SUCCESS, location=location, version=version)

    @classmethod
    def recoverable(cls, reason: str) -> "StrategyOutcome":
        return cls(OutcomeKind.RECOVERABLE, reason=reason)

    @classmethod
    def fatal(cls, reason: str) -> "StrategyOutcome":
        return cls(OutcomeKind.FATAL, reason=reason)

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS


@dataclass(frozen=True)
class ResolutionAttempt:
    """One try of one strategy, kept for diagnostics."""
    strategy: StrategyKind
    outcome: StrategyOutcome
    duration_ms: float = 0.0

    @property
    def provenance(self) -> str:
        """Human-readable account of the attempt."""
        if self.outcome.ok:
            return f"loaded from {self.outcome.location} via {self.strategy.value}"
        return f"{self.strategy.value} {self.outcome.kind.value} failure: {self.outcome.reason}"


@dataclass
class ResolutionResult:
    """Resolution outcome to feed logging, policy decisions and exports."""
    request: DependencyRequest
    attempts: List[ResolutionAttempt] = field(default_factory=list)
    framework_fallback: bool = False

    @property
    def status(self) -> ResolutionStatus:
        """Derived from the last attempt; attempts is never empty on a terminal result."""
        last = self.attempts[-1].outcome.kind
        if last == OutcomeKind.SUCCESS:
            return ResolutionStatus.RESOLVED
        if last == OutcomeKind.FATAL:
            return ResolutionStatus.ABORTED
        return ResolutionStatus.EXHAUSTED

    @property
    def resolved(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED

    @property
    def strategy(self) -> Optional[StrategyKind]:
        return self.attempts[-1].strategy if self.resolved else None

    @property
    def location(self) -> Optional[str]:
        return self.attempts[-1].outcome.location if self.resolved else None

    @property
    def version(self) -> Optional[str]:
        return self.attempts[-1].outcome.version if self.resolved else None

    @property
    def provenance(self) -> str:
        return self.attempts[-1].provenance

    def failures(self) -> List[ResolutionAttempt]:
        """Attempts that did not succeed, in order."""
        return [a for a in self.attempts if not a.outcome.ok]
