"""Data models for generator policy categories."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class _Unset:
    """Sentinel for a category with no selection and no default."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


class Reselection(Enum):
    """Whether a category may be selected again once chosen."""
    FORBIDDEN = "forbidden"
    ALLOWED = "allowed"


class Severity(Enum):
    """What an unresolvable selection means for startup."""
    SOFT = "soft"  # warn and keep the default active
    HARD = "hard"  # fatal to startup


class Placement(Enum):
    """Where a category's active candidates sit in the generator scope."""
    PREPEND = "prepend"
    APPEND = "append"


@dataclass
class Category:
    """A named policy slot such as "orm" or "test"."""
    name: str
    allowed_candidates: Tuple[str, ...]
    default: object = UNSET
    reselection: Reselection = Reselection.ALLOWED
    severity: Severity = Severity.SOFT
    namespace: str = ""
    multi_select: bool = False
    placement: Placement = Placement.APPEND
    preferences: List[str] = field(default_factory=list)
    current_selection: object = UNSET

    def __post_init__(self) -> None:
        self.allowed_candidates = tuple(self.allowed_candidates)
        if self.default is not UNSET and self.default not in self.allowed_candidates:
            raise ValueError(f"default '{self.default}' is not an allowed candidate of '{self.name}'")
        if self.multi_select and not self.preferences and self.default is not UNSET:
            self.preferences = [self.default]

    def normalize(self, candidate: str) -> Optional[str]:
        """Return the allowed identifier for ``candidate``, accepting namespaced names."""
        value = str(candidate).strip()
        if value in self.allowed_candidates:
            return value
        if self.namespace and value.startswith(self.namespace):
            short = value[len(self.namespace):]
            if short in self.allowed_candidates:
                return short
        return None

    def package_for(self, candidate: str) -> str:
        """Derive the plugin package implementing ``candidate``."""
        if not self.namespace or candidate.startswith(self.namespace):
            return candidate
        return f"{self.namespace}{candidate}"

    @property
    def has_selection(self) -> bool:
        """True when an explicit, non-default selection was made."""
        return self.current_selection is not UNSET

    def current(self) -> object:
        """The selection, else the default (which may be UNSET)."""
        return self.current_selection if self.has_selection else self.default

    def active(self) -> List[str]:
        """Candidates in effect, highest precedence first."""
        if self.has_selection:
            return [self.current_selection]
        if self.multi_select:
            return list(self.preferences)
        return [] if self.default is UNSET else [self.default]
