"""Generator policy registry.

Holds the per-category selections that decide which generator templates a
scaffolding tool uses. Selecting a candidate resolves the plugin package that
implements it; if that fails the selection is rolled back, so a failed select
leaves the registry exactly as it was.

The registry is owned by the startup coordinator and is not thread-safe:
configuration is a single sequential pass, closed with ``freeze()``.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from resolution.models import ResolutionResult
from resolution.parser import build_request
from resolution.resolver import Resolver

from .defaults import builtin_categories
from .errors import (
    DependencyUnresolved,
    InvalidCandidate,
    PolicyError,
    RegistryFrozen,
    ReselectionForbidden,
    UnknownCategory,
)
from .models import Category, Placement, Reselection, Severity

logger = logging.getLogger(__name__)


class PolicyRegistry:
    """Mapping of category name to Category with single-active-selection semantics."""

    def __init__(
        self,
        resolver: Resolver,
        categories: Optional[Iterable[Category]] = None,
        framework_predicate: Optional[Callable[[str], bool]] = None,
    ):
        self._resolver = resolver
        self._framework_predicate = framework_predicate
        self._categories: Dict[str, Category] = {}
        self._frozen = False
        for category in (builtin_categories() if categories is None else categories):
            self.register(category)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def categories(self) -> List[str]:
        return list(self._categories)

    def register(self, category: Category) -> None:
        """Add a category. Severity and reselection are fixed from here on."""
        if self._frozen:
            raise RegistryFrozen(category.name)
        if category.name in self._categories:
            raise PolicyError(f"Policy category '{category.name}' is already registered")
        self._categories[category.name] = category

    def category(self, name: str) -> Category:
        try:
            return self._categories[name]
        except KeyError:
            raise UnknownCategory(name) from None

    def current(self, name: str) -> object:
        """Selected candidate, else the category default (possibly UNSET)."""
        return self.category(name).current()

    def active(self, name: str) -> List[str]:
        return self.category(name).active()

    def freeze(self) -> None:
        """End the configuration phase; later select/prefer calls fail."""
        self._frozen = True

    def _validate(self, name: str, candidate: str, one_shot: bool = False) -> tuple:
        """Check order: unknown category, frozen, one-shot reselection, candidate."""
        category = self.category(name)
        if self._frozen:
            raise RegistryFrozen(name)
        if one_shot and category.has_selection and category.reselection == Reselection.FORBIDDEN:
            raise ReselectionForbidden(name, category.current_selection)
        chosen = category.normalize(candidate)
        if chosen is None:
            raise InvalidCandidate(name, candidate, category.allowed_candidates)
        return category, chosen

    def _resolve_package(self, category: Category, candidate: str) -> ResolutionResult:
        package = category.package_for(str(candidate).strip())
        request = build_request(
            package,
            source="policy",
            framework_predicate=self._framework_predicate,
        )
        return self._resolver.resolve(request)

    def select(self, name: str, candidate: str) -> ResolutionResult:
        """Force ``candidate`` as the single active choice of category ``name``.

        Returns:
            ResolutionResult of the candidate's plugin package.

        Raises:
            UnknownCategory, InvalidCandidate, ReselectionForbidden,
            RegistryFrozen, DependencyUnresolved
        """
        category, chosen = self._validate(name, candidate, one_shot=True)

        previous = category.current_selection
        category.current_selection = chosen
        try:
            result = self._resolve_package(category, candidate)
        except Exception:
            category.current_selection = previous
            raise
        if not result.resolved:
            category.current_selection = previous
            raise DependencyUnresolved(
                name, chosen, result.request.name, result,
                fatal=category.severity == Severity.HARD,
            )

        if is_debug_enabled(logger):
            logger.debug(
                "Policy selection",
                extra=extra_context(
                    event="policy_select",
                    component="policy_registry",
                    category=name,
                    candidate=chosen,
                )
            )
        return result

    def prefer(self, name: str, candidate: str) -> ResolutionResult:
        """Put ``candidate`` first in a layering category's preference list.

        Raises:
            PolicyError: if the category is single-select, plus the select errors.
        """
        category, chosen = self._validate(name, candidate)
        if not category.multi_select:
            raise PolicyError(f"Policy category '{name}' does not support layering")

        previous = list(category.preferences)
        category.preferences = [chosen] + [p for p in previous if p != chosen]
        try:
            result = self._resolve_package(category, candidate)
        except Exception:
            category.preferences = previous
            raise
        if not result.resolved:
            category.preferences = previous
            raise DependencyUnresolved(
                name, chosen, result.request.name, result,
                fatal=category.severity == Severity.HARD,
            )
        return result

    def generator_scope(self) -> List[str]:
        """Ordered generator candidates, highest precedence first."""
        front: List[str] = []
        back: List[str] = []
        for category in self._categories.values():
            if category.placement == Placement.PREPEND:
                front = category.active() + front
            else:
                back.extend(category.active())
        scope: List[str] = []
        for item in front + back:
            if item not in scope:
                scope.append(item)
        return scope

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Plain-data view of every category for reports."""
        data: Dict[str, Dict[str, Any]] = {}
        for name, category in self._categories.items():
            current = category.current()
            data[name] = {
                "current": current if isinstance(current, str) else None,
                "selected": category.has_selection,
                "active": category.active(),
                "severity": category.severity.value,
                "reselection": category.reselection.value,
            }
        return data
