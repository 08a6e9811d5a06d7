"""Strategy-chain resolver for dependency requests.

The chain is FrameworkLocal -> PackageRegistry -> RawPath. FrameworkLocal is
only tried for framework-internal requests; when it misses, the request is
downgraded to a generic one and the chain carries on from PackageRegistry,
once. A FATAL outcome stops the chain for that request.

The resolver returns structured results; logging outcomes is the caller's job.
Only DEBUG traces are emitted here.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from common.logging_utils import Timer, extra_context, is_debug_enabled

from .errors import ConfigurationError
from .models import (
    DependencyRequest,
    OutcomeKind,
    ResolutionAttempt,
    ResolutionResult,
    StrategyKind,
)
from .strategies import (
    FrameworkLocalStrategy,
    PackageIndex,
    PackageRegistryStrategy,
    RawPathStrategy,
    ResolutionStrategy,
)

logger = logging.getLogger(__name__)


def default_strategies(
    framework_root: Optional[str] = None,
    framework_predicate: Optional[Callable[[str], bool]] = None,
    index: Optional[PackageIndex] = None,
) -> List[ResolutionStrategy]:
    """Build the standard three-step chain."""
    return [
        FrameworkLocalStrategy(framework_root, framework_predicate),
        PackageRegistryStrategy(index),
        RawPathStrategy(),
    ]


class Resolver:
    """Walks an ordered list of strategies for each request."""

    def __init__(self, strategies: Optional[Sequence[ResolutionStrategy]] = None):
        self._strategies = list(strategies) if strategies is not None else default_strategies()
        kinds = [s.kind for s in self._strategies]
        if len(set(kinds)) != len(kinds):
            raise ConfigurationError("each strategy kind may appear only once in the chain")

    @property
    def strategies(self) -> List[ResolutionStrategy]:
        return list(self._strategies)

    def resolve(self, request: DependencyRequest) -> ResolutionResult:
        """Resolve one request.

        Raises:
            ConfigurationError: for an empty name, before any strategy runs.
        """
        if not isinstance(request.name, str) or not request.name.strip():
            raise ConfigurationError("Dependency name must not be empty")

        result = ResolutionResult(request=request)
        for strategy in self._strategies:
            if strategy.kind == StrategyKind.FRAMEWORK_LOCAL and not strategy.applies(request):
                continue

            with Timer() as timer:
                outcome = strategy.attempt(request)
            result.attempts.append(ResolutionAttempt(strategy.kind, outcome, timer.duration_ms()))

            if is_debug_enabled(logger):
                logger.debug(
                    "Resolution attempt",
                    extra=extra_context(
                        event="resolution_attempt",
                        component="resolver",
                        target=request.name,
                        strategy=strategy.kind.value,
                        outcome=outcome.kind.value,
                        duration_ms=timer.duration_ms(),
                    )
                )

            if outcome.kind != OutcomeKind.RECOVERABLE:
                break
            if strategy.kind == StrategyKind.FRAMEWORK_LOCAL:
                # Downgrade to a generic request; never retried again.
                result.framework_fallback = True

        if not result.attempts:
            raise ConfigurationError(f"No strategy applies to '{request.name}'")
        return result

    def resolve_all(self, requests: Iterable[DependencyRequest]) -> List[ResolutionResult]:
        """Resolve requests in order, one result per request."""
        return [self.resolve(r) for r in requests]
