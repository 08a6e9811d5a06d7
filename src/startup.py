"""Startup coordinator: the directives a configuration script evaluates.

``dependency``/``dependencies`` resolve libraries, ``use_orm``/``use_test``/
``use_template`` drive the generator policy registry, and ``finish`` closes
the configuration phase. Outcomes are written to an injected logger; fatal
conditions are raised to the caller, which decides whether the process exits.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Any, Callable, List, Optional

from config import StartupConfig, parse_requirements_file
from constants import Constants, DefaultCategories
from common.logging_utils import extra_context
from policy.defaults import builtin_categories
from policy.errors import DependencyUnresolved
from policy.registry import PolicyRegistry
from reporting import describe_failure
from resolution.errors import RequiredDependencyMissing
from resolution.models import DependencyRequest, ResolutionResult
from resolution.parser import build_request, normalize_declarations, parse_cli_token
from resolution.resolver import Resolver, default_strategies
from resolution.strategies import PackageIndex, prefix_predicate

Hint = Callable[[str], Optional[str]]


class StartupCoordinator:
    """Owns the resolver and the policy registry for one configuration pass.

    Args:
        resolver: strategy chain; built from the framework settings when omitted.
        registry: policy registry; built around ``resolver`` when omitted.
        logger: diagnostics sink for one record per outcome.
        framework_root: embedded framework directory, if the app is frozen.
        framework_prefix: names with this prefix are framework-internal.
        plugin_namespace: prefix used to derive plugin package names.
        index: package index for the registry strategy.
        hint: optional callable returning an extra remedy line for a name.
        strict: when False, unresolved required dependencies are recorded
            and logged instead of raised.
    """

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        registry: Optional[PolicyRegistry] = None,
        *,
        logger: Optional[logging.Logger] = None,
        framework_root: Optional[str] = None,
        framework_prefix: Optional[str] = None,
        plugin_namespace: Optional[str] = None,
        index: Optional[PackageIndex] = None,
        hint: Optional[Hint] = None,
        strict: bool = True,
    ):
        prefix = Constants.FRAMEWORK_PREFIX if framework_prefix is None else framework_prefix
        predicate = prefix_predicate(prefix)
        # Requests are only hinted as framework-internal when a framework copy is embedded.
        self.framework_predicate = predicate if framework_root else None
        self.resolver = resolver or Resolver(
            default_strategies(framework_root, predicate, index))
        self.registry = registry or PolicyRegistry(
            self.resolver,
            categories=builtin_categories(plugin_namespace),
            framework_predicate=self.framework_predicate,
        )
        self.logger = logger or logging.getLogger(__name__)
        self.hint = hint
        self.strict = strict
        self.results: List[ResolutionResult] = []
        self.warnings: List[str] = []
        self.missing: List[ResolutionResult] = []

    @property
    def failures(self) -> List[ResolutionResult]:
        return [r for r in self.results if not r.resolved]

    # ---------- load path ----------

    def extend_load_path(self, paths: List[str]) -> None:
        """Put directories in front of sys.path, keeping their order."""
        for path in reversed(paths):
            full = os.path.abspath(os.path.expanduser(path))
            if full in sys.path:
                continue
            if not os.path.isdir(full):
                self.logger.warning("Load path entry %s is not a directory", full)
            sys.path.insert(0, full)
            self.logger.debug("Added %s to the load path", full)

    # ---------- dependencies ----------

    def _log_success(self, result: ResolutionResult) -> None:
        self.logger.info(
            "loading %s '%s' from %s (%s) ...",
            "package" if result.version else "library",
            result.request.name,
            result.location,
            result.strategy.value,
            extra=extra_context(
                event="resolution",
                component="startup",
                outcome="success",
                target=result.request.name,
                strategy=result.strategy.value,
                source=result.request.source,
                fallback=result.framework_fallback or None,
            )
        )

    def _run(self, request: DependencyRequest, required: bool) -> ResolutionResult:
        result = self.resolver.resolve(request)
        self.results.append(result)
        if result.resolved:
            self._log_success(result)
            return result
        if required:
            self.logger.error(describe_failure(result, self.hint))
            if self.strict:
                raise RequiredDependencyMissing(result)
            self.missing.append(result)
        else:
            message = f"Optional dependency '{request.name}' is unavailable ({result.status.value})"
            self.logger.warning(message)
            self.warnings.append(message)
        return result

    def dependency(self, name: str, *constraints: Any, source: str = "api",
                   required: bool = True) -> ResolutionResult:
        """Resolve a single dependency with optional version constraints.

        Raises:
            ConfigurationError: for an empty name or malformed constraint.
            RequiredDependencyMissing: when strict and nothing satisfied it.
        """
        if not constraints:
            constraint = None
        elif len(constraints) == 1:
            constraint = constraints[0]
        else:
            constraint = list(constraints)
        request = build_request(name, constraint, source=source,
                                framework_predicate=self.framework_predicate)
        return self._run(request, required)

    def dependencies(self, *args: Any, source: str = "api",
                     required: bool = True) -> List[ResolutionResult]:
        """Resolve names, name->constraint mappings and nested sequences in order."""
        requests = normalize_declarations(args, source=source,
                                          framework_predicate=self.framework_predicate)
        return [self._run(r, required) for r in requests]

    def dependency_token(self, token: str) -> ResolutionResult:
        """Resolve a required ``name[:spec]`` token given on the command line."""
        request = parse_cli_token(token, framework_predicate=self.framework_predicate)
        return self._run(request, required=True)

    def require(self, library: str) -> ResolutionResult:
        """Resolve a library that startup cannot continue without; always raises on failure."""
        request = build_request(library, source="api", framework_predicate=self.framework_predicate)
        result = self.resolver.resolve(request)
        self.results.append(result)
        if not result.resolved:
            self.logger.error(describe_failure(result, self.hint))
            raise RequiredDependencyMissing(result)
        self._log_success(result)
        return result

    def rescue_require(self, library: str, message: Optional[str] = None) -> ResolutionResult:
        """Resolve an optional library; failures only log ``message`` when given."""
        request = build_request(library, source="api", framework_predicate=self.framework_predicate)
        result = self.resolver.resolve(request)
        self.results.append(result)
        if result.resolved:
            self._log_success(result)
        elif message:
            self.logger.error(message)
        return result

    # ---------- generator policy ----------

    def _use(self, category: str, candidate: str, layer: bool = False) -> Optional[ResolutionResult]:
        try:
            if layer:
                result = self.registry.prefer(category, candidate)
            else:
                result = self.registry.select(category, candidate)
        except DependencyUnresolved as e:
            self.results.append(e.result)
            self.logger.warning("The %s package was not found. You may need to install it.", e.package)
            self.logger.warning(describe_failure(e.result, self.hint))
            if e.fatal:
                raise
            self.warnings.append(str(e))
            return None
        self.results.append(result)
        self._log_success(result)
        return result

    def use_orm(self, orm: str) -> Optional[ResolutionResult]:
        """Choose the ORM adapter; allowed once, a missing adapter is fatal."""
        return self._use(DefaultCategories.ORM.value, orm)

    def use_test(self, test_framework: str) -> Optional[ResolutionResult]:
        """Choose the test adapter; a missing adapter only warns."""
        return self._use(DefaultCategories.TEST.value, test_framework)

    def use_template(self, template: str) -> Optional[ResolutionResult]:
        """Layer a template set over the current ones; it takes precedence."""
        return self._use(DefaultCategories.TEMPLATE.value, template, layer=True)

    def run_config(self, config: StartupConfig) -> List[ResolutionResult]:
        """Evaluate the directives of a config file in order and freeze the registry.

        Order: load path, requirements file, dependencies, optional
        dependencies, orm, test, templates.
        """
        if config.load_path:
            self.extend_load_path([config.resolve_path(p) for p in config.load_path])
        if config.requirements_file:
            declarations = parse_requirements_file(config.resolve_path(config.requirements_file))
            self.dependencies(declarations, source="requirements")
        if config.dependencies:
            self.dependencies(config.dependencies, source="config")
        if config.optional:
            self.dependencies(config.optional, source="config", required=False)
        if config.orm:
            self.use_orm(config.orm)
        if config.test:
            self.use_test(config.test)
        # Last listed template ends up with the highest precedence
        for template in config.templates:
            self.use_template(template)
        self.finish()
        return list(self.results)

    def generator_scope(self) -> List[str]:
        return self.registry.generator_scope()

    def finish(self) -> None:
        """Close the configuration phase."""
        self.registry.freeze()
        self.logger.debug(
            "Configuration finished",
            extra=extra_context(event="function_exit", component="startup",
                                outcome="frozen", count=len(self.results))
        )
