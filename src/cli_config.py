"""CLI and environment overrides for runtime tunables.

Applies overrides to Constants with highest precedence and merges CLI
directives into the loaded StartupConfig. Precedence: CLI flags, then
environment, then config file, then defaults.
"""

from __future__ import annotations

import logging
import os

from config import StartupConfig
from constants import Constants

logger = logging.getLogger(__name__)


def apply_framework_overrides(args, config: StartupConfig) -> None:
    """Apply framework and index settings to Constants.

    A bad override is logged and skipped; the previous value stays.
    """
    try:
        root = (
            getattr(args, "FRAMEWORK_ROOT", None)
            or os.environ.get(Constants.ENV_FRAMEWORK_ROOT)
            or (config.resolve_path(config.framework_root) if config.framework_root else None)
        )
        if not root:
            frozen = config.resolve_path(Constants.FRAMEWORK_DIRNAME)
            if os.path.isdir(frozen):
                root = frozen
        if root:
            Constants.FRAMEWORK_ROOT = os.path.abspath(root)
        prefix = getattr(args, "FRAMEWORK_PREFIX", None) or config.framework_prefix
        if prefix:
            Constants.FRAMEWORK_PREFIX = prefix
        if config.plugin_namespace:
            Constants.PLUGIN_NAMESPACE = config.plugin_namespace
        if getattr(args, "INDEX_HINTS", False) or config.index_hints:
            Constants.INDEX_HINTS_ENABLED = True
    except (TypeError, ValueError) as exc:
        logger.warning("Ignoring invalid framework override: %s", exc)


def merge_cli_directives(args, config: StartupConfig) -> StartupConfig:
    """Fold CLI directives into ``config``; CLI values win for single choices."""
    cwd = os.getcwd()
    for path in getattr(args, "LOAD_PATH", None) or []:
        config.load_path.append(os.path.join(cwd, path))
    if getattr(args, "REQUIREMENTS", None):
        config.requirements_file = os.path.join(cwd, args.REQUIREMENTS)
    if getattr(args, "ORM", None):
        config.orm = args.ORM
    if getattr(args, "TEST", None):
        config.test = args.TEST
    config.templates.extend(getattr(args, "TEMPLATES", None) or [])
    return config
