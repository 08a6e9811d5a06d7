"""FrameBoot - startup dependency resolver and generator policy.

Evaluates a startup configuration (dependencies, ORM/test/template choices),
reports where every dependency was loaded from and exits non-zero when a
required dependency or a hard policy choice cannot be satisfied.

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from args import parse_args
from cli_config import apply_framework_overrides, merge_cli_directives
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from config import StartupConfig, find_config, load_config
from constants import Constants, ExitCodes
from index_hints import install_hint
from policy.errors import DependencyUnresolved, PolicyError
from reporting import export_csv, export_json, render_summary
from resolution.errors import ConfigurationError, RequiredDependencyMissing
from startup import StartupCoordinator

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()
    if getattr(args, "QUIET", False):
        logging.getLogger().setLevel(logging.ERROR)
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        add_file_handler(log_file)
        logger.info("Logging to file: %s", log_file)


def load_startup_config(args) -> StartupConfig:
    """Load the explicit or default config file; exits on unreadable or invalid files."""
    path = getattr(args, "CONFIG", None) or find_config(os.getcwd())
    if not path:
        logger.info("No startup config found; using CLI directives only.")
        return StartupConfig(base_dir=os.getcwd())
    try:
        config = load_config(path)
    except FileNotFoundError as e:
        logger.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except OSError as e:
        logger.error("IO error: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except ConfigurationError as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.CONFIG_ERROR.value)
    logger.info("Loaded startup config from: %s", path)
    return config


def build_coordinator(args) -> StartupCoordinator:
    """Create a coordinator from the (already overridden) Constants."""
    return StartupCoordinator(
        framework_root=Constants.FRAMEWORK_ROOT,
        framework_prefix=Constants.FRAMEWORK_PREFIX,
        plugin_namespace=Constants.PLUGIN_NAMESPACE,
        hint=install_hint if Constants.INDEX_HINTS_ENABLED else None,
        strict=not getattr(args, "KEEP_GOING", False),
    )


def run_startup(coordinator: StartupCoordinator, config: StartupConfig, cli_tokens) -> int:
    """Evaluate config and CLI directives; return the exit code they warrant."""
    try:
        coordinator.run_config(config)
        for token in cli_tokens:
            coordinator.dependency_token(token)
    except RequiredDependencyMissing as e:
        logger.error("Missing library/package '%s' must be addressed.", e.result.request.name)
        return ExitCodes.DEPENDENCY_ERROR.value
    except DependencyUnresolved as e:
        logger.error("%s", e)
        return ExitCodes.DEPENDENCY_ERROR.value
    except (PolicyError, ConfigurationError) as e:
        logger.error("Configuration error: %s", e)
        return ExitCodes.CONFIG_ERROR.value
    except OSError as e:
        logger.error("IO error: %s, aborting", e)
        return ExitCodes.FILE_ERROR.value

    if coordinator.missing:
        return ExitCodes.DEPENDENCY_ERROR.value
    return ExitCodes.SUCCESS.value


def export_results(args, coordinator: StartupCoordinator) -> None:
    """Write results to --output in the requested or inferred format."""
    path = getattr(args, "OUTPUT", None)
    if not path:
        return
    fmt = getattr(args, "OUTPUT_FORMAT", None)
    if not fmt:
        fmt = "csv" if path.lower().endswith(".csv") else "json"
    try:
        if fmt == "csv":
            export_csv(coordinator.results, path)
        else:
            export_json(coordinator.results, path, policy=coordinator.registry.snapshot())
    except OSError as e:
        logger.error("%s file couldn't be written to disk: %s", fmt.upper(), e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    config = load_startup_config(args)
    apply_framework_overrides(args, config)
    merge_cli_directives(args, config)

    coordinator = build_coordinator(args)
    exit_code = run_startup(coordinator, config, getattr(args, "DEPENDENCIES", []) or [])

    if not getattr(args, "QUIET", False):
        sys.stdout.write(render_summary(coordinator.results, coordinator.generator_scope()) + "\n")
    export_results(args, coordinator)

    if (exit_code == ExitCodes.SUCCESS.value and coordinator.warnings
            and getattr(args, "ERROR_ON_WARNINGS", False)):
        logger.warning("%d warning(s) reported; exiting with warnings status", len(coordinator.warnings))
        exit_code = ExitCodes.EXIT_WARNINGS.value
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
