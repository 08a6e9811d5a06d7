"""Argument parsing functionality for FrameBoot."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog=Constants.FRAMEWORK_NAME,
        description=(
            "FrameBoot - startup dependency resolver and generator policy"
        ),
        add_help=True,
    )

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to startup configuration file (YAML, YML, or JSON). "
                             "Defaults to dependencies.yml in the current directory if present.",
                        action="store",
                        type=str)
    parser.add_argument("-d", "--dependency",
                        dest="DEPENDENCIES",
                        help="Dependency to resolve as NAME or NAME:SPEC (can be used multiple times)",
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("-r", "--requirements",
                        dest="REQUIREMENTS",
                        help="Resolve every entry of a requirements.txt file",
                        action="store",
                        type=str)
    parser.add_argument("--orm",
                        dest="ORM",
                        help="ORM adapter to use, i.e: " + ", ".join(Constants.ORM_CANDIDATES),
                        action="store",
                        type=str)
    parser.add_argument("--test",
                        dest="TEST",
                        help="Test framework adapter to use, i.e: " + ", ".join(Constants.TEST_CANDIDATES),
                        action="store",
                        type=str)
    parser.add_argument("--template",
                        dest="TEMPLATES",
                        help="Template set to layer over the defaults (can be used multiple times)",
                        action="append",
                        type=str,
                        default=[])

    parser.add_argument("--framework-root",
                        dest="FRAMEWORK_ROOT",
                        help="Embedded framework directory searched first for framework-internal names",
                        action="store",
                        type=str)
    parser.add_argument("--framework-prefix",
                        dest="FRAMEWORK_PREFIX",
                        help=f"Name prefix of framework-internal dependencies (default: {Constants.FRAMEWORK_PREFIX})",
                        action="store",
                        type=str)
    parser.add_argument("--load-path",
                        dest="LOAD_PATH",
                        help="Directory to put in front of the load path (can be used multiple times)",
                        action="append",
                        type=str,
                        default=[])

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV)",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or csv). If not specified, inferred from --output extension; defaults to json.",
                        action="store",
                        type=str.lower,
                        choices=['json', 'csv'])

    parser.add_argument("--index-hints",
                        dest="INDEX_HINTS",
                        help="Look up unresolved dependencies on PyPI to suggest an install command",
                        action="store_true")
    parser.add_argument("--keep-going",
                        dest="KEEP_GOING",
                        help="Record unresolved required dependencies and continue instead of aborting",
                        action="store_true")
    parser.add_argument("--error-on-warnings",
                        dest="ERROR_ON_WARNINGS",
                        help="Exit with a non-zero status code if warnings are present.",
                        action="store_true")

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
