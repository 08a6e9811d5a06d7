"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3
    DEPENDENCY_ERROR = 4
    CONFIG_ERROR = 5


class DefaultCategories(Enum):
    """Names of the generator policy categories registered at startup.

    Args:
        Enum (string): Category names.
    """

    ORM = "orm"
    TEST = "test"
    TEMPLATE = "template"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    CLI and config overrides are applied in cli_config.
    """

    FRAMEWORK_NAME = "frameboot"
    # Names starting with this prefix are looked up in the embedded framework first.
    FRAMEWORK_PREFIX = "frameboot"
    # Plugin packages are named <namespace><candidate>, e.g. frameboot_datamapper.
    PLUGIN_NAMESPACE = "frameboot_"
    # A directory with this name beside the config is used as the root when none is given.
    FRAMEWORK_DIRNAME = "framework"
    FRAMEWORK_ROOT = None  # embedded ("frozen") framework root, unset by default

    ORM_CANDIDATES = ["active_record", "datamapper", "sequel"]
    TEST_CANDIDATES = ["rspec", "test_unit"]
    TEST_DEFAULT = "rspec"
    TEMPLATE_CANDIDATES = ["frameboot", "haml", "erb"]
    TEMPLATE_DEFAULT = "frameboot"

    CONFIG_FILES = ["dependencies.yml", "dependencies.yaml", "dependencies.json"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "FRAMEBOOT_LOG_LEVEL"
    ENV_FRAMEWORK_ROOT = "FRAMEBOOT_FRAMEWORK_ROOT"

    INDEX_HINTS_ENABLED = False
    REGISTRY_URL_PYPI = "https://pypi.org/pypi/"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_CACHE_TTL_SEC = 300
