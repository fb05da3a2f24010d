"""Constants used in the project."""

from enum import Enum


class LogLevels(Enum):
    """Log level names accepted by the logging helpers.

    Args:
        Enum (string): Log level names.
    """

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration defaults; never mutated at runtime.
    """

    DEFAULT_BASE_URL = "https://releases.hashicorp.com"
    INDEX_FILENAME = "index.json"
    ARCHIVE_EXTENSION = ".zip"

    DEFAULT_INSTALL_TIMEOUT = 30  # Overall deadline in seconds for one install call
    REQUEST_TIMEOUT = 30  # Upper bound in seconds for any single HTTP request
    DOWNLOAD_CHUNK_SIZE = 64 * 1024
    WATCHDOG_INTERVAL = 0.05  # Seconds between deadline checks during a transfer
    EXECUTABLE_MODE = 0o700

    LICENSE_FILENAMES = ("license.txt", "eula.txt", "termsofevaluation.txt")
    ENTERPRISE_METADATA = "ent"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    USER_AGENT = "lf-install/0.1.0"

    # Environment variables
    ENV_CONFIG = "LF_INSTALL_CONFIG"
    ENV_LOG_LEVEL = "LF_INSTALL_LOG_LEVEL"
    ENV_BASE_URL = "LF_INSTALL_BASE_URL"
    ENV_TIMEOUT = "LF_INSTALL_TIMEOUT"
    ENV_PUBLIC_KEY_FILE = "LF_INSTALL_PUBLIC_KEY_FILE"
    ENV_SKIP_CHECKSUM = "LF_INSTALL_SKIP_CHECKSUM"
