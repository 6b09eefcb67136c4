"""
wakatime-cli installation and version management.
"""

from .manager import ToolManager, ARCHIVE_URL, run_version_check
from .version import (
    VERSION_URL,
    UNKNOWN_VERSION,
    latest_cli_version,
    parse_version_descriptor,
)

__all__ = [
    "ToolManager",
    "ARCHIVE_URL",
    "run_version_check",
    "VERSION_URL",
    "UNKNOWN_VERSION",
    "latest_cli_version",
    "parse_version_descriptor",
]
