"""
Remote version descriptor for wakatime-cli.

The latest version is read from the ``__about__.py`` file on the master
branch, e.g. ``__version_info__ = ('4', '1', '3')`` parses to ``"4.1.3"``.
Anything that does not match yields the ``"Unknown"`` sentinel, which can
never appear in a real version output and so forces an upgrade.
"""

import logging
import re
from typing import Callable

from wakatimekit.core.download import fetch_text

logger = logging.getLogger(__name__)

VERSION_URL = (
    "https://raw.githubusercontent.com/wakatime/wakatime/master/wakatime/__about__.py"
)
VERSION_PATTERN = re.compile(
    r"__version_info__ = \('([0-9]+)', '([0-9]+)', '([0-9]+)'\)"
)
UNKNOWN_VERSION = "Unknown"


def parse_version_descriptor(text: str) -> str:
    """
    Extract ``major.minor.patch`` from descriptor text.

    Example:
        >>> parse_version_descriptor("__version_info__ = ('4', '1', '3')")
        '4.1.3'
        >>> parse_version_descriptor("garbage")
        'Unknown'
    """
    match = VERSION_PATTERN.search(text or "")
    if match is None:
        return UNKNOWN_VERSION
    return ".".join(match.groups())


def latest_cli_version(fetcher: Callable[[str], str] = fetch_text) -> str:
    """Fetch and parse the published wakatime-cli version."""
    version = parse_version_descriptor(fetcher(VERSION_URL))
    logger.debug(f"Current cli version from GitHub: {version}")
    return version
