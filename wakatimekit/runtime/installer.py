"""
Embedded interpreter installation.

On Windows a missing interpreter is fixed by downloading the python.org
embeddable ZIP into the resource directory. Other platforms are expected
to provide Python themselves, so installation is a logged no-op there.

Layout:
    <resources>/python.zip   : downloaded archive, removed after extraction
    <resources>/python/      : extracted interpreter (probed by the locator)
"""

import logging
from pathlib import Path
from typing import Optional

from wakatimekit.core.download import fetch_to_file
from wakatimekit.core.exceptions import FilesystemError
from wakatimekit.core.filesystem import install_archive
from wakatimekit.core.locking import LockTimeout, install_lock
from wakatimekit.core.platform import is_64bit, is_windows

logger = logging.getLogger(__name__)

PYTHON_VERSION = "3.5.0"
PYTHON_URL_TEMPLATE = (
    "https://www.python.org/ftp/python/{version}/python-{version}-embed-{arch}.zip"
)


def get_python_url(x64: Optional[bool] = None) -> str:
    """
    Get the embeddable Python download URL.

    Example:
        >>> get_python_url(x64=True)
        'https://www.python.org/ftp/python/3.5.0/python-3.5.0-embed-amd64.zip'
    """
    if x64 is None:
        x64 = is_64bit()
    arch = "amd64" if x64 else "win32"
    return PYTHON_URL_TEMPLATE.format(version=PYTHON_VERSION, arch=arch)


def install_python(resources_dir: Path, windows: Optional[bool] = None) -> bool:
    """
    Download and extract the embeddable interpreter.

    Args:
        resources_dir: Installation root
        windows: Override platform detection (tests)

    Returns:
        True if an interpreter tree was extracted
    """
    if windows is None:
        windows = is_windows()
    if not windows:
        logger.info("Automatic python install is only supported on Windows")
        return False

    resources_dir = Path(resources_dir)
    zip_file = resources_dir / "python.zip"
    target_dir = resources_dir / "python"
    url = get_python_url()

    try:
        with install_lock(resources_dir):
            if not fetch_to_file(url, zip_file):
                return False
            install_archive(zip_file, target_dir)
    except (FilesystemError, LockTimeout, OSError) as e:
        logger.error(f"Failed to install python: {e}")
        return False

    logger.debug(f"Python extracted to {target_dir}")
    return True
