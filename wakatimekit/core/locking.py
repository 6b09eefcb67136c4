"""
Install coordination for WakaTimeKit.

Several host processes (e.g. two editor windows) may bootstrap at the same
time. Downloads and extractions into the shared resource directory are
serialized with a file lock from the ``filelock`` library, which is
released automatically if the holding process dies.

Usage:
    with install_lock(resources_dir):
        install_archive(...)
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from wakatimekit.core.exceptions import FilesystemError

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = "install.lock"
DEFAULT_TIMEOUT = 300


@contextmanager
def install_lock(resources_dir: Path, timeout: int = DEFAULT_TIMEOUT):
    """
    Acquire the install lock for a resource directory.

    Args:
        resources_dir: Resource directory (created if missing)
        timeout: Maximum wait time in seconds

    Yields:
        None

    Raises:
        LockTimeout: If the lock can't be acquired within timeout
        FilesystemError: If the resource directory or lock file can't be created
    """
    resources_dir = Path(resources_dir)
    lock_path = resources_dir / LOCK_FILE_NAME
    lock = FileLock(str(lock_path), timeout=timeout)

    try:
        resources_dir.mkdir(parents=True, exist_ok=True)
        lock.acquire()
    except LockTimeout as e:
        logger.error(
            f"Could not acquire install lock after {timeout}s. "
            "Another editor process may be installing wakatime-cli."
        )
        raise LockTimeout(str(lock_path)) from e
    except OSError as e:
        raise FilesystemError(f"Cannot create install lock {lock_path}: {e}") from e

    logger.debug(f"Acquired install lock: {lock_path}")
    try:
        yield
    finally:
        lock.release()
        logger.debug(f"Released install lock: {lock_path}")


__all__ = ["install_lock", "LockTimeout", "LOCK_FILE_NAME"]
