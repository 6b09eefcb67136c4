"""
Archive installation utilities for WakaTimeKit.

This module provides:
- Stale tree removal (files first, then empty directories, bottom-up)
- Streaming ZIP extraction in archive order with traversal protection
- A combined purge + extract + cleanup install step

No checksum is verified on extracted content. A corrupt archive produces a
broken tree that is only noticed later when the entry script is missing.
"""

import io
import logging
import os
import shutil
import zipfile
from pathlib import Path
from typing import Optional, Union

from wakatimekit.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
)

logger = logging.getLogger(__name__)

ArchiveSource = Union[str, Path, bytes]


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Example:
        >>> is_relative_to(Path("/home/user/project/file.txt"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def _validate_archive_path(name: str, destination: Path) -> Path:
    """
    Resolve an archive member path, rejecting directory traversal.

    Raises:
        InsecureArchiveError: If the member would land outside destination
    """
    member_path = (destination / name).resolve()
    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{name}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )
    return member_path


# ============================================================================
# Stale Tree Removal
# ============================================================================


def purge_stale(target_dir: Union[str, Path]) -> None:
    """
    Recursively delete a previous installation tree.

    Files are removed individually, then directories once empty, walking
    bottom-up. A missing target is not an error.

    Args:
        target_dir: Root of the stale installation

    Raises:
        FilesystemError: If any entry cannot be removed

    Example:
        >>> purge_stale(Path("WakaTime-resources/wakatime-master"))
    """
    target_dir = Path(target_dir)
    if not target_dir.exists():
        return

    if not target_dir.is_dir():
        raise FilesystemError(f"Path is not a directory: {target_dir}")

    logger.debug(f"Removing stale installation: {target_dir}")
    try:
        for root, dirs, files in os.walk(target_dir, topdown=False):
            for name in files:
                os.unlink(os.path.join(root, name))
            for name in dirs:
                dir_path = os.path.join(root, name)
                if os.path.islink(dir_path):
                    os.unlink(dir_path)
                else:
                    os.rmdir(dir_path)
        target_dir.rmdir()
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{target_dir}': {e}")


# ============================================================================
# Archive Extraction
# ============================================================================


def extract_zip(archive: ArchiveSource, destination: Union[str, Path]) -> int:
    """
    Extract every entry of a ZIP archive, in archive order.

    Directory entries create directories; file entries are stream-copied to
    a new file at the same relative path under ``destination``.

    Args:
        archive: Path to a ZIP file, or the raw archive bytes
        destination: Directory to extract into (created if missing)

    Returns:
        Number of entries processed

    Raises:
        InsecureArchiveError: If an entry would escape destination
        ArchiveExtractionError: If the archive cannot be read or written

    Example:
        >>> extract_zip(Path("wakatime-cli.zip"), Path("WakaTime-resources"))
        42
    """
    destination = Path(destination)
    source = io.BytesIO(archive) if isinstance(archive, bytes) else Path(archive)
    count = 0

    try:
        destination.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(source, "r") as zf:
            for info in zf.infolist():
                target = _validate_archive_path(info.filename, destination)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                else:
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(info, "r") as src, open(target, "wb") as dst:
                        shutil.copyfileobj(src, dst, 1024)
                count += 1
    except InsecureArchiveError:
        raise
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract archive: {e}")

    logger.debug(f"Extracted {count} entries to {destination}")
    return count


def install_archive(
    archive: ArchiveSource,
    destination: Union[str, Path],
    stale_dir: Optional[Union[str, Path]] = None,
) -> None:
    """
    Install an archive, replacing any previous installation.

    ``stale_dir`` (defaulting to ``destination``) is purged before
    extraction so a new version never merges with an old tree. When the
    archive is a file it is deleted after a successful extraction.

    Args:
        archive: ZIP file path or raw bytes
        destination: Directory to extract into
        stale_dir: Previous installation tree to remove first

    Raises:
        FilesystemError: If the stale tree cannot be removed
        ArchiveExtractionError: If extraction fails

    Example:
        >>> install_archive(
        ...     Path("res/wakatime-cli.zip"),
        ...     Path("res"),
        ...     stale_dir=Path("res/wakatime-master"),
        ... )
    """
    purge_stale(stale_dir if stale_dir is not None else destination)
    extract_zip(archive, destination)

    if not isinstance(archive, bytes):
        archive_path = Path(archive)
        try:
            archive_path.unlink()
        except OSError as e:
            logger.warning(f"Could not delete archive {archive_path}: {e}")
