"""
Path resolution for WakaTimeKit.

Resolves the resource directory that hosts both the interpreter and the
wakatime-cli installation, and joins path segments portably.

Directory Structure:
    Resource directory (<plugin-root>/WakaTime-resources/):
        - python/             : Embedded interpreter (Windows only)
        - wakatime-master/    : Extracted wakatime-cli source tree
          - wakatime/cli.py   : Entry script, its existence is the install signal
        - install.lock        : Install coordination between host processes
"""

import os
from pathlib import Path
from typing import Optional, Union

RESOURCES_DIR_NAME = "WakaTime-resources"
RESOURCES_ENV_VAR = "WAKATIME_RESOURCES"

PathLike = Union[str, Path]


def combine_paths(*segments: Optional[PathLike]) -> Optional[str]:
    """
    Join path segments with the native separator.

    Absent (``None``) or empty segments are skipped. A later absolute
    segment does not discard earlier ones, it is appended like any other.

    Args:
        *segments: Path segments, any of which may be ``None``

    Returns:
        Joined path string, or ``None`` if no segment was usable

    Example:
        >>> combine_paths(None, "/usr/bin/", "python")
        '/usr/bin/python'
        >>> combine_paths(None, "python")
        'python'
        >>> combine_paths(None, None) is None
        True
    """
    path: Optional[Path] = None
    for segment in segments:
        if segment is None or str(segment) == "":
            continue
        if path is None:
            path = Path(segment)
        else:
            path = path / str(segment).lstrip("/\\")
    if path is None:
        return None
    return str(path)


def get_resources_dir(override: Optional[PathLike] = None) -> Path:
    """
    Get the absolute resource directory used as installation root.

    Resolution order: explicit override, ``WAKATIME_RESOURCES`` environment
    variable, then ``WakaTime-resources`` next to the installed package.

    Args:
        override: Explicit resource directory (e.g. from settings)

    Returns:
        Absolute resource directory path

    Example:
        >>> get_resources_dir("/tmp/res")
        PosixPath('/tmp/res')
    """
    if override:
        return Path(override).expanduser().absolute()

    env_dir = os.environ.get(RESOURCES_ENV_VAR)
    if env_dir:
        return Path(env_dir).expanduser().absolute()

    package_root = Path(__file__).resolve().parent.parent
    return package_root.parent / RESOURCES_DIR_NAME
