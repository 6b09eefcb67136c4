"""
Platform detection for WakaTimeKit.

Only two facts matter here: whether we run on Windows (which enables the
bundled interpreter, registry probing and versioned install directories)
and whether the machine is 64-bit (which selects the embeddable Python
build to download).
"""

import os
import platform


def is_windows() -> bool:
    """True when running on Windows."""
    return platform.system().lower().startswith("windows")


def is_64bit() -> bool:
    """
    Detect a 64-bit machine.

    Windows reports this through the ``ProgramFiles(x86)`` environment
    variable, which only exists on 64-bit installs; elsewhere the machine
    architecture string is checked for ``64``.

    Example:
        >>> is_64bit()
        True
    """
    if is_windows():
        return os.environ.get("ProgramFiles(x86)") is not None
    return "64" in platform.machine()
