"""
Read-only access to interpreter install paths reported by the OS registry.

The runtime locator only needs one capability: "which install paths does
the registry report under this root?". Windows answers from the
``PythonCore`` keys; every other platform uses :class:`NullPythonRegistry`.
"""

import logging
import sys
from typing import List, Optional, Protocol

if sys.platform == "win32":
    import winreg

logger = logging.getLogger(__name__)

HKEY_CURRENT_USER = "HKEY_CURRENT_USER"
HKEY_LOCAL_MACHINE = "HKEY_LOCAL_MACHINE"

# Probed in this order; the 32-bit view on 64-bit Windows comes first.
PYTHON_CORE_KEYS = (
    r"Software\Wow6432Node\Python\PythonCore",
    r"Software\Python\PythonCore",
)


class PythonRegistry(Protocol):
    """Capability for querying registry-reported interpreter installs."""

    def query_installed_versions(self, root: str) -> List[str]:
        """Return install paths found under ``root``, in enumeration order."""
        ...


class NullPythonRegistry:
    """Registry for platforms without one; reports nothing."""

    def query_installed_versions(self, root: str) -> List[str]:
        return []


class WindowsPythonRegistry:
    """
    Query ``<root>\\<key>\\<version>\\InstallPath`` for each PythonCore key.

    Keys that are missing or unreadable are logged at DEBUG and skipped.
    """

    def query_installed_versions(self, root: str) -> List[str]:
        hkey = getattr(winreg, root)
        paths = []
        for key in PYTHON_CORE_KEYS:
            try:
                for version in self._subkeys(hkey, key):
                    install_path = self._install_path(hkey, key, version)
                    if install_path is not None:
                        paths.append(install_path)
            except OSError as e:
                logger.debug(f"Registry key {root}\\{key} not readable: {e}")
        return paths

    @staticmethod
    def _subkeys(hkey, key: str) -> List[str]:
        names = []
        with winreg.OpenKey(hkey, key) as handle:
            index = 0
            while True:
                try:
                    names.append(winreg.EnumKey(handle, index))
                except OSError:
                    break
                index += 1
        return names

    @staticmethod
    def _install_path(hkey, key: str, version: str) -> Optional[str]:
        try:
            with winreg.OpenKey(hkey, f"{key}\\{version}\\InstallPath") as handle:
                value, _ = winreg.QueryValueEx(handle, "")
        except OSError:
            return None
        return value or None


def default_registry() -> PythonRegistry:
    """Registry implementation for the running platform."""
    if sys.platform == "win32":
        return WindowsPythonRegistry()
    return NullPythonRegistry()
