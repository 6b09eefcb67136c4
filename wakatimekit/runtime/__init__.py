"""
Interpreter discovery and installation.
"""

from .installer import get_python_url, install_python
from .locator import RuntimeLocator, spawn_version

__all__ = ["RuntimeLocator", "spawn_version", "get_python_url", "install_python"]
