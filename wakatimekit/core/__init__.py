"""
Core functionality for WakaTimeKit.

This package contains the foundational modules that the runtime, tool and
heartbeat components depend on.
"""

from .context import AgentContext, DebounceState

from .download import fetch, fetch_text, fetch_to_file

from .exceptions import (
    WakaTimeKitError,
    ConfigError,
    DownloadError,
    FilesystemError,
    ArchiveExtractionError,
    InsecureArchiveError,
    RuntimeNotFoundError,
    ToolInstallError,
    DispatchError,
)

from .filesystem import extract_zip, install_archive, purge_stale

from .locking import install_lock, LockTimeout

from .paths import combine_paths, get_resources_dir

from .registry import (
    PythonRegistry,
    NullPythonRegistry,
    WindowsPythonRegistry,
    default_registry,
)

__all__ = [
    "AgentContext",
    "DebounceState",
    "fetch",
    "fetch_text",
    "fetch_to_file",
    "WakaTimeKitError",
    "ConfigError",
    "DownloadError",
    "FilesystemError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "RuntimeNotFoundError",
    "ToolInstallError",
    "DispatchError",
    "extract_zip",
    "install_archive",
    "purge_stale",
    "install_lock",
    "LockTimeout",
    "combine_paths",
    "get_resources_dir",
    "PythonRegistry",
    "NullPythonRegistry",
    "WindowsPythonRegistry",
    "default_registry",
]
