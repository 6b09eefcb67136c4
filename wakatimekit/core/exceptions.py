"""
Centralized exception hierarchy for WakaTimeKit.

Low-level modules raise these; the component boundaries (fetcher, tool
manager, dispatcher, agent) catch and log them so the host never sees one.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class WakaTimeKitError(Exception):
    """Base exception for all WakaTimeKit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(WakaTimeKitError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Network / Filesystem Exceptions
# ============================================================================


class DownloadError(WakaTimeKitError):
    """Raised when a download fails on every transport."""

    pass


class FilesystemError(WakaTimeKitError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Runtime / Tool Exceptions
# ============================================================================


class RuntimeNotFoundError(WakaTimeKitError):
    """No usable interpreter could be located or installed."""

    pass


class ToolInstallError(WakaTimeKitError):
    """Raised when wakatime-cli cannot be installed."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        msg = f"Failed to install wakatime-cli from {url}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


# ============================================================================
# Heartbeat Exceptions
# ============================================================================


class DispatchError(WakaTimeKitError):
    """Raised when a heartbeat could not be handed to wakatime-cli."""

    def __init__(self, attempts: int, cause: BaseException):
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"Heartbeat dropped after {attempts} attempts: {cause}")
