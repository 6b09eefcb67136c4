"""
Heartbeat debouncing, command construction and dispatch.
"""

from .command import build_command, obfuscate_key, plugin_identity, redact_command
from .debounce import FREQUENCY_SECONDS, should_log_file, should_send
from .dispatcher import HeartbeatDispatcher, MAX_RETRIES, spawn_heartbeat

__all__ = [
    "build_command",
    "obfuscate_key",
    "plugin_identity",
    "redact_command",
    "FREQUENCY_SECONDS",
    "should_log_file",
    "should_send",
    "HeartbeatDispatcher",
    "MAX_RETRIES",
    "spawn_heartbeat",
]
