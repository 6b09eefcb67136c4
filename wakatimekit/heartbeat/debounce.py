"""
Heartbeat rate limiting.

A heartbeat goes out when it is a write, when it targets a different file
than the last one sent, or when more than ``FREQUENCY_SECONDS`` passed since
the last one. Host housekeeping files never produce heartbeats.
"""

from wakatimekit.core.context import DebounceState

FREQUENCY_MINUTES = 2
FREQUENCY_SECONDS = FREQUENCY_MINUTES * 60

IGNORED_FILE_NAMES = ("atlassian-ide-plugin.xml",)
IGNORED_PATH_FRAGMENTS = ("/.idea/workspace.xml",)


def should_log_file(file: str) -> bool:
    """
    Check a path against the housekeeping denylist.

    Example:
        >>> should_log_file("/home/me/proj/.idea/workspace.xml")
        False
        >>> should_log_file("/home/me/proj/main.go")
        True
    """
    if file in IGNORED_FILE_NAMES:
        return False
    return not any(fragment in file for fragment in IGNORED_PATH_FRAGMENTS)


def enough_time_passed(
    state: DebounceState, now: float, frequency: float = FREQUENCY_SECONDS
) -> bool:
    return state.last_time + frequency < now


def should_send(
    state: DebounceState,
    file: str,
    is_write: bool,
    now: float,
    frequency: float = FREQUENCY_SECONDS,
) -> bool:
    """Apply the debounce gate for one event."""
    if is_write:
        return True
    if file != state.last_file:
        return True
    return enough_time_passed(state, now, frequency)
