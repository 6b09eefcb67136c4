"""
Unit tests for wakatimekit.heartbeat.debounce module.
"""

import pytest

from wakatimekit.core.context import DebounceState
from wakatimekit.heartbeat.debounce import (
    FREQUENCY_SECONDS,
    enough_time_passed,
    should_log_file,
    should_send,
)

T = 1_000_000.0


@pytest.fixture
def state():
    return DebounceState(last_file="a.txt", last_time=T)


class TestShouldSend:
    """Tests for the debounce gate."""

    def test_frequency_is_two_minutes(self):
        assert FREQUENCY_SECONDS == 120

    def test_same_file_inside_window_dropped(self, state):
        assert should_send(state, "a.txt", False, T + 119) is False

    def test_same_file_at_boundary_dropped(self, state):
        """Test the window is strict: exactly 120s is not enough."""
        assert should_send(state, "a.txt", False, T + 120) is False

    def test_same_file_after_window_sent(self, state):
        assert should_send(state, "a.txt", False, T + 121) is True

    def test_write_always_sent(self, state):
        assert should_send(state, "a.txt", True, T + 1) is True

    def test_different_file_sent(self, state):
        assert should_send(state, "b.txt", False, T + 1) is True

    def test_first_event_sent(self):
        assert should_send(DebounceState(), "a.txt", False, T) is True

    def test_custom_frequency(self, state):
        assert should_send(state, "a.txt", False, T + 11, frequency=10) is True

    def test_enough_time_passed(self, state):
        assert enough_time_passed(state, T + 121) is True
        assert enough_time_passed(state, T + 60) is False


class TestShouldLogFile:
    """Tests for the housekeeping denylist."""

    @pytest.mark.parametrize(
        "path",
        [
            "atlassian-ide-plugin.xml",
            "/home/me/project/.idea/workspace.xml",
        ],
    )
    def test_ignored(self, path):
        assert should_log_file(path) is False

    @pytest.mark.parametrize(
        "path",
        [
            "/home/me/project/main.go",
            "/home/me/project/atlassian-ide-plugin.xml",
            "/home/me/project/.idea/misc.xml",
        ],
    )
    def test_logged(self, path):
        assert should_log_file(path) is True
