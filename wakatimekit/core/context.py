"""
Explicitly owned process-wide state.

The interpreter location, resource directory and debounce state are shared
by the bootstrap and the dispatcher. They live on an :class:`AgentContext`
passed to each component at construction, so tests get fresh state per case.

Writes are unguarded on purpose: the cached values are computed
deterministically, and a racing debounce update costs at most one redundant
or dropped heartbeat.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from wakatimekit.core.paths import get_resources_dir


@dataclass
class DebounceState:
    """Last dispatched file and the wall-clock time (seconds) it was sent."""

    last_file: Optional[str] = None
    last_time: float = 0.0

    def record(self, file: str, now: float) -> None:
        """Remember an accepted heartbeat; time never moves backwards."""
        self.last_file = file
        if now > self.last_time:
            self.last_time = now


@dataclass
class AgentContext:
    """
    State shared by the bootstrap and heartbeat components.

    Attributes:
        resources_dir: Installation root for interpreter and wakatime-cli
        python_location: Memoized interpreter path, None until resolved
        ready: Set once wakatime-cli is installed and current
        debounce: Last-heartbeat bookkeeping
    """

    resources_dir: Path = field(default_factory=get_resources_dir)
    python_location: Optional[str] = None
    ready: bool = False
    debounce: DebounceState = field(default_factory=DebounceState)
