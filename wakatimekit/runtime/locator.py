"""
Interpreter discovery.

Probes a prioritized list of candidate directories for a launchable
``pythonw`` or ``python`` binary. A candidate succeeds if spawning it with
``--version`` does not raise; its exit code and output are not inspected.
The first success is memoized on the :class:`AgentContext` and never
re-resolved for the lifetime of that context.

Probe order:
    1. bare name on PATH
    2. filesystem root
    3. /usr/local/bin/, /usr/bin/
    4. (Windows) bundled install under the resource directory
    5. (Windows) registry install paths, HKEY_CURRENT_USER then HKEY_LOCAL_MACHINE
    6. (Windows) /python39 ... /Python26 in listed order
"""

import logging
import subprocess
import threading
from typing import Callable, List, Optional, Sequence

from wakatimekit.core.context import AgentContext
from wakatimekit.core.paths import combine_paths
from wakatimekit.core.platform import is_windows
from wakatimekit.core.registry import (
    HKEY_CURRENT_USER,
    HKEY_LOCAL_MACHINE,
    PythonRegistry,
    default_registry,
)

logger = logging.getLogger(__name__)

# GUI-less variant first so no console window flashes on Windows.
EXECUTABLE_NAMES = ("pythonw", "python")

COMMON_PREFIXES = ("/", "/usr/local/bin/", "/usr/bin/")

WINDOWS_VERSIONED_DIRS = tuple(
    f"/{prefix}{version}"
    for version in ("39", "38", "37", "36", "35", "34", "33", "27", "26")
    for prefix in ("python", "Python")
)

Launcher = Callable[[Sequence[str]], None]


def spawn_version(cmd: Sequence[str]) -> None:
    """
    Launch ``cmd`` without waiting for it.

    The child is reaped by a daemon thread so probing never blocks on it.

    Raises:
        OSError: If the binary cannot be launched
    """
    proc = subprocess.Popen(
        list(cmd),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    threading.Thread(target=proc.wait, name="python-probe", daemon=True).start()


class RuntimeLocator:
    """
    Find a usable interpreter binary.

    Example:
        >>> locator = RuntimeLocator(AgentContext())
        >>> locator.locate()
        'python'
    """

    def __init__(
        self,
        context: AgentContext,
        registry: Optional[PythonRegistry] = None,
        launcher: Launcher = spawn_version,
        windows: Optional[bool] = None,
    ):
        self.context = context
        self.registry = registry if registry is not None else default_registry()
        self.launcher = launcher
        self.windows = is_windows() if windows is None else windows

    def is_installed(self) -> bool:
        return self.locate() is not None

    def candidate_dirs(self) -> List[Optional[str]]:
        """Directories to probe, in order; ``None`` means PATH lookup."""
        dirs: List[Optional[str]] = [None]
        dirs.extend(COMMON_PREFIXES)
        if self.windows:
            dirs.append(combine_paths(str(self.context.resources_dir), "python"))
            dirs.append(self._from_registry(HKEY_CURRENT_USER))
            dirs.append(self._from_registry(HKEY_LOCAL_MACHINE))
            dirs.extend(WINDOWS_VERSIONED_DIRS)
        return dirs

    def locate(self) -> Optional[str]:
        """
        Resolve the interpreter, probing only on the first successful call.

        Returns:
            Interpreter path, or None if every candidate failed
        """
        if self.context.python_location is not None:
            return self.context.python_location

        location = None
        for directory in self.candidate_dirs():
            location = self._probe(directory)
            if location is not None:
                break

        if location is not None:
            self.context.python_location = location
            logger.debug(f"Found python binary: {location}")
        else:
            logger.warning("Could not find python binary.")
        return location

    def _probe(self, directory: Optional[str]) -> Optional[str]:
        for name in EXECUTABLE_NAMES:
            candidate = combine_paths(directory, name)
            try:
                self.launcher([candidate, "--version"])
            except OSError as e:
                logger.debug(f"Probe failed for {candidate}: {e}")
                continue
            return candidate
        return None

    def _from_registry(self, root: str) -> Optional[str]:
        try:
            paths = self.registry.query_installed_versions(root)
        except OSError as e:
            logger.debug(f"Registry query for {root} failed: {e}")
            return None
        for path in paths:
            if path:
                return path
        return None
