"""
Fire-and-forget heartbeat dispatch.

``notify`` runs on the host's calling thread: it checks readiness, applies
the debounce gate, records the debounce state and builds the command line.
Spawning wakatime-cli happens on a worker pool so the host never blocks on
process creation. A failed spawn is retried ``MAX_RETRIES`` more times with
a short fixed delay, then the heartbeat is dropped; nothing is queued or
persisted.

Lifecycle of one heartbeat:
    Idle -> Pending -> Dispatching -> Success
                                   -> Retrying -> Dispatching
                                   -> GivenUp
"""

import logging
import subprocess
import time
from concurrent.futures import Executor, Future
from typing import Callable, List, Optional, Sequence

from wakatimekit.core.context import AgentContext
from wakatimekit.core.exceptions import DispatchError
from wakatimekit.heartbeat.command import build_command, redact_command
from wakatimekit.heartbeat.debounce import (
    FREQUENCY_SECONDS,
    should_log_file,
    should_send,
)

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_DELAY_SECONDS = 0.03

Spawner = Callable[[Sequence[str]], subprocess.Popen]


def spawn_heartbeat(cmd: Sequence[str]) -> subprocess.Popen:
    """Start wakatime-cli, discarding its output."""
    return subprocess.Popen(
        list(cmd),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )


def spawn_heartbeat_captured(cmd: Sequence[str]) -> subprocess.Popen:
    """Start wakatime-cli with piped output, for debug logging."""
    return subprocess.Popen(
        list(cmd),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )


class HeartbeatDispatcher:
    """
    Debounce file activity and hand heartbeats to wakatime-cli.

    Args:
        context: Shared agent state (readiness, interpreter, debounce)
        executor: Worker pool that runs the spawns
        cli_location: Callable returning the wakatime-cli entry script path
        api_key: Callable returning the current API key
        project_name: Callable returning the current project, or None
        plugin: ``--plugin`` identity string
        debug: Wait for each process and log its output
        spawner: Process launcher, defaults by debug mode
        clock: Wall-clock source in seconds
        sleep: Delay function used between retries
        frequency: Minimum seconds between heartbeats for the same file
    """

    def __init__(
        self,
        context: AgentContext,
        executor: Executor,
        cli_location: Callable[[], str],
        api_key: Callable[[], str],
        project_name: Callable[[], Optional[str]],
        plugin: str,
        debug: bool = False,
        spawner: Optional[Spawner] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        frequency: float = FREQUENCY_SECONDS,
    ):
        self.context = context
        self.executor = executor
        self.cli_location = cli_location
        self.api_key = api_key
        self.project_name = project_name
        self.plugin = plugin
        self.debug = debug
        if spawner is None:
            spawner = spawn_heartbeat_captured if debug else spawn_heartbeat
        self.spawner = spawner
        self.clock = clock
        self.sleep = sleep
        self.frequency = frequency

    def notify(self, file: str, is_write: bool = False) -> Optional[Future]:
        """
        Handle one file activity event.

        Returns:
            Future resolving to True on a successful spawn, False once
            retries are exhausted; None when the event was ignored
        """
        if not self.context.ready:
            return None
        if not should_log_file(file):
            return None

        now = self.clock()
        if not should_send(self.context.debounce, file, is_write, now, self.frequency):
            return None

        self.context.debounce.record(file, now)
        cmd = self.build_command(file, is_write)
        try:
            return self.executor.submit(self.dispatch, cmd)
        except RuntimeError as e:
            # executor already shut down
            logger.debug(f"Heartbeat dropped: {e}")
            return None

    def build_command(self, file: str, is_write: bool) -> List[str]:
        return build_command(
            python=self.context.python_location,
            cli=str(self.cli_location()),
            file=file,
            api_key=self.api_key(),
            plugin=self.plugin,
            project=self.project_name(),
            is_write=is_write,
        )

    def dispatch(self, cmd: Sequence[str]) -> bool:
        """
        Spawn wakatime-cli, retrying spawn failures.

        Returns:
            True once a process was started, False if every attempt failed
        """
        attempts = MAX_RETRIES + 1
        for attempt in range(attempts):
            try:
                logger.debug(f"Executing CLI: {redact_command(cmd)}")
                proc = self.spawner(cmd)
            except (OSError, subprocess.SubprocessError) as e:
                if attempt < MAX_RETRIES:
                    logger.debug(f"Spawn attempt {attempt + 1} failed: {e}")
                    self.sleep(RETRY_DELAY_SECONDS)
                    continue
                logger.error(str(DispatchError(attempts, e)))
                return False

            if self.debug:
                self._log_output(proc)
            return True
        return False

    @staticmethod
    def _log_output(proc: subprocess.Popen) -> None:
        stdout, stderr = proc.communicate()
        for line in (stdout or "").splitlines():
            logger.debug(line)
        for line in (stderr or "").splitlines():
            logger.debug(line)
        logger.debug(f"Command finished with return value: {proc.returncode}")
