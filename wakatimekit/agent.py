"""
Host-facing entry points.

The host editor creates one :class:`WakaTimeAgent`, calls ``bootstrap()``
once on startup and ``notify(file, is_write)`` for every file edit or save.
Everything slow (probing, downloads, extraction, spawning) runs on the
agent's worker pool; the host is only called back for its project name and
for the single blocking error when no interpreter can be found.

Startup order:
    locate interpreter -> (install interpreter) -> ensure wakatime-cli -> ready

Events arriving before ``ready`` are dropped, not queued.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Protocol

from wakatimekit import __version__
from wakatimekit.config.settings import AgentSettings
from wakatimekit.core.context import AgentContext
from wakatimekit.core.exceptions import RuntimeNotFoundError, WakaTimeKitError
from wakatimekit.core.paths import get_resources_dir
from wakatimekit.core.registry import PythonRegistry
from wakatimekit.heartbeat.command import obfuscate_key, plugin_identity
from wakatimekit.heartbeat.dispatcher import HeartbeatDispatcher
from wakatimekit.runtime.installer import install_python
from wakatimekit.runtime.locator import RuntimeLocator
from wakatimekit.tool.manager import ToolManager

logger = logging.getLogger(__name__)

MAX_WORKERS = 4

PYTHON_MISSING_MESSAGE = (
    "WakaTime requires Python to be installed.\n"
    "You can install it from https://www.python.org/downloads/\n"
    "After installing Python, restart your IDE."
)
DEBUG_MODE_MESSAGE = (
    "Running WakaTime in DEBUG mode. "
    "Your IDE may be slow when saving or editing files."
)


class HostIntegration(Protocol):
    """What the agent needs from the host editor."""

    name: str
    version: str

    def get_project_name(self) -> Optional[str]: ...

    def show_error(self, title: str, message: str) -> None: ...

    def show_warning(self, title: str, message: str) -> None: ...


class WakaTimeAgent:
    """
    Bootstrap the wakatime-cli runtime and forward heartbeats to it.

    Example:
        >>> agent = WakaTimeAgent(load_settings(), host)
        >>> agent.bootstrap()
        >>> agent.notify("/src/main.go", is_write=True)
    """

    def __init__(
        self,
        settings: AgentSettings,
        host: HostIntegration,
        context: Optional[AgentContext] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        registry: Optional[PythonRegistry] = None,
        locator: Optional[RuntimeLocator] = None,
        tool: Optional[ToolManager] = None,
        windows: Optional[bool] = None,
    ):
        self.settings = settings
        self.host = host
        self.context = context or AgentContext(
            resources_dir=get_resources_dir(settings.resources_dir)
        )
        self.executor = executor or ThreadPoolExecutor(
            max_workers=MAX_WORKERS, thread_name_prefix="wakatime"
        )
        self.windows = windows
        self.locator = locator or RuntimeLocator(
            self.context, registry=registry, windows=windows
        )
        self.tool = tool or ToolManager(self.context, self.locator)
        self.dispatcher = HeartbeatDispatcher(
            context=self.context,
            executor=self.executor,
            cli_location=lambda: self.tool.cli_location,
            api_key=lambda: self.settings.api_key,
            project_name=self.host.get_project_name,
            plugin=plugin_identity(host.name, host.version, __version__),
            debug=settings.debug,
            frequency=settings.frequency_seconds,
        )

    @property
    def ready(self) -> bool:
        return self.context.ready

    def bootstrap(self, wait: bool = False) -> Future:
        """
        Start the bootstrap on the worker pool.

        Args:
            wait: Block until the bootstrap finished

        Returns:
            Future resolving to True once heartbeats can be sent
        """
        logger.info(f"Initializing WakaTime plugin v{__version__} (https://wakatime.com/)")
        if self.settings.debug:
            logging.getLogger("wakatimekit").setLevel(logging.DEBUG)
            logger.debug("Logging level set to DEBUG")
        logger.debug(f"Api Key: {obfuscate_key(self.settings.api_key)}")

        future = self.executor.submit(self._bootstrap)
        if wait:
            future.result()
        return future

    def _ensure_python(self) -> None:
        """
        Raises:
            RuntimeNotFoundError: If no interpreter is found after installing
        """
        if self.locator.is_installed():
            return
        logger.info("Python not found, downloading python...")
        install_python(self.context.resources_dir, windows=self.windows)
        if not self.locator.is_installed():
            raise RuntimeNotFoundError("No python interpreter found")
        logger.info("Finished installing python...")

    def _bootstrap(self) -> bool:
        try:
            self._ensure_python()
            self.tool.ensure_current()
            logger.debug(f"CLI location: {self.tool.cli_location}")
        except RuntimeNotFoundError as e:
            logger.error(str(e))
            self.host.show_error("Error", PYTHON_MISSING_MESSAGE)
            return False
        except (WakaTimeKitError, OSError) as e:
            logger.error(f"Bootstrap failed: {e}")
            return False

        self.context.ready = self.tool.is_installed()
        if not self.context.ready:
            logger.warning("wakatime-cli is not installed; heartbeats are disabled")
            return False

        if self.settings.debug:
            self.host.show_warning("Debug", DEBUG_MODE_MESSAGE)
        logger.info("Finished initializing WakaTime plugin")
        return True

    def notify(self, file: str, is_write: bool = False) -> Optional[Future]:
        """Forward one file activity event to the dispatcher."""
        return self.dispatcher.notify(file, is_write)

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)
