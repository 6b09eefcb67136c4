"""
wakatime-cli installation and staleness checks.

The tool is installed when its entry script exists; nothing else about the
tree is verified. It is outdated unless ``<python> cli.py --version`` exits
0 and its combined output contains the published version string. This is a
substring test, not a semantic version comparison, and any error while
checking counts as outdated.

Install and upgrade are the same operation: download the full source ZIP,
purge the previous tree, extract.
"""

import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from wakatimekit.core.context import AgentContext
from wakatimekit.core.download import fetch_to_file
from wakatimekit.core.exceptions import FilesystemError, ToolInstallError
from wakatimekit.core.filesystem import install_archive
from wakatimekit.core.locking import LockTimeout, install_lock
from wakatimekit.runtime.locator import RuntimeLocator
from wakatimekit.tool.version import latest_cli_version

logger = logging.getLogger(__name__)

ARCHIVE_URL = "https://codeload.github.com/wakatime/wakatime/zip/master"
ARCHIVE_NAME = "wakatime-cli.zip"
TREE_NAME = "wakatime-master"
ENTRY_SCRIPT = ("wakatime", "cli.py")

Runner = Callable[[List[str]], subprocess.CompletedProcess]


def run_version_check(cmd: List[str]) -> subprocess.CompletedProcess:
    """Run ``cmd`` to completion, capturing output. No timeout is applied."""
    return subprocess.run(cmd, capture_output=True, text=True)


class ToolManager:
    """
    Install, upgrade and version-check wakatime-cli.

    Example:
        >>> manager = ToolManager(context, RuntimeLocator(context))
        >>> if not manager.is_installed():
        ...     manager.install()
        ... elif manager.is_outdated():
        ...     manager.upgrade()
    """

    def __init__(
        self,
        context: AgentContext,
        locator: RuntimeLocator,
        runner: Runner = run_version_check,
        version_source: Callable[[], str] = latest_cli_version,
    ):
        self.context = context
        self.locator = locator
        self.runner = runner
        self.version_source = version_source

    @property
    def cli_location(self) -> Path:
        """Path to the wakatime-cli entry script."""
        return Path(self.context.resources_dir, TREE_NAME, *ENTRY_SCRIPT)

    @property
    def install_root(self) -> Path:
        """Directory the archive is extracted into (the tree's parent)."""
        return self.cli_location.parent.parent.parent

    def is_installed(self) -> bool:
        cli = self.cli_location
        logger.debug(f"WakaTime Core Location: {cli.absolute()}")
        logger.debug(f"WakaTime Core Exists: {cli.exists()}")
        return cli.exists()

    def is_outdated(self) -> bool:
        """
        Check the installed tool against the published version.

        Returns:
            False if not installed, or if the installed tool reports the
            published version; True otherwise, including on any error
        """
        if not self.is_installed():
            return False

        cmd = [self.locator.locate(), str(self.cli_location), "--version"]
        try:
            result = self.runner(cmd)
            output = (result.stdout or "") + (result.stderr or "")
            logger.debug(f'wakatime cli version check output: "{output}"')
            logger.debug(f"wakatime cli version check exit code: {result.returncode}")

            if result.returncode == 0:
                if self.version_source() in output:
                    return False
        except Exception as e:
            logger.debug(f"wakatime cli version check failed: {e}")
        return True

    def install(self) -> None:
        """
        Download and extract a fresh copy of wakatime-cli.

        Failures are logged; a failed install leaves the tool missing, which
        :meth:`is_installed` reports on the next check.
        """
        try:
            self._install()
        except ToolInstallError as e:
            logger.error(str(e))

    def upgrade(self) -> None:
        self.install()

    def _install(self) -> None:
        root = self.install_root
        zip_file = root / ARCHIVE_NAME

        try:
            root.mkdir(parents=True, exist_ok=True)
            with install_lock(self.context.resources_dir):
                if not fetch_to_file(ARCHIVE_URL, zip_file):
                    raise ToolInstallError(ARCHIVE_URL, "download failed")
                install_archive(zip_file, root, stale_dir=root / TREE_NAME)
        except (FilesystemError, LockTimeout, OSError) as e:
            raise ToolInstallError(ARCHIVE_URL, str(e)) from e

    def ensure_current(self) -> Optional[str]:
        """
        Install or upgrade as needed.

        Returns:
            "installed", "upgraded" or None when already current
        """
        if not self.is_installed():
            logger.info("Downloading and installing wakatime-cli ...")
            self.install()
            logger.info("Finished downloading and installing wakatime-cli.")
            return "installed"
        if self.is_outdated():
            logger.info("Upgrading wakatime-cli ...")
            self.upgrade()
            logger.info("Finished upgrading wakatime-cli.")
            return "upgraded"
        logger.info("wakatime-cli is up to date.")
        return None
