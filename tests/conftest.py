"""
Pytest configuration and shared fixtures for WakaTimeKit tests.
"""

import io
import zipfile
from concurrent.futures import Future
from pathlib import Path
from typing import Callable, Dict

import pytest

from wakatimekit.core.context import AgentContext

CLI_ENTRY = "wakatime-master/wakatime/cli.py"


class ImmediateExecutor:
    """Executor that runs submitted work on the calling thread."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs) -> Future:
        self.submitted += 1
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:  # pragma: no cover - surfaced through the future
            future.set_exception(e)
        return future

    def shutdown(self, wait: bool = True) -> None:
        pass


def build_zip(entries: Dict[str, str]) -> bytes:
    """Build an in-memory ZIP; names ending in '/' become directory entries."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in entries.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), "")
            else:
                zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def resources_dir(tmp_path: Path) -> Path:
    """Empty resource directory."""
    path = tmp_path / "WakaTime-resources"
    path.mkdir()
    return path


@pytest.fixture
def blocked_resources_dir(tmp_path: Path) -> Path:
    """Resource directory that cannot be created: its parent is a regular file."""
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    return blocker / "WakaTime-resources"


@pytest.fixture
def context(resources_dir: Path) -> AgentContext:
    """Fresh agent state rooted at a temporary resource directory."""
    return AgentContext(resources_dir=resources_dir)


@pytest.fixture
def executor() -> ImmediateExecutor:
    return ImmediateExecutor()


@pytest.fixture
def cli_zip() -> bytes:
    """Archive shaped like the wakatime master branch download."""
    return build_zip(
        {
            "wakatime-master/": "",
            "wakatime-master/wakatime/": "",
            "wakatime-master/wakatime/__init__.py": "",
            "wakatime-master/wakatime/__about__.py": "__version_info__ = ('4', '1', '3')\n",
            "wakatime-master/wakatime/cli.py": "print('wakatime')\n",
        }
    )


@pytest.fixture
def zip_builder() -> Callable[[Dict[str, str]], bytes]:
    return build_zip
