"""
Settings loader for WakaTimeKit.

Settings are merged from, lowest precedence first:
    1. Built-in defaults
    2. ``~/.wakatime.cfg`` ``[settings]`` section (shared with wakatime-cli):
       ``api_key`` and ``debug``
    3. Optional YAML file, ``~/.wakatime-agent.yaml`` by default or the path
       in ``WAKATIME_AGENT_CONFIG``
    4. ``WAKATIME_RESOURCES`` environment variable for the resource directory

Example YAML:
    api_key: 00000000-0000-0000-0000-000000000000
    debug: true
    resources_dir: ~/.wakatime-resources
    frequency_seconds: 120
    ide_name: IC
    ide_version: "2016.1"
"""

import configparser
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from wakatimekit import __version__
from wakatimekit.core.exceptions import ConfigError
from wakatimekit.core.paths import RESOURCES_ENV_VAR
from wakatimekit.heartbeat.debounce import FREQUENCY_SECONDS

logger = logging.getLogger(__name__)

CLI_CONFIG_NAME = ".wakatime.cfg"
AGENT_CONFIG_NAME = ".wakatime-agent.yaml"
AGENT_CONFIG_ENV_VAR = "WAKATIME_AGENT_CONFIG"
SETTINGS_SECTION = "settings"


@dataclass
class AgentSettings:
    """Resolved agent settings."""

    api_key: str = ""
    debug: bool = False
    resources_dir: Optional[str] = None
    frequency_seconds: float = FREQUENCY_SECONDS
    ide_name: str = "cli"
    ide_version: str = __version__


def get_cli_config_path(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / CLI_CONFIG_NAME


def get_agent_config_path(home: Optional[Path] = None) -> Path:
    env_path = os.environ.get(AGENT_CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return (home or Path.home()) / AGENT_CONFIG_NAME


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def read_cli_config(path: Path) -> Dict[str, Any]:
    """
    Read ``api_key`` and ``debug`` from wakatime-cli's INI file.

    A missing or unreadable file yields an empty dict.
    """
    if not path.exists():
        logger.debug(f"Config file not found (optional): {path}")
        return {}

    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as e:
        logger.warning(f"Ignoring unreadable {path}: {e}")
        return {}

    if not parser.has_section(SETTINGS_SECTION):
        return {}

    section = parser[SETTINGS_SECTION]
    values: Dict[str, Any] = {}
    if section.get("api_key"):
        values["api_key"] = section.get("api_key").strip()
    if "debug" in section:
        values["debug"] = _parse_bool(section.get("debug"))
    return values


def read_agent_config(path: Path) -> Dict[str, Any]:
    """
    Read the optional YAML agent config.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping
    """
    if not path.exists():
        logger.debug(f"Config file not found (optional): {path}")
        return {}

    logger.debug(f"Loading configuration from {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(AgentSettings)}
    unknown = set(data) - known
    if unknown:
        logger.warning(f"Ignoring unknown settings in {path}: {sorted(unknown)}")
    return {k: v for k, v in data.items() if k in known}


def load_settings(
    config_path: Optional[Path] = None, home: Optional[Path] = None
) -> AgentSettings:
    """
    Load merged settings.

    Args:
        config_path: Explicit YAML config path
        home: Home directory override (tests)

    Raises:
        ConfigError: If the YAML config is invalid
    """
    values: Dict[str, Any] = {}
    values.update(read_cli_config(get_cli_config_path(home)))
    values.update(read_agent_config(config_path or get_agent_config_path(home)))

    env_resources = os.environ.get(RESOURCES_ENV_VAR)
    if env_resources:
        values["resources_dir"] = env_resources

    if "debug" in values:
        values["debug"] = _parse_bool(values["debug"])
    if "frequency_seconds" in values:
        try:
            values["frequency_seconds"] = float(values["frequency_seconds"])
        except (TypeError, ValueError):
            raise ConfigError(
                f"frequency_seconds must be a number, got {values['frequency_seconds']!r}"
            )
    for key in ("api_key", "ide_name", "ide_version", "resources_dir"):
        if values.get(key) is not None:
            values[key] = str(values[key])

    return AgentSettings(**values)


def save_api_key(api_key: str, home: Optional[Path] = None) -> Path:
    """
    Persist the API key to ``~/.wakatime.cfg``, keeping other entries.

    Returns:
        Path of the written config file
    """
    path = get_cli_config_path(home)
    parser = configparser.ConfigParser(interpolation=None)
    if path.exists():
        parser.read(path, encoding="utf-8")
    if not parser.has_section(SETTINGS_SECTION):
        parser.add_section(SETTINGS_SECTION)
    parser.set(SETTINGS_SECTION, "api_key", api_key)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        parser.write(f)
    return path
