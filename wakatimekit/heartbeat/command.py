"""
wakatime-cli command line construction and redaction.

Argument order is part of the contract with wakatime-cli's parser:

    <python> <cli.py> --file <path> --key <api key> [--project <name>]
        --plugin "<ide>/<ide version> <ide>-wakatime/<agent version>" [--write]
"""

from typing import List, Optional, Sequence

KEY_FLAG = "--key"
KEY_MASK = "XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXX"


def plugin_identity(ide_name: str, ide_version: str, agent_version: str) -> str:
    """
    Build the ``--plugin`` value.

    Example:
        >>> plugin_identity("IC", "2016.1", "6.0.1")
        'IC/2016.1 IC-wakatime/6.0.1'
    """
    return f"{ide_name}/{ide_version} {ide_name}-wakatime/{agent_version}"


def build_command(
    python: str,
    cli: str,
    file: str,
    api_key: str,
    plugin: str,
    project: Optional[str] = None,
    is_write: bool = False,
) -> List[str]:
    cmd = [python, cli, "--file", file, KEY_FLAG, api_key]
    if project is not None:
        cmd.extend(["--project", project])
    cmd.extend(["--plugin", plugin])
    if is_write:
        cmd.append("--write")
    return cmd


def obfuscate_key(key: Optional[str]) -> Optional[str]:
    """
    Mask all but the last four characters of an API key.

    The mask has a fixed length so the key length is not leaked. Keys of
    four characters or fewer are returned unchanged.

    Example:
        >>> obfuscate_key("abcd1234-ef56")
        'XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXef56'
    """
    if key is None or len(key) <= 4:
        return key
    return KEY_MASK + key[-4:]


def redact_command(cmd: Sequence[str]) -> List[str]:
    """Copy ``cmd`` with the value following every ``--key`` obfuscated."""
    redacted = []
    previous = ""
    for arg in cmd:
        redacted.append(obfuscate_key(arg) if previous == KEY_FLAG else arg)
        previous = arg
    return redacted
