"""
WakaTimeKit command-line interface.

Lets the bootstrap and dispatch paths run without an editor:

    wakatimekit bootstrap
    wakatimekit status
    wakatimekit heartbeat --file src/main.go --write --project demo
    wakatimekit api-key 00000000-0000-0000-0000-000000000000
"""

import argparse
import configparser
import logging
import sys
from pathlib import Path
from typing import List, Optional

from wakatimekit import __version__
from wakatimekit.agent import WakaTimeAgent
from wakatimekit.config.settings import AgentSettings, load_settings, save_api_key
from wakatimekit.core.exceptions import ConfigError
from wakatimekit.heartbeat.command import obfuscate_key

logger = logging.getLogger(__name__)


class CliHost:
    """Host integration for terminal use; dialogs become stderr messages."""

    def __init__(self, settings: AgentSettings, project: Optional[str] = None):
        self.name = settings.ide_name
        self.version = settings.ide_version
        self.project = project

    def get_project_name(self) -> Optional[str]:
        return self.project

    def show_error(self, title: str, message: str) -> None:
        print(f"{title}: {message}", file=sys.stderr)

    def show_warning(self, title: str, message: str) -> None:
        print(f"{title}: {message}", file=sys.stderr)


class CLI:
    """WakaTimeKit command-line interface."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="wakatimekit",
            description="WakaTimeKit - wakatime-cli bootstrap and heartbeat dispatch",
            epilog='Use "wakatimekit COMMAND --help" for command-specific help',
        )

        parser.add_argument(
            "--version", action="version", version=f"WakaTimeKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to YAML settings file (default: ~/.wakatime-agent.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        subparsers.add_parser(
            "bootstrap", help="Locate python and install or upgrade wakatime-cli"
        )
        subparsers.add_parser("status", help="Show interpreter and wakatime-cli state")

        heartbeat = subparsers.add_parser("heartbeat", help="Send one heartbeat")
        heartbeat.add_argument("--file", required=True, help="File being edited")
        heartbeat.add_argument(
            "--write", action="store_true", help="The file was saved"
        )
        heartbeat.add_argument("--project", help="Project name")

        api_key = subparsers.add_parser(
            "api-key", help="Save the API key to ~/.wakatime.cfg"
        )
        api_key.add_argument("key", help="WakaTime API key")

        return parser

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Parse arguments and run the selected command.

        Returns:
            Process exit code
        """
        parsed_args = self.parser.parse_args(args)
        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        if parsed_args.command == "api-key":
            return self._save_api_key(parsed_args.key)

        try:
            settings = load_settings(parsed_args.config)
        except ConfigError as e:
            logger.error(f"Error: {e}")
            return 1

        agent = WakaTimeAgent(
            settings, CliHost(settings, getattr(parsed_args, "project", None))
        )
        try:
            return self._dispatch_command(parsed_args, agent)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        finally:
            agent.shutdown()

    def _configure_logging(self, args):
        if args.verbose:
            level = logging.DEBUG
        elif args.quiet:
            level = logging.ERROR
        else:
            level = logging.INFO

        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s",
        )

    def _dispatch_command(self, args, agent: WakaTimeAgent) -> int:
        if args.command == "status":
            return self._status(agent)

        ready = agent.bootstrap().result()
        if args.command == "bootstrap":
            return 0 if ready else 1

        if not ready:
            logger.error("wakatime-cli is not ready; heartbeat not sent")
            return 1
        future = agent.notify(str(Path(args.file).absolute()), args.write)
        if future is None:
            logger.info("Heartbeat skipped")
            return 0
        return 0 if future.result() else 1

    def _save_api_key(self, key: str) -> int:
        key = key.strip()
        if not key:
            logger.error("Error: API key must not be empty")
            return 1
        try:
            path = save_api_key(key)
        except (OSError, configparser.Error) as e:
            logger.error(f"Error: could not save API key: {e}")
            return 1
        logger.info(f"API key {obfuscate_key(key)} saved to {path}")
        return 0

    def _status(self, agent: WakaTimeAgent) -> int:
        python = agent.locator.locate()
        installed = agent.tool.is_installed()
        print(f"Resources:  {agent.context.resources_dir}")
        print(f"Python:     {python or 'not found'}")
        print(f"CLI:        {agent.tool.cli_location}")
        print(f"Installed:  {'yes' if installed else 'no'}")
        if installed and python:
            print(f"Outdated:   {'yes' if agent.tool.is_outdated() else 'no'}")
        return 0 if python and installed else 1


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
