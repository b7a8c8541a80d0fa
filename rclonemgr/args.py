"""Module defining the command-line arguments and providing a parser for them."""

from __future__ import annotations

import argparse
from typing import Dict, List, Optional, Tuple

from rclonemgr.constants import DEFAULT_SETTINGS_PATH, VERSION


class Arguments(argparse.Namespace):
    """Parsed command-line arguments."""

    command: str

    settings: str
    config: Optional[str]
    plugins: Optional[str]

    debug: bool

    remote: str
    plugin: str
    fields: List[Tuple[str, str]]

    @classmethod
    def parse(cls, args: Optional[List[str]] = None) -> Arguments:
        """
        Parse command-line arguments from the given list of strings.

        Defaults to sys.argv if none are specified.
        """
        return cls._get_parser().parse_args(args, namespace=cls())

    @property
    def submission(self) -> Dict[str, str]:
        """Fields of the add command as submitted to a plugin, including the name."""
        submission = {"remote_name": self.remote}
        submission.update(self.fields)
        return submission

    @classmethod
    def _get_parser(cls) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="rclone-manager",
            description="Manage, mount and schedule rclone remotes.",
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {VERSION}",
            help="show the program version",
        )

        # Path to (optional) settings file
        parser.add_argument(
            "--settings",
            type=str,
            help=f"path to settings file (default is {DEFAULT_SETTINGS_PATH})",
            default=DEFAULT_SETTINGS_PATH,
        )

        # Overrides of the settings file
        parser.add_argument(
            "--config", type=str, help="path to rclone config file for this command"
        )
        parser.add_argument("--plugins", type=str, help="path to plugin directory")

        # Enable debug output for development
        parser.add_argument(
            "--debug", action="store_true", help="enable debug information"
        )

        commands = parser.add_subparsers(dest="command", metavar="command")
        commands.required = True

        commands.add_parser("list", help="list remotes and their status")
        commands.add_parser("plugins", help="list available plugins")
        commands.add_parser("check", help="check if rclone is installed")

        for name, description in [
            ("mount", "mount a remote"),
            ("unmount", "unmount a remote"),
            ("test", "test the connection to a remote"),
            ("schedule", "mount a remote at boot"),
            ("unschedule", "stop mounting a remote at boot"),
        ]:
            command = commands.add_parser(name, help=description)
            command.add_argument("remote", type=str, help="name of the remote")

        add = commands.add_parser("add", help="add a remote using a plugin")
        add.add_argument("plugin", type=str, help="plugin (backend type) to use")
        add.add_argument("remote", type=str, help="name of the new remote")
        add.add_argument(
            "fields",
            type=cls._parse_field,
            nargs="*",
            metavar="key=value",
            help="plugin fields",
        )

        return parser

    @staticmethod
    def _parse_field(arg: str) -> Tuple[str, str]:
        key, sep, value = arg.partition("=")

        if not sep or not key:
            raise argparse.ArgumentTypeError("expected key=value")

        return key, value
