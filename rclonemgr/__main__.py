"""
Module implementing the command-line interface of rclone-manager.

The command-line interface is a thin host around RemoteManager: it parses the command,
calls the matching operation and prints the result. Expected failures (ManagerError)
are reported as a single line and result in exit code 1.
"""

import logging
import os
import sys
from typing import List, NoReturn, Optional

from rclonemgr.args import Arguments
from rclonemgr.config import Settings
import rclonemgr.constants as constants
from rclonemgr.errors import ManagerError
from rclonemgr.logger import log
from rclonemgr.manager import RemoteManager
from rclonemgr.paths import expand_home


def main(arguments: Optional[List[str]] = None) -> NoReturn:
    """
    Run a single rclone-manager command with the given arguments.

    Defaults to parsing command-line arguments from sys.argv if none are specified.
    """
    args = Arguments.parse(arguments)

    # Configure debug logging.
    if args.debug:
        log.setLevel(logging.DEBUG)
    else:
        log.setLevel(logging.WARNING)

    try:
        settings = Settings.load(expand_home(args.settings))

        if args.plugins:
            settings.plugins.path = os.path.abspath(expand_home(args.plugins))

        exit_code = run(RemoteManager(settings), args)
    except ManagerError as e:
        log.error(str(e))
        exit_code = constants.FAILURE_CODE
    except Exception as e:
        log.error(f"failed to run command: {e}")
        exit_code = constants.MANAGER_ERROR_CODE

    sys.exit(exit_code)


def run(manager: RemoteManager, args: Arguments) -> int:
    """Run the command given in the arguments and print its results."""
    if args.command == "list":
        for remote in manager.list_remotes(args.config):
            mounted = "mounted" if remote.mounted else "-"
            scheduled = "at boot" if remote.scheduled else "-"
            print(
                f"{remote.name}\t{remote.kind}\t{mounted}\t{scheduled}\t"
                f"{remote.mount_point}"
            )
    elif args.command == "plugins":
        for plugin in manager.load_plugins():
            print(f"{plugin.name}\t{plugin.version}\t{plugin.description}")
    elif args.command == "check":
        if not manager.is_rclone_installed():
            print("rclone is not installed")
            return constants.FAILURE_CODE

        print("rclone is installed")
    elif args.command == "mount":
        print(manager.mount(args.remote, args.config))
    elif args.command == "unmount":
        print(manager.unmount(args.remote))
    elif args.command == "test":
        print(manager.test_connection(args.remote, args.config))
    elif args.command == "schedule":
        if manager.set_scheduled(args.remote, True):
            print(f"added {args.remote} to crontab for auto-mount")
        else:
            print(f"{args.remote} is already scheduled for auto-mount")
    elif args.command == "unschedule":
        if manager.set_scheduled(args.remote, False):
            print(f"removed {args.remote} from crontab")
        else:
            print(f"{args.remote} is not scheduled for auto-mount")
    elif args.command == "add":
        # Like a form that is prefilled with the defaults of the plugin
        plugin = manager.get_plugin(args.plugin)
        submission = plugin.with_defaults(args.submission)

        name = manager.add_remote(args.plugin, submission, args.config)
        print(f"added remote '{name}'")
    else:
        raise ValueError(f"unknown command {args.command}")

    return 0


if __name__ == "__main__":
    main()
