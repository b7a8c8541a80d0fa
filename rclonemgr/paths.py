"""Module that resolves user-supplied paths against the home directory."""

import os
from typing import Mapping, Optional

from rclonemgr.constants import DEFAULT_CONFIG_PATH, DEFAULT_MOUNT_ROOT
from rclonemgr.errors import HomeDirectoryError


def home_dir(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the home directory as set in the HOME environment variable."""
    if environ is None:
        environ = os.environ

    home = environ.get("HOME")

    if not home:
        raise HomeDirectoryError("HOME not set")

    return home


def expand_home(path: str, home: Optional[str] = None) -> str:
    """
    Replace a leading ~ with the home directory.

    Only the first ~ is replaced and only if the path starts with it. Unlike
    os.path.expanduser, ~user forms are not looked up.
    """
    if not path.startswith("~"):
        return path

    return path.replace("~", home or home_dir(), 1)


def resolve_config_path(path: Optional[str] = None, home: Optional[str] = None) -> str:
    """Return the location of the rclone config file, defaulting to the rclone one."""
    return expand_home(path or DEFAULT_CONFIG_PATH, home)


def mount_dir(
    remote_name: str, root: str = DEFAULT_MOUNT_ROOT, home: Optional[str] = None
) -> str:
    """Return the directory that the remote is mounted at."""
    return os.path.join(expand_home(root, home), remote_name)
