"""Module that checks whether a directory is an active mount point."""

import os
import subprocess
from typing import Optional

from rclonemgr.constants import DEFAULT_TIMEOUT
from rclonemgr.logger import log


class MountProbe:
    """
    Answers whether a path is currently mounted.

    The primary method asks the mountpoint utility from util-linux. If that utility
    can't be run at all, the probe falls back to reporting whether the path is an
    existing directory. That fallback is an approximation: an unmounted but existing
    mount directory is reported as mounted.
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        """Construct a probe that waits at most timeout seconds for mountpoint."""
        self._timeout = timeout

    def is_mounted(self, path: str) -> bool:
        """Check if the path is an active mount point."""
        mounted = self._query_mountpoint(path)

        if mounted is None:
            log.debug(f"mountpoint unavailable, checking if {path} is a directory")
            return self._directory_exists(path)

        return mounted

    def _query_mountpoint(self, path: str) -> Optional[bool]:
        """Run mountpoint -q on the path, or return None if it can't be run."""
        try:
            result = subprocess.run(
                ["mountpoint", "-q", path],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            log.debug(f"failed to run mountpoint: {e}")
            return None

        return result.returncode == 0

    @staticmethod
    def _directory_exists(path: str) -> bool:
        return os.path.isdir(path)
