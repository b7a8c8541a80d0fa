"""
Module that schedules remotes to be mounted at boot.

Scheduling is done with @reboot entries in the crontab of the current user. An entry is
recognized by the exact mount command that it runs, which looks like this:

@reboot rclone mount --vfs-cache-mode writes photos: /home/user/mnt/photos

Callers only see the narrow ScheduleStore interface so that the matching strategy can be
replaced (e.g. by tagging entries with a comment) without touching them.

Removal matches on the whole mount command rather than on the remote name alone, so
unrelated lines that merely mention the name are left alone. If two remotes ever
produced colliding command text, removal could not tell them apart.
"""

from abc import ABC, abstractmethod
import subprocess
from typing import Optional

from rclonemgr.constants import (
    DEFAULT_MOUNT_ROOT,
    DEFAULT_TIMEOUT,
    DEFAULT_VFS_CACHE_MODE,
)
from rclonemgr.errors import ReadError, WriteError
from rclonemgr.logger import log, summarize
from rclonemgr.paths import mount_dir


class ScheduleStore(ABC):
    """Set of remotes that are mounted at boot."""

    @abstractmethod
    def contains(self, remote_name: str) -> bool:
        """Check if the remote is scheduled to be mounted at boot."""

    @abstractmethod
    def add(self, remote_name: str) -> bool:
        """Schedule the remote, returning False if it already was scheduled."""

    @abstractmethod
    def remove(self, remote_name: str) -> bool:
        """Unschedule the remote, returning False if it wasn't scheduled."""


class CrontabScheduleStore(ScheduleStore):
    """Schedule store backed by @reboot entries in the user crontab."""

    def __init__(
        self,
        mount_root: str = DEFAULT_MOUNT_ROOT,
        home: Optional[str] = None,
        vfs_cache_mode: str = DEFAULT_VFS_CACHE_MODE,
        binary: str = "rclone",
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """Construct a store that schedules mounts of remotes under mount_root."""
        self._mount_root = mount_root
        self._home = home
        self._vfs_cache_mode = vfs_cache_mode
        self._binary = binary
        self._timeout = timeout

    def mount_command(self, remote_name: str) -> str:
        """Return the command that identifies the crontab entry of a remote."""
        mode = self._vfs_cache_mode
        return f"{self._binary} mount --vfs-cache-mode {mode} {remote_name}:"

    def entry(self, remote_name: str) -> str:
        """Return the full crontab line that mounts the remote at boot."""
        mount_point = mount_dir(remote_name, self._mount_root, self._home)
        return f"@reboot {self.mount_command(remote_name)} {mount_point}"

    def contains(self, remote_name: str) -> bool:
        """Check if the remote is scheduled to be mounted at boot."""
        return self.mount_command(remote_name) in self.read_table()

    def add(self, remote_name: str) -> bool:
        """Append a @reboot entry for the remote unless there already is one."""
        table = self.read_table()

        if self.mount_command(remote_name) in table:
            log.info(f"{remote_name} is already scheduled for auto-mount")
            return False

        if table and not table.endswith("\n"):
            table += "\n"

        self.write_table(table + self.entry(remote_name) + "\n")
        log.info(f"scheduled {remote_name} for auto-mount")

        return True

    def remove(self, remote_name: str) -> bool:
        """Drop every crontab line that runs the mount command of the remote."""
        table = self.read_table()
        command = self.mount_command(remote_name)

        lines = table.splitlines(keepends=True)
        kept_lines = [line for line in lines if command not in line]

        if len(kept_lines) == len(lines):
            log.info(f"{remote_name} is not scheduled for auto-mount")
            return False

        self.write_table("".join(kept_lines))
        log.info(f"removed {remote_name} from auto-mount")

        return True

    def read_table(self) -> str:
        """
        Read the crontab of the current user.

        crontab exits with a non-zero status if the user has no crontab yet, which is
        treated the same as an empty one.
        """
        try:
            result = subprocess.run(
                ["crontab", "-l"],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ReadError(f"failed to read crontab: {e}")

        if result.returncode != 0:
            log.debug(f"no crontab: {result.stderr.strip()}")
            return ""

        log.debug(f"read crontab: {summarize(result.stdout)}")

        return result.stdout

    def write_table(self, table: str) -> None:
        """Replace the crontab of the current user as a whole."""
        log.debug(f"writing crontab: {summarize(table)}")

        try:
            result = subprocess.run(
                ["crontab", "-"],
                input=table,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise WriteError(f"failed to write crontab: {e}")

        if result.returncode != 0:
            raise WriteError(f"failed to write crontab: {result.stderr.strip()}")
