"""Module that runs rclone and the unmount utilities as subprocesses."""

import os
import subprocess
from typing import List, Optional

from rclonemgr.constants import DEFAULT_TIMEOUT, DEFAULT_VFS_CACHE_MODE
from rclonemgr.errors import CommandError
from rclonemgr.logger import log
from rclonemgr.mounts import MountProbe


class Rclone:
    """
    Mounts, unmounts and tests remotes with the rclone command-line tool.

    Mounts are started with --daemon, so rclone returns as soon as the mount is up and
    the mount outlives this process.
    """

    def __init__(
        self,
        mount_probe: MountProbe,
        binary: str = "rclone",
        vfs_cache_mode: str = DEFAULT_VFS_CACHE_MODE,
        timeout: int = DEFAULT_TIMEOUT,
        config_path: Optional[str] = None,
    ):
        """Construct a runner that uses the given rclone binary and config file."""
        self._mount_probe = mount_probe
        self._binary = binary
        self._vfs_cache_mode = vfs_cache_mode
        self._timeout = timeout
        self._config_path = config_path

    def is_installed(self) -> bool:
        """Check if rclone can be run at all."""
        try:
            result = self._run([self._binary, "--version"])
        except CommandError as e:
            log.debug(f"rclone is not available: {e}")
            return False

        return result.returncode == 0

    def mount(self, remote_name: str, mount_point: str) -> str:
        """Mount the remote at the mount point, creating it if necessary."""
        if self._mount_probe.is_mounted(mount_point):
            return f"{remote_name} is already mounted at {mount_point}"

        try:
            os.makedirs(mount_point, exist_ok=True)
        except OSError as e:
            raise CommandError(f"failed to create mount directory: {e}")

        command = [
            self._binary,
            "mount",
            f"{remote_name}:",
            mount_point,
            "--vfs-cache-mode",
            self._vfs_cache_mode,
            "--daemon",
        ]

        result = self._run(command + self._config_args())

        if result.returncode != 0:
            raise CommandError(f"mount failed: {result.stderr.strip()}")

        return f"mounted {remote_name} at {mount_point}"

    def unmount(self, remote_name: str, mount_point: str) -> str:
        """Unmount the remote with fusermount, falling back to umount."""
        if not self._mount_probe.is_mounted(mount_point):
            return f"{remote_name} is not mounted"

        try:
            result = self._run(["fusermount", "-u", mount_point])
        except CommandError as e:
            log.debug(f"fusermount failed, trying umount: {e}")
        else:
            if result.returncode == 0:
                return f"unmounted {remote_name}"

            log.debug(f"fusermount failed, trying umount: {result.stderr.strip()}")

        result = self._run(["umount", mount_point])

        if result.returncode != 0:
            raise CommandError(f"unmount failed: {result.stderr.strip()}")

        return f"unmounted {remote_name}"

    def test_connection(self, remote_name: str) -> str:
        """List the root of the remote to check that it can be reached."""
        command = [self._binary, "lsf", f"{remote_name}:"]
        result = self._run(command + self._config_args())

        if result.returncode != 0:
            raise CommandError(f"connection test failed: {result.stderr.strip()}")

        return f"connection to {remote_name} successful"

    def _config_args(self) -> List[str]:
        if self._config_path:
            return ["--config", self._config_path]
        else:
            return []

    def _run(self, command: List[str]) -> subprocess.CompletedProcess:
        """Run a command to completion, raising CommandError if it can't be run."""
        log.debug(f"running {' '.join(command)}")

        try:
            return subprocess.run(
                command, capture_output=True, text=True, timeout=self._timeout
            )
        except FileNotFoundError:
            raise CommandError(f"{command[0]} not found")
        except subprocess.TimeoutExpired:
            raise CommandError(f"{command[0]} timed out after {self._timeout} seconds")
        except OSError as e:
            raise CommandError(f"failed to run {command[0]}: {e}")
