"""Module that ties the individual components together into the app operations."""

from typing import List, Mapping, Optional

from rclonemgr.config import Settings
from rclonemgr.constants import DEFAULT_CONFIG_PATH
from rclonemgr.logger import log
from rclonemgr.mounts import MountProbe
from rclonemgr.paths import home_dir, mount_dir, resolve_config_path
from rclonemgr.plugins import PluginDescriptor, PluginStore, validate_submission
from rclonemgr.rclone import Rclone
from rclonemgr.remotes import Remote, RemoteConfigParser
from rclonemgr.schedule import CrontabScheduleStore, ScheduleStore
from rclonemgr.writer import RemoteConfigWriter


class RemoteManager:
    """
    Operations on rclone remotes as offered to a user interface.

    Every operation re-reads the state it needs (config file, crontab, mount table), so
    nothing is cached between calls. Expected failures are raised as ManagerError
    subclasses for the user interface to present.

    Operations that accept a config_path use it instead of the configured rclone config
    file for that call only.
    """

    def __init__(
        self,
        settings: Settings,
        home: Optional[str] = None,
        mount_probe: Optional[MountProbe] = None,
        schedule: Optional[ScheduleStore] = None,
    ):
        """Construct the manager, optionally with substitutes for system state."""
        self._settings = settings
        self._home = home or home_dir()

        self._mount_probe = mount_probe or MountProbe(settings.rclone.timeout)
        self._schedule = schedule or CrontabScheduleStore(
            mount_root=settings.mounts.root,
            home=self._home,
            vfs_cache_mode=settings.rclone.vfs_cache_mode,
            binary=settings.rclone.binary,
            timeout=settings.rclone.timeout,
        )
        self._plugins = PluginStore(settings.plugins.path)

    def config_path(self, path: Optional[str] = None) -> str:
        """Return the absolute location of the rclone config file."""
        return resolve_config_path(path or self._settings.rclone.config, self._home)

    def mount_point(self, remote_name: str) -> str:
        """Return where the remote is mounted."""
        return mount_dir(remote_name, self._settings.mounts.root, self._home)

    def list_remotes(self, config_path: Optional[str] = None) -> List[Remote]:
        """List all remotes in the config file along with their status."""
        parser = RemoteConfigParser(
            self._mount_probe, self._schedule, self._settings.mounts.root, self._home
        )

        return parser.read(self.config_path(config_path))

    def load_plugins(self) -> List[PluginDescriptor]:
        """Load all available plugins."""
        return self._plugins.load_plugins()

    def get_plugin(self, name: str) -> PluginDescriptor:
        """Load a single plugin by name."""
        return self._plugins.get_plugin(name)

    def add_remote(
        self,
        plugin_name: str,
        submission: Mapping[str, str],
        config_path: Optional[str] = None,
    ) -> str:
        """Validate the submitted plugin fields and add the remote to the config."""
        plugin = self._plugins.get_plugin(plugin_name)

        log.debug(f"validating fields {list(submission)} against plugin {plugin_name}")
        validate_submission(plugin, submission)

        writer = RemoteConfigWriter(self.config_path(config_path))
        return writer.add_remote(plugin_name, submission)

    def is_scheduled(self, remote_name: str) -> bool:
        """Check if the remote is mounted at boot."""
        return self._schedule.contains(remote_name)

    def set_scheduled(self, remote_name: str, enabled: bool) -> bool:
        """Enable or disable mounting at boot, returning whether anything changed."""
        if enabled:
            return self._schedule.add(remote_name)
        else:
            return self._schedule.remove(remote_name)

    def is_rclone_installed(self) -> bool:
        """Check if rclone is available."""
        return self._rclone().is_installed()

    def mount(self, remote_name: str, config_path: Optional[str] = None) -> str:
        """Mount the remote, returning a message describing the result."""
        rclone = self._rclone(config_path)
        return rclone.mount(remote_name, self.mount_point(remote_name))

    def unmount(self, remote_name: str) -> str:
        """Unmount the remote, returning a message describing the result."""
        return self._rclone().unmount(remote_name, self.mount_point(remote_name))

    def test_connection(
        self, remote_name: str, config_path: Optional[str] = None
    ) -> str:
        """Check that the remote can be reached."""
        return self._rclone(config_path).test_connection(remote_name)

    def _rclone(self, config_path: Optional[str] = None) -> Rclone:
        """
        Construct an rclone runner.

        rclone is only passed --config if a config file other than the default one was
        chosen, so that it otherwise applies its own lookup rules (e.g. $RCLONE_CONFIG).
        """
        if not config_path and self._settings.rclone.config != DEFAULT_CONFIG_PATH:
            config_path = self._settings.rclone.config

        return Rclone(
            self._mount_probe,
            binary=self._settings.rclone.binary,
            vfs_cache_mode=self._settings.rclone.vfs_cache_mode,
            timeout=self._settings.rclone.timeout,
            config_path=self.config_path(config_path) if config_path else None,
        )
