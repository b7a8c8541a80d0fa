"""Module for configuration variables with defaults that are overridable by a file."""

from __future__ import annotations

from configparser import ConfigParser, SectionProxy
from dataclasses import dataclass, field
import os

from rclonemgr.constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_MOUNT_ROOT,
    DEFAULT_TIMEOUT,
    DEFAULT_VFS_CACHE_MODE,
)
from rclonemgr.logger import log
from rclonemgr.paths import expand_home


@dataclass
class RcloneSettings:
    """Configuration variables related to invoking rclone."""

    binary: str = "rclone"
    config: str = DEFAULT_CONFIG_PATH
    vfs_cache_mode: str = DEFAULT_VFS_CACHE_MODE
    timeout: int = DEFAULT_TIMEOUT

    @staticmethod
    def load(section: SectionProxy) -> RcloneSettings:
        """Load overridden variables from a section within a config file."""
        settings = RcloneSettings()

        settings.binary = section.get("binary", fallback=settings.binary)
        settings.config = section.get("config", fallback=settings.config)
        settings.vfs_cache_mode = section.get(
            "vfs_cache_mode", fallback=settings.vfs_cache_mode
        )
        settings.timeout = section.getint("timeout", fallback=settings.timeout)

        return settings


@dataclass
class MountSettings:
    """Configuration variables related to mount points."""

    root: str = DEFAULT_MOUNT_ROOT

    @staticmethod
    def load(section: SectionProxy) -> MountSettings:
        """Load overridden variables from a section within a config file."""
        settings = MountSettings()

        settings.root = section.get("root", fallback=settings.root)

        return settings


@dataclass
class PluginSettings:
    """
    Configuration variables related to plugin descriptors.

    The plugin directory defaults to "plugins" in the working directory at the time the
    settings are created. It is resolved once here so that nothing else depends on the
    working directory.
    """

    path: str = field(default_factory=lambda: os.path.abspath("plugins"))

    @staticmethod
    def load(section: SectionProxy) -> PluginSettings:
        """Load overridden variables from a section within a config file."""
        settings = PluginSettings()

        path = section.get("path", fallback=None)

        if path is not None:
            settings.path = os.path.abspath(expand_home(path))

        return settings


@dataclass
class Settings:
    """Configuration variables."""

    rclone: RcloneSettings = field(default_factory=RcloneSettings)
    mounts: MountSettings = field(default_factory=MountSettings)
    plugins: PluginSettings = field(default_factory=PluginSettings)

    @staticmethod
    def load(filename: str) -> Settings:
        """Load overridden configuration variables from a settings file."""
        parser = ConfigParser()

        settings = Settings()

        try:
            with open(filename, "r") as f:
                parser.read_string(f.read(), filename)

            if "rclone" in parser:
                settings.rclone = RcloneSettings.load(parser["rclone"])
            if "mounts" in parser:
                settings.mounts = MountSettings.load(parser["mounts"])
            if "plugins" in parser:
                settings.plugins = PluginSettings.load(parser["plugins"])
        except FileNotFoundError:
            log.info(f"no settings file at {filename}")
        except Exception as e:
            # An unreadable settings file is not considered a fatal error since we can
            # fall back to defaults.
            log.error(f"failed to read settings file {filename}: {e}")
        else:
            log.info(f"loaded settings: {settings}")

        return settings
