"""
Module that lists the remotes in an rclone config file.

The rclone config file is an INI-like file with one section per remote:

[photos]
type = sftp
host = example.com

Only sections with a type key are considered to be remotes. The file is scanned line by
line rather than loaded with configparser, since configparser rejects duplicate sections
and keys and would interpret things like % interpolation that rclone doesn't know about.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from rclonemgr.constants import DEFAULT_MOUNT_ROOT
from rclonemgr.errors import NotFoundError, ReadError
from rclonemgr.logger import log
from rclonemgr.mounts import MountProbe
from rclonemgr.paths import mount_dir
from rclonemgr.schedule import ScheduleStore


@dataclass
class Remote:
    """A remote from the config file along with its current mount and boot status."""

    name: str
    kind: str
    mount_point: str
    mounted: bool
    scheduled: bool


def _content_lines(text: str) -> Iterator[str]:
    """Yield the stripped lines of a config file that aren't blank or comments."""
    # Editors on Windows may save the file with a byte order mark
    if text.startswith("\ufeff"):
        text = text[1:]

    for line in text.splitlines():
        line = line.strip()

        if line and not line.startswith("#") and not line.startswith(";"):
            yield line


def _is_header(line: str) -> bool:
    return line.startswith("[") and line.endswith("]")


def section_names(text: str) -> List[str]:
    """Return the name of every section, with or without a type, without repeats."""
    names: Dict[str, None] = {}

    for line in _content_lines(text):
        if _is_header(line):
            names[line[1:-1]] = None

    return list(names)


def parse_sections(text: str) -> List[Tuple[str, str]]:
    """
    Return the (name, type) of every section with a type, in order of appearance.

    If a section name is used more than once, the last type wins and the section keeps
    the position where the name first appeared.
    """
    sections: Dict[str, str] = {}

    current_section: Optional[str] = None
    current_type = ""

    def close_section() -> None:
        if current_section and current_type:
            sections[current_section] = current_type

    for line in _content_lines(text):
        if _is_header(line):
            close_section()

            current_section = line[1:-1]
            current_type = ""
        elif line.startswith("type =") or line.startswith("type="):
            current_type = line.split("=", 1)[1].strip()

    # A truncated file still yields its last section
    close_section()

    return list(sections.items())


class RemoteConfigParser:
    """Turns the contents of an rclone config file into a list of remotes."""

    def __init__(
        self,
        mount_probe: MountProbe,
        schedule: ScheduleStore,
        mount_root: str = DEFAULT_MOUNT_ROOT,
        home: Optional[str] = None,
    ):
        """Construct a parser that checks remote status with the given probes."""
        self._mount_probe = mount_probe
        self._schedule = schedule
        self._mount_root = mount_root
        self._home = home

    def read(self, path: str) -> List[Remote]:
        """Read and parse the config file at the given path."""
        log.debug(f"looking for config at {path}")

        try:
            with open(path, "r", encoding="utf-8-sig") as f:
                text = f.read()
        except FileNotFoundError:
            raise NotFoundError(f"rclone config not found at {path}")
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"failed to read config from {path}: {e}")

        remotes = self.parse(text)
        log.debug(f"found {len(remotes)} remotes in {path}")

        return remotes

    def parse(self, text: str) -> List[Remote]:
        """Parse config file contents and look up the status of every remote."""
        return [self._remote(name, kind) for name, kind in parse_sections(text)]

    def _remote(self, name: str, kind: str) -> Remote:
        mount_point = mount_dir(name, self._mount_root, self._home)

        return Remote(
            name=name,
            kind=kind,
            mount_point=mount_point,
            mounted=self._mount_probe.is_mounted(mount_point),
            scheduled=self._is_scheduled(name),
        )

    def _is_scheduled(self, name: str) -> bool:
        """Check the schedule, but don't let a missing crontab break the listing."""
        try:
            return self._schedule.contains(name)
        except ReadError as e:
            log.warning(f"failed to check schedule of {name}: {e}")
            return False
