"""Module that appends new remotes to an rclone config file."""

import os
from typing import Mapping, Set

import fasteners

from rclonemgr.constants import REMOTE_NAME_KEY
from rclonemgr.errors import ReadError, ValidationError, WriteError
from rclonemgr.logger import log
from rclonemgr.remotes import section_names


class RemoteConfigWriter:
    """
    Adds remote sections to the end of an rclone config file.

    Existing contents are never parsed back and rewritten, only appended to, so
    comments and formatting of hand-edited config files survive. The new section is
    composed in memory first and written with a single call while holding an
    inter-process lock next to the config file. The lock file, named after the
    config file with a .lock suffix, is left in place afterwards.
    """

    def __init__(self, path: str):
        """Construct a writer for the config file at the given path."""
        self._path = path

    @property
    def _lock_path(self) -> str:
        return self._path + ".lock"

    @staticmethod
    def render_section(plugin_name: str, submission: Mapping[str, str]) -> str:
        """Serialize a remote as an INI section, starting with a blank line."""
        remote_name = submission[REMOTE_NAME_KEY]

        lines = ["", f"[{remote_name}]", f"type = {plugin_name}"]

        for key, value in submission.items():
            if key != REMOTE_NAME_KEY:
                lines.append(f"{key} = {value}")

        return "\n".join(lines) + "\n"

    def add_remote(self, plugin_name: str, submission: Mapping[str, str]) -> str:
        """Append a section for the submitted remote and return its name."""
        self._check_submission(plugin_name, submission)

        remote_name = submission[REMOTE_NAME_KEY]
        section = self.render_section(plugin_name, submission).encode("utf-8")

        try:
            os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
        except OSError as e:
            raise WriteError(f"failed to create config directory: {e}")

        with fasteners.InterProcessLock(self._lock_path):
            if remote_name in self._existing_sections():
                raise ValidationError(
                    REMOTE_NAME_KEY, f"remote {remote_name} already exists"
                )

            try:
                with open(self._path, "ab") as f:
                    f.write(section)
            except OSError as e:
                raise WriteError(f"failed to write rclone config: {e}")

        log.info(f"added remote {remote_name} of type {plugin_name} to {self._path}")

        return remote_name

    def _existing_sections(self) -> Set[str]:
        try:
            with open(self._path, "r", encoding="utf-8-sig") as f:
                text = f.read()
        except FileNotFoundError:
            return set()
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"failed to read rclone config: {e}")

        return set(section_names(text))

    @staticmethod
    def _check_submission(plugin_name: str, submission: Mapping[str, str]) -> None:
        """Reject input that would produce a section that reads back differently."""
        remote_name = submission.get(REMOTE_NAME_KEY)

        if not remote_name:
            raise ValidationError(REMOTE_NAME_KEY, f"missing field {REMOTE_NAME_KEY}")

        unsafe = any(c in remote_name for c in "[]\r\n")
        if unsafe or remote_name != remote_name.strip():
            raise ValidationError(
                REMOTE_NAME_KEY, f"invalid remote name '{remote_name}'"
            )

        if not plugin_name or any(c in plugin_name for c in "\r\n"):
            raise ValidationError(None, f"invalid plugin name '{plugin_name}'")

        for key, value in submission.items():
            if key == REMOTE_NAME_KEY:
                continue

            # Keys must read back as the same key rather than as a comment or header
            if not key or key != key.strip() or key[0] in "#;[" or "=" in key:
                raise ValidationError(key, f"invalid key '{key}'")

            if key == "type":
                raise ValidationError(key, f"key '{key}' is reserved")

            if "\r" in value or "\n" in value:
                raise ValidationError(key, f"field {key} must be a single line")

            # Values are read back with surrounding whitespace removed
            if value != value.strip():
                message = f"field {key} must not start or end with whitespace"
                raise ValidationError(key, message)
