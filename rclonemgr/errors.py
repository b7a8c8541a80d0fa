"""
Exceptions raised by rclone-manager.

Every expected failure derives from ManagerError so that the host (the command-line
interface) can present it to the user as a message instead of a traceback.
"""

from typing import Optional


class ManagerError(Exception):
    """Base class for expected failures."""


class HomeDirectoryError(ManagerError):
    """The home directory could not be determined from the environment."""


class NotFoundError(ManagerError):
    """An expected file, like the rclone config or a plugin descriptor, is missing."""


class ReadError(ManagerError):
    """A file or the crontab could not be read."""


class WriteError(ManagerError):
    """A file or the crontab could not be written."""


class ParseError(ManagerError):
    """A structured file, like a plugin descriptor, is malformed."""


class ValidationError(ManagerError):
    """User input does not match the schema of a plugin."""

    def __init__(self, field: Optional[str], message: str):
        """Construct with the name of the offending field and a readable message."""
        super().__init__(message)
        self.field = field


class CommandError(ManagerError):
    """An external tool like rclone or fusermount failed."""
