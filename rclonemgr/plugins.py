"""
Module that loads plugin descriptors and validates user input against them.

A plugin describes the form fields needed to configure one rclone backend type. Every
plugin is a directory with a config.json descriptor, like plugins/sftp/config.json:

{
    "name": "sftp",
    "display_name": "SFTP",
    "description": "SSH File Transfer Protocol",
    "version": "1.0.0",
    "author": "rclone-manager",
    "fields": [
        {"name": "host", "display_name": "Host", "type": "text", "required": true},
        {"name": "port", "display_name": "Port", "type": "number", "required": false,
         "default": "22"}
    ]
}

The name of the plugin is also the rclone backend type that is written to the config.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import math
import os
import re
from typing import Any, Dict, List, Mapping

import semver

from rclonemgr.constants import PLUGIN_DESCRIPTOR
from rclonemgr.errors import NotFoundError, ParseError, ReadError, ValidationError
from rclonemgr.logger import log


@dataclass(frozen=True)
class FieldSpec:
    """A single form field of a plugin."""

    name: str
    display_name: str
    type: str
    required: bool
    default: str = ""
    placeholder: str = ""

    @staticmethod
    def from_dict(obj: Any) -> FieldSpec:
        """Deserialize a field from its JSON representation."""
        if not isinstance(obj, dict):
            raise ParseError(f"expected field object, got {obj!r}")

        return FieldSpec(
            name=_get(obj, "name", str),
            display_name=_get(obj, "display_name", str),
            type=_get(obj, "type", str),
            required=_get(obj, "required", bool),
            default=_get(obj, "default", str, ""),
            placeholder=_get(obj, "placeholder", str, ""),
        )


@dataclass(frozen=True)
class PluginDescriptor:
    """Declarative schema of the fields needed to configure one backend type."""

    name: str
    display_name: str
    description: str
    version: str
    author: str
    fields: List[FieldSpec]

    # Reserved for future validation rules, not interpreted yet.
    validation: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(obj: Any) -> PluginDescriptor:
        """Deserialize and sanity check a plugin descriptor."""
        if not isinstance(obj, dict):
            raise ParseError("expected descriptor object")

        fields = [FieldSpec.from_dict(f) for f in _get(obj, "fields", list)]

        names = [f.name for f in fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ParseError(f"duplicate fields: {', '.join(duplicates)}")

        version = _get(obj, "version", str)
        try:
            semver.Version.parse(version, optional_minor_and_patch=True)
        except (ValueError, TypeError):
            raise ParseError(f"invalid version '{version}'")

        return PluginDescriptor(
            name=_get(obj, "name", str),
            display_name=_get(obj, "display_name", str),
            description=_get(obj, "description", str),
            version=version,
            author=_get(obj, "author", str),
            fields=fields,
            validation=_get(obj, "validation", dict, {}),
        )

    def with_defaults(self, submission: Mapping[str, str]) -> Dict[str, str]:
        """Fill in the defaults of fields that are missing from the submission."""
        filled = dict(submission)

        for spec in self.fields:
            if spec.name not in filled and spec.default:
                filled[spec.name] = spec.default

        return filled


def _get(obj: Dict[str, Any], key: str, kind: type, *fallback: Any) -> Any:
    """Get a key of the expected type from a JSON object, with an optional fallback."""
    if key not in obj:
        if fallback:
            return fallback[0]
        raise ParseError(f"missing key '{key}'")

    value = obj[key]

    if not isinstance(value, kind):
        raise ParseError(f"expected {kind.__name__} for '{key}', got {value!r}")

    return value


def validate_submission(
    plugin: PluginDescriptor, submission: Mapping[str, str]
) -> None:
    """
    Check user input against the fields of a plugin.

    Fields are checked in declaration order and the first problem is raised as a
    ValidationError, so the user always sees the error for the topmost field first.
    Submitted keys that the plugin doesn't declare are not checked.
    """
    for spec in plugin.fields:
        if spec.name not in submission:
            if spec.required:
                raise ValidationError(spec.name, f"missing field {spec.name}")
            continue

        value = submission[spec.name]

        if spec.type == "number" and not _is_number(value):
            raise ValidationError(spec.name, f"field {spec.name} must be a number")
        elif spec.type == "checkbox" and value not in ("true", "false"):
            message = f"field {spec.name} must be true or false"
            raise ValidationError(spec.name, message)


# Plain ASCII decimal notation, as rclone parses numeric options
NUMBER_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def _is_number(value: str) -> bool:
    if not NUMBER_PATTERN.fullmatch(value):
        return False

    # Overflows to infinity for exponents like 1e999
    return math.isfinite(float(value))


class PluginStore:
    """Loads plugin descriptors from the subdirectories of a plugin directory."""

    def __init__(self, root: str):
        """Construct a store for the plugins in the given directory."""
        self._root = root

    @property
    def root(self) -> str:
        """Directory that contains the plugins."""
        return self._root

    def load_plugins(self) -> List[PluginDescriptor]:
        """
        Load all plugins, ordered by directory name.

        Directories without a descriptor are skipped, but a malformed descriptor is an
        error, since skipping it would hide mistakes made while writing one.
        """
        try:
            entries = sorted(os.listdir(self._root))
        except FileNotFoundError:
            log.info(f"no plugin directory at {self._root}")
            return []
        except OSError as e:
            raise ReadError(f"failed to read plugin directory {self._root}: {e}")

        plugins = []

        for entry in entries:
            path = os.path.join(self._root, entry)

            if not os.path.isdir(path):
                continue

            descriptor_path = os.path.join(path, PLUGIN_DESCRIPTOR)

            if not os.path.exists(descriptor_path):
                log.debug(f"skipping {path} without {PLUGIN_DESCRIPTOR}")
                continue

            plugins.append(self._load(descriptor_path))

        log.debug(f"loaded {len(plugins)} plugins from {self._root}")

        return plugins

    def get_plugin(self, name: str) -> PluginDescriptor:
        """Load the plugin with the given name."""
        descriptor_path = os.path.join(self._root, name, PLUGIN_DESCRIPTOR)

        # Plugin names must not escape the plugin directory
        if name in ("", ".", "..") or os.path.basename(name) != name:
            raise NotFoundError(f"plugin {name} not found")

        if not os.path.isfile(descriptor_path):
            raise NotFoundError(f"plugin {name} not found")

        return self._load(descriptor_path)

    @staticmethod
    def _load(path: str) -> PluginDescriptor:
        try:
            with open(path, "r", encoding="utf-8") as f:
                obj = json.load(f)
        except json.JSONDecodeError as e:
            raise ParseError(f"failed to parse plugin config {path}: {e}")
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"failed to read plugin config {path}: {e}")

        try:
            return PluginDescriptor.from_dict(obj)
        except ParseError as e:
            raise ParseError(f"invalid plugin config {path}: {e}")
