"""Settings shared by serializers and the command line.

Settings come from an optional YAML file; every key is optional and
falls back to the defaults below.

Example ``chanlist.yaml``::

    default_encoding: cp1252
    temp_prefix: chanlist_
    compress_archives: true

The command line reads the file named by ``--config`` or the
``CHANLIST_CONFIG`` environment variable.
"""
from __future__ import annotations

import codecs
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from chanlist.archive import DEFAULT_TEMP_PREFIX
from chanlist.errors import SettingsError

CONFIG_ENV_VAR = "CHANLIST_CONFIG"
DEFAULT_ENCODING = "iso-8859-9"
DEFAULT_ENTRYPOINT_GROUP = "chanlist.serializers"


@dataclass(frozen=True)
class Settings:
    """Host-level defaults applied to every serializer the host opens.

    Parameters
    ----------
    default_encoding:
        Text encoding for formats without an encoding marker.
    temp_root:
        Directory for staged archives; ``None`` uses the system default.
    temp_prefix:
        Name prefix for staged archive directories.
    compress_archives:
        Whether zip-based formats deflate their entries on save.
    plugins_entrypoint_group:
        Entry-point group scanned for third-party serializers.
    """

    default_encoding: str = DEFAULT_ENCODING
    temp_root: str | None = None
    temp_prefix: str = DEFAULT_TEMP_PREFIX
    compress_archives: bool = True
    plugins_entrypoint_group: str = DEFAULT_ENTRYPOINT_GROUP

    def __post_init__(self) -> None:
        try:
            codecs.lookup(self.default_encoding)
        except LookupError as exc:
            raise SettingsError(f"Unknown default_encoding {self.default_encoding!r}") from exc

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "Settings":
        """Build settings from a parsed YAML mapping, checking keys and types."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise SettingsError(f"Unknown settings key(s): {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for name, value in data.items():
            if name == "compress_archives":
                if not isinstance(value, bool):
                    raise SettingsError(f"{name} must be true or false, got {value!r}")
            elif name == "temp_root":
                if value is not None and not isinstance(value, str):
                    raise SettingsError(f"{name} must be a path string, got {value!r}")
            elif not isinstance(value, str) or not value:
                raise SettingsError(f"{name} must be a non-empty string, got {value!r}")
            values[name] = value
        return cls(**values)


def load_settings(path: str | os.PathLike[str] | None = None) -> Settings:
    """Load settings from a YAML file.

    Parameters
    ----------
    path:
        The YAML file.  ``None`` falls back to ``$CHANLIST_CONFIG``; if
        neither is set the defaults are returned.

    Raises
    ------
    SettingsError
        If the file cannot be read, is not a YAML mapping, or holds
        unknown keys or values of the wrong type.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return Settings()
        path = env_path

    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Cannot read settings file {config_path}: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SettingsError(f"Invalid YAML in {config_path}: {exc}") from exc

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise SettingsError(f"{config_path} must contain a mapping at the top level")
    return Settings.from_mapping(data)


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_ENCODING",
    "DEFAULT_ENTRYPOINT_GROUP",
    "Settings",
    "load_settings",
]
