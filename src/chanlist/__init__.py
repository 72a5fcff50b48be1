"""chanlist — format plugin contract for channel-list editors.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import chanlist

    with chanlist.open_serializer("channels.zip") as serializer:
        if serializer.features.can_hide_channels:
            ...
        print(serializer.get_file_information())
        serializer.save()

    chanlist.parse_int("0x1A")
    26
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from chanlist.errors import (
    ArchiveIoError,
    ChanlistError,
    FormatError,
    UnsupportedVersionError,
)
from chanlist.features import DeleteMode, FavoritesMode, FavoritesPolicy, SupportedFeatures
from chanlist.numeric import parse_decimal, parse_int, parse_long
from chanlist.serializer import SerializerBase

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from chanlist.config import Settings
    from chanlist.plugins.registry import PluginRegistry


def open_serializer(
    path: str,
    registry: "PluginRegistry[SerializerBase] | None" = None,
    settings: "Settings | None" = None,
) -> SerializerBase:
    """Open *path* with the first registered plugin that accepts it.

    Parameters
    ----------
    path:
        The channel-list file.
    registry:
        Plugins to try; defaults to the built-in formats.
    settings:
        Host settings applied to the serializer.

    Returns
    -------
    SerializerBase
        A loaded serializer with frozen features.  The caller must close it.

    Raises
    ------
    chanlist.FormatError
        If no plugin accepts the file.
    chanlist.UnsupportedVersionError
        If the file was recognised but its version is not supported.
    """
    from chanlist.host import open_serializer as _open_serializer

    return _open_serializer(path, registry=registry, settings=settings)


def list_formats() -> list[str]:
    """Return the names of all registered format plugins."""
    from chanlist.host import _default_registry

    return _default_registry().list_plugins()


__all__ = [
    "__version__",
    "open_serializer",
    "list_formats",
    "parse_int",
    "parse_long",
    "parse_decimal",
    "SerializerBase",
    "SupportedFeatures",
    "FavoritesPolicy",
    "FavoritesMode",
    "DeleteMode",
    "ChanlistError",
    "FormatError",
    "UnsupportedVersionError",
    "ArchiveIoError",
]
