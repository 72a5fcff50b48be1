"""Error types surfaced by chanlist serializers and helpers.

Hosts try plugins in turn by catching ``FormatError`` (try the next plugin) and
``UnsupportedVersionError`` (stop trying and show the detected version).
Numeric field parsing never raises; see ``chanlist.numeric``.
"""
from __future__ import annotations

from pathlib import Path

ERR_UNKNOWN_FORMAT = "unknown channel list format"
ERR_UNSUPPORTED_FORMAT = "Detected a known but unsupported channel list format: {0}"


class ChanlistError(Exception):
    """Base class for every error raised by chanlist itself."""


class FormatError(ChanlistError, ValueError):
    """The file is not an instance of the format a serializer handles.

    Parameters
    ----------
    path:
        The file that was rejected, if known.
    detail:
        Optional extra context appended to the message.
    """

    def __init__(self, path: str | Path | None = None, detail: str = "") -> None:
        self.path = str(path) if path is not None else None
        self.detail = detail
        message = ERR_UNKNOWN_FORMAT
        if self.path:
            message = f"{message}: {self.path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnsupportedVersionError(FormatError):
    """The format was recognised but this variant or version is not handled.

    Parameters
    ----------
    version:
        The detected version or variant string, shown to the user.
    path:
        The file that was rejected, if known.
    """

    def __init__(self, version: str, path: str | Path | None = None) -> None:
        self.version = version
        self.path = str(path) if path is not None else None
        self.detail = ""
        # skip FormatError.__init__; the message differs
        ChanlistError.__init__(self, ERR_UNSUPPORTED_FORMAT.format(version))


class ArchiveIoError(ChanlistError, OSError):
    """Staging, packaging or replacing a file on disk failed."""


class FeaturesFrozenError(ChanlistError, AttributeError):
    """A capability switch was modified after the features were frozen."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Cannot change {name!r}: supported features are read-only "
            "once the serializer has been handed to the host."
        )
        # AttributeError.__init__ resets name
        self.name = name


class SaveAsNotSupportedError(ChanlistError, ValueError):
    """A save-as path was assigned to a serializer that can only save in place."""

    def __init__(self, format_name: str, path: str | Path) -> None:
        self.format_name = format_name
        self.path = str(path)
        super().__init__(
            f"The {format_name!r} format can only be saved in place; "
            f"cannot save as {self.path!r}."
        )


class SettingsError(ChanlistError, ValueError):
    """A configuration file could not be read or contains invalid values."""


__all__ = [
    "ERR_UNKNOWN_FORMAT",
    "ERR_UNSUPPORTED_FORMAT",
    "ChanlistError",
    "FormatError",
    "UnsupportedVersionError",
    "ArchiveIoError",
    "FeaturesFrozenError",
    "SaveAsNotSupportedError",
    "SettingsError",
]
