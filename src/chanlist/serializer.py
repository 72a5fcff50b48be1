"""The contract every channel-list format plugin implements.

A serializer owns one input file.  The host drives it through a fixed
lifecycle without knowing anything format specific::

    with SomeSerializer("channels.zip") as serializer:
        serializer.load()
        serializer.features.freeze()
        ...                       # user edits serializer.data_root
        serializer.save_as_file_name = "edited.zip"
        serializer.save()

``SerializerBase`` supplies the shared machinery: the capability model,
default encoding, archive staging, tolerant numeric parsing and the
diagnostics report.  Subclasses implement :meth:`SerializerBase.load` and
:meth:`SerializerBase.save` and override the rest only where the format
differs.  Code that does not inherit can satisfy the
:class:`ChannelListSerializer` protocol and delegate to the
module-level helpers instead.

Disposal is explicit: use a ``with`` block or call :meth:`close`.  An
instance collected while it still has a staged archive directory removes
the directory and emits a ``ResourceWarning``.
"""
from __future__ import annotations

import codecs
import logging
import os
from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from types import TracebackType
from typing import Any, ClassVar, Protocol, runtime_checkable

from chanlist import numeric
from chanlist.archive import DEFAULT_TEMP_PREFIX, ArchiveStager
from chanlist.config import DEFAULT_ENCODING
from chanlist.errors import ArchiveIoError, SaveAsNotSupportedError
from chanlist.features import SupportedFeatures
from chanlist.model import DataRoot
from chanlist.report import build_file_information

logger = logging.getLogger(__name__)


@runtime_checkable
class ChannelListSerializer(Protocol):
    """Structural view of the serializer contract."""

    @property
    def file_name(self) -> str: ...

    @property
    def features(self) -> SupportedFeatures: ...

    @property
    def data_root(self) -> DataRoot: ...

    def load(self) -> None: ...

    def save(self) -> None: ...

    def get_data_file_paths(self) -> list[str]: ...

    def get_file_information(self) -> str: ...

    def clean_up_channel_data(self) -> str: ...

    def show_device_settings(self, parent_window: Any) -> None: ...

    def close(self) -> None: ...


def default_data_file_paths(serializer: ChannelListSerializer) -> list[str]:
    """Return just the primary file, the default backup set."""
    return [serializer.file_name]


def default_file_information(serializer: ChannelListSerializer) -> str:
    """Return the standard diagnostics report for *serializer*."""
    return build_file_information(serializer.file_name, serializer.data_root)


class SerializerBase(ABC):
    """Abstract base class for channel-list format plugins.

    Parameters
    ----------
    input_file:
        Path of the channel list to load.
    temp_root:
        Directory for staged archives; ``None`` uses the system default.
    temp_prefix:
        Name prefix for staged archive directories.

    Class attributes
    ----------------
    format_name:
        Human readable format name, shown by the host.
    file_patterns:
        Glob patterns of file names this plugin is worth trying on.
    """

    format_name: ClassVar[str] = "unknown"
    file_patterns: ClassVar[tuple[str, ...]] = ("*",)

    def __init__(
        self,
        input_file: str | os.PathLike[str],
        *,
        temp_root: str | os.PathLike[str] | None = None,
        temp_prefix: str = DEFAULT_TEMP_PREFIX,
    ) -> None:
        self._file_name = os.fspath(input_file)
        self._save_as_file_name: str | None = None
        self._default_encoding = DEFAULT_ENCODING
        self._features = SupportedFeatures()
        self._stager = ArchiveStager(temp_root=temp_root, prefix=temp_prefix)
        self._closed = False
        self.compress_archives = True
        self.data_root = DataRoot()
        self.tv_model_name = ""
        self.file_format_version = ""

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    def load(self) -> None:
        """Read :attr:`file_name` and populate :attr:`data_root`.

        Raises
        ------
        FormatError
            If the file is not an instance of this format.
        UnsupportedVersionError
            If the format is recognised but the version is not handled.
        ArchiveIoError
            If an archive cannot be staged.
        """

    @abstractmethod
    def save(self) -> None:
        """Write :attr:`data_root` to :attr:`output_file_name`.

        Implementations must leave the previous file intact when the
        write fails; :func:`chanlist.archive.atomic_output` does this.
        """

    def close(self) -> None:
        """Release the staged archive directory.  Safe to call repeatedly.

        Every call releases, so an instance that was loaded again after
        closing still cleans up its new staged directory.
        """
        if not self._closed:
            logger.debug("Closing %s for %s", type(self).__name__, self._file_name)
        self._closed = True
        self._stager.release()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "SerializerBase":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Overridable behaviour
    # ------------------------------------------------------------------

    def get_data_file_paths(self) -> list[str]:
        """Return every file to copy together for backup and restore.

        The first entry is always the primary file.
        """
        return default_data_file_paths(self)

    def get_file_information(self) -> str:
        """Return the plain-text diagnostics report for the loaded data."""
        return default_file_information(self)

    def clean_up_channel_data(self) -> str:
        """Normalize format-specific quirks; return a description of changes."""
        return ""

    def show_device_settings(self, parent_window: Any) -> None:
        """Show device-specific settings.  *parent_window* may be ``None``."""

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def file_name(self) -> str:
        return self._file_name

    @property
    def save_as_file_name(self) -> str | None:
        return self._save_as_file_name

    @save_as_file_name.setter
    def save_as_file_name(self, path: str | os.PathLike[str] | None) -> None:
        if path is None:
            self._save_as_file_name = None
            return
        new_path = os.fspath(path)
        if not self._features.can_save_as and Path(new_path) != Path(self._file_name):
            raise SaveAsNotSupportedError(self.format_name, new_path)
        self._save_as_file_name = new_path

    @property
    def output_file_name(self) -> str:
        """Where :meth:`save` writes: the save-as path if set, else the input."""
        return self._save_as_file_name or self._file_name

    @property
    def default_encoding(self) -> str:
        """Codec name used when a file carries no encoding marker."""
        return self._default_encoding

    @default_encoding.setter
    def default_encoding(self, encoding: str) -> None:
        codecs.lookup(encoding)
        self._default_encoding = encoding

    @property
    def features(self) -> SupportedFeatures:
        return self._features

    @property
    def display_name(self) -> str:
        if self.file_format_version:
            return f"{self.format_name} {self.file_format_version}"
        return self.format_name

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    @property
    def temp_path(self) -> Path | None:
        """The staged archive directory, if any."""
        return self._stager.path

    def _unzip_file_to_temp_folder(self) -> Path:
        """Stage :attr:`file_name` as a zip archive and return the directory."""
        return self._stager.stage(self._file_name)

    def _zip_to_output_file(self, compress: bool = True) -> None:
        """Package the staged directory into :attr:`output_file_name`."""
        if self._stager.path is None:
            raise ArchiveIoError(f"{self.format_name}: no archive staged for {self._file_name}")
        self._stager.package(self.output_file_name, compress=compress)

    def _delete_temp_path(self) -> None:
        self._stager.release()

    @staticmethod
    def _parse_int(text: str | None) -> int:
        return numeric.parse_int(text)

    @staticmethod
    def _parse_long(text: str | None) -> int:
        return numeric.parse_long(text)

    @staticmethod
    def _parse_decimal(text: str | None) -> Decimal:
        return numeric.parse_decimal(text)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(file_name={self._file_name!r})"


__all__ = [
    "ChannelListSerializer",
    "SerializerBase",
    "default_data_file_paths",
    "default_file_information",
]
