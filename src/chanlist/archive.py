"""Archive staging for zip-packaged channel-list formats.

Several TV vendors ship their channel list as a zip archive holding XML
or database files.  A serializer stages such an archive into a private
temporary directory, edits the files in place, and packages the
directory back into a zip on save.

Usage
-----
::

    from chanlist.archive import ArchiveStager

    stager = ArchiveStager()
    try:
        root = stager.stage("channels.zip")
        (root / "channels.xml").write_text(updated_xml, encoding="utf-8")
        stager.package("channels.zip", compress=True)
    finally:
        stager.release()

Each stager owns at most one staged directory.  ``release()`` never
raises.  A stager that is garbage collected while a directory is still
staged removes it and emits a ``ResourceWarning``, the same way
``tempfile.TemporaryDirectory`` does.
"""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
import warnings
import weakref
import zipfile
import zlib
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from chanlist.errors import ArchiveIoError

logger = logging.getLogger(__name__)

DEFAULT_TEMP_PREFIX = "chanlist_"

# zipfile surfaces damaged, truncated, encrypted and exotic entries through these
_EXTRACT_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    RuntimeError,
    NotImplementedError,
    OSError,
)


def _remove_path(path: Path) -> None:
    """Delete *path* recursively, logging instead of raising on failure."""
    try:
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()
    except OSError as exc:
        logger.debug("Could not remove staged path %s: %s", path, exc)


def _implicit_cleanup(path: Path, warn_message: str) -> None:
    warnings.warn(warn_message, ResourceWarning, stacklevel=2)
    _remove_path(path)


@contextmanager
def atomic_output(path: str | os.PathLike[str]) -> Iterator[Path]:
    """Yield a temporary sibling of *path* that replaces it on success.

    The temporary file lives in the destination directory so the final
    ``os.replace`` is a same-filesystem rename.  If the body raises, the
    temporary file is removed and *path* is left untouched.

    Raises
    ------
    ArchiveIoError
        If the temporary file cannot be created or the replacement fails.
    """
    target = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
    except OSError as exc:
        raise ArchiveIoError(f"Cannot create a temporary file next to {target}: {exc}") from exc
    os.close(fd)
    tmp_path = Path(tmp_name)

    try:
        yield tmp_path
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    try:
        os.replace(tmp_path, target)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise ArchiveIoError(f"Cannot replace {target}: {exc}") from exc
    logger.debug("Replaced %s", target)


class ArchiveStager:
    """Owns one temporary extraction directory for a zip-based format.

    Parameters
    ----------
    temp_root:
        Directory under which staged directories are created.  Defaults
        to the system temporary directory.
    prefix:
        Name prefix for staged directories.
    """

    def __init__(
        self,
        temp_root: str | os.PathLike[str] | None = None,
        prefix: str = DEFAULT_TEMP_PREFIX,
    ) -> None:
        self._temp_root = Path(temp_root) if temp_root is not None else None
        self._prefix = prefix
        self._path: Path | None = None
        self._finalizer: weakref.finalize | None = None

    @property
    def path(self) -> Path | None:
        """The staged directory, or ``None`` when nothing is staged."""
        return self._path

    @property
    def is_staged(self) -> bool:
        return self._path is not None

    def stage(self, source_file: str | os.PathLike[str]) -> Path:
        """Extract the zip archive *source_file* into a fresh directory.

        Any previously staged directory is released first.  If extraction
        fails, the new directory stays staged so that :meth:`release`
        removes whatever was written.

        Returns
        -------
        Path
            The staged directory.

        Raises
        ------
        ArchiveIoError
            If the directory cannot be created or the archive cannot be
            read or extracted.
        """
        self.release()
        try:
            path = Path(tempfile.mkdtemp(prefix=self._prefix, dir=self._temp_root))
        except OSError as exc:
            raise ArchiveIoError(f"Cannot create staging directory: {exc}") from exc

        self._path = path
        self._finalizer = weakref.finalize(
            self,
            _implicit_cleanup,
            path,
            f"Implicitly cleaning up staged archive directory {path}",
        )
        logger.debug("Staging %s into %s", source_file, path)

        try:
            with zipfile.ZipFile(source_file) as archive:
                archive.extractall(path)
        except _EXTRACT_ERRORS as exc:
            raise ArchiveIoError(f"Cannot extract {source_file}: {exc}") from exc
        return path

    def package(self, destination_file: str | os.PathLike[str], compress: bool = True) -> None:
        """Zip the full contents of the staged directory into *destination_file*.

        The archive is written next to the destination and renamed over it
        only once complete, so a failed write leaves the old file intact.

        Parameters
        ----------
        destination_file:
            Archive to create or overwrite.
        compress:
            ``True`` for deflate at the highest level, ``False`` to store
            entries uncompressed.

        Raises
        ------
        ArchiveIoError
            If nothing is staged or the archive cannot be written.
        """
        root = self._path
        if root is None:
            raise ArchiveIoError("No archive is staged; call stage() first.")

        if compress:
            compression, level = zipfile.ZIP_DEFLATED, 9
        else:
            compression, level = zipfile.ZIP_STORED, None

        with atomic_output(destination_file) as tmp_path:
            try:
                with zipfile.ZipFile(
                    tmp_path, "w", compression=compression, compresslevel=level
                ) as archive:
                    for entry in sorted(root.rglob("*")):
                        if entry.is_dir() and any(entry.iterdir()):
                            continue
                        archive.write(entry, entry.relative_to(root).as_posix())
            except OSError as exc:
                raise ArchiveIoError(f"Cannot write archive {destination_file}: {exc}") from exc
        logger.debug("Packaged %s into %s (compress=%s)", root, destination_file, compress)

    def release(self) -> None:
        """Remove the staged directory if there is one.  Never raises."""
        finalizer, self._finalizer = self._finalizer, None
        path, self._path = self._path, None
        if finalizer is not None:
            finalizer.detach()
        if path is not None:
            logger.debug("Releasing staged directory %s", path)
            _remove_path(path)

    def __repr__(self) -> str:
        return f"ArchiveStager(path={str(self._path) if self._path else None!r})"


__all__ = ["DEFAULT_TEMP_PREFIX", "ArchiveStager", "atomic_output"]
