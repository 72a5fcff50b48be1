"""Host-side helpers: picking a plugin for a file, backup and restore.

``open_serializer`` is what an editor calls when the user opens a file.
Candidates are the registered plugins whose ``file_patterns`` match the
file name, tried in registration order.  A plugin that raises
``FormatError`` is disposed and the next one is tried; an
``UnsupportedVersionError`` ends the search because the file has been
recognised.

Example
-------
::

    from chanlist.host import backup_data_files, open_serializer

    with open_serializer("channels.zip") as serializer:
        backup_data_files(serializer, "backup/")
        print(serializer.get_file_information())
"""
from __future__ import annotations

import logging
import os
import shutil
from fnmatch import fnmatch
from pathlib import Path

from chanlist.config import Settings
from chanlist.errors import ArchiveIoError, FormatError, UnsupportedVersionError
from chanlist.plugins.registry import PluginRegistry, serializer_registry
from chanlist.serializer import SerializerBase

logger = logging.getLogger(__name__)


def _default_registry() -> PluginRegistry[SerializerBase]:
    import chanlist.formats  # noqa: F401  registers the built-in formats

    return serializer_registry


def candidate_serializers(
    path: str | os.PathLike[str],
    registry: PluginRegistry[SerializerBase] | None = None,
) -> list[tuple[str, type[SerializerBase]]]:
    """Return ``(name, class)`` pairs whose file patterns match *path*."""
    registry = registry if registry is not None else _default_registry()
    file_name = Path(path).name.lower()
    return [
        (name, cls)
        for name, cls in registry.items()
        if any(fnmatch(file_name, pattern.lower()) for pattern in cls.file_patterns)
    ]


def create_serializer(
    cls: type[SerializerBase],
    path: str | os.PathLike[str],
    settings: Settings | None = None,
) -> SerializerBase:
    """Instantiate *cls* for *path* and apply host *settings* to it."""
    settings = settings or Settings()
    serializer = cls(path, temp_root=settings.temp_root, temp_prefix=settings.temp_prefix)
    serializer.default_encoding = settings.default_encoding
    serializer.compress_archives = settings.compress_archives
    return serializer


def open_serializer(
    path: str | os.PathLike[str],
    registry: PluginRegistry[SerializerBase] | None = None,
    settings: Settings | None = None,
) -> SerializerBase:
    """Find a plugin that loads *path* and return it, loaded and with frozen features.

    The caller owns the returned serializer and must close it, ideally
    with a ``with`` block.

    Raises
    ------
    UnsupportedVersionError
        If a plugin recognised the file but not its version.
    FormatError
        If no registered plugin accepts the file.
    """
    candidates = candidate_serializers(path, registry)
    if not candidates:
        raise FormatError(path, "no registered format matches this file name")

    for name, cls in candidates:
        serializer = create_serializer(cls, path, settings)
        try:
            serializer.load()
        except UnsupportedVersionError:
            serializer.close()
            raise
        except FormatError as exc:
            serializer.close()
            logger.debug("Plugin %r rejected %s: %s", name, path, exc)
            continue
        except BaseException:
            serializer.close()
            raise
        serializer.features.freeze()
        logger.debug("Opened %s with plugin %r (%s)", path, name, serializer.display_name)
        return serializer

    raise FormatError(path)


def _copy_files(sources: list[Path], destination_dir: Path) -> list[Path]:
    try:
        destination_dir.mkdir(parents=True, exist_ok=True)
        copied = []
        for source in sources:
            target = destination_dir / source.name
            shutil.copy2(source, target)
            copied.append(target)
    except OSError as exc:
        raise ArchiveIoError(f"Cannot copy data files into {destination_dir}: {exc}") from exc
    return copied


def backup_data_files(
    serializer: SerializerBase, destination_dir: str | os.PathLike[str]
) -> list[Path]:
    """Copy every file from ``get_data_file_paths()`` into *destination_dir*.

    Returns
    -------
    list[Path]
        The copies, in the order the serializer listed them.

    Raises
    ------
    ArchiveIoError
        If a file cannot be copied.
    """
    sources = [Path(p) for p in serializer.get_data_file_paths()]
    copied = _copy_files(sources, Path(destination_dir))
    logger.debug("Backed up %d file(s) of %s", len(copied), serializer.file_name)
    return copied


def restore_data_files(
    serializer: SerializerBase, backup_dir: str | os.PathLike[str]
) -> list[Path]:
    """Copy a backup made by :func:`backup_data_files` back into place.

    Every file must be present in *backup_dir*; nothing is copied
    otherwise.

    Raises
    ------
    ArchiveIoError
        If a backed-up file is missing or cannot be copied.
    """
    backup = Path(backup_dir)
    targets = [Path(p) for p in serializer.get_data_file_paths()]
    missing = [t.name for t in targets if not (backup / t.name).is_file()]
    if missing:
        raise ArchiveIoError(f"Backup in {backup} is incomplete; missing: {', '.join(missing)}")

    restored = []
    for target in targets:
        restored.extend(_copy_files([backup / target.name], target.parent))
    return restored


__all__ = [
    "candidate_serializers",
    "create_serializer",
    "open_serializer",
    "backup_data_files",
    "restore_data_files",
]
