"""Semicolon-separated reference channel list.

A plain text format users keep as a master ordering to apply to other
devices.  The first line identifies the format and its version::

    #chanlist-ref,1
    TV;tv;1;Das Erste HD;S19.2E-1-1019-10301;0x0;0x1
    TV;tv;2;ZDF HD;S19.2E-1-1011-11110;4;0
    Radio;radio;;Bayern 3;S19.2E-1-1093-28403;;

Columns: list caption, signal type, program number, name, unique id,
flag bits and favorites mask.  Numeric columns accept decimal or
``0x`` hexadecimal and blank fields read as zero (or no number).  The
file is decoded with the serializer's default encoding unless it starts
with a UTF-8 byte order mark.
"""
from __future__ import annotations

import csv
import io
import logging
import os
from enum import IntFlag
from pathlib import Path
from typing import Any

from chanlist.archive import atomic_output
from chanlist.errors import FormatError, UnsupportedVersionError
from chanlist.features import ChannelNameEditMode, DeleteMode, Favorites
from chanlist.model import ChannelInfo, ChannelList, SignalSource
from chanlist.serializer import SerializerBase

logger = logging.getLogger(__name__)

MAGIC = "#chanlist-ref"
SUPPORTED_VERSIONS = ("1",)
DELIMITER = ";"
UTF8_BOM = b"\xef\xbb\xbf"


class _RowFlags(IntFlag):
    HIDDEN = 0x01
    SKIP = 0x02
    LOCK = 0x04
    ENCRYPTED = 0x08


class ReferenceCsvSerializer(SerializerBase):
    """Reads and writes ``#chanlist-ref`` text lists.

    Deleted channels are dropped from the file on save.
    """

    format_name = "Reference list"
    file_patterns = ("*.csv", "*.txt")

    def __init__(self, input_file: str | os.PathLike[str], **kwargs: Any) -> None:
        super().__init__(input_file, **kwargs)
        self._file_encoding: str | None = None

        features = self.features
        features.channel_name_edit = ChannelNameEditMode.ALL
        features.can_save_as = True
        features.can_edit_encrypted_flag = True
        features.allow_short_name_edit = False
        features.delete_mode = DeleteMode.PHYSICALLY
        features.max_favorite_lists = 8
        features.allow_gaps_in_fav_numbers = True

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def load(self) -> None:
        raw = Path(self.file_name).read_bytes()
        if raw.startswith(UTF8_BOM):
            encoding = "utf-8-sig"
        else:
            encoding = self.default_encoding
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError as exc:
            raise FormatError(self.file_name, f"cannot decode as {encoding}") from exc

        header = text.splitlines()[0] if text else ""
        if not header.strip():
            raise FormatError(self.file_name, "empty file")
        magic, _, version = header.strip().partition(",")
        if magic != MAGIC:
            raise FormatError(self.file_name)
        version = version.strip()
        if version not in SUPPORTED_VERSIONS:
            raise UnsupportedVersionError(f"{self.format_name} v{version}", self.file_name)

        self.file_format_version = version
        self._file_encoding = encoding
        self.data_root.clear()

        # quoted names may contain line breaks
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=DELIMITER)
        next(reader)
        for row in reader:
            if not row or not any(cell.strip() for cell in row):
                continue
            row += [""] * (7 - len(row))
            caption = row[0].strip()
            if not caption:
                logger.debug(
                    "%s:%d: row without list caption skipped", self.file_name, reader.line_num
                )
                continue
            channel_list = self.data_root.get_channel_list(caption)
            if channel_list is None:
                channel_list = self.data_root.add_channel_list(ChannelList(caption))
            channel_list.add_channel(self._read_channel(row))

        logger.debug(
            "Loaded %d channel(s) in %d list(s) from %s",
            self.data_root.channel_count,
            len(self.data_root.channel_lists),
            self.file_name,
        )

    def _read_channel(self, row: list[str]) -> ChannelInfo:
        flags = _RowFlags(self._parse_int(row[5]) & 0x0F)
        program_nr = self._parse_int(row[2]) if row[2].strip() else None
        try:
            source = SignalSource(row[1].strip().lower())
        except ValueError:
            source = SignalSource.TV
        return ChannelInfo(
            uid=row[4].strip(),
            name=row[3],
            old_program_nr=program_nr,
            signal_source=source,
            hidden=bool(flags & _RowFlags.HIDDEN),
            skip=bool(flags & _RowFlags.SKIP),
            lock=bool(flags & _RowFlags.LOCK),
            encrypted=bool(flags & _RowFlags.ENCRYPTED),
            favorites=Favorites(self._parse_int(row[6]) & int(self.features.supported_favorites)),
        )

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self) -> None:
        buffer = io.StringIO()
        buffer.write(f"{MAGIC},{self.file_format_version or SUPPORTED_VERSIONS[-1]}\n")
        writer = csv.writer(buffer, delimiter=DELIMITER, lineterminator="\n")
        for channel_list in self.data_root.channel_lists:
            for channel in channel_list.channels:
                if channel.is_deleted:
                    continue
                writer.writerow(self._channel_row(channel_list.caption, channel))

        encoding = self._file_encoding or self.default_encoding
        data = buffer.getvalue().encode(encoding)
        with atomic_output(self.output_file_name) as tmp_path:
            tmp_path.write_bytes(data)
        logger.debug("Saved %s", self.output_file_name)

    @staticmethod
    def _channel_row(caption: str, channel: ChannelInfo) -> list[str]:
        flags = _RowFlags(0)
        if channel.hidden:
            flags |= _RowFlags.HIDDEN
        if channel.skip:
            flags |= _RowFlags.SKIP
        if channel.lock:
            flags |= _RowFlags.LOCK
        if channel.encrypted:
            flags |= _RowFlags.ENCRYPTED
        program_nr = channel.new_program_nr
        return [
            caption,
            channel.signal_source.value,
            "" if program_nr is None else str(program_nr),
            channel.name,
            channel.uid,
            str(int(flags)),
            str(int(channel.favorites)),
        ]


__all__ = ["ReferenceCsvSerializer", "MAGIC", "SUPPORTED_VERSIONS"]
