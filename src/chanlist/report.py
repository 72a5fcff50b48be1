"""Plain-text diagnostics report for a loaded channel data set.

The report is what support staff ask users to paste when a file does not
load as expected.  Tooling parses it, so the layout is stable: a file name
header, a blank line, then one block per channel list in list order, each
block ending with a blank line.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from chanlist.model import ChannelInfo, DataRoot

LIST_HEADER_SUFFIX = "-----"


@dataclass(frozen=True)
class ChannelFlagCounts:
    """Number of channels carrying each editable flag."""

    deleted: int = 0
    hidden: int = 0
    skipped: int = 0
    locked: int = 0


def count_channel_flags(channels: Iterable[ChannelInfo]) -> ChannelFlagCounts:
    """Count deleted, hidden, skipped and locked channels.

    A channel carrying several flags is counted once for each of them.
    """
    deleted = hidden = skipped = locked = 0
    for channel in channels:
        if channel.is_deleted:
            deleted += 1
        if channel.hidden:
            hidden += 1
        if channel.skip:
            skipped += 1
        if channel.lock:
            locked += 1
    return ChannelFlagCounts(deleted=deleted, hidden=hidden, skipped=skipped, locked=locked)


def build_file_information(file_name: str, data_root: DataRoot) -> str:
    """Render the diagnostics report for *data_root*.

    Parameters
    ----------
    file_name:
        Path shown in the header line.
    data_root:
        The loaded channel lists.

    Returns
    -------
    str
        The report, ``\\n``-terminated lines.
    """
    lines = [f"File name: {file_name}", ""]
    for channel_list in data_root.channel_lists:
        counts = count_channel_flags(channel_list.channels)
        lines.extend(
            [
                f"{channel_list.short_caption}{LIST_HEADER_SUFFIX}",
                f"number of channels: {channel_list.count}",
                f"number of predefined channel numbers: {channel_list.preset_program_nr_count}",
                f"number of duplicate program numbers: {channel_list.duplicate_prog_nr_count}",
                f"number of duplicate channel identifiers: {channel_list.duplicate_uid_count}",
                f"number of deleted channels: {counts.deleted}",
                f"number of hidden channels: {counts.hidden}",
                f"number of skipped channels: {counts.skipped}",
                f"number of locked channels: {counts.locked}",
                "",
            ]
        )
    return "\n".join(lines) + "\n"


__all__ = ["LIST_HEADER_SUFFIX", "ChannelFlagCounts", "count_channel_flags", "build_file_information"]
