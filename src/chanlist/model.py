"""Minimal in-memory channel data model.

Serializers fill a :class:`DataRoot` with :class:`ChannelList` objects on
``load()`` and write them back on ``save()``.  Only the parts every format
needs live here: identity, numbering and the deleted/hidden/skip/lock
flags that the diagnostics report counts.  Sorting and favorites editing
belong to the host application.
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from chanlist.features import Favorites


class SignalSource(Enum):
    """Broad channel type, used for TV-before-radio-before-data ordering."""

    TV = "tv"
    RADIO = "radio"
    DATA = "data"


@dataclass
class ChannelInfo:
    """One channel record.

    Parameters
    ----------
    uid:
        Identifier that is stable across reloads, e.g. ``"S19.2E-1-1019-10301"``.
    name:
        Display name.
    old_program_nr:
        The preset program number as found in the file, or ``None`` when
        the record has no number.
    new_program_nr:
        Number assigned by the user; defaults to ``old_program_nr``.
    """

    uid: str
    name: str
    old_program_nr: int | None = None
    new_program_nr: int | None = None
    short_name: str = ""
    signal_source: SignalSource = SignalSource.TV
    is_deleted: bool = False
    hidden: bool = False
    skip: bool = False
    lock: bool = False
    encrypted: bool = False
    favorites: Favorites = Favorites(0)

    def __post_init__(self) -> None:
        if self.new_program_nr is None:
            self.new_program_nr = self.old_program_nr


@dataclass
class ChannelList:
    """An ordered list of channels sharing one numbering space."""

    caption: str
    short_caption: str = ""
    channels: list[ChannelInfo] = field(default_factory=list)
    preset_program_nr_count: int = field(default=0, init=False)
    duplicate_prog_nr_count: int = field(default=0, init=False)
    duplicate_uid_count: int = field(default=0, init=False)
    _uids: set[str] = field(default_factory=set, init=False, repr=False)
    _program_nrs: set[int] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.short_caption:
            self.short_caption = self.caption
        initial, self.channels = self.channels, []
        for channel in initial:
            self.add_channel(channel)

    def add_channel(self, channel: ChannelInfo) -> None:
        """Append *channel*, updating the preset and duplicate counters."""
        if channel.uid in self._uids:
            self.duplicate_uid_count += 1
        else:
            self._uids.add(channel.uid)

        nr = channel.old_program_nr
        if nr is not None:
            self.preset_program_nr_count += 1
            if nr in self._program_nrs:
                self.duplicate_prog_nr_count += 1
            else:
                self._program_nrs.add(nr)

        self.channels.append(channel)

    @property
    def count(self) -> int:
        return len(self.channels)

    def __len__(self) -> int:
        return len(self.channels)

    def __iter__(self) -> Iterator[ChannelInfo]:
        return iter(self.channels)


@dataclass
class DataRoot:
    """All channel lists loaded from one file, in file order."""

    channel_lists: list[ChannelList] = field(default_factory=list)

    def add_channel_list(self, channel_list: ChannelList) -> ChannelList:
        self.channel_lists.append(channel_list)
        return channel_list

    def get_channel_list(self, caption: str) -> ChannelList | None:
        """Return the list whose caption or short caption equals *caption*."""
        for channel_list in self.channel_lists:
            if caption in (channel_list.caption, channel_list.short_caption):
                return channel_list
        return None

    def clear(self) -> None:
        self.channel_lists.clear()

    @property
    def channel_count(self) -> int:
        return sum(len(channel_list) for channel_list in self.channel_lists)


__all__ = ["SignalSource", "ChannelInfo", "ChannelList", "DataRoot"]
