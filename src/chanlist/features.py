"""Capability model advertised by every channel-list serializer.

A ``SupportedFeatures`` instance tells the host which editing operations
the underlying file format can represent, so the host can enable or hide
the matching UI.  Each serializer owns one instance, configures it in its
constructor, and the host freezes it before reading it.

The favorites mode and the number of favorite lists are two views over a
single :class:`FavoritesPolicy` value, which keeps them consistent:
favorites are either disabled (mode ``NONE``, zero lists) or limited to
``k > 0`` lists under a concrete mode.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag, IntFlag
from typing import Any

from chanlist.errors import FeaturesFrozenError

DEFAULT_MAX_FAVORITE_LISTS = 4


class ChannelNameEditMode(Flag):
    """Which channels may be renamed."""

    NONE = 0
    ANALOG = 1
    DIGITAL = 2
    ALL = ANALOG | DIGITAL


class DeleteMode(Enum):
    """How a deleted channel is represented when the file is written.

    NOT_SUPPORTED
        The format has no way to drop a channel.
    PHYSICALLY
        The record is removed from the file.
    FLAG_WITHOUT_PR_NR
        The record stays, flagged as deleted, and loses its program number.
    FLAG_WITH_PR_NR
        The record stays, flagged as deleted, and keeps a program number.
    """

    NOT_SUPPORTED = 0
    PHYSICALLY = 1
    FLAG_WITHOUT_PR_NR = 2
    FLAG_WITH_PR_NR = 3


class FavoritesMode(Enum):
    """How a format stores favorite lists."""

    NONE = 0
    FLAGS = 1
    ORDERED_PER_SOURCE = 2
    MIXED_SOURCE = 3


class Favorites(IntFlag):
    """Bit per favorite list; bit 0 is the first list."""

    A = 1 << 0
    B = 1 << 1
    C = 1 << 2
    D = 1 << 3
    E = 1 << 4
    F = 1 << 5
    G = 1 << 6
    H = 1 << 7
    I = 1 << 8  # noqa: E741
    J = 1 << 9
    K = 1 << 10
    L = 1 << 11
    M = 1 << 12
    N = 1 << 13
    O = 1 << 14  # noqa: E741
    P = 1 << 15


def favorites_mask(count: int) -> Favorites:
    """Return the mask with the low *count* bits set."""
    if count < 0:
        raise ValueError(f"favorite list count must be >= 0, got {count}")
    return Favorites((1 << count) - 1)


@dataclass(frozen=True)
class FavoritesPolicy:
    """Favorites support of a format: disabled, or ``max_lists`` lists under ``mode``.

    Use :meth:`disabled` and :meth:`limited` rather than the constructor;
    a policy whose mode and count disagree cannot be built.
    """

    mode: FavoritesMode
    max_lists: int

    def __post_init__(self) -> None:
        if self.max_lists < 0:
            raise ValueError(f"max_lists must be >= 0, got {self.max_lists}")
        if (self.mode is FavoritesMode.NONE) != (self.max_lists == 0):
            raise ValueError(
                f"Inconsistent favorites policy: mode={self.mode.name} "
                f"with max_lists={self.max_lists}"
            )

    @classmethod
    def disabled(cls) -> "FavoritesPolicy":
        return cls(FavoritesMode.NONE, 0)

    @classmethod
    def limited(
        cls, max_lists: int, mode: FavoritesMode = FavoritesMode.FLAGS
    ) -> "FavoritesPolicy":
        return cls(mode, max_lists)

    @property
    def enabled(self) -> bool:
        return self.max_lists > 0

    @property
    def mask(self) -> Favorites:
        """Supported favorite lists as a bitmask."""
        return favorites_mask(self.max_lists)


class SupportedFeatures:
    """Editing capabilities of one serializer instance.

    Boolean switches and modes are plain attributes that a serializer sets
    in its constructor.  After :meth:`freeze` every public attribute is
    read-only and assignments raise :class:`FeaturesFrozenError`.

    Parameters
    ----------
    **overrides:
        Initial values for any public attribute, e.g.
        ``SupportedFeatures(can_save_as=True, max_favorite_lists=8)``.
    """

    def __init__(self, **overrides: Any) -> None:
        self._frozen = False
        self._favorites = FavoritesPolicy.limited(DEFAULT_MAX_FAVORITE_LISTS)

        self.channel_name_edit = ChannelNameEditMode.NONE
        self.can_clean_up_channel_data = False
        self.has_device_settings = False
        self.can_save_as = False
        self.can_skip_channels = True
        self.can_lock_channels = True
        self.can_hide_channels = True
        self.can_have_gaps = True
        self.can_edit_encrypted_flag = False
        self.delete_mode = DeleteMode.NOT_SUPPORTED
        self.enforce_tv_before_radio_before_data = False
        self.allow_gaps_in_fav_numbers = False
        self.can_edit_fav_list_names = False
        self.can_edit_audio_pid = False
        self.allow_short_name_edit = False

        for name, value in overrides.items():
            if name.startswith("_") or not hasattr(self, name):
                raise TypeError(f"Unknown feature {name!r}")
            setattr(self, name, value)

    def __setattr__(self, name: str, value: Any) -> None:
        if not name.startswith("_") and getattr(self, "_frozen", False):
            raise FeaturesFrozenError(name)
        super().__setattr__(name, value)

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    @property
    def favorites_policy(self) -> FavoritesPolicy:
        return self._favorites

    @favorites_policy.setter
    def favorites_policy(self, policy: FavoritesPolicy) -> None:
        self._favorites = policy

    @property
    def favorites_mode(self) -> FavoritesMode:
        return self._favorites.mode

    @favorites_mode.setter
    def favorites_mode(self, mode: FavoritesMode) -> None:
        if mode is FavoritesMode.NONE:
            self._favorites = FavoritesPolicy.disabled()
        elif self._favorites.enabled:
            self._favorites = FavoritesPolicy.limited(self._favorites.max_lists, mode)
        else:
            self._favorites = FavoritesPolicy.limited(DEFAULT_MAX_FAVORITE_LISTS, mode)

    @property
    def max_favorite_lists(self) -> int:
        return self._favorites.max_lists

    @max_favorite_lists.setter
    def max_favorite_lists(self, count: int) -> None:
        if count == self._favorites.max_lists:
            return
        if count < 0:
            raise ValueError(f"max_favorite_lists must be >= 0, got {count}")
        if count == 0:
            self._favorites = FavoritesPolicy.disabled()
        elif self._favorites.enabled:
            self._favorites = FavoritesPolicy.limited(count, self._favorites.mode)
        else:
            # a previously disabled mode is not remembered
            self._favorites = FavoritesPolicy.limited(count)

    @property
    def supported_favorites(self) -> Favorites:
        return self._favorites.mask

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def freeze(self) -> None:
        """Make every public attribute read-only.  Calling it again is harmless."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def as_dict(self) -> dict[str, object]:
        """Return every capability, including the derived favorites mask."""
        return {
            "channel_name_edit": self.channel_name_edit,
            "can_clean_up_channel_data": self.can_clean_up_channel_data,
            "has_device_settings": self.has_device_settings,
            "can_save_as": self.can_save_as,
            "can_skip_channels": self.can_skip_channels,
            "can_lock_channels": self.can_lock_channels,
            "can_hide_channels": self.can_hide_channels,
            "can_have_gaps": self.can_have_gaps,
            "can_edit_encrypted_flag": self.can_edit_encrypted_flag,
            "delete_mode": self.delete_mode,
            "enforce_tv_before_radio_before_data": self.enforce_tv_before_radio_before_data,
            "favorites_mode": self.favorites_mode,
            "max_favorite_lists": self.max_favorite_lists,
            "supported_favorites": self.supported_favorites,
            "allow_gaps_in_fav_numbers": self.allow_gaps_in_fav_numbers,
            "can_edit_fav_list_names": self.can_edit_fav_list_names,
            "can_edit_audio_pid": self.can_edit_audio_pid,
            "allow_short_name_edit": self.allow_short_name_edit,
        }

    def __repr__(self) -> str:
        return (
            f"SupportedFeatures(delete_mode={self.delete_mode.name}, "
            f"favorites_mode={self.favorites_mode.name}, "
            f"max_favorite_lists={self.max_favorite_lists}, frozen={self._frozen})"
        )


__all__ = [
    "DEFAULT_MAX_FAVORITE_LISTS",
    "ChannelNameEditMode",
    "DeleteMode",
    "FavoritesMode",
    "Favorites",
    "FavoritesPolicy",
    "SupportedFeatures",
    "favorites_mask",
]
