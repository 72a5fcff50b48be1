"""Unit tests for chanlist.features — SupportedFeatures and the favorites policy."""
from __future__ import annotations

import pytest

from chanlist.errors import FeaturesFrozenError
from chanlist.features import (
    ChannelNameEditMode,
    DeleteMode,
    Favorites,
    FavoritesMode,
    FavoritesPolicy,
    SupportedFeatures,
    favorites_mask,
)


# ===========================================================================
# Defaults
# ===========================================================================


class TestDefaults:
    def test_boolean_defaults(self) -> None:
        features = SupportedFeatures()
        assert features.can_skip_channels is True
        assert features.can_lock_channels is True
        assert features.can_hide_channels is True
        assert features.can_have_gaps is True
        assert features.can_edit_encrypted_flag is False
        assert features.can_edit_audio_pid is False
        assert features.allow_short_name_edit is False
        assert features.can_clean_up_channel_data is False
        assert features.has_device_settings is False
        assert features.can_save_as is False
        assert features.enforce_tv_before_radio_before_data is False

    def test_mode_defaults(self) -> None:
        features = SupportedFeatures()
        assert features.delete_mode is DeleteMode.NOT_SUPPORTED
        assert features.channel_name_edit is ChannelNameEditMode.NONE

    def test_favorites_default_to_four_lists(self) -> None:
        features = SupportedFeatures()
        assert features.max_favorite_lists == 4
        assert features.favorites_mode is FavoritesMode.FLAGS
        assert features.supported_favorites == Favorites.A | Favorites.B | Favorites.C | Favorites.D

    def test_keyword_overrides(self) -> None:
        features = SupportedFeatures(can_save_as=True, max_favorite_lists=2)
        assert features.can_save_as is True
        assert features.supported_favorites == Favorites.A | Favorites.B

    def test_unknown_keyword_rejected(self) -> None:
        with pytest.raises(TypeError):
            SupportedFeatures(can_fly=True)

    def test_channel_name_edit_all_covers_both(self) -> None:
        assert ChannelNameEditMode.ANALOG in ChannelNameEditMode.ALL
        assert ChannelNameEditMode.DIGITAL in ChannelNameEditMode.ALL


# ===========================================================================
# max_favorite_lists / supported_favorites
# ===========================================================================


class TestMaxFavoriteLists:
    @pytest.mark.parametrize(("first", "second"), [(1, 3), (3, 1), (8, 16), (0, 5), (5, 0), (2, 20)])
    def test_mask_tracks_last_distinct_value(self, first: int, second: int) -> None:
        features = SupportedFeatures()
        features.max_favorite_lists = first
        features.max_favorite_lists = second
        assert int(features.supported_favorites) == (1 << second) - 1
        assert features.max_favorite_lists == second

    def test_mask_bit_zero_is_first_list(self) -> None:
        features = SupportedFeatures()
        features.max_favorite_lists = 1
        assert features.supported_favorites == Favorites.A

    def test_setting_same_value_twice_changes_nothing(self) -> None:
        features = SupportedFeatures()
        features.favorites_mode = FavoritesMode.MIXED_SOURCE
        features.max_favorite_lists = 6
        before = features.favorites_policy
        features.max_favorite_lists = 6
        assert features.favorites_policy is before
        assert features.favorites_mode is FavoritesMode.MIXED_SOURCE

    def test_zero_disables_favorites(self) -> None:
        features = SupportedFeatures()
        features.max_favorite_lists = 0
        assert features.favorites_mode is FavoritesMode.NONE
        assert features.supported_favorites == Favorites(0)

    def test_raising_count_keeps_current_mode(self) -> None:
        features = SupportedFeatures()
        features.favorites_mode = FavoritesMode.ORDERED_PER_SOURCE
        features.max_favorite_lists = 8
        assert features.favorites_mode is FavoritesMode.ORDERED_PER_SOURCE

    def test_reenabling_does_not_restore_previous_mode(self) -> None:
        features = SupportedFeatures()
        features.favorites_mode = FavoritesMode.MIXED_SOURCE
        features.favorites_mode = FavoritesMode.NONE
        features.max_favorite_lists = 2
        assert features.favorites_mode is FavoritesMode.FLAGS
        assert features.max_favorite_lists == 2

    def test_negative_count_rejected(self) -> None:
        features = SupportedFeatures()
        with pytest.raises(ValueError):
            features.max_favorite_lists = -1
        assert features.max_favorite_lists == 4


# ===========================================================================
# favorites_mode
# ===========================================================================


class TestFavoritesMode:
    @pytest.mark.parametrize("count", [0, 1, 4, 12])
    def test_none_always_clears_count_and_mask(self, count: int) -> None:
        features = SupportedFeatures()
        features.max_favorite_lists = count
        features.favorites_mode = FavoritesMode.NONE
        assert features.max_favorite_lists == 0
        assert features.supported_favorites == Favorites(0)

    def test_switching_mode_keeps_count(self) -> None:
        features = SupportedFeatures()
        features.max_favorite_lists = 6
        features.favorites_mode = FavoritesMode.MIXED_SOURCE
        assert features.max_favorite_lists == 6

    def test_enabling_mode_from_none_uses_default_count(self) -> None:
        features = SupportedFeatures()
        features.favorites_mode = FavoritesMode.NONE
        features.favorites_mode = FavoritesMode.FLAGS
        assert features.max_favorite_lists == 4


# ===========================================================================
# FavoritesPolicy
# ===========================================================================


class TestFavoritesPolicy:
    def test_disabled(self) -> None:
        policy = FavoritesPolicy.disabled()
        assert not policy.enabled
        assert policy.mask == Favorites(0)

    def test_limited(self) -> None:
        policy = FavoritesPolicy.limited(3, FavoritesMode.MIXED_SOURCE)
        assert policy.enabled
        assert policy.mask == Favorites.A | Favorites.B | Favorites.C

    @pytest.mark.parametrize(
        ("mode", "count"),
        [(FavoritesMode.NONE, 2), (FavoritesMode.FLAGS, 0), (FavoritesMode.FLAGS, -1)],
    )
    def test_inconsistent_policy_rejected(self, mode: FavoritesMode, count: int) -> None:
        with pytest.raises(ValueError):
            FavoritesPolicy(mode, count)

    def test_policy_assignment(self) -> None:
        features = SupportedFeatures()
        features.favorites_policy = FavoritesPolicy.limited(2, FavoritesMode.ORDERED_PER_SOURCE)
        assert features.favorites_mode is FavoritesMode.ORDERED_PER_SOURCE
        assert features.max_favorite_lists == 2

    def test_favorites_mask_helper(self) -> None:
        assert favorites_mask(0) == Favorites(0)
        assert favorites_mask(16) == Favorites(0xFFFF)
        with pytest.raises(ValueError):
            favorites_mask(-1)


# ===========================================================================
# freeze
# ===========================================================================


class TestFreeze:
    def test_frozen_features_reject_assignment(self) -> None:
        features = SupportedFeatures()
        features.freeze()
        with pytest.raises(FeaturesFrozenError):
            features.can_save_as = True
        with pytest.raises(FeaturesFrozenError):
            features.max_favorite_lists = 2
        with pytest.raises(FeaturesFrozenError):
            features.favorites_mode = FavoritesMode.NONE
        assert features.can_save_as is False
        assert features.max_favorite_lists == 4

    def test_frozen_error_is_attribute_error(self) -> None:
        features = SupportedFeatures()
        features.freeze()
        with pytest.raises(AttributeError):
            features.delete_mode = DeleteMode.PHYSICALLY

    def test_freeze_is_idempotent(self) -> None:
        features = SupportedFeatures()
        features.freeze()
        features.freeze()
        assert features.frozen

    def test_as_dict_includes_derived_mask(self) -> None:
        data = SupportedFeatures().as_dict()
        assert data["supported_favorites"] == favorites_mask(4)
        assert data["delete_mode"] is DeleteMode.NOT_SUPPORTED
        assert "frozen" not in data
