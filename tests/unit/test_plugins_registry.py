"""Unit tests for chanlist.plugins.registry — PluginRegistry, error types,
entry-point loading, and the shared serializer registry.
"""
from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from chanlist.plugins.registry import (
    PluginAlreadyRegisteredError,
    PluginNotFoundError,
    PluginRegistry,
    serializer_registry,
)
from chanlist.serializer import SerializerBase


# ---------------------------------------------------------------------------
# Test fixtures — concrete serializers
# ---------------------------------------------------------------------------


class AlphaSerializer(SerializerBase):
    format_name = "Alpha"
    file_patterns = ("*.alpha",)

    def load(self) -> None:
        pass

    def save(self) -> None:
        pass


class BetaSerializer(SerializerBase):
    format_name = "Beta"

    def load(self) -> None:
        pass

    def save(self) -> None:
        pass


class NotASerializer:
    """Does NOT subclass SerializerBase — used for error path testing."""


def _fresh_registry(name: str = "test") -> PluginRegistry[SerializerBase]:
    return PluginRegistry(SerializerBase, name)


# ===========================================================================
# Error types
# ===========================================================================


class TestPluginNotFoundError:
    def test_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            raise PluginNotFoundError("acme", "serializers", [])

    def test_attributes(self) -> None:
        error = PluginNotFoundError("acme", "serializers", ["zip-xml"])
        assert error.plugin_name == "acme"
        assert error.registry_name == "serializers"

    def test_message_lists_available_plugins(self) -> None:
        error = PluginNotFoundError("acme", "serializers", ["reference-csv", "zip-xml"])
        assert "reference-csv, zip-xml" in str(error)

    def test_message_when_registry_is_empty(self) -> None:
        assert "none" in str(PluginNotFoundError("acme", "serializers", []))


class TestPluginAlreadyRegisteredError:
    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            raise PluginAlreadyRegisteredError("acme", "serializers")

    def test_message_contains_plugin_name(self) -> None:
        assert "acme" in str(PluginAlreadyRegisteredError("acme", "serializers"))


# ===========================================================================
# Registration
# ===========================================================================


class TestPluginRegistryRegister:
    def test_empty_registry(self) -> None:
        registry = _fresh_registry("formats")
        assert len(registry) == 0
        assert registry.list_plugins() == []
        assert "formats" in repr(registry)
        assert "SerializerBase" in repr(registry)

    def test_decorator_registers_class_and_returns_it(self) -> None:
        registry = _fresh_registry()

        @registry.register("local")
        class LocalSerializer(AlphaSerializer):
            pass

        assert registry.get("local") is LocalSerializer

    def test_decorator_duplicate_name_raises(self) -> None:
        registry = _fresh_registry()
        registry.register_class("alpha", AlphaSerializer)

        with pytest.raises(PluginAlreadyRegisteredError):
            @registry.register("alpha")
            class Duplicate(AlphaSerializer):
                pass

    def test_wrong_base_class_raises_type_error(self) -> None:
        registry = _fresh_registry()
        with pytest.raises(TypeError):
            registry.register_class("bad", NotASerializer)  # type: ignore[arg-type]

    def test_non_class_raises_type_error(self) -> None:
        registry = _fresh_registry()
        with pytest.raises(TypeError):
            registry.register_class("bad", "not_a_class")  # type: ignore[arg-type]

    def test_register_logs_debug_message(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _fresh_registry()
        with caplog.at_level(logging.DEBUG, logger="chanlist.plugins.registry"):
            registry.register_class("logged", AlphaSerializer)
        assert "logged" in caplog.text

    def test_deregister_removes_plugin(self) -> None:
        registry = _fresh_registry()
        registry.register_class("alpha", AlphaSerializer)
        registry.deregister("alpha")
        assert "alpha" not in registry

    def test_deregister_unknown_raises(self) -> None:
        with pytest.raises(PluginNotFoundError):
            _fresh_registry().deregister("ghost")


# ===========================================================================
# Lookup
# ===========================================================================


class TestPluginRegistryLookup:
    def test_get_unknown_raises_not_found(self) -> None:
        with pytest.raises(PluginNotFoundError):
            _fresh_registry().get("ghost")

    def test_list_plugins_is_sorted(self) -> None:
        registry = _fresh_registry()
        registry.register_class("zebra", AlphaSerializer)
        registry.register_class("alpha", BetaSerializer)
        assert registry.list_plugins() == ["alpha", "zebra"]

    def test_items_keep_registration_order(self) -> None:
        registry = _fresh_registry()
        registry.register_class("zebra", AlphaSerializer)
        registry.register_class("alpha", BetaSerializer)
        assert [name for name, _ in registry.items()] == ["zebra", "alpha"]

    def test_registered_class_is_instantiable(self, tmp_path: Path) -> None:
        registry = _fresh_registry()
        registry.register_class("alpha", AlphaSerializer)
        with registry.get("alpha")(tmp_path / "x.alpha") as serializer:
            assert serializer.format_name == "Alpha"


# ===========================================================================
# load_entrypoints
# ===========================================================================


class TestPluginRegistryLoadEntrypoints:
    def test_empty_group_does_nothing(self) -> None:
        registry = _fresh_registry()
        with patch(
            "chanlist.plugins.registry.importlib.metadata.entry_points",
            return_value=[],
        ):
            assert registry.load_entrypoints("chanlist.serializers") == 0
        assert len(registry) == 0

    def test_registers_valid_plugin(self) -> None:
        registry = _fresh_registry()
        mock_ep = MagicMock()
        mock_ep.name = "alpha"
        mock_ep.load.return_value = AlphaSerializer

        with patch(
            "chanlist.plugins.registry.importlib.metadata.entry_points",
            return_value=[mock_ep],
        ):
            assert registry.load_entrypoints("chanlist.serializers") == 1

        assert registry.get("alpha") is AlphaSerializer

    def test_skips_already_registered(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _fresh_registry()
        registry.register_class("alpha", AlphaSerializer)
        mock_ep = MagicMock()
        mock_ep.name = "alpha"

        with patch(
            "chanlist.plugins.registry.importlib.metadata.entry_points",
            return_value=[mock_ep],
        ):
            with caplog.at_level(logging.DEBUG, logger="chanlist.plugins.registry"):
                assert registry.load_entrypoints("chanlist.serializers") == 0

        mock_ep.load.assert_not_called()
        assert "alpha" in caplog.text

    def test_import_failure_is_skipped(self) -> None:
        registry = _fresh_registry()
        mock_ep = MagicMock()
        mock_ep.name = "broken"
        mock_ep.load.side_effect = ImportError("no module named broken_plugin")

        with patch(
            "chanlist.plugins.registry.importlib.metadata.entry_points",
            return_value=[mock_ep],
        ):
            registry.load_entrypoints("chanlist.serializers")

        assert len(registry) == 0

    def test_wrong_type_is_skipped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _fresh_registry()
        mock_ep = MagicMock()
        mock_ep.name = "wrong"
        mock_ep.load.return_value = NotASerializer

        with patch(
            "chanlist.plugins.registry.importlib.metadata.entry_points",
            return_value=[mock_ep],
        ):
            with caplog.at_level(logging.WARNING, logger="chanlist.plugins.registry"):
                registry.load_entrypoints("chanlist.serializers")

        assert len(registry) == 0
        assert "wrong" in caplog.text


class TestSerializerRegistry:
    def test_builtin_formats_registered_on_import(self) -> None:
        import chanlist.formats  # noqa: F401

        assert "reference-csv" in serializer_registry
        assert "zip-xml" in serializer_registry
