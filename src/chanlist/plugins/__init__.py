"""Serializer plugin discovery.

``serializer_registry`` holds the built-in formats once
``chanlist.formats`` is imported.  Third-party serializers register via
``importlib.metadata`` entry-points under the "chanlist.serializers"
group; see :mod:`chanlist.plugins.registry`.
"""
from __future__ import annotations

from chanlist.plugins.registry import (
    PluginAlreadyRegisteredError,
    PluginNotFoundError,
    PluginRegistry,
    serializer_registry,
)

__all__ = [
    "PluginAlreadyRegisteredError",
    "PluginNotFoundError",
    "PluginRegistry",
    "serializer_registry",
]
