"""Registry of channel-list serializer plugins.

Built-in formats register themselves with the ``@register`` decorator at
import time.  Third-party packages declare entry-points in their own
``pyproject.toml`` under the "chanlist.serializers" group and are picked
up by ``load_entrypoints``.

Example
-------
Register a format::

    from chanlist.plugins import serializer_registry
    from chanlist.serializer import SerializerBase

    @serializer_registry.register("acme-bin")
    class AcmeSerializer(SerializerBase):
        format_name = "ACME binary"
        file_patterns = ("*.acm",)
        ...

Declare it for discovery from another package:

.. code-block:: toml

    [project.entry-points."chanlist.serializers"]
    acme-bin = "acme_chanlist.serializer:AcmeSerializer"

Look it up::

    cls = serializer_registry.get("acme-bin")
    with cls("channels.acm") as serializer:
        serializer.load()
"""
from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from chanlist.serializer import SerializerBase

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=SerializerBase)


class PluginNotFoundError(KeyError):
    """Raised when a requested plugin name is not in the registry."""

    def __init__(self, name: str, registry_name: str, available: list[str]) -> None:
        self.plugin_name = name
        self.registry_name = registry_name
        listing = ", ".join(available) if available else "none"
        super().__init__(
            f"Plugin {name!r} is not registered in the {registry_name!r} registry. "
            f"Available plugins: {listing}."
        )


class PluginAlreadyRegisteredError(ValueError):
    """Raised when attempting to register a name that already exists."""

    def __init__(self, name: str, registry_name: str) -> None:
        self.plugin_name = name
        self.registry_name = registry_name
        super().__init__(
            f"Plugin {name!r} is already registered in the {registry_name!r} registry. "
            "Use a unique name or deregister the existing entry first."
        )


class PluginRegistry(Generic[T]):
    """Name-keyed registry of serializer classes, in registration order.

    Registration order matters: the host tries candidates in this order,
    so more specific formats should register before catch-all ones.

    Parameters
    ----------
    base_class:
        The class every plugin must subclass.
    name:
        A human-readable name for this registry (used in error messages).
    """

    def __init__(self, base_class: type[T], name: str) -> None:
        self._base_class = base_class
        self._name = name
        self._plugins: dict[str, type[T]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: str) -> Callable[[type[T]], type[T]]:
        """Return a class decorator that registers the decorated class under *name*.

        Raises
        ------
        PluginAlreadyRegisteredError
            If ``name`` is already in use in this registry.
        TypeError
            If the decorated class does not subclass ``base_class``.
        """

        def decorator(cls: type[T]) -> type[T]:
            self.register_class(name, cls)
            return cls

        return decorator

    def register_class(self, name: str, cls: type[T]) -> None:
        """Register *cls* under *name* without decorator syntax.

        Raises
        ------
        PluginAlreadyRegisteredError
            If ``name`` is already registered.
        TypeError
            If ``cls`` is not a subclass of ``base_class``.
        """
        if name in self._plugins:
            raise PluginAlreadyRegisteredError(name, self._name)
        if not (isinstance(cls, type) and issubclass(cls, self._base_class)):
            raise TypeError(
                f"Cannot register {cls!r} under {name!r}: "
                f"it must be a subclass of {self._base_class.__name__}."
            )
        self._plugins[name] = cls
        logger.debug(
            "Registered serializer %r -> %s in registry %r",
            name,
            cls.__qualname__,
            self._name,
        )

    def deregister(self, name: str) -> None:
        """Remove a plugin from the registry.

        Raises
        ------
        PluginNotFoundError
            If ``name`` is not currently registered.
        """
        if name not in self._plugins:
            raise PluginNotFoundError(name, self._name, self.list_plugins())
        del self._plugins[name]
        logger.debug("Deregistered serializer %r from registry %r", name, self._name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> type[T]:
        """Return the class registered under ``name``.

        Raises
        ------
        PluginNotFoundError
            If no plugin is registered under ``name``.
        """
        try:
            return self._plugins[name]
        except KeyError:
            raise PluginNotFoundError(name, self._name, self.list_plugins()) from None

    def list_plugins(self) -> list[str]:
        """Return all registered plugin names in alphabetical order."""
        return sorted(self._plugins)

    def items(self) -> Iterator[tuple[str, type[T]]]:
        """Yield ``(name, class)`` pairs in registration order."""
        yield from self._plugins.items()

    def __contains__(self, name: object) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    def __repr__(self) -> str:
        return (
            f"PluginRegistry(name={self._name!r}, "
            f"base_class={self._base_class.__name__}, "
            f"plugins={self.list_plugins()})"
        )

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str) -> int:
        """Register every serializer declared under entry-point *group*.

        Names that are already registered are skipped, which makes repeated
        calls idempotent and lets built-in registrations win over the
        entry-points this package declares for itself.  Entry-points that
        fail to import or do not subclass ``base_class`` are logged and
        skipped.

        Returns
        -------
        int
            The number of newly registered plugins.
        """
        loaded = 0
        for ep in importlib.metadata.entry_points(group=group):
            if ep.name in self._plugins:
                logger.debug(
                    "Entry-point %r already registered in %r; skipping.",
                    ep.name,
                    self._name,
                )
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            try:
                self.register_class(ep.name, cls)
            except (PluginAlreadyRegisteredError, TypeError):
                logger.warning(
                    "Entry-point %r loaded but could not be registered "
                    "in registry %r; skipping.",
                    ep.name,
                    self._name,
                )
                continue
            loaded += 1
        return loaded


serializer_registry: PluginRegistry[SerializerBase] = PluginRegistry(SerializerBase, "serializers")
