"""Application context — the plugin registry.

One ``GazelleContext`` is owned by each ``App`` and passed explicitly to
every plugin's ``initialize``. It is written only while the app is being
set up and read-only once it serves requests, so it holds no lock.
"""

from __future__ import annotations

import logging
from typing import TypeVar

from gazelle.errors import ConfigurationError, PluginNotRegistered
from gazelle.plugins.protocol import Plugin

logger = logging.getLogger("gazelle.app")

P = TypeVar("P")


class GazelleContext:
    """Typed registry mapping a plugin class to its initialized instance.

    Usage::

        context = GazelleContext()
        context.register(JwtPlugin("secret"))
        jwt = context.get(JwtPlugin)
    """

    __slots__ = ("_plugins",)

    def __init__(self) -> None:
        self._plugins: dict[type, object] = {}

    def register(self, plugin: Plugin) -> None:
        """Initialize *plugin* against this context and store it.

        Raises ``ConfigurationError`` if the object is not a plugin or an
        instance of the same class is already registered.
        """
        if not isinstance(plugin, Plugin):
            msg = f"{type(plugin).__name__} has no initialize(context) method."
            raise ConfigurationError(msg)
        key = type(plugin)
        if key in self._plugins:
            msg = f"Plugin {key.__name__} is already registered."
            raise ConfigurationError(msg)
        plugin.initialize(self)
        self._plugins[key] = plugin
        logger.debug("Registered plugin %s", key.__name__)

    def get(self, plugin_type: type[P]) -> P:
        """Return the registered instance of *plugin_type*.

        Raises ``PluginNotRegistered`` if it was never registered.
        """
        try:
            return self._plugins[plugin_type]  # type: ignore[return-value]
        except KeyError:
            raise PluginNotRegistered(plugin_type) from None

    def __contains__(self, plugin_type: object) -> bool:
        return plugin_type in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    @property
    def plugins(self) -> tuple[object, ...]:
        """Registered plugins in registration order."""
        return tuple(self._plugins.values())

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self._plugins)
        return f"<GazelleContext [{names}]>"
