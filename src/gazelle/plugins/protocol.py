"""Plugin protocol.

A plugin is any object matching::

    class MyPlugin:
        def initialize(self, context: GazelleContext) -> None: ...

No base class required. The registry keys instances by their class, so
``app.get_plugin(MyPlugin)`` returns the one registered instance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gazelle.context import GazelleContext


@runtime_checkable
class Plugin(Protocol):
    """Protocol for gazelle plugins.

    ``initialize`` runs exactly once, synchronously, when the plugin is
    registered and before the app serves requests. Plugins expose their
    hooks as attributes for the caller to wire into routes; nothing is
    applied automatically.
    """

    def initialize(self, context: GazelleContext) -> None: ...
