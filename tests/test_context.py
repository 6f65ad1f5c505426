"""Tests for gazelle.context — the plugin registry."""

import pytest

from gazelle.context import GazelleContext
from gazelle.errors import ConfigurationError, PluginNotRegistered
from gazelle.plugins.protocol import Plugin


class CountingPlugin:
    def __init__(self) -> None:
        self.initialized = 0
        self.context: GazelleContext | None = None

    def initialize(self, context: GazelleContext) -> None:
        self.initialized += 1
        self.context = context


class OtherPlugin:
    def initialize(self, context: GazelleContext) -> None:
        pass


class TestGazelleContext:
    def test_register_initializes_once(self) -> None:
        context = GazelleContext()
        plugin = CountingPlugin()
        context.register(plugin)
        assert plugin.initialized == 1
        assert plugin.context is context

    def test_get_returns_instance(self) -> None:
        context = GazelleContext()
        plugin = CountingPlugin()
        context.register(plugin)
        assert context.get(CountingPlugin) is plugin

    def test_get_missing(self) -> None:
        context = GazelleContext()
        with pytest.raises(PluginNotRegistered) as exc_info:
            context.get(CountingPlugin)
        assert exc_info.value.plugin_type is CountingPlugin

    def test_duplicate_class_rejected(self) -> None:
        context = GazelleContext()
        context.register(CountingPlugin())
        with pytest.raises(ConfigurationError):
            context.register(CountingPlugin())

    def test_non_plugin_rejected(self) -> None:
        context = GazelleContext()
        with pytest.raises(ConfigurationError):
            context.register(object())  # type: ignore[arg-type]

    def test_introspection(self) -> None:
        context = GazelleContext()
        first = CountingPlugin()
        second = OtherPlugin()
        context.register(first)
        context.register(second)

        assert len(context) == 2
        assert CountingPlugin in context
        assert context.plugins == (first, second)
        assert repr(context) == "<GazelleContext [CountingPlugin, OtherPlugin]>"

    def test_plugin_protocol(self) -> None:
        assert isinstance(CountingPlugin(), Plugin)
        assert not isinstance(object(), Plugin)
