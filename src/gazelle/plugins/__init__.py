"""Plugins — Protocol-based, no inheritance required.

A plugin is any object with ``initialize(context)``. It is initialized once
by ``app.register_plugin()`` and exposes hooks for the caller to attach to
routes.

Built-in plugins:
    CorsPlugin -- Cross-Origin Resource Sharing (preflight + response headers)
    JwtPlugin -- Bearer-token authentication (requires PyJWT)
    LoggerPlugin -- Request/response logging
"""

from gazelle.plugins.cors import CorsConfig, CorsPlugin
from gazelle.plugins.jwt import JwtPlugin
from gazelle.plugins.logger import LoggerPlugin
from gazelle.plugins.protocol import Plugin

__all__ = [
    "CorsConfig",
    "CorsPlugin",
    "JwtPlugin",
    "LoggerPlugin",
    "Plugin",
]
