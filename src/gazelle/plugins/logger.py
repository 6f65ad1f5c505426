"""Request/response logging plugin.

One record when a request enters the hook chain, one when its response
leaves it (including short-circuited responses)::

    app.register_plugin(LoggerPlugin())
    log = app.get_plugin(LoggerPlugin)
    app.hooks("/", pre_hooks=[log.log_request_hook], post_hooks=[log.log_response_hook])
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from gazelle.hooks import Continue, PostResponseHook, PreRequestHook
from gazelle.http.request import Request
from gazelle.http.response import Response

if TYPE_CHECKING:
    from gazelle.context import GazelleContext

START_METADATA_KEY = "gazelle.logger.start"


class LoggerPlugin:
    """Logs each request and its response through the standard ``logging`` module.

    The pre hook stamps the request with a start time; the post hook reads
    it back to report the elapsed milliseconds. Records go to the logger
    named *name* at *level*.
    """

    __slots__ = ("_level", "_log_request_hook", "_log_response_hook", "_logger", "_name")

    def __init__(self, name: str = "gazelle.plugins.logger", *, level: int = logging.INFO) -> None:
        self._name = name
        self._level = level
        self._logger: logging.Logger | None = None
        self._log_request_hook = PreRequestHook(self._log_request)
        self._log_response_hook = PostResponseHook(self._log_response)

    def initialize(self, context: GazelleContext) -> None:
        self._logger = logging.getLogger(self._name)

    @property
    def logger(self) -> logging.Logger:
        if self._logger is None:
            return logging.getLogger(self._name)
        return self._logger

    @property
    def log_request_hook(self) -> PreRequestHook:
        return self._log_request_hook

    @property
    def log_response_hook(self) -> PostResponseHook:
        return self._log_response_hook

    def _log_request(self, request: Request, response: Response) -> Continue:
        self.logger.log(self._level, "--> %s %s", request.method, request.url)
        return Continue(request.with_metadata(**{START_METADATA_KEY: time.perf_counter()}), response)

    def _log_response(self, request: Request, response: Response) -> Continue:
        started = request.metadata.get(START_METADATA_KEY)
        if started is None:
            self.logger.log(self._level, "<-- %s %s %d", request.method, request.url, response.status)
        else:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self.logger.log(
                self._level,
                "<-- %s %s %d (%.1fms)",
                request.method,
                request.url,
                response.status,
                elapsed_ms,
            )
        return Continue(request, response)
