"""Built-in middleware: request logging.

The mux itself stays quiet on the request path. Add ``RequestLogger``
to get one access-log line per request.
"""

import logging
import time
from dataclasses import dataclass

from switchyard.handlers import Handler, HandlerFunc, serve_handler
from switchyard.http.request import Request
from switchyard.http.response import ResponseWriter


@dataclass(frozen=True, slots=True)
class RequestLoggerConfig:
    """Access-log configuration."""

    logger_name: str = "switchyard.access"
    level: int = logging.INFO
    include_query: bool = False


class RequestLogger:
    """Log method, path, status and elapsed time for every request.

    Usage::

        mux.use(RequestLogger())
        mux.use(RequestLogger(RequestLoggerConfig(level=logging.DEBUG)))

    A handler that raises is logged at ERROR and the exception is
    re-raised for the server to handle.
    """

    __slots__ = ("_config", "_logger")

    def __init__(self, config: RequestLoggerConfig | None = None) -> None:
        self._config = config or RequestLoggerConfig()
        self._logger = logging.getLogger(self._config.logger_name)

    def __call__(self, next_handler: Handler) -> Handler:
        async def serve(writer: ResponseWriter, request: Request) -> None:
            start = time.perf_counter()
            target = request.url if self._config.include_query else request.path
            try:
                await serve_handler(next_handler, writer, request)
            except Exception:
                elapsed_ms = (time.perf_counter() - start) * 1000
                self._logger.exception(
                    "%s %s failed after %.1fms", request.method, target, elapsed_ms
                )
                raise
            elapsed_ms = (time.perf_counter() - start) * 1000
            route = request.route.pattern if request.route is not None else "-"
            self._logger.log(
                self._config.level,
                "%s %s %d %.1fms route=%s",
                request.method,
                target,
                writer.status,
                elapsed_ms,
                route,
            )

        return HandlerFunc(serve)
