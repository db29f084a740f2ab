"""Handler protocol, the function adapter, and synthesized handlers.

A handler is any object with a ``serve(writer, request)`` method, sync
or async. ``HandlerFunc`` adapts a plain function. The mux synthesizes
its own handlers for 404, redirects and 405 so every request ends in a
written response.
"""

from html import escape
from http import HTTPStatus
from typing import Any, Protocol, runtime_checkable

from switchyard._internal.invoke import invoke
from switchyard._internal.types import HandlerFunction
from switchyard.errors import ConfigurationError, HTTPError, MethodNotAllowed, NotFound
from switchyard.http.request import Request
from switchyard.http.response import ResponseWriter


@runtime_checkable
class Handler(Protocol):
    """Protocol for switchyard handlers.

    Accepts any object with a ``serve`` method::

        class Hello:
            def serve(self, w: ResponseWriter, r: Request) -> None:
                w.write("hello\\n")

        class Slow:
            async def serve(self, w: ResponseWriter, r: Request) -> None:
                await anyio.sleep(1)
                w.write("done\\n")
    """

    def serve(self, writer: ResponseWriter, request: Request) -> Any: ...


def is_handler(obj: object) -> bool:
    """True if *obj* exposes a callable ``serve``."""
    return callable(getattr(obj, "serve", None))


class HandlerFunc:
    """Adapt a plain ``(writer, request)`` function to the handler protocol."""

    __slots__ = ("func",)

    def __init__(self, func: HandlerFunction) -> None:
        if not callable(func):
            msg = f"handler function must be callable, got {type(func).__name__}"
            raise ConfigurationError(msg)
        self.func = func

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"HandlerFunc({name})"

    def serve(self, writer: ResponseWriter, request: Request) -> Any:
        return self.func(writer, request)


async def serve_handler(
    handler: Handler,
    writer: ResponseWriter,
    request: Request,
    *,
    offload: bool = False,
) -> None:
    """Run *handler* against (*writer*, *request*), sync or async.

    Middleware calls this to invoke the handler it wraps::

        def timing(next_handler: Handler) -> Handler:
            async def serve(w, r):
                start = time.monotonic()
                await serve_handler(next_handler, w, r)
                w.headers["X-Time"] = f"{time.monotonic() - start:.3f}"
            return HandlerFunc(serve)
    """
    func = handler.func if isinstance(handler, HandlerFunc) else handler.serve
    await invoke(func, writer, request, offload=offload)


def offloaded(handler: Handler) -> Handler:
    """Wrap *handler* so a sync ``serve`` runs on a worker thread."""

    async def serve(writer: ResponseWriter, request: Request) -> None:
        await serve_handler(handler, writer, request, offload=True)

    return HandlerFunc(serve)


# -- Synthesized handlers --


def error_handler(error: HTTPError) -> Handler:
    """A handler that renders *error* as a plain-text response."""

    def serve(writer: ResponseWriter, request: Request) -> None:
        writer.headers["Content-Type"] = "text/plain; charset=utf-8"
        writer.headers["X-Content-Type-Options"] = "nosniff"
        for name, value in error.headers:
            writer.headers[name] = value
        writer.write_header(error.status)
        writer.write(error.detail)

    return HandlerFunc(serve)


def not_found_handler(body: str = "404 page not found\n") -> Handler:
    """A handler that replies 404."""
    return error_handler(NotFound(body))


def method_not_allowed_handler(allowed: frozenset[str]) -> Handler:
    """A handler that replies 405 with an ``Allow`` header."""
    return error_handler(MethodNotAllowed(allowed))


def redirect_handler(url: str, status: int = 301) -> Handler:
    """A handler that redirects to *url*, which must already be percent-encoded.

    GET requests also get a short HTML body linking to the target.
    """
    phrase = HTTPStatus(status).phrase

    def serve(writer: ResponseWriter, request: Request) -> None:
        writer.headers["Location"] = url
        if request.method == "GET" and "content-type" not in writer.headers:
            writer.headers["Content-Type"] = "text/html; charset=utf-8"
            writer.write_header(status)
            writer.write(f'<a href="{escape(url)}">{phrase}</a>.\n')
            return
        writer.write_header(status)

    return HandlerFunc(serve)


def strip_prefix(handler: Handler, prefix: str | None = None) -> Handler:
    """Serve *handler* with *prefix* removed from the request path.

    With ``prefix=None`` the matched route's pattern is stripped, so a
    handler mounted on ``/static/`` sees ``/static/app.css`` as
    ``/app.css``. The result always starts with ``/``. Requests outside
    the prefix get a 404. The original path stays available as
    ``request.values["original_path"]``.
    """
    missing = not_found_handler()

    async def serve(writer: ResponseWriter, request: Request) -> None:
        active = prefix
        if active is None and request.route is not None and request.route.is_prefix:
            active = request.route.pattern
        if not active:
            await serve_handler(missing, writer, request)
            return
        base = active.rstrip("/")
        path = request.path
        if path != base and not path.startswith(base + "/"):
            await serve_handler(missing, writer, request)
            return
        stripped = request.with_value("original_path", path).with_path(path[len(base) :] or "/")
        await serve_handler(handler, writer, stripped)

    return HandlerFunc(serve)
