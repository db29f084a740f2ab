"""The multiplexer.

Registration writes into the route trie under an exclusive lock.
Dispatch reads the trie under a shared lock, picks one handler, wraps
it in the middleware stack and runs it outside the lock, so a slow
handler never holds up registration.
"""

import logging
from collections.abc import Callable

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.types import HandlerFunction
from switchyard.config import MuxConfig
from switchyard.context import request_var
from switchyard.errors import ConfigurationError
from switchyard.handlers import (
    Handler,
    HandlerFunc,
    is_handler,
    method_not_allowed_handler,
    not_found_handler,
    offloaded,
    redirect_handler,
    serve_handler,
)
from switchyard.http.request import Request
from switchyard.http.response import ResponseWriter
from switchyard.middleware.protocol import Middleware
from switchyard.middleware.stack import MiddlewareStack, compose
from switchyard.routing.canonical import canonicalize, escape_path
from switchyard.routing.entry import Entry
from switchyard.routing.rwlock import RWLock
from switchyard.routing.trie import RouteTrie

logger = logging.getLogger("switchyard.mux")


class Mux:
    """HTTP request multiplexer and ASGI application.

    Usage::

        mux = Mux()
        mux.handle_func("/", index)                 # prefix: everything
        mux.handle_func("/users/", users)           # prefix: /users/...
        mux.handle_func("/users/me", me).allow("GET")
        mux.use(RequestLogger())

        # any ASGI server
        uvicorn.run(mux)

    Thread safety:
        Registration and dispatch may run concurrently from any number
        of threads or tasks. A completed ``handle()`` is visible to every
        ``resolve()`` that starts after it returns.
    """

    __slots__ = ("_lock", "_middleware", "_trie", "config")

    def __init__(self, config: MuxConfig | None = None) -> None:
        self.config: MuxConfig = config or MuxConfig()
        self._lock = RWLock()
        self._trie = RouteTrie()
        self._middleware = MiddlewareStack()

    def __repr__(self) -> str:
        return f"Mux(routes={len(self._trie)}, middleware={len(self._middleware)})"

    # -- Registration --

    def handle(self, pattern: str, handler: Handler) -> Entry:
        """Register *handler* for *pattern* and return its route entry.

        Patterns ending in ``/`` match every path below them; other
        patterns match one path exactly. Raises ``ConfigurationError``
        for an empty pattern or a missing handler and
        ``DuplicateRouteError`` if the canonical pattern is taken.
        """
        if not isinstance(pattern, str) or not pattern:
            msg = f"invalid pattern {pattern!r}"
            raise ConfigurationError(msg)
        if handler is None:
            msg = f"nil handler for pattern {pattern!r}"
            raise ConfigurationError(msg)
        if not is_handler(handler):
            msg = (
                f"{type(handler).__name__} has no serve() method; "
                "use handle_func() to register a plain function"
            )
            raise ConfigurationError(msg)

        canonical = canonicalize(pattern)
        entry = Entry(canonical, handler)
        with self._lock.write():
            self._trie.insert(canonical, entry)
        logger.debug("registered %s -> %r", canonical, handler)
        return entry

    def handle_func(self, pattern: str, func: HandlerFunction) -> Entry:
        """Register a plain ``(writer, request)`` function for *pattern*."""
        if func is None:
            msg = f"nil handler for pattern {pattern!r}"
            raise ConfigurationError(msg)
        return self.handle(pattern, HandlerFunc(func))

    def route(
        self,
        pattern: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[HandlerFunction], HandlerFunction]:
        """Register a handler function via decorator.

        Args:
            pattern: Exact (``/users/me``) or prefix (``/users/``) pattern.
            methods: Restrict the route to these HTTP methods.
            name: Optional route name for introspection.
        """

        def decorator(func: HandlerFunction) -> HandlerFunction:
            entry = self.handle_func(pattern, func)
            if methods:
                entry.allow(*methods)
            if name:
                entry.named(name)
            return func

        return decorator

    def use(self, *middleware: Middleware) -> None:
        """Append *middleware*; the first one appended runs outermost."""
        with self._lock.write():
            self._middleware.append(*middleware)
            depth = len(self._middleware)
        logger.debug("middleware stack now %d deep", depth)

    @property
    def routes(self) -> list[Entry]:
        """All registered entries, ordered by pattern."""
        with self._lock.read():
            return list(self._trie.entries())

    # -- Lookup --

    def resolve(self, request: Request) -> tuple[Handler, Request]:
        """Pick the handler for *request* without running it.

        Always returns a handler: the matched route's, a redirect, a 405
        or a 404. The returned request carries the canonical path and,
        on a match, the route entry in ``request.route``.
        """
        handler, routed, _ = self._resolve(request)
        return handler, routed

    def _resolve(
        self, request: Request
    ) -> tuple[Handler, Request, tuple[Middleware, ...]]:
        path = canonicalize(request.path)
        with self._lock.read():
            match = self._trie.match(path)
            middleware = self._middleware.snapshot()

        if self.config.redirect_unclean_paths and path != request.path:
            target = request.query.attach(escape_path(path))
            return redirect_handler(target, self.config.redirect_status), request, middleware

        if match.entry is not None:
            entry = match.entry
            entry.freeze()
            routed = request.with_path(path).with_route(entry)
            if not entry.allows(request.method):
                return method_not_allowed_handler(entry.allowed_methods()), routed, middleware
            return entry.handler, routed, middleware

        if match.redirect is not None:
            target = request.query.attach(escape_path(match.redirect))
            return redirect_handler(target, self.config.redirect_status), request, middleware

        return not_found_handler(self.config.not_found_body), request, middleware

    # -- Dispatch --

    async def dispatch(self, writer: ResponseWriter, request: Request) -> None:
        """Route *request* and run the winning handler through the middleware.

        ``OPTIONS *`` style requests (request-URI ``*``) are rejected with
        400 before routing. Handler exceptions propagate to the caller.
        """
        if request.request_uri == "*":
            if request.proto_at_least(1, 1):
                writer.headers["Connection"] = "close"
            writer.write_header(400)
            return

        handler, routed, middleware = self._resolve(request)
        if self.config.offload_sync_handlers:
            handler = offloaded(handler)
        handler = compose(middleware, handler)

        token = request_var.set(routed)
        try:
            await serve_handler(handler, writer, routed)
        finally:
            request_var.reset(token)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Acknowledges lifespan scopes, dispatches HTTP scopes and flushes
        the buffered response through ``send``.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            msg = f"unsupported ASGI scope type {scope['type']!r}"
            raise ValueError(msg)

        request = Request.from_asgi(scope, receive)
        writer = ResponseWriter()
        await self.dispatch(writer, request)
        await writer.flush(send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol. The mux has no startup work."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
