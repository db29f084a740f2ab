"""Switchyard — an HTTP request multiplexer for ASGI.

Routes each request by canonical path to exactly one handler: exact
patterns match one path, patterns ending in ``/`` match a whole subtree,
and the longest one wins. Handlers run wrapped in an ordered middleware
stack. Route lookup is safe under concurrent registration.

Basic usage::

    from switchyard import Mux

    mux = Mux()

    @mux.route("/")
    def index(w, r):
        w.write("hello\\n")

    @mux.route("/users/me", methods=["GET"])
    async def me(w, r):
        w.write("me\\n")

    # serve with any ASGI server: uvicorn module:mux
"""

# Declare free-threading support (PEP 703)
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DuplicateRouteError",
    "Entry",
    "Handler",
    "HandlerFunc",
    "Middleware",
    "Mux",
    "MuxConfig",
    "Request",
    "RequestLogger",
    "ResponseWriter",
    "SwitchyardError",
    "canonicalize",
    "get_request",
    "serve_handler",
    "strip_prefix",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "Mux":
        from switchyard.mux import Mux

        return Mux

    if name == "MuxConfig":
        from switchyard.config import MuxConfig

        return MuxConfig

    if name == "Request":
        from switchyard.http.request import Request

        return Request

    if name == "ResponseWriter":
        from switchyard.http.response import ResponseWriter

        return ResponseWriter

    if name == "Entry":
        from switchyard.routing.entry import Entry

        return Entry

    if name == "canonicalize":
        from switchyard.routing.canonical import canonicalize

        return canonicalize

    if name in ("Handler", "HandlerFunc", "serve_handler", "strip_prefix"):
        from switchyard import handlers as _handlers

        return getattr(_handlers, name)

    if name == "Middleware":
        from switchyard.middleware.protocol import Middleware

        return Middleware

    if name == "RequestLogger":
        from switchyard.middleware.builtin import RequestLogger

        return RequestLogger

    if name == "get_request":
        from switchyard.context import get_request

        return get_request

    if name in ("ConfigurationError", "DuplicateRouteError", "SwitchyardError"):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
