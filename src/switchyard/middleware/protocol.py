"""Middleware protocol.

A middleware is any callable matching::

    def my_mw(next_handler: Handler) -> Handler: ...

No base class required. The stack checks the shape, not the lineage.
The returned handler decides whether, and when, to call the handler it
wraps (via ``serve_handler``).
"""

from typing import Protocol

from switchyard.handlers import Handler


class Middleware(Protocol):
    """Protocol for switchyard middleware.

    Accepts both functions and callable objects::

        # Function middleware
        def server_header(next_handler: Handler) -> Handler:
            async def serve(w, r):
                w.headers["Server"] = "switchyard"
                await serve_handler(next_handler, w, r)
            return HandlerFunc(serve)

        # Class middleware
        class RequestLogger:
            def __call__(self, next_handler: Handler) -> Handler:
                ...
    """

    def __call__(self, next_handler: Handler) -> Handler: ...
