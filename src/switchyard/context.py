"""Request-scoped context via ContextVar.

Provides ``request_var``: the routed ``Request`` for this task/thread.
Set by ``Mux.dispatch`` for the duration of the handler chain and reset
afterwards. Accessing it outside a dispatch raises ``LookupError``.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading (3.14t). No locks needed. Handlers offloaded to a
    worker thread see the same value: anyio copies the context.
"""

from contextvars import ContextVar

from switchyard.http.request import Request

request_var: ContextVar[Request] = ContextVar("switchyard_request")
"""The current routed request. Set by the mux before invoking handlers."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()
