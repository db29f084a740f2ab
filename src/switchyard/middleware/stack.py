"""Ordered middleware stack.

Appended in order ``m1, m2, ..., mn``, the stack wraps a handler as
``m1(m2(...mn(h)))``: ``m1`` sees the request first and the response
last. The stack itself is not locked; ``Mux`` guards it with the same
reader/writer lock as the route trie and dispatches against a
``snapshot()``.
"""

from collections.abc import Iterable

from switchyard.errors import ConfigurationError
from switchyard.handlers import Handler, is_handler
from switchyard.middleware.protocol import Middleware


def compose(middleware: Iterable[Middleware], handler: Handler) -> Handler:
    """Right-fold *middleware* around *handler*.

    Raises ``ConfigurationError`` if a middleware returns something that
    is not a handler.
    """
    for mw in reversed(tuple(middleware)):
        wrapped = mw(handler)
        if not is_handler(wrapped):
            name = getattr(mw, "__qualname__", type(mw).__name__)
            msg = f"middleware {name} returned {type(wrapped).__name__}, not a handler"
            raise ConfigurationError(msg)
        handler = wrapped
    return handler


class MiddlewareStack:
    """Append-only list of handler transformers."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: tuple[Middleware, ...] = ()

    def __len__(self) -> int:
        return len(self._items)

    def append(self, *middleware: Middleware) -> None:
        """Push *middleware* onto the tail, in order."""
        for mw in middleware:
            if not callable(mw):
                msg = f"middleware must be callable, got {type(mw).__name__}"
                raise ConfigurationError(msg)
        self._items = (*self._items, *middleware)

    def snapshot(self) -> tuple[Middleware, ...]:
        """The current middleware, as an immutable tuple."""
        return self._items

    def wrap(self, handler: Handler) -> Handler:
        """Return *handler* wrapped by every middleware in the stack."""
        return compose(self._items, handler)
