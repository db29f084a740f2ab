"""Switchyard exception hierarchy.

Shared across the trie, the route entries, the middleware stack and the
mux so every module raises and catches the same types.
"""

from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when the mux is misused at registration time.

    Empty patterns, missing handlers, non-callable middleware and
    reconfiguring a route that already served traffic all land here.
    These are programmer errors; request traffic never raises them.
    """


class DuplicateRouteError(ConfigurationError):
    """Raised when a canonical pattern is registered twice."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(f"multiple registrations for {pattern}")


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    The mux never raises these from ``dispatch``; the synthesized
    handlers render them into the response writer instead.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request path."""

    def __init__(self, detail: str = "404 page not found\n") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: the route exists but does not accept this method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or "405 method not allowed\n",
            headers=(("Allow", allow_value),),
        )
