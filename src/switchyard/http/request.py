"""Immutable HTTP request.

Frozen metadata with async body access. The mux never mutates a request;
routing produces a new one through ``with_path()`` / ``with_route()``.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from switchyard._internal.asgi import HTTPScope, Receive, Scope
from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams

if TYPE_CHECKING:
    from switchyard.routing.entry import Entry


async def _no_body() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``request_uri`` is the raw request target (``*`` for server-wide
    ``OPTIONS *``); ``path`` is the decoded path the mux routes on.
    ``values`` carries per-request data for middleware, and ``route``
    holds the matched ``Entry`` once the mux has resolved the request.
    """

    method: str = "GET"
    path: str = "/"
    query: QueryParams = field(default_factory=QueryParams)
    headers: Headers = field(default_factory=Headers)
    http_version: str = "1.1"
    request_uri: str = ""
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None
    values: Mapping[str, Any] = field(default_factory=dict)
    route: Entry | None = None

    # Private: ASGI receive callable; also the disconnect channel
    _receive: Receive = _no_body

    # Private: mutable cache for the body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.request_uri:
            object.__setattr__(self, "request_uri", self.url)

    # -- Computed properties --

    @property
    def raw_query(self) -> str:
        """The query string without the leading ``?``."""
        return self.query.raw

    @property
    def url(self) -> str:
        """Path plus query string."""
        return self.query.attach(self.path)

    @property
    def receive(self) -> Receive:
        """The ASGI receive channel, passed through untouched."""
        return self._receive

    def proto_at_least(self, major: int, minor: int) -> bool:
        """Whether the request protocol is at least HTTP/*major*.*minor*."""
        return _parse_version(self.http_version) >= (major, minor)

    # -- Derived requests --

    def with_path(self, path: str) -> Request:
        """Return a copy routed under *path*."""
        return replace(self, path=path)

    def with_route(self, route: Entry | None) -> Request:
        """Return a copy carrying the matched route entry."""
        return replace(self, route=route)

    def with_value(self, key: str, value: Any) -> Request:
        """Return a copy with *key* set in ``values``."""
        return replace(self, values={**self.values, key: value})

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached: the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            if message.get("type") == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        parsed = HTTPScope.from_scope(scope)
        return cls(
            method=parsed.method,
            path=parsed.path,
            query=QueryParams(parsed.query_string),
            headers=Headers(parsed.headers),
            http_version=parsed.http_version,
            request_uri=parsed.request_uri,
            server=parsed.server,
            client=parsed.client,
            _receive=receive,
        )


def _parse_version(version: str) -> tuple[int, int]:
    """``"1.1"`` -> ``(1, 1)``; ``"2"`` -> ``(2, 0)``. Unknown -> ``(0, 0)``."""
    major, _, minor = version.removeprefix("HTTP/").partition(".")
    try:
        return int(major), int(minor or 0)
    except ValueError:
        return 0, 0
