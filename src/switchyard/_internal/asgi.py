"""Typed ASGI definitions.

Replaces the standard Scope = MutableMapping[str, Any] with typed
dataclasses for internal use. Users never see these.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from dataclasses import dataclass
from typing import Any, TypeAlias

# Raw ASGI types (matching the spec)
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class HTTPScope:
    """Typed HTTP scope parsed from raw ASGI scope dict.

    Internal only -- users interact with Request, not this.
    """

    method: str
    path: str
    raw_path: bytes
    query_string: bytes
    http_version: str
    headers: tuple[tuple[bytes, bytes], ...]
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    @classmethod
    def from_scope(cls, scope: Scope) -> "HTTPScope":
        """Parse raw ASGI scope into typed object."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            raw_path=scope.get("raw_path") or b"",
            query_string=scope.get("query_string", b""),
            http_version=scope.get("http_version", "1.1"),
            headers=tuple((bytes(k), bytes(v)) for k, v in scope.get("headers", ())),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )

    @property
    def request_uri(self) -> str:
        """The request target as sent on the request line.

        Falls back to the decoded path when the server did not supply
        ``raw_path``.
        """
        target = self.raw_path.decode("latin-1") if self.raw_path else self.path
        if self.query_string:
            return f"{target}?{self.query_string.decode('latin-1')}"
        return target
