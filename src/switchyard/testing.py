"""Async test client for switchyard muxes.

Sends requests through the ASGI interface directly, without sockets or a
server. Useful for exercising the full dispatch path, including the
request-URI forms an HTTP client library would never send (``*``).
"""

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, unquote

from switchyard.http.headers import Headers
from switchyard.mux import Mux


@dataclass(frozen=True, slots=True)
class TestResponse:
    """A captured response."""

    __test__ = False  # Tell pytest this is not a test class

    status: int
    headers: Headers
    body: bytes

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def header(self, name: str) -> str | None:
        """Return the first value of header *name*, or ``None``."""
        return self.headers.get(name)


class TestClient:
    """Async test client for a ``Mux``.

    Usage::

        client = TestClient(mux)
        response = await client.get("/users/me?x=1")
        assert response.status == 200

        response = await client.request("OPTIONS", "*")
        assert response.status == 400
    """

    __test__ = False  # Tell pytest this is not a test class

    __slots__ = ("app",)

    def __init__(self, app: Mux) -> None:
        self.app = app

    async def get(self, target: str, *, headers: dict[str, str] | None = None) -> TestResponse:
        """Send a GET request."""
        return await self.request("GET", target, headers=headers)

    async def head(self, target: str, *, headers: dict[str, str] | None = None) -> TestResponse:
        """Send a HEAD request."""
        return await self.request("HEAD", target, headers=headers)

    async def post(
        self,
        target: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> TestResponse:
        """Send a POST request."""
        return await self.request("POST", target, headers=headers, body=body)

    async def request(
        self,
        method: str,
        target: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        http_version: str = "1.1",
    ) -> TestResponse:
        """Send *method* to the request *target* (path plus query, or ``*``).

        The path may be percent-encoded or plain Unicode; handlers see it
        decoded, as an ASGI server would deliver it.
        """
        if "?" in target:
            path_part, query_string = target.split("?", 1)
        else:
            path_part, query_string = target, ""

        raw_headers: list[tuple[bytes, bytes]] = []
        for name, value in (headers or {}).items():
            raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": http_version,
            "method": method.upper(),
            "path": unquote(path_part),
            "raw_path": quote(path_part, safe="/%:@!$&'()*+,;=").encode("ascii"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body or b"", "more_body": False}
            return {"type": "http.disconnect"}

        status = 0
        response_headers: list[tuple[bytes, bytes]] = []
        chunks: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
                response_headers.extend(message.get("headers", []))
            elif message["type"] == "http.response.body":
                chunks.append(message.get("body", b""))

        await self.app(scope, receive, send)
        return TestResponse(
            status=status,
            headers=Headers(tuple(response_headers)),
            body=b"".join(chunks),
        )
