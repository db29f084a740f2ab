"""Buffered response writer.

Handlers fill a ``ResponseWriter`` (header map, status line, body)
and the mux flushes it to ASGI ``send()`` once the handler returns.
Buffering lets sync and async handlers share the same writer.
"""

import logging

from switchyard._internal.asgi import Send
from switchyard.http.headers import MutableHeaders

logger = logging.getLogger("switchyard.http")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


class ResponseWriter:
    """Collects a single HTTP response.

    ``headers`` is mutable until the status is written. ``write_header``
    fixes the status and snapshots the headers; later calls are ignored.
    ``write`` implies ``write_header(200)`` when no status was written.

    Usage::

        def serve(w: ResponseWriter, r: Request) -> None:
            w.headers["Content-Type"] = "text/plain; charset=utf-8"
            w.write_header(201)
            w.write("created\\n")
    """

    __slots__ = ("_chunks", "_sent_headers", "_status", "headers")

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self._status: int | None = None
        self._sent_headers: MutableHeaders | None = None
        self._chunks: list[bytes] = []

    @property
    def status(self) -> int:
        """The written status, or 200 if nothing was written yet."""
        return self._status if self._status is not None else 200

    @property
    def written(self) -> bool:
        """True once the status line has been written."""
        return self._status is not None

    @property
    def body(self) -> bytes:
        """Everything written so far."""
        return b"".join(self._chunks)

    @property
    def sent_headers(self) -> MutableHeaders:
        """The headers as they were when the status was written."""
        if self._sent_headers is None:
            return self.headers
        return self._sent_headers

    def write_header(self, status: int) -> None:
        """Write the status line. Only the first call has any effect."""
        if self._status is not None:
            logger.warning(
                "superfluous write_header(%d); status already %d", status, self._status
            )
            return
        if not 100 <= status <= 999:
            msg = f"invalid status code {status}"
            raise ValueError(msg)
        self._status = status
        self._sent_headers = self.headers.copy()

    def write(self, data: str | bytes) -> int:
        """Append *data* to the body and return the number of bytes written."""
        if self._status is None:
            self.write_header(200)
        chunk = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        self._chunks.append(chunk)
        return len(chunk)

    async def flush(self, send: Send) -> None:
        """Translate the buffered response into ASGI send() calls."""
        if self._status is None:
            self.write_header(200)
        status = self.status
        headers = self.sent_headers.copy()

        body = self.body if _body_allowed(status) else b""
        if "content-type" not in headers and body:
            headers["content-type"] = "text/plain; charset=utf-8"
        headers["content-length"] = str(len(body))

        await send(
            {
                "type": "http.response.start",
                "status": status,
                "headers": headers.raw(),
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": body,
            }
        )
