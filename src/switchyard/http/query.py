"""Request query string.

The mux never interprets the query; it only carries it, byte for byte,
onto redirect targets. Parsing happens on first use, for handlers that
ask for a value.
"""

from urllib.parse import parse_qs


class QueryParams:
    """The query string of one request.

    ``raw`` is the undecoded string without the leading ``?``. ``attach``
    puts it back onto a path unchanged, so ``/a?x=%2F&x=1`` redirects to
    ``/a/?x=%2F&x=1`` and not to a re-encoded variant.
    """

    __slots__ = ("_parsed", "raw")

    def __init__(self, query_string: bytes | str = b"") -> None:
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        self.raw: str = query_string
        self._parsed: dict[str, list[str]] | None = None

    def __bool__(self) -> bool:
        return bool(self.raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryParams):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self) -> int:
        return hash(self.raw)

    def __repr__(self) -> str:
        return f"QueryParams({self.raw!r})"

    def __contains__(self, key: object) -> bool:
        return key in self._values()

    def attach(self, path: str) -> str:
        """Return *path* followed by ``?`` and the raw query, if there is one."""
        if self.raw:
            return f"{path}?{self.raw}"
        return path

    def get(self, key: str, default: str | None = None) -> str | None:
        """First decoded value for *key*, or *default*."""
        values = self._values().get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Every decoded value for *key*, in order."""
        return list(self._values().get(key, ()))

    def _values(self) -> dict[str, list[str]]:
        # Racing first calls parse the same string; either result is kept.
        if self._parsed is None:
            self._parsed = parse_qs(self.raw, keep_blank_values=True)
        return self._parsed
