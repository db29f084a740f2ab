"""Tests for switchyard.http.headers."""

import pytest

from switchyard.http.headers import Headers, MutableHeaders


def _h(*pairs: tuple[str, str]) -> Headers:
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_lookup_ignores_case(self) -> None:
        h = _h(("X-Forwarded-For", "10.0.0.1"))
        assert h["x-forwarded-for"] == "10.0.0.1"
        assert h["X-FORWARDED-FOR"] == "10.0.0.1"

    def test_missing(self) -> None:
        h = _h(("Accept", "*/*"))
        with pytest.raises(KeyError):
            h["Host"]
        assert h.get("Host") is None
        assert h.get("Host", "example.com") == "example.com"
        assert 7 not in h  # type: ignore[operator]

    def test_repeated_values(self) -> None:
        h = _h(("Accept", "text/plain"), ("Host", "a"), ("accept", "text/html"))
        assert h["accept"] == "text/plain"
        assert h.get_list("ACCEPT") == ["text/plain", "text/html"]
        assert list(h) == ["accept", "host"]
        assert len(h) == 2

    def test_raw_round_trip(self) -> None:
        raw = ((b"host", b"example.com"),)
        assert Headers(raw).raw is raw


class TestMutableHeaders:
    def test_set_replaces(self) -> None:
        h = MutableHeaders()
        h["Vary"] = "Accept"
        h["vary"] = "Cookie"
        assert h.get_list("Vary") == ["Cookie"]

    def test_add_appends(self) -> None:
        h = MutableHeaders({"Set-Cookie": "a=1"})
        h.add("set-cookie", "b=2")
        assert h["Set-Cookie"] == "a=1"
        assert h.raw() == [(b"set-cookie", b"a=1"), (b"set-cookie", b"b=2")]

    def test_delete_and_contains(self) -> None:
        h = MutableHeaders({"Location": "/x"})
        assert "location" in h
        del h["LOCATION"]
        assert "location" not in h
        assert len(h) == 0

    def test_copy_is_independent(self) -> None:
        h = MutableHeaders({"Allow": "GET"})
        clone = h.copy()
        clone.add("Allow", "POST")
        h["X-Extra"] = "1"
        assert h.get_list("allow") == ["GET"]
        assert clone.get_list("allow") == ["GET", "POST"]
        assert "x-extra" not in clone
