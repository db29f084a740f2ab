"""Tests for switchyard.http.request."""

import dataclasses

import pytest

from switchyard.http.query import QueryParams
from switchyard.http.request import Request
from switchyard.routing.entry import Entry


class TestRequest:
    def test_defaults(self) -> None:
        r = Request()
        assert r.method == "GET"
        assert r.path == "/"
        assert r.request_uri == "/"
        assert r.values == {}
        assert r.route is None

    def test_request_uri_defaults_to_url(self) -> None:
        r = Request(path="/a", query=QueryParams(b"x=1"))
        assert r.url == "/a?x=1"
        assert r.request_uri == "/a?x=1"

    def test_explicit_request_uri_kept(self) -> None:
        r = Request(method="OPTIONS", path="*", request_uri="*")
        assert r.request_uri == "*"

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Request().path = "/x"  # type: ignore[misc]

    @pytest.mark.parametrize(
        ("version", "major", "minor", "expected"),
        [
            ("1.1", 1, 1, True),
            ("1.0", 1, 1, False),
            ("2", 1, 1, True),
            ("HTTP/1.1", 1, 0, True),
            ("bogus", 1, 0, False),
        ],
    )
    def test_proto_at_least(self, version: str, major: int, minor: int, expected: bool) -> None:
        assert Request(http_version=version).proto_at_least(major, minor) is expected


class TestDerivedRequests:
    def test_with_path_leaves_original(self) -> None:
        r = Request(path="/a//b", request_uri="/a//b")
        routed = r.with_path("/a/b")
        assert routed.path == "/a/b"
        assert routed.request_uri == "/a//b"
        assert r.path == "/a//b"

    def test_with_route(self) -> None:
        entry = Entry("/a", object())
        assert Request().with_route(entry).route is entry

    def test_with_value_copies(self) -> None:
        r = Request().with_value("user", "ada")
        r2 = r.with_value("role", "admin")
        assert r.values == {"user": "ada"}
        assert r2.values == {"user": "ada", "role": "admin"}


class TestBody:
    @pytest.mark.asyncio
    async def test_default_body_is_empty(self) -> None:
        assert await Request().body() == b""

    @pytest.mark.asyncio
    async def test_stream_stops_on_disconnect(self) -> None:
        messages = iter(
            [
                {"type": "http.request", "body": b"part", "more_body": True},
                {"type": "http.disconnect"},
            ]
        )

        async def receive() -> dict:
            return next(messages)

        r = Request(method="POST", _receive=receive)
        assert [chunk async for chunk in r.stream()] == [b"part"]
