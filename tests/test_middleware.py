"""Tests for switchyard.middleware: stack composition and built-ins."""

import logging

import pytest

from switchyard.errors import ConfigurationError
from switchyard.handlers import Handler, HandlerFunc, serve_handler
from switchyard.http.request import Request
from switchyard.http.response import ResponseWriter
from switchyard.middleware import MiddlewareStack, RequestLogger, RequestLoggerConfig, compose
from switchyard.mux import Mux
from switchyard.testing import TestClient


def _recording(name: str, log: list[str]):
    def middleware(next_handler: Handler) -> Handler:
        async def serve(w: ResponseWriter, r: Request) -> None:
            log.append(name)
            await serve_handler(next_handler, w, r)
            log.append(f"/{name}")

        return HandlerFunc(serve)

    middleware.__qualname__ = name
    return middleware


class TestMiddlewareStack:
    def test_append_preserves_order(self) -> None:
        log: list[str] = []
        m1, m2, m3 = (_recording(n, log) for n in ("m1", "m2", "m3"))
        stack = MiddlewareStack()
        stack.append(m1)
        stack.append(m2, m3)
        assert stack.snapshot() == (m1, m2, m3)
        assert len(stack) == 3

    def test_append_rejects_non_callable(self) -> None:
        stack = MiddlewareStack()
        with pytest.raises(ConfigurationError):
            stack.append("not-middleware")  # type: ignore[arg-type]
        assert len(stack) == 0

    def test_snapshot_is_stable(self) -> None:
        log: list[str] = []
        stack = MiddlewareStack()
        stack.append(_recording("m1", log))
        snap = stack.snapshot()
        stack.append(_recording("m2", log))
        assert len(snap) == 1

    @pytest.mark.asyncio
    async def test_wrap_runs_first_appended_outermost(self) -> None:
        log: list[str] = []
        stack = MiddlewareStack()
        stack.append(_recording("m1", log), _recording("m2", log))

        handler = stack.wrap(HandlerFunc(lambda w, r: log.append("handler")))
        await serve_handler(handler, ResponseWriter(), Request())

        assert log == ["m1", "m2", "handler", "/m2", "/m1"]

    def test_empty_wrap_is_identity(self) -> None:
        handler = HandlerFunc(lambda w, r: None)
        assert MiddlewareStack().wrap(handler) is handler

    def test_compose_rejects_non_handler_result(self) -> None:
        def broken(next_handler: Handler) -> Handler:
            return lambda w, r: None  # type: ignore[return-value]

        with pytest.raises(ConfigurationError, match="not a handler"):
            compose([broken], HandlerFunc(lambda w, r: None))


class TestMiddlewareOnMux:
    @pytest.mark.asyncio
    async def test_dispatch_order(self) -> None:
        log: list[str] = []
        mux = Mux()
        mux.use(_recording("m1", log))
        mux.use(_recording("m2", log))
        mux.handle_func("/", lambda w, r: log.append("handler"))

        response = await TestClient(mux).get("/")

        assert response.status == 200
        assert log[:3] == ["m1", "m2", "handler"]

    @pytest.mark.asyncio
    async def test_middleware_wraps_synthesized_handlers(self) -> None:
        log: list[str] = []
        mux = Mux()
        mux.use(_recording("m1", log))

        response = await TestClient(mux).get("/missing")

        assert response.status == 404
        assert log == ["m1", "/m1"]

    @pytest.mark.asyncio
    async def test_middleware_can_short_circuit(self) -> None:
        def deny(next_handler: Handler) -> Handler:
            def serve(w: ResponseWriter, r: Request) -> None:
                w.write_header(403)

            return HandlerFunc(serve)

        called: list[bool] = []
        mux = Mux()
        mux.use(deny)
        mux.handle_func("/", lambda w, r: called.append(True))

        response = await TestClient(mux).get("/")

        assert response.status == 403
        assert called == []

    @pytest.mark.asyncio
    async def test_middleware_sees_matched_route(self) -> None:
        seen: list[str | None] = []

        def spy(next_handler: Handler) -> Handler:
            async def serve(w: ResponseWriter, r: Request) -> None:
                seen.append(r.route.pattern if r.route else None)
                await serve_handler(next_handler, w, r)

            return HandlerFunc(serve)

        mux = Mux()
        mux.use(spy)
        mux.handle_func("/users/", lambda w, r: None)

        await TestClient(mux).get("/users/42")
        await TestClient(mux).get("/elsewhere")

        assert seen == ["/users/", None]


class TestRequestLogger:
    @pytest.mark.asyncio
    async def test_logs_one_line_per_request(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = Mux()
        mux.use(RequestLogger())

        def created(w: ResponseWriter, r: Request) -> None:
            w.write_header(201)

        mux.handle_func("/items/", created)

        with caplog.at_level(logging.INFO, logger="switchyard.access"):
            await TestClient(mux).post("/items/1?secret=x")

        records = [r for r in caplog.records if r.name == "switchyard.access"]
        assert len(records) == 1
        message = records[0].getMessage()
        assert "POST /items/1 201" in message
        assert "route=/items/" in message
        assert "secret" not in message

    @pytest.mark.asyncio
    async def test_include_query(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = Mux()
        mux.use(RequestLogger(RequestLoggerConfig(include_query=True)))
        mux.handle_func("/", lambda w, r: None)

        with caplog.at_level(logging.INFO, logger="switchyard.access"):
            await TestClient(mux).get("/?page=2")

        assert any("GET /?page=2 200" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_logs_and_reraises_handler_errors(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        mux = Mux()
        mux.use(RequestLogger())

        def boom(w: ResponseWriter, r: Request) -> None:
            raise RuntimeError("boom")

        mux.handle_func("/", boom)

        with caplog.at_level(logging.INFO, logger="switchyard.access"), pytest.raises(
            RuntimeError
        ):
            await TestClient(mux).get("/")

        assert any(r.levelno == logging.ERROR for r in caplog.records)
