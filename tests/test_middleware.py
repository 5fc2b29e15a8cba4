"""Tests for the ASGI middleware and the scope-backed header bag."""

from __future__ import annotations

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from xff_realip.configs.system import RealIPConfig
from xff_realip.core import ConfigError, RealIPResolver, ScopeHeaders
from xff_realip.middleware import REAL_IP_STATE_KEY, RealIPMiddleware

# =========================================================================
# Helpers
# =========================================================================


class _RecordingApp:
    """Next ASGI app that keeps the scope it was called with."""

    def __init__(self) -> None:
        self.scope: dict | None = None

    async def __call__(self, scope, receive, send) -> None:
        self.scope = scope


async def _receive() -> dict:
    return {"type": "http.request", "body": b"", "more_body": False}


async def _send(message: dict) -> None:
    pass


def _scope(headers: list[tuple[bytes, bytes]], scope_type: str = "http") -> dict:
    return {"type": scope_type, "headers": headers}


def _config(clean: bool = True) -> RealIPConfig:
    return RealIPConfig(excluded_nets=["127.0.0.1/24"], clean_xff=clean)


async def _echo(request: Request) -> JSONResponse:
    return JSONResponse(
        {
            "x_real_ip": request.headers.get("x-real-ip"),
            "x_forwarded_for": request.headers.get("x-forwarded-for"),
            "state_real_ip": request.state.real_ip,
        }
    )


def _client(clean: bool) -> TestClient:
    app = Starlette(
        routes=[Route("/", _echo)],
        middleware=[Middleware(RealIPMiddleware, config=_config(clean))],
    )
    return TestClient(app)


# =========================================================================
# ScopeHeaders
# =========================================================================


class TestScopeHeaders:
    def test_get_all_case_insensitive(self):
        scope = _scope([(b"x-forwarded-for", b"1.1.1.1"), (b"x-forwarded-for", b"2.2.2.2")])
        assert ScopeHeaders(scope).get_all("X-Forwarded-For") == ["1.1.1.1", "2.2.2.2"]

    def test_set_replaces_every_value_in_scope(self):
        scope = _scope([(b"x-forwarded-for", b"1.1.1.1"), (b"x-forwarded-for", b"2.2.2.2")])
        ScopeHeaders(scope).set("X-Forwarded-For", "3.3.3.3")
        assert scope["headers"] == [(b"x-forwarded-for", b"3.3.3.3")]

    def test_delete(self):
        scope = _scope([(b"x-real-ip", b"1.1.1.1"), (b"host", b"example.com")])
        headers = ScopeHeaders(scope)
        headers.delete("X-Real-Ip")
        headers.delete("X-Missing")
        assert scope["headers"] == [(b"host", b"example.com")]


# =========================================================================
# Middleware (raw ASGI)
# =========================================================================


class TestRealIPMiddleware:
    def test_invalid_config_fails_at_construction(self):
        with pytest.raises(ConfigError):
            RealIPMiddleware(_RecordingApp(), config=RealIPConfig(excluded_nets=["10.0.0.1"]))

    def test_accepts_prebuilt_resolver(self):
        resolver = RealIPResolver.from_config(_config())
        middleware = RealIPMiddleware(_RecordingApp(), resolver=resolver)
        assert middleware.resolver is resolver

    @pytest.mark.asyncio
    async def test_http_scope_rewritten(self):
        inner = _RecordingApp()
        middleware = RealIPMiddleware(inner, config=_config(clean=True))
        scope = _scope([(b"x-forwarded-for", b"127.0.0.2, 203.0.113.9")])

        await middleware(scope, _receive, _send)

        assert inner.scope is scope
        assert (b"x-real-ip", b"203.0.113.9") in scope["headers"]
        assert (b"x-forwarded-for", b"203.0.113.9") in scope["headers"]
        assert scope["state"][REAL_IP_STATE_KEY] == "203.0.113.9"

    @pytest.mark.asyncio
    async def test_websocket_scope_handled(self):
        inner = _RecordingApp()
        middleware = RealIPMiddleware(inner, config=_config(clean=False))
        scope = _scope([(b"cf-connecting-ip", b"198.51.100.7")], scope_type="websocket")

        await middleware(scope, _receive, _send)

        assert scope["state"][REAL_IP_STATE_KEY] == "198.51.100.7"

    @pytest.mark.asyncio
    async def test_none_found_recorded_as_none(self):
        inner = _RecordingApp()
        middleware = RealIPMiddleware(inner, config=_config(clean=False))
        scope = _scope([(b"x-forwarded-for", b"127.0.0.2"), (b"x-real-ip", b"6.6.6.6")])

        await middleware(scope, _receive, _send)

        assert scope["state"][REAL_IP_STATE_KEY] is None
        assert scope["headers"] == [(b"x-forwarded-for", b"127.0.0.2")]

    @pytest.mark.asyncio
    async def test_lifespan_scope_passed_through(self):
        inner = _RecordingApp()
        middleware = RealIPMiddleware(inner, config=_config())
        scope = {"type": "lifespan"}

        await middleware(scope, _receive, _send)

        assert inner.scope == {"type": "lifespan"}


# =========================================================================
# Middleware (through a Starlette app)
# =========================================================================


class TestRealIPMiddlewareApp:
    def test_excluded_only_clean(self):
        body = _client(clean=True).get("/", headers={"X-Forwarded-For": "127.0.0.2"}).json()
        assert body == {"x_real_ip": None, "x_forwarded_for": None, "state_real_ip": None}

    def test_admissible_clean(self):
        body = _client(clean=True).get("/", headers={"X-Forwarded-For": "10.0.0.1"}).json()
        assert body["x_real_ip"] == "10.0.0.1"
        assert body["x_forwarded_for"] == "10.0.0.1"
        assert body["state_real_ip"] == "10.0.0.1"

    def test_cdn_header_priority(self):
        body = (
            _client(clean=True)
            .get("/", headers={"X-Forwarded-For": "127.0.0.2", "Cf-Connecting-Ip": "10.0.0.1"})
            .json()
        )
        assert body["x_real_ip"] == "10.0.0.1"
        assert body["x_forwarded_for"] == "10.0.0.1"

    def test_admissible_no_clean(self):
        body = _client(clean=False).get("/", headers={"X-Forwarded-For": "10.0.0.1"}).json()
        assert body["x_real_ip"] == "10.0.0.1"
        assert body["x_forwarded_for"] == "10.0.0.1"

    def test_excluded_only_no_clean(self):
        body = _client(clean=False).get("/", headers={"X-Forwarded-For": "127.0.0.2"}).json()
        assert body["x_real_ip"] is None
        assert body["x_forwarded_for"] == "127.0.0.2"

    def test_spoofed_real_ip_header_removed(self):
        body = _client(clean=False).get("/", headers={"X-Real-Ip": "6.6.6.6"}).json()
        assert body["x_real_ip"] is None
