"""Tests for the ``get_real_ip`` request dependency."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

from xff_realip.real_ip import get_real_ip


class _FakeRequest:
    """Minimal stand-in for ``fastapi.Request``."""

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        client_host: str | None = None,
        **state: str | None,
    ) -> None:
        self.headers = headers or {}
        self.client = MagicMock(host=client_host) if client_host else None
        self.state = SimpleNamespace(**state)


class TestGetRealIP:
    def test_state_preferred(self):
        req = _FakeRequest(
            headers={"X-Real-Ip": "5.6.7.8"},
            client_host="10.0.0.1",
            real_ip="1.2.3.4",
        )
        assert get_real_ip(req) == "1.2.3.4"

    def test_header_fallback(self):
        req = _FakeRequest(headers={"X-Real-Ip": " 5.6.7.8 "}, client_host="10.0.0.1")
        assert get_real_ip(req) == "5.6.7.8"

    def test_unresolved_state_falls_back_to_client(self):
        req = _FakeRequest(client_host="10.0.0.1", real_ip=None)
        assert get_real_ip(req) == "10.0.0.1"

    def test_unresolved_state_ignores_header(self):
        req = _FakeRequest(
            headers={"X-Real-Ip": "6.6.6.6"}, client_host="10.0.0.1", real_ip=None
        )
        assert get_real_ip(req) == "10.0.0.1"

    def test_no_client_returns_unknown(self):
        assert get_real_ip(_FakeRequest()) == "unknown"
