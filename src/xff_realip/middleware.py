"""ASGI middleware that resolves the real client IP before the next app.

The resolver is built once, when the middleware is constructed, so an
invalid ``excluded_nets`` entry stops the application from starting
instead of letting requests through with a partial rule set.
"""

from __future__ import annotations

from starlette.types import ASGIApp, Receive, Scope, Send

from xff_realip.configs.system import RealIPConfig
from xff_realip.core import RealIPResolver, ScopeHeaders

REAL_IP_STATE_KEY = "real_ip"

_HANDLED_SCOPES = ("http", "websocket")


class RealIPMiddleware:
    """Rewrite forwarding headers and expose the resolved IP on ``scope["state"]``."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        resolver: RealIPResolver | None = None,
        config: RealIPConfig | None = None,
    ) -> None:
        if resolver is None:
            resolver = RealIPResolver.from_config(config or RealIPConfig())
        self.app = app
        self.resolver = resolver

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] in _HANDLED_SCOPES:
            resolution = self.resolver.resolve(ScopeHeaders(scope))
            scope.setdefault("state", {})[REAL_IP_STATE_KEY] = resolution.real_ip

        await self.app(scope, receive, send)
