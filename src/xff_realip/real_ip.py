"""Real client IP lookup for request handlers.

``RealIPMiddleware`` stores the resolved address on the request state.
Handlers read it through ``get_real_ip`` in this order:

1. ``request.state.real_ip`` — set by the middleware, even when ``None``
2. the ``X-Real-Ip`` header — only when the middleware is not installed
3. ``request.client.host`` — last resort (local dev / direct access)

Once the middleware has run, an unresolved request never falls back to a
real-IP header: the middleware only controls its configured output header,
so any other one may come straight from the client.
"""

from __future__ import annotations

from fastapi import Request

from xff_realip.configs.system import DEFAULT_REAL_IP_HEADER
from xff_realip.middleware import REAL_IP_STATE_KEY

_DEFAULT_UNKNOWN_IP = "unknown"
_UNSET = object()


def get_real_ip(request: Request) -> str:
    """Return the real client IP for ``request``.

    Usable as a FastAPI dependency::

        real_ip: str = Depends(get_real_ip)
    """
    resolved = getattr(request.state, REAL_IP_STATE_KEY, _UNSET)
    if isinstance(resolved, str) and resolved:
        return resolved

    if resolved is _UNSET:
        header = request.headers.get(DEFAULT_REAL_IP_HEADER)
        if header:
            return header.strip()

    if request.client:
        return request.client.host

    return _DEFAULT_UNKNOWN_IP
