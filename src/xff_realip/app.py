"""FastAPI application entry point."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from xff_realip.configs.config import AppConfig, get_app_config
from xff_realip.core import RealIPResolver
from xff_realip.infra.logging import setup_logging
from xff_realip.middleware import RealIPMiddleware
from xff_realip.real_ip import get_real_ip

logger = logging.getLogger(__name__)

RealIPDep = Annotated[str, Depends(get_real_ip)]


def get_app(config: AppConfig | None = None) -> FastAPI:
    """Create the application with real-IP resolution in front of every route.

    Raises:
        ConfigError: when ``config.real_ip.excluded_nets`` holds an invalid CIDR.
    """
    if config is None:
        config = get_app_config()

    setup_logging(config.logging)

    app = FastAPI(
        title="xff-realip",
        description="Real client IP resolution behind trusted proxies",
        version="0.1.0",
    )
    # Starlette builds the middleware stack lazily; build the resolver here
    # so a bad CIDR fails at startup rather than on the first request.
    resolver = RealIPResolver.from_config(config.real_ip)
    app.add_middleware(RealIPMiddleware, resolver=resolver)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/ip")
    async def whoami(request: Request, real_ip: RealIPDep) -> dict[str, str | None]:
        return {
            "real_ip": real_ip,
            "x_real_ip": request.headers.get(config.real_ip.real_ip_header),
            "forwarded_for": request.headers.get(config.real_ip.forwarded_header),
        }

    logger.info("Application configured.")
    return app
