"""Real client IP resolution behind trusted proxies."""

from xff_realip.configs.system import RealIPConfig
from xff_realip.core import (
    ConfigError,
    DictHeaders,
    ExcludedNetworks,
    RealIPResolver,
    Resolution,
    parse_excluded_networks,
)
from xff_realip.middleware import RealIPMiddleware

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DictHeaders",
    "ExcludedNetworks",
    "RealIPConfig",
    "RealIPMiddleware",
    "RealIPResolver",
    "Resolution",
    "parse_excluded_networks",
]
