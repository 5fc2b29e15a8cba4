from .config import AppConfig, get_app_config
from .system import (
    DEFAULT_FORWARDED_HEADER,
    DEFAULT_HEADER_NAMES,
    DEFAULT_REAL_IP_HEADER,
    LoggingConfig,
    RealIPConfig,
    ServerConfig,
)

__all__ = [
    "DEFAULT_FORWARDED_HEADER",
    "DEFAULT_HEADER_NAMES",
    "DEFAULT_REAL_IP_HEADER",
    "AppConfig",
    "LoggingConfig",
    "RealIPConfig",
    "ServerConfig",
    "get_app_config",
]
