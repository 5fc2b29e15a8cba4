import json
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import NoDecode

DEFAULT_FORWARDED_HEADER = "X-Forwarded-For"
DEFAULT_REAL_IP_HEADER = "X-Real-Ip"
DEFAULT_HEADER_NAMES: tuple[str, ...] = ("Cf-Connecting-Ip", DEFAULT_FORWARDED_HEADER)


def _split_csv(value: object) -> object:
    """Accept ``"a, b"`` or a JSON list from env vars as well as real lists."""
    if isinstance(value, str):
        if value.lstrip().startswith("["):
            return json.loads(value)
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class RealIPConfig(BaseModel):
    """Real client IP resolution settings.

    ``excluded_nets`` is kept as raw strings here; the resolver parses
    them at construction and refuses to start on the first invalid one.
    """

    excluded_nets: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="CIDR ranges whose addresses are never the real client IP",
    )
    clean_xff: bool = Field(
        default=False,
        description="Rewrite the source header to hold only admissible addresses",
    )
    header_names: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_HEADER_NAMES),
        description="Candidate headers in priority order",
    )
    forwarded_header: str = Field(
        default=DEFAULT_FORWARDED_HEADER,
        description="Generic forwarding header, always used as a fallback source",
    )
    real_ip_header: str = Field(
        default=DEFAULT_REAL_IP_HEADER,
        description="Header that receives the resolved address",
    )

    @field_validator("excluded_nets", "header_names", mode="before")
    @classmethod
    def split_comma_separated(cls, value: object) -> object:
        return _split_csv(value)


class ServerConfig(BaseModel):
    """HTTP server bind settings."""

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8000, ge=1, le=65535, description="API server port")


class LoggingConfig(BaseModel):
    """Logging output settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Root log level"
    )
    json_output: bool = Field(
        default=True, description="Emit JSON lines instead of coloured text"
    )

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
