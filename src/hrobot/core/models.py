"""
Hetzner Robot Client - Data Models

This module contains Pydantic models for configuration and the value types
shared by the resource models.
"""

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

logger = logging.getLogger("hrobot")

DEFAULT_BASE_URL = "https://robot-ws.your-server.de"
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "hrobot-python/1.0.0"
DEFAULT_TIMEZONE = "Europe/Berlin"

# Used when the tz database has no entry for the configured zone
FALLBACK_TIMEZONE = timezone(timedelta(hours=1), "CET")

TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
)


class RobotConfig(BaseModel):
    """Configuration for a Robot webservice connection."""

    model_config = ConfigDict(validate_assignment=True)

    url: str = Field(default=DEFAULT_BASE_URL, description="Robot webservice base URL")
    username: str = Field(..., description="Webservice username")
    password: str = Field(..., description="Webservice password", repr=False)  # Hide in logs
    verify_ssl: bool = Field(default=True, description="Whether to verify SSL certificates")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header value")
    timezone: str = Field(default=DEFAULT_TIMEZONE, description="Timezone of provider timestamps")
    poll_initial_delay: float = Field(default=2.0, ge=0, description="First poller delay in seconds")
    poll_max_delay: float = Field(default=30.0, gt=0, description="Poller delay ceiling in seconds")
    poll_max_attempts: int = Field(default=30, gt=0, description="Poller attempt budget")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        """Validate URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        if not v:
            raise ValueError("username must not be empty")
        return v

    def tzinfo(self) -> tzinfo:
        """Resolve the configured provider timezone."""
        return resolve_timezone(self.timezone)


def resolve_timezone(name: str) -> tzinfo:
    """Look up an IANA timezone, falling back to a fixed CET offset."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone '{name}', falling back to fixed CET (+01:00)")
        return FALLBACK_TIMEZONE


def parse_provider_timestamp(value: str, tz: tzinfo) -> datetime:
    """Parse a timestamp as the Robot webservice formats it.

    Naive values are interpreted in ``tz``; values carrying an offset keep it.

    Raises:
        ValueError: If no known format matches
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        parsed = None

    if parsed is None:
        for fmt in TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        raise ValueError(f"unable to parse timestamp: {value}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


class ProviderModel(BaseModel):
    """Base for resource models decoded from webservice responses."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @staticmethod
    def context_timezone(info: ValidationInfo) -> tzinfo:
        """Timezone passed by the transport as validation context."""
        context = info.context or {}
        tz = context.get("timezone")
        if tz is None:
            return resolve_timezone(DEFAULT_TIMEZONE)
        return tz


class TrafficSize(BaseModel):
    """Traffic allowance; the provider sends ``"unlimited"`` or a byte count."""

    unlimited: bool = False
    bytes: int = 0

    @classmethod
    def from_provider(cls, value: Any) -> "TrafficSize":
        if isinstance(value, TrafficSize):
            return value
        if isinstance(value, dict):
            return cls(**value)
        if isinstance(value, str):
            if value == "unlimited":
                return cls(unlimited=True)
            try:
                return cls(bytes=int(value))
            except ValueError:
                raise ValueError(f"invalid traffic size: {value}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"invalid traffic size: {value!r}")
        return cls(bytes=value)

    def __str__(self) -> str:
        if self.unlimited:
            return "unlimited"
        return format_bytes(self.bytes)


def format_bytes(size: int) -> str:
    """Render a byte count with binary units."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"
