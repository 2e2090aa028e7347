"""
Hetzner Robot Client - Exception Hierarchy

This module contains the error taxonomy used throughout the client and the
mapping from provider error payloads to typed errors.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator


class ErrorKind(str, Enum):
    """Category of a client error."""

    API = "API"
    NETWORK = "Network"
    PARSE = "Parse"
    AUTH = "Auth"


class ErrorCode(str, Enum):
    """Error codes issued by the Robot webservice."""

    # Common errors
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_INPUT_SERVER_IP = "INVALID_INPUT_SERVER_IP"
    INVALID_INPUT_IP_ADDRESS = "INVALID_INPUT_IP_ADDRESS"
    SERVER_NOT_FOUND = "SERVER_NOT_FOUND"
    IP_NOT_FOUND = "IP_NOT_FOUND"
    IP_LOCKED = "IP_LOCKED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    MAINTENANCE_MODE = "MAINTENANCE_MODE"

    # Firewall errors
    FIREWALL_IN_PROCESS = "FIREWALL_IN_PROCESS"
    FIREWALL_ALREADY_ACTIVE = "FIREWALL_ALREADY_ACTIVE"
    FIREWALL_ALREADY_DISABLED = "FIREWALL_ALREADY_DISABLED"
    FIREWALL_CONFIG_INVALID = "FIREWALL_CONFIG_INVALID"
    FIREWALL_RULE_LIMIT_EXCEEDED = "FIREWALL_RULE_LIMIT_EXCEEDED"

    # Boot errors
    BOOT_CONFIG_NOT_FOUND = "BOOT_CONFIG_NOT_FOUND"
    BOOT_ALREADY_ACTIVE = "BOOT_ALREADY_ACTIVE"
    RESCUE_NOT_ACTIVE = "RESCUE_NOT_ACTIVE"
    RESCUE_ALREADY_ACTIVE = "RESCUE_ALREADY_ACTIVE"

    # Reset errors
    RESET_NOT_AVAILABLE = "RESET_NOT_AVAILABLE"
    RESET_MANUAL_ACTIVE = "RESET_MANUAL_ACTIVE"

    # VNC errors
    VNC_DISABLED = "VNC_DISABLED"
    VNC_NOT_AVAILABLE = "VNC_NOT_AVAILABLE"

    # Reverse DNS errors
    RDNS_NOT_FOUND = "RDNS_NOT_FOUND"
    RDNS_INVALID = "RDNS_INVALID"

    UNKNOWN = "UNKNOWN"


class RobotError(Exception):
    """Base exception for all Robot client errors with enhanced context."""

    kind: ErrorKind = ErrorKind.API

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.kind.value}: {self.message}: {self.cause}"
        return f"{self.kind.value}: {self.message}"

    def unwrap(self) -> BaseException | None:
        """Return the underlying cause, if any."""
        return self.cause

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "kind": self.kind.value,
            "message": self.message,
            "cause": str(self.cause) if self.cause is not None else None,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }


class NetworkError(RobotError):
    """Request construction or transport-level failure."""

    kind = ErrorKind.NETWORK

    def __init__(self, message: str, cause: BaseException, context: dict[str, Any] | None = None):
        super().__init__(message, cause=cause, context=context)


class ParseError(RobotError):
    """Response body could not be interpreted as the expected JSON."""

    kind = ErrorKind.PARSE

    def __init__(self, message: str, cause: BaseException, context: dict[str, Any] | None = None):
        super().__init__(message, cause=cause, context=context)


class AuthenticationError(RobotError):
    """Explicit authentication failure raised by callers."""

    kind = ErrorKind.AUTH


class APIError(RobotError):
    """Error reported by the Robot webservice itself."""

    kind = ErrorKind.API

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.code = code.value if isinstance(code, ErrorCode) else str(code)
        self.detail = message
        self.status_code = status_code
        super().__init__(f"[{self.code}] {message}", context=context)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["code"] = self.code
        data["status_code"] = self.status_code
        return data


class ConfigurationError(Exception):
    """Client not configured or invalid configuration."""


class WaitError(Exception):
    """Base class for condition poller outcomes that are not predicate errors."""


class ConditionTimeoutError(WaitError):
    """The attempt budget ran out before the condition became true."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class ConditionCancelledError(WaitError):
    """The caller's cancel signal fired while waiting."""


# ========== Error payload mapping ==========


class APIErrorDetail(BaseModel):
    """The ``error`` object of a provider error payload."""

    status: int = 0
    code: str = ErrorCode.UNKNOWN.value
    message: str = ""

    @field_validator("code", mode="before")
    @classmethod
    def coerce_code(cls, v):
        """The provider sometimes omits or mistypes the code."""
        if isinstance(v, str):
            return v
        return ErrorCode.UNKNOWN.value


class APIErrorResponse(BaseModel):
    """Error payload: ``{"error": {"status": int, "code": str, "message": str}}``."""

    error: APIErrorDetail


def map_error_response(status_code: int, body: bytes) -> APIError:
    """Convert an error-status response body into an ``APIError``.

    Args:
        status_code: HTTP status of the response
        body: Raw response body

    Returns:
        APIError carrying the provider code, or ``UNKNOWN`` with the raw
        status and body text when the payload is not a structured error
    """
    try:
        payload = APIErrorResponse.model_validate_json(body)
    except ValidationError:
        text = body.decode("utf-8", errors="replace")
        return APIError(
            ErrorCode.UNKNOWN,
            f"HTTP {status_code}: {text}",
            status_code=status_code,
        )

    code = payload.error.code
    if payload.error.code == "":
        code = ErrorCode.UNKNOWN.value
    return APIError(
        code,
        payload.error.message,
        status_code=status_code,
        context={"provider_status": payload.error.status},
    )


# ========== Error predicates ==========


def is_api_error(error: BaseException, code: ErrorCode | str) -> bool:
    """Check whether ``error`` is an API error with the given code."""
    if not isinstance(error, APIError):
        return False
    expected = code.value if isinstance(code, ErrorCode) else code
    return error.code == expected


def is_rate_limit_error(error: BaseException) -> bool:
    return is_api_error(error, ErrorCode.RATE_LIMIT_EXCEEDED)


def is_not_found_error(error: BaseException) -> bool:
    return is_api_error(error, ErrorCode.SERVER_NOT_FOUND) or is_api_error(
        error, ErrorCode.IP_NOT_FOUND
    )


def is_firewall_in_process_error(error: BaseException) -> bool:
    return is_api_error(error, ErrorCode.FIREWALL_IN_PROCESS)


def is_unauthorized_error(error: BaseException) -> bool:
    return is_api_error(error, ErrorCode.UNAUTHORIZED)


def is_firewall_rule_limit_exceeded_error(error: BaseException) -> bool:
    return is_api_error(error, ErrorCode.FIREWALL_RULE_LIMIT_EXCEEDED)
