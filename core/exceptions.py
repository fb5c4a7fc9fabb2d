# PATH: core/exceptions.py
"""
Typed exceptions for MegaGecko.

Every error carries an ErrorCode so log lines can be grouped by cause.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Error codes used in exceptions and structured log context."""
    # Infrastructure errors
    INFRA_HTTP_ERROR = "INFRA_HTTP_ERROR"
    INFRA_TIMEOUT = "INFRA_TIMEOUT"
    INFRA_RATE_LIMIT = "INFRA_RATE_LIMIT"

    # Data errors
    RESPONSE_MALFORMED = "RESPONSE_MALFORMED"
    LOG_CORRUPT = "LOG_CORRUPT"
    CONFIG_INVALID = "CONFIG_INVALID"

    # Other
    UNKNOWN = "UNKNOWN"


class GeckoError(Exception):
    """Base exception for MegaGecko."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


class InfraError(GeckoError):
    """Infrastructure-related errors (HTTP status, timeouts, rate limits)."""
    pass


class ResponseError(GeckoError):
    """Upstream returned a body that cannot be decoded."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.RESPONSE_MALFORMED, details)


class ConfigError(GeckoError):
    """Static table missing or malformed."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.CONFIG_INVALID, details)
