"""
core - Core utilities and models for MegaGecko.

This package contains:
- models.py: Data models (Token, Dex, Pool, PoolConfig)
- constants.py: Enums, API defaults and filter thresholds
- exceptions.py: Typed exceptions with error codes
- format_money.py: USD parsing and display formatting
- time.py: UTC timestamps and log dates
- logging.py: Structured logging
"""

from core.constants import (
    DEFAULT_NETWORK,
    GECKO_TERMINAL_API,
    PoolType,
)
from core.exceptions import (
    ConfigError,
    ErrorCode,
    GeckoError,
    InfraError,
    ResponseError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    Dex,
    DexProgram,
    Pool,
    PoolConfig,
    Token,
    TransactionCounts,
)

__all__ = [
    # Constants
    "DEFAULT_NETWORK",
    "GECKO_TERMINAL_API",
    "PoolType",
    # Exceptions
    "ConfigError",
    "ErrorCode",
    "GeckoError",
    "InfraError",
    "ResponseError",
    # Models
    "Dex",
    "DexProgram",
    "Pool",
    "PoolConfig",
    "Token",
    "TransactionCounts",
    # Logging
    "get_logger",
    "setup_logging",
]
