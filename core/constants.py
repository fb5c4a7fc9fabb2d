# PATH: core/constants.py
"""
Constants for MegaGecko.

Contains enums, API defaults, and filter thresholds.
"""

from decimal import Decimal
from enum import Enum
from typing import Final

# =============================================================================
# UPSTREAM API
# =============================================================================

GECKO_TERMINAL_API: Final[str] = "https://api.geckoterminal.com/api/v2"
DEFAULT_NETWORK: Final[str] = "solana"

# Entities requested inline with every pools query
POOL_INCLUDES: Final[str] = "base_token,quote_token,dex"

# Free tier allows 30 calls per minute
DEFAULT_REQUEST_DELAY_SECONDS: Final[float] = 2.0
DEFAULT_HTTP_TIMEOUT_SECONDS: Final[float] = 10.0

# =============================================================================
# TOKEN DEFAULTS (applied when the API omits entity attributes)
# =============================================================================

UNKNOWN_TOKEN_NAME: Final[str] = "Unknown"
UNKNOWN_TOKEN_SYMBOL: Final[str] = "UNKNOWN"
DEFAULT_TOKEN_DECIMALS: Final[int] = 9

UNKNOWN_DEX_ID: Final[str] = "unknown"

# Anchor token for the USDC-only filter
DEFAULT_ANCHOR_SYMBOL: Final[str] = "USDC"

# =============================================================================
# FILTER THRESHOLDS (USD)
# =============================================================================

MIN_LIQUIDITY_USD: Final[Decimal] = Decimal("1000")
MIN_VOLUME_24H_USD: Final[Decimal] = Decimal("1000")
# USDC paired with an unlisted token needs a much higher turnover
MIN_VOLUME_24H_USDC_ONLY: Final[Decimal] = Decimal("100000")

# =============================================================================
# TIME WINDOWS
# =============================================================================

TIME_WINDOWS: Final[tuple[str, ...]] = ("m5", "m15", "m30", "h1", "h6", "h24")


class PoolType(str, Enum):
    """On-chain pool layout used by the downstream config."""
    AMM = "amm"
    CLMM = "clmm"
    ORDERBOOK = "orderbook"


# Config account key per pool type
ACCOUNT_KEY_BY_POOL_TYPE: Final[dict[PoolType, str]] = {
    PoolType.CLMM: "state",
    PoolType.AMM: "ammId",
    PoolType.ORDERBOOK: "market",
}

CONFIG_ID_PREFIX: Final[str] = "gecko"
PAIR_SEPARATOR: Final[str] = "/"
