# PATH: core/models.py
"""
Core data models for MegaGecko.

Records are built once at the API boundary (discovery/gecko.py) and are
typed from there on. USD amounts keep the API's decimal-string form; the
Decimal views used by filters and reports never raise.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

from core.constants import (
    DEFAULT_TOKEN_DECIMALS,
    PAIR_SEPARATOR,
    PoolType,
    UNKNOWN_DEX_ID,
    UNKNOWN_TOKEN_NAME,
    UNKNOWN_TOKEN_SYMBOL,
)
from core.format_money import parse_usd


def compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None (absent upstream)."""
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class Token:
    """SPL token as reported by the market-data API."""
    address: str
    symbol: str = UNKNOWN_TOKEN_SYMBOL
    name: str = UNKNOWN_TOKEN_NAME
    decimals: int = DEFAULT_TOKEN_DECIMALS

    def __post_init__(self):
        if self.decimals < 0:
            raise ValueError(f"Token decimals must be >= 0, got {self.decimals}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
        }


@dataclass(frozen=True)
class Dex:
    """DEX hosting a pool."""
    id: str = UNKNOWN_DEX_ID
    name: str = UNKNOWN_DEX_ID

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class TransactionCounts:
    """Swap activity in one time window."""
    buys: int = 0
    sells: int = 0
    buyers: int = 0
    sellers: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "buys": self.buys,
            "sells": self.sells,
            "buyers": self.buyers,
            "sellers": self.sellers,
        }


@dataclass(frozen=True)
class DexProgram:
    """On-chain program backing a DEX."""
    program_id: str
    pool_type: PoolType


@dataclass
class Pool:
    """
    Liquidity pool with reserve, volume and price metadata.

    base_token/quote_token order is assigned by the API and is not canonical.
    Window-keyed fields use the API's window names (m5, m15, m30, h1, h6, h24).
    """
    address: str
    name: str
    base_token: Token
    quote_token: Token
    dex: Dex = field(default_factory=Dex)
    pool_created_at: Optional[str] = None
    reserve_in_usd: Optional[str] = None
    volume_usd: Dict[str, str] = field(default_factory=dict)
    price_change_percentage: Optional[Dict[str, str]] = None
    transactions: Optional[Dict[str, TransactionCounts]] = None

    # Prices
    base_token_price_usd: Optional[str] = None
    base_token_price_native_currency: Optional[str] = None
    quote_token_price_usd: Optional[str] = None
    base_token_price_quote_token: Optional[str] = None
    quote_token_price_base_token: Optional[str] = None

    # Market metrics
    fdv_usd: Optional[str] = None
    market_cap_usd: Optional[str] = None
    locked_liquidity_percentage: Optional[str] = None

    @property
    def pair_key(self) -> str:
        symbols = sorted([self.base_token.symbol, self.quote_token.symbol])
        return PAIR_SEPARATOR.join(symbols)

    @property
    def liquidity_usd(self) -> Decimal:
        return parse_usd(self.reserve_in_usd)

    @property
    def volume_24h_usd(self) -> Decimal:
        return parse_usd(self.volume_usd.get("h24"))

    @property
    def volume_1h_usd(self) -> Decimal:
        return parse_usd(self.volume_usd.get("h1"))

    def transactions_in(self, window: str) -> TransactionCounts:
        """Transaction counts for a window; zeros when unreported."""
        if not self.transactions:
            return TransactionCounts()
        return self.transactions.get(window) or TransactionCounts()

    def prices_dict(self) -> Dict[str, Any]:
        return compact({
            "base_token_price_usd": self.base_token_price_usd,
            "base_token_price_native_currency": self.base_token_price_native_currency,
            "quote_token_price_usd": self.quote_token_price_usd,
            "base_token_price_quote_token": self.base_token_price_quote_token,
            "quote_token_price_base_token": self.quote_token_price_base_token,
        })

    def market_metrics_dict(self) -> Dict[str, Any]:
        return compact({
            "fdv_usd": self.fdv_usd,
            "market_cap_usd": self.market_cap_usd,
            "locked_liquidity_percentage": self.locked_liquidity_percentage,
        })

    def transactions_dict(self) -> Optional[Dict[str, Any]]:
        if self.transactions is None:
            return None
        return {window: counts.to_dict() for window, counts in self.transactions.items()}

    def to_log_dict(self) -> Dict[str, Any]:
        """Trimmed projection stored in the JSON run log."""
        return compact({
            "address": self.address,
            "name": self.name,
            "dex": self.dex.to_dict(),
            "base_token": self.base_token.to_dict(),
            "quote_token": self.quote_token.to_dict(),
            "liquidity_usd": self.reserve_in_usd,
            "volume_usd": dict(self.volume_usd),
            "pool_created_at": self.pool_created_at,
        })


@dataclass
class PoolConfig:
    """
    Pool entry in the schema consumed by the downstream trading config.

    tokens are ordered by symbol so the same pool always yields the same
    tokenA/tokenB regardless of the API's base/quote order.
    """
    id: str
    type: PoolType
    program_id: str
    token_a: Token
    token_b: Token
    accounts: Dict[str, str]
    pool: Pool

    def to_dict(self) -> Dict[str, Any]:
        pool = self.pool
        return compact({
            "id": self.id,
            "type": self.type.value,
            "programId": self.program_id,
            "tokenA": _config_token(self.token_a),
            "tokenB": _config_token(self.token_b),
            "accounts": dict(self.accounts),
            "address": pool.address,
            "name": pool.name,
            "pool_created_at": pool.pool_created_at,
            "liquidity_usd": pool.reserve_in_usd,
            "volume_usd": dict(pool.volume_usd),
            "prices": pool.prices_dict(),
            "price_change_percentage": (
                dict(pool.price_change_percentage)
                if pool.price_change_percentage is not None else None
            ),
            "transactions": pool.transactions_dict(),
            "market_metrics": pool.market_metrics_dict(),
            "dex": pool.dex.to_dict(),
        })


def _config_token(token: Token) -> Dict[str, Any]:
    return {
        "address": token.address,
        "decimals": token.decimals,
        "symbol": token.symbol,
    }
