# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for MegaGecko tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.constants import PoolType  # noqa: E402
from core.models import Dex, DexProgram, Pool, Token  # noqa: E402
from discovery.registry import TokenRegistry  # noqa: E402
from strategy.pool_config import DexProgramMap  # noqa: E402

USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
CBBTC = "cbbtcf3aa214zXHbiAZQwf4122FBYbraNdFqgw4iMij"
WBTC = "5XZw2LKTyrfvfiskJ78AMpackRjPcyCif1WhUsPDuVqQ"
SOL = "So11111111111111111111111111111111111111112"

CLMM_PROGRAM = "CLMMmwW4ardRXn1VqkVW38oywYcXoCskswJso1hHc5m"
AMM_PROGRAM = "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8"
PHOENIX_PROGRAM = "PhoeNiXZ8ByJGLkxNfZRnkUfjvmuYqLR89jjFHGqdXY"


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def make_token(symbol: str, address: str, decimals: int = 6) -> Token:
    return Token(address=address, symbol=symbol, name=symbol, decimals=decimals)


def make_pool(
    address: str,
    base: Token,
    quote: Token,
    liquidity: str | None = "50000",
    volume_24h: str | None = "50000",
    dex_id: str = "raydium_clmm",
    **kwargs,
) -> Pool:
    volume = {"h24": volume_24h} if volume_24h is not None else {}
    return Pool(
        address=address,
        name=f"{base.symbol} / {quote.symbol}",
        base_token=base,
        quote_token=quote,
        dex=Dex(dex_id, dex_id.replace("_", " ").title()),
        reserve_in_usd=liquidity,
        volume_usd=volume,
        **kwargs,
    )


def gecko_token(address: str, symbol: str, decimals: int = 6, network: str = "solana") -> dict:
    """Included token entity as GeckoTerminal sends it."""
    return {
        "id": f"{network}_{address}",
        "type": "token",
        "attributes": {
            "address": address,
            "name": symbol,
            "symbol": symbol,
            "decimals": decimals,
        },
    }


def gecko_dex(dex_id: str, name: str) -> dict:
    return {"id": dex_id, "type": "dex", "attributes": {"name": name}}


def gecko_pool(
    address: str,
    base: str,
    quote: str,
    dex_id: str = "raydium_clmm",
    reserve: str = "50000",
    volume_24h: str = "50000",
    network: str = "solana",
) -> dict:
    """Pool `data` entry referencing tokens and dex by relationship id."""
    return {
        "id": f"{network}_{address}",
        "type": "pool",
        "attributes": {
            "address": address,
            "name": "pool",
            "pool_created_at": "2024-05-01T10:00:00Z",
            "reserve_in_usd": reserve,
            "volume_usd": {"h1": "100", "h24": volume_24h},
            "price_change_percentage": {"h1": "0.1", "h24": "-1.5"},
            "transactions": {"h24": {"buys": 10, "sells": 12, "buyers": 7, "sellers": 8}},
            "base_token_price_usd": "1.0001",
            "quote_token_price_usd": "64000.5",
        },
        "relationships": {
            "base_token": {"data": {"id": f"{network}_{base}", "type": "token"}},
            "quote_token": {"data": {"id": f"{network}_{quote}", "type": "token"}},
            "dex": {"data": {"id": dex_id, "type": "dex"}},
        },
    }


@pytest.fixture
def usdc():
    return make_token("USDC", USDC)


@pytest.fixture
def wbtc():
    return make_token("WBTC", WBTC, decimals=8)


@pytest.fixture
def cbbtc():
    return make_token("cbBTC", CBBTC, decimals=8)


@pytest.fixture
def sol():
    return make_token("SOL", SOL, decimals=9)


@pytest.fixture
def registry():
    return TokenRegistry({"USDC": USDC, "cbBTC": CBBTC, "WBTC": WBTC})


@pytest.fixture
def dex_programs():
    return DexProgramMap(
        {
            "raydium": DexProgram(AMM_PROGRAM, PoolType.AMM),
            "raydium_clmm": DexProgram(CLMM_PROGRAM, PoolType.CLMM),
            "phoenix": DexProgram(PHOENIX_PROGRAM, PoolType.ORDERBOOK),
        },
        default_key="raydium_clmm",
    )
