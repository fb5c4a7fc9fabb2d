# PATH: tests/unit/test_core_models.py
"""
Unit tests for core models.
"""

from decimal import Decimal

import pytest

from conftest import USDC, WBTC, make_pool
from core.constants import PoolType
from core.models import Dex, PoolConfig, Token, TransactionCounts


class TestToken:
    def test_defaults(self):
        token = Token(address=USDC)
        assert token.symbol == "UNKNOWN"
        assert token.name == "Unknown"
        assert token.decimals == 9

    def test_zero_decimals_allowed(self):
        assert Token(address=USDC, decimals=0).decimals == 0

    def test_negative_decimals_rejected(self):
        with pytest.raises(ValueError):
            Token(address=USDC, decimals=-1)


class TestPool:
    def test_pair_key_is_symmetric(self, usdc, wbtc):
        forward = make_pool("P1", usdc, wbtc)
        reverse = make_pool("P2", wbtc, usdc)
        assert forward.pair_key == reverse.pair_key == "USDC/WBTC"

    def test_pair_key_uses_code_point_order(self, usdc, cbbtc):
        # Uppercase sorts before lowercase
        assert make_pool("P1", cbbtc, usdc).pair_key == "USDC/cbBTC"

    def test_missing_usd_values_are_zero(self, usdc, wbtc):
        pool = make_pool("P1", usdc, wbtc, liquidity=None, volume_24h=None)
        assert pool.liquidity_usd == Decimal("0")
        assert pool.volume_24h_usd == Decimal("0")
        assert pool.volume_1h_usd == Decimal("0")

    def test_unparsable_usd_values_are_zero(self, usdc, wbtc):
        pool = make_pool("P1", usdc, wbtc, liquidity="abc", volume_24h="")
        assert pool.liquidity_usd == Decimal("0")
        assert pool.volume_24h_usd == Decimal("0")

    def test_transactions_in_defaults_to_zero(self, usdc, wbtc):
        pool = make_pool("P1", usdc, wbtc)
        assert pool.transactions_in("h24") == TransactionCounts()

        pool.transactions = {"h24": TransactionCounts(buys=3, sells=4)}
        assert pool.transactions_in("h24").buys == 3
        assert pool.transactions_in("h1") == TransactionCounts()

    def test_log_dict_is_trimmed(self, usdc, wbtc):
        pool = make_pool("P1", usdc, wbtc, fdv_usd="1")
        data = pool.to_log_dict()
        assert set(data) == {
            "address", "name", "dex", "base_token", "quote_token",
            "liquidity_usd", "volume_usd",
        }
        assert data["liquidity_usd"] == "50000"

    def test_absent_sections_are_empty(self, usdc, wbtc):
        pool = make_pool("P1", usdc, wbtc)
        assert pool.prices_dict() == {}
        assert pool.market_metrics_dict() == {}
        assert pool.transactions_dict() is None


class TestPoolConfig:
    def test_to_dict_shape(self, usdc, wbtc):
        pool = make_pool(
            "PoolAddr",
            wbtc,
            usdc,
            base_token_price_usd="64000",
            market_cap_usd="1000000",
        )
        config = PoolConfig(
            id="gecko-raydium_clmm-usdc-wbtc-0",
            type=PoolType.CLMM,
            program_id="Prog",
            token_a=usdc,
            token_b=wbtc,
            accounts={"state": "PoolAddr"},
            pool=pool,
        )

        data = config.to_dict()

        assert data["type"] == "clmm"
        assert data["programId"] == "Prog"
        assert data["tokenA"] == {"address": USDC, "decimals": 6, "symbol": "USDC"}
        assert data["tokenB"] == {"address": WBTC, "decimals": 8, "symbol": "WBTC"}
        assert data["accounts"] == {"state": "PoolAddr"}
        assert data["address"] == "PoolAddr"
        assert data["liquidity_usd"] == "50000"
        assert data["prices"] == {"base_token_price_usd": "64000"}
        assert data["market_metrics"] == {"market_cap_usd": "1000000"}
        assert data["dex"] == {"id": "raydium_clmm", "name": "Raydium Clmm"}
        assert "price_change_percentage" not in data


def test_dex_defaults():
    assert Dex() == Dex("unknown", "unknown")
