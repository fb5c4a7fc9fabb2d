"""
discovery/registry.py - Target token registry and the aggregate pool set.

Pipeline position:
1. TokenRegistry lists the tokens to query (config/core_tokens.yaml)
2. The fetcher returns pools per token
3. PoolSet merges them, one entry per pool address
"""

from typing import Any, Iterable, Iterator

from core.constants import DEFAULT_ANCHOR_SYMBOL
from core.exceptions import ConfigError
from core.logging import get_logger
from core.models import Pool

logger = get_logger(__name__)


class TokenRegistry:
    """
    Static symbol -> address mapping of target tokens.

    Address membership checks are case-insensitive. The anchor token (USDC)
    is the one side the USDC-only filter requires.
    """

    def __init__(self, tokens: dict[str, str], anchor_symbol: str = DEFAULT_ANCHOR_SYMBOL):
        if not tokens:
            raise ConfigError("Token registry is empty")
        if anchor_symbol not in tokens:
            raise ConfigError(
                f"Anchor token {anchor_symbol} missing from registry",
                details={"symbols": list(tokens)},
            )

        self._tokens = dict(tokens)
        self.anchor_symbol = anchor_symbol
        self._addresses = frozenset(addr.lower() for addr in self._tokens.values())

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "TokenRegistry":
        """Build from the parsed core_tokens.yaml mapping."""
        entries = config.get("tokens")
        if not isinstance(entries, dict):
            raise ConfigError("core_tokens config needs a 'tokens' mapping")

        tokens = {}
        for symbol, entry in entries.items():
            address = entry.get("address") if isinstance(entry, dict) else entry
            if not isinstance(address, str) or not address:
                raise ConfigError(f"Token {symbol} has no address")
            tokens[str(symbol)] = address

        return cls(tokens, anchor_symbol=config.get("anchor", DEFAULT_ANCHOR_SYMBOL))

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._tokens.items())

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def anchor_address(self) -> str:
        return self._tokens[self.anchor_symbol]

    def contains(self, address: str) -> bool:
        return address.lower() in self._addresses

    def is_anchor(self, address: str) -> bool:
        return address.lower() == self.anchor_address.lower()

    def to_dict(self) -> dict[str, str]:
        return dict(self._tokens)


class PoolSet:
    """
    Aggregate of fetched pools keyed by pool address.

    The same pool comes back from several per-token queries. Adding is
    idempotent: the last record for an address wins while its position stays
    where it was first inserted.
    """

    def __init__(self):
        self._pools: dict[str, Pool] = {}

    def add(self, pool: Pool) -> None:
        self._pools[pool.address] = pool

    def add_all(self, pools: Iterable[Pool]) -> int:
        """Add pools from one query. Returns how many addresses were new."""
        before = len(self._pools)
        for pool in pools:
            self.add(pool)
        added = len(self._pools) - before
        logger.debug(
            "Merged pools",
            extra={"context": {"new": added, "total": len(self._pools)}},
        )
        return added

    def get(self, address: str) -> Pool | None:
        return self._pools.get(address)

    def pools(self) -> list[Pool]:
        return list(self._pools.values())

    def __contains__(self, address: object) -> bool:
        return address in self._pools

    def __len__(self) -> int:
        return len(self._pools)

    def __iter__(self) -> Iterator[Pool]:
        return iter(self.pools())
