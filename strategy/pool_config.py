"""
strategy/pool_config.py - Convert pools into downstream config entries.

Config id format:
  gecko-{dex_id}-{symbol_a}-{symbol_b}-{index}
  Example: "gecko-raydium_clmm-usdc-wbtc-0"

index is assigned in group-then-pool order, so ids are stable for one run
but not across reorderings of the input.
"""

from typing import Any, Iterable, Mapping

from core.constants import ACCOUNT_KEY_BY_POOL_TYPE, CONFIG_ID_PREFIX, PoolType
from core.exceptions import ConfigError
from core.logging import get_logger
from core.models import DexProgram, Pool, PoolConfig, Token

logger = get_logger(__name__)


class DexProgramMap:
    """
    DEX id -> on-chain program lookup.

    Lookups are case-insensitive. Unknown DEX ids resolve to the default
    entry, so every pool gets a program and pool type.
    """

    def __init__(self, programs: Mapping[str, DexProgram], default_key: str):
        self._programs = {key.lower(): program for key, program in programs.items()}
        self.default_key = default_key.lower()
        if self.default_key not in self._programs:
            raise ConfigError(
                f"Default DEX {default_key} missing from program map",
                details={"dexes": sorted(self._programs)},
            )

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "DexProgramMap":
        """Build from the parsed dexes.yaml mapping."""
        entries = config.get("dexes")
        if not isinstance(entries, dict):
            raise ConfigError("dexes config needs a 'dexes' mapping")

        programs = {}
        for dex_id, entry in entries.items():
            try:
                programs[str(dex_id)] = DexProgram(
                    program_id=entry["program_id"],
                    pool_type=PoolType(entry["type"]),
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigError(f"Invalid DEX entry {dex_id}: {e}") from e

        default_key = config.get("default")
        if not isinstance(default_key, str):
            raise ConfigError("dexes config needs a 'default' key")
        return cls(programs, default_key)

    def __contains__(self, dex_id: object) -> bool:
        return isinstance(dex_id, str) and dex_id.lower() in self._programs

    def resolve(self, dex_id: str) -> DexProgram:
        program = self._programs.get(dex_id.lower())
        if program is None:
            logger.debug(
                f"Unknown DEX {dex_id}, using {self.default_key}",
                extra={"context": {"dex_id": dex_id}},
            )
            return self._programs[self.default_key]
        return program


def order_tokens(first: Token, second: Token) -> tuple[Token, Token]:
    """
    Order two tokens by symbol, ignoring case.

    Ties fall back to the exact symbol and then the address so the order is
    total.
    """
    def sort_key(token: Token) -> tuple[str, str, str]:
        return (token.symbol.casefold(), token.symbol, token.address)

    token_a, token_b = sorted([first, second], key=sort_key)
    return token_a, token_b


def build_config_id(dex_id: str, token_a: Token, token_b: Token, index: int) -> str:
    return (
        f"{CONFIG_ID_PREFIX}-{dex_id.lower()}-"
        f"{token_a.symbol.lower()}-{token_b.symbol.lower()}-{index}"
    )


def build_accounts(pool_type: PoolType, pool_address: str) -> dict[str, str]:
    """Single account reference keyed by pool type (state/ammId/market)."""
    key = ACCOUNT_KEY_BY_POOL_TYPE.get(pool_type)
    if key is None:
        return {}
    return {key: pool_address}


def pool_to_config(pool: Pool, index: int, dex_programs: DexProgramMap) -> PoolConfig:
    """Convert a pool into its config entry."""
    program = dex_programs.resolve(pool.dex.id)
    token_a, token_b = order_tokens(pool.base_token, pool.quote_token)

    return PoolConfig(
        id=build_config_id(pool.dex.id, token_a, token_b, index),
        type=program.pool_type,
        program_id=program.program_id,
        token_a=token_a,
        token_b=token_b,
        accounts=build_accounts(program.pool_type, pool.address),
        pool=pool,
    )


def build_configs(
    groups: Mapping[str, Iterable[Pool]],
    dex_programs: DexProgramMap,
) -> list[PoolConfig]:
    """Generate configs across all groups with a run-wide increasing index."""
    configs = []
    for pools in groups.values():
        for pool in pools:
            configs.append(pool_to_config(pool, len(configs), dex_programs))

    logger.info(f"Generated {len(configs)} pool configs")
    return configs
