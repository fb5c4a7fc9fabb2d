"""
strategy/filters.py - Pool filters.

Each filter is a pure predicate over a pool sequence: it never raises and
never mutates its input. run_filter_pipeline composes them into the final
filtered set (target pairs first, then USDC-only pools).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from core.constants import (
    MIN_LIQUIDITY_USD,
    MIN_VOLUME_24H_USD,
    MIN_VOLUME_24H_USDC_ONLY,
)
from core.logging import get_logger
from core.models import Pool
from discovery.registry import TokenRegistry

logger = get_logger(__name__)


# =============================================================================
# THRESHOLDS
# =============================================================================

@dataclass(frozen=True)
class FilterThresholds:
    """Liquidity/volume bars for both filtered sets (USD)."""
    min_liquidity: Decimal = MIN_LIQUIDITY_USD
    min_volume_24h: Decimal = MIN_VOLUME_24H_USD
    min_volume_24h_usdc_only: Decimal = MIN_VOLUME_24H_USDC_ONLY


# =============================================================================
# INDIVIDUAL FILTERS
# =============================================================================

def is_target_pair(pool: Pool, registry: TokenRegistry) -> bool:
    """Both sides are registry tokens."""
    return (
        registry.contains(pool.base_token.address)
        and registry.contains(pool.quote_token.address)
    )


def is_usdc_only(pool: Pool, registry: TokenRegistry) -> bool:
    """One side is the anchor (USDC), the other is not a registry token."""
    base = pool.base_token.address
    quote = pool.quote_token.address

    if registry.is_anchor(base):
        return not registry.contains(quote)
    if registry.is_anchor(quote):
        return not registry.contains(base)
    return False


def meets_liquidity_and_volume(
    pool: Pool,
    min_liquidity: Decimal,
    min_volume_24h: Decimal,
) -> bool:
    """Reserve and 24h volume both at or above the bars."""
    return pool.liquidity_usd >= min_liquidity and pool.volume_24h_usd >= min_volume_24h


def filter_target_pairs(pools: Iterable[Pool], registry: TokenRegistry) -> list[Pool]:
    return [pool for pool in pools if is_target_pair(pool, registry)]


def filter_usdc_only(pools: Iterable[Pool], registry: TokenRegistry) -> list[Pool]:
    return [pool for pool in pools if is_usdc_only(pool, registry)]


def filter_by_liquidity_and_volume(
    pools: Iterable[Pool],
    min_liquidity: Decimal | int = MIN_LIQUIDITY_USD,
    min_volume_24h: Decimal | int = MIN_VOLUME_24H_USD,
) -> list[Pool]:
    min_liquidity = Decimal(min_liquidity)
    min_volume_24h = Decimal(min_volume_24h)
    return [
        pool for pool in pools
        if meets_liquidity_and_volume(pool, min_liquidity, min_volume_24h)
    ]


# =============================================================================
# PIPELINE
# =============================================================================

@dataclass
class FilterResult:
    """Intermediate and final sets of one pipeline run."""
    relevant: list[Pool] = field(default_factory=list)
    usdc_only: list[Pool] = field(default_factory=list)
    target_pairs: list[Pool] = field(default_factory=list)
    usdc_only_filtered: list[Pool] = field(default_factory=list)

    @property
    def filtered(self) -> list[Pool]:
        return self.target_pairs + self.usdc_only_filtered


def run_filter_pipeline(
    pools: list[Pool],
    registry: TokenRegistry,
    thresholds: FilterThresholds | None = None,
) -> FilterResult:
    """
    Apply target-pair and USDC-only filters, each followed by its own
    liquidity/volume bar.

    The two branches are mutually exclusive, so concatenation never
    duplicates a pool.
    """
    if thresholds is None:
        thresholds = FilterThresholds()

    relevant = filter_target_pairs(pools, registry)
    target_pairs = filter_by_liquidity_and_volume(
        relevant, thresholds.min_liquidity, thresholds.min_volume_24h
    )

    usdc_only = filter_usdc_only(pools, registry)
    usdc_only_filtered = filter_by_liquidity_and_volume(
        usdc_only, thresholds.min_liquidity, thresholds.min_volume_24h_usdc_only
    )

    result = FilterResult(
        relevant=relevant,
        usdc_only=usdc_only,
        target_pairs=target_pairs,
        usdc_only_filtered=usdc_only_filtered,
    )

    logger.info(
        f"Filtered {len(result.filtered)} of {len(pools)} pools",
        extra={"context": {
            "relevant": len(relevant),
            "target_pairs": len(target_pairs),
            "usdc_only": len(usdc_only),
            "usdc_only_filtered": len(usdc_only_filtered),
        }},
    )
    return result
