# PATH: strategy/__init__.py
"""Strategy package for MegaGecko: filtering, grouping and config mapping."""

from strategy.filters import (
    FilterResult,
    FilterThresholds,
    filter_by_liquidity_and_volume,
    filter_target_pairs,
    filter_usdc_only,
    run_filter_pipeline,
)
from strategy.grouping import group_by_pair
from strategy.pool_config import DexProgramMap, build_configs, pool_to_config

__all__ = [
    "FilterResult",
    "FilterThresholds",
    "filter_by_liquidity_and_volume",
    "filter_target_pairs",
    "filter_usdc_only",
    "run_filter_pipeline",
    "group_by_pair",
    "DexProgramMap",
    "build_configs",
    "pool_to_config",
]
