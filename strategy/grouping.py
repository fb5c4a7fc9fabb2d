"""
strategy/grouping.py - Bucket pools by unordered token pair.
"""

from typing import Iterable

from core.models import Pool


def group_by_pair(pools: Iterable[Pool]) -> dict[str, list[Pool]]:
    """
    Group pools by pair key ("USDC/WBTC").

    The key sorts both symbols, so (A, B) and (B, A) land in one group.
    Groups keep first-seen order; pools keep insertion order within a group.
    """
    groups: dict[str, list[Pool]] = {}
    for pool in pools:
        groups.setdefault(pool.pair_key, []).append(pool)
    return groups
