"""
tests/unit/test_grouping.py - Pair grouping tests.
"""

from conftest import make_pool
from strategy.grouping import group_by_pair


def test_reverse_pairs_share_a_group(usdc, wbtc):
    groups = group_by_pair([make_pool("P1", usdc, wbtc), make_pool("P2", wbtc, usdc)])
    assert list(groups) == ["USDC/WBTC"]
    assert [p.address for p in groups["USDC/WBTC"]] == ["P1", "P2"]


def test_groups_in_first_seen_order(usdc, wbtc, cbbtc, sol):
    groups = group_by_pair([
        make_pool("P1", wbtc, cbbtc),
        make_pool("P2", sol, usdc),
        make_pool("P3", cbbtc, wbtc),
    ])
    assert list(groups) == ["WBTC/cbBTC", "SOL/USDC"]
    assert [p.address for p in groups["WBTC/cbBTC"]] == ["P1", "P3"]


def test_every_pool_in_exactly_one_group(usdc, wbtc, sol):
    pools = [make_pool(f"P{i}", usdc, token) for i, token in enumerate([wbtc, sol, wbtc])]
    groups = group_by_pair(pools)
    assert sum(len(members) for members in groups.values()) == len(pools)


def test_empty():
    assert group_by_pair([]) == {}
