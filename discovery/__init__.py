# PATH: discovery/__init__.py
"""Discovery package for MegaGecko: token registry and GeckoTerminal fetcher."""

from discovery.gecko import (
    GeckoTerminalClient,
    extract_address,
    parse_pools_response,
)
from discovery.registry import PoolSet, TokenRegistry

__all__ = [
    "GeckoTerminalClient",
    "extract_address",
    "parse_pools_response",
    "PoolSet",
    "TokenRegistry",
]
