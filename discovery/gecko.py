"""
discovery/gecko.py - GeckoTerminal pool fetcher.

GeckoTerminal answers in JSON:API form: each pool in `data` references its
base token, quote token and DEX by relationship id, and the referenced
entities arrive in the shared `included` list. The response is parsed once
here into typed Pool records; nothing downstream sees raw payloads.

Relationship ids look like "solana_<address>". When an included entity is
missing its attributes, the address is recovered from the id itself.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx

from core.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_NETWORK,
    DEFAULT_TOKEN_DECIMALS,
    GECKO_TERMINAL_API,
    POOL_INCLUDES,
    TIME_WINDOWS,
    UNKNOWN_DEX_ID,
    UNKNOWN_TOKEN_NAME,
    UNKNOWN_TOKEN_SYMBOL,
)
from core.exceptions import ErrorCode, GeckoError, InfraError, ResponseError
from core.logging import get_logger, log_error
from core.models import Dex, Pool, Token, TransactionCounts
from core.time import now_ms

logger = get_logger(__name__)


# =============================================================================
# RESPONSE PARSING
# =============================================================================

def extract_address(identifier: str, network: str = DEFAULT_NETWORK) -> str:
    """
    Strip the network prefix from a relationship id.

    Example:
        >>> extract_address("solana_EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v")
        'EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v'
        >>> extract_address("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v")
        'EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v'
    """
    prefix = f"{network}_"
    if identifier.startswith(prefix):
        return identifier[len(prefix):]
    return identifier


@dataclass
class IncludedIndex:
    """Lookup maps over a response's `included` list, keyed by entity id."""
    tokens: dict[str, dict[str, Any]] = field(default_factory=dict)
    dexes: dict[str, dict[str, Any]] = field(default_factory=dict)


def build_included_index(included: Any) -> IncludedIndex:
    """Index included token and dex entities by id."""
    index = IncludedIndex()
    if not isinstance(included, list):
        return index

    for item in included:
        if not isinstance(item, dict):
            continue
        item_id = item.get("id")
        if not isinstance(item_id, str):
            continue
        attributes = item.get("attributes")
        if not isinstance(attributes, dict):
            attributes = {}

        if item.get("type") == "token":
            index.tokens[item_id] = attributes
        elif item.get("type") == "dex":
            index.dexes[item_id] = attributes

    return index


def _relationship_id(entry: dict[str, Any], name: str) -> str | None:
    relationships = entry.get("relationships")
    if not isinstance(relationships, dict):
        return None
    relation = relationships.get(name)
    if not isinstance(relation, dict):
        return None
    data = relation.get("data")
    if not isinstance(data, dict):
        return None
    rel_id = data.get("id")
    return rel_id if isinstance(rel_id, str) and rel_id else None


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return 0


def _decimals(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return DEFAULT_TOKEN_DECIMALS
    try:
        decimals = int(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_TOKEN_DECIMALS
    return decimals if decimals >= 0 else DEFAULT_TOKEN_DECIMALS


def _windowed(raw: Any) -> dict[str, str] | None:
    if not isinstance(raw, dict):
        return None
    values = {}
    for window in TIME_WINDOWS:
        text = _text(raw.get(window))
        if text is not None:
            values[window] = text
    return values


def _transactions(raw: Any) -> dict[str, TransactionCounts] | None:
    if not isinstance(raw, dict):
        return None
    counts = {}
    for window in TIME_WINDOWS:
        entry = raw.get(window)
        if not isinstance(entry, dict):
            continue
        counts[window] = TransactionCounts(
            buys=_count(entry.get("buys")),
            sells=_count(entry.get("sells")),
            buyers=_count(entry.get("buyers")),
            sellers=_count(entry.get("sellers")),
        )
    return counts


def resolve_token(
    relationship_id: str | None,
    index: IncludedIndex,
    network: str = DEFAULT_NETWORK,
) -> Token | None:
    """
    Resolve a token relationship to a Token.

    Returns None when no address can be found either in the included
    attributes or in the relationship id.
    """
    attributes = index.tokens.get(relationship_id, {}) if relationship_id else {}

    address = _text(attributes.get("address")) or extract_address(relationship_id or "", network)
    if not address:
        return None

    return Token(
        address=address,
        symbol=_text(attributes.get("symbol")) or UNKNOWN_TOKEN_SYMBOL,
        name=_text(attributes.get("name")) or UNKNOWN_TOKEN_NAME,
        decimals=_decimals(attributes.get("decimals")),
    )


def resolve_dex(relationship_id: str | None, index: IncludedIndex) -> Dex:
    """Resolve a dex relationship; the id doubles as name when attributes are missing."""
    if not relationship_id:
        return Dex(UNKNOWN_DEX_ID, UNKNOWN_DEX_ID)
    attributes = index.dexes.get(relationship_id, {})
    return Dex(relationship_id, _text(attributes.get("name")) or relationship_id)


def parse_pool(
    entry: Any,
    index: IncludedIndex,
    network: str = DEFAULT_NETWORK,
) -> Pool | None:
    """
    Build a Pool from one `data` entry.

    Returns None for pools that cannot be keyed (no address) or whose base
    or quote token cannot be resolved.
    """
    if not isinstance(entry, dict):
        return None
    attributes = entry.get("attributes")
    if not isinstance(attributes, dict):
        attributes = {}

    address = _text(attributes.get("address"))
    if not address:
        logger.debug("Dropping pool without address", extra={"context": {"id": entry.get("id")}})
        return None

    base_token = resolve_token(_relationship_id(entry, "base_token"), index, network)
    quote_token = resolve_token(_relationship_id(entry, "quote_token"), index, network)
    if base_token is None or quote_token is None:
        logger.debug(
            "Dropping pool with unresolved token",
            extra={"context": {
                "pool": address,
                "base_resolved": base_token is not None,
                "quote_resolved": quote_token is not None,
            }},
        )
        return None

    return Pool(
        address=address,
        name=_text(attributes.get("name")) or "",
        base_token=base_token,
        quote_token=quote_token,
        dex=resolve_dex(_relationship_id(entry, "dex"), index),
        pool_created_at=_text(attributes.get("pool_created_at")),
        reserve_in_usd=_text(attributes.get("reserve_in_usd")),
        volume_usd=_windowed(attributes.get("volume_usd")) or {},
        price_change_percentage=_windowed(attributes.get("price_change_percentage")),
        transactions=_transactions(attributes.get("transactions")),
        base_token_price_usd=_text(attributes.get("base_token_price_usd")),
        base_token_price_native_currency=_text(attributes.get("base_token_price_native_currency")),
        quote_token_price_usd=_text(attributes.get("quote_token_price_usd")),
        base_token_price_quote_token=_text(attributes.get("base_token_price_quote_token")),
        quote_token_price_base_token=_text(attributes.get("quote_token_price_base_token")),
        fdv_usd=_text(attributes.get("fdv_usd")),
        market_cap_usd=_text(attributes.get("market_cap_usd")),
        locked_liquidity_percentage=_text(attributes.get("locked_liquidity_percentage")),
    )


def parse_pools_response(payload: Any, network: str = DEFAULT_NETWORK) -> list[Pool]:
    """
    Parse a /tokens/{address}/pools response into Pools.

    The included-entity index is built once per response and discarded.
    """
    if not isinstance(payload, dict):
        raise ResponseError(
            "Pools response is not a JSON object",
            details={"type": type(payload).__name__},
        )

    data = payload.get("data") or []
    if not isinstance(data, list):
        raise ResponseError("Pools response 'data' is not a list")

    index = build_included_index(payload.get("included"))

    pools = []
    for entry in data:
        pool = parse_pool(entry, index, network)
        if pool is not None:
            pools.append(pool)

    dropped = len(data) - len(pools)
    if dropped:
        logger.debug(f"Dropped {dropped} unresolvable pools", extra={"context": {"kept": len(pools)}})
    return pools


# =============================================================================
# HTTP CLIENT
# =============================================================================

@dataclass
class FetchStats:
    """Request statistics for one run."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_latency_ms: int = 0
    last_error: str | None = None

    @property
    def avg_latency_ms(self) -> int:
        if self.successful_requests == 0:
            return 0
        return self.total_latency_ms // self.successful_requests

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "avg_latency_ms": self.avg_latency_ms,
            "last_error": self.last_error,
        }


class GeckoTerminalClient:
    """
    GeckoTerminal API client.

    One GET per token; failures are logged and turned into an empty result
    so a single bad token never aborts the run.
    """

    def __init__(
        self,
        base_url: str = GECKO_TERMINAL_API,
        network: str = DEFAULT_NETWORK,
        timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.network = network
        self.timeout_seconds = timeout_seconds
        self._client = client
        self.stats = FetchStats()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GeckoTerminalClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def pools_url(self, token_address: str) -> str:
        return f"{self.base_url}/networks/{self.network}/tokens/{token_address}/pools"

    async def _get_json(self, url: str, params: dict[str, str]) -> Any:
        """
        GET a JSON document.

        Raises:
            InfraError: transport failure or non-success status
            ResponseError: body is not JSON
        """
        client = await self._get_client()
        self.stats.total_requests += 1
        start_ms = now_ms()

        try:
            resp = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise InfraError(
                f"Timeout after {self.timeout_seconds}s",
                code=ErrorCode.INFRA_TIMEOUT,
                details={"url": url},
            ) from e
        except httpx.HTTPError as e:
            raise InfraError(
                f"Request failed: {e}",
                code=ErrorCode.INFRA_HTTP_ERROR,
                details={"url": url},
            ) from e

        if resp.status_code == 429:
            raise InfraError(
                "Rate limited",
                code=ErrorCode.INFRA_RATE_LIMIT,
                details={"url": url, "status": resp.status_code},
            )
        if not resp.is_success:
            raise InfraError(
                f"HTTP {resp.status_code}: {resp.reason_phrase}",
                code=ErrorCode.INFRA_HTTP_ERROR,
                details={"url": url, "status": resp.status_code},
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise ResponseError("Response body is not JSON", details={"url": url}) from e

        self.stats.total_latency_ms += now_ms() - start_ms
        return payload

    async def get_pools_by_token(self, token_address: str) -> list[Pool]:
        """
        Fetch all pools containing a token, with tokens and dex inlined.

        Never raises for upstream problems: returns [] and logs the error.
        """
        url = self.pools_url(token_address)
        try:
            payload = await self._get_json(url, params={"include": POOL_INCLUDES})
            pools = parse_pools_response(payload, self.network)
        except GeckoError as e:
            self.stats.failed_requests += 1
            self.stats.last_error = str(e)
            log_error(
                logger,
                e.code.value,
                f"Failed to fetch pools for token {token_address}: {e.message}",
                token=token_address,
                **e.details,
            )
            return []

        self.stats.successful_requests += 1
        logger.debug(
            f"Fetched {len(pools)} pools",
            extra={"context": {"token": token_address}},
        )
        return pools
