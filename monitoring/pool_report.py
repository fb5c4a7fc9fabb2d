"""
Pool report module for MegaGecko.

Console narration, the config JSON dump, and the two per-day run logs.

LOG FILES (one pair per UTC day under the logs directory):
- pools-YYYY-MM-DD.json: JSON array, one LogEntry per run.
  Read-modify-write each run; a corrupt file is replaced by a fresh array.
- pools-YYYY-MM-DD.txt: human-readable, strictly appended, never parsed.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import click

from core.exceptions import ErrorCode
from core.format_money import format_price, format_usd, format_usd_cents
from core.logging import get_logger
from core.models import Pool, PoolConfig
from core.time import iso_date, to_iso, to_local_string
from strategy.filters import FilterResult, FilterThresholds

logger = get_logger("megagecko.report")

HEAVY_RULE = "=" * 80
RULE = "-" * 80
LIGHT_RULE = "." * 80


@dataclass(frozen=True)
class ReportConfig:
    """Reporter settings; quiet suppresses console narration only."""
    quiet: bool = False
    logs_dir: Path = Path("logs")


def _json_number(value: Decimal) -> int | float:
    return int(value) if value == value.to_integral_value() else float(value)


@dataclass
class LogEntry:
    """One run as stored in the JSON log."""
    timestamp: str
    summary: Dict[str, Any]
    target_tokens: Dict[str, str]
    configs: List[Dict[str, Any]] = field(default_factory=list)
    raw_pools: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "summary": self.summary,
            "target_tokens": self.target_tokens,
            "configs": self.configs,
            "raw_pools": self.raw_pools,
        }


def build_log_entry(
    timestamp: datetime,
    total_pools_fetched: int,
    result: FilterResult,
    configs: List[PoolConfig],
    target_tokens: Mapping[str, str],
    thresholds: FilterThresholds,
) -> LogEntry:
    """Assemble the JSON log entry for a run."""
    return LogEntry(
        timestamp=to_iso(timestamp),
        summary={
            "total_pools_fetched": total_pools_fetched,
            "relevant_pools": len(result.relevant),
            "usdc_only_pools": len(result.usdc_only),
            "filtered_pools": len(result.filtered),
            "configs_generated": len(configs),
            "min_liquidity": _json_number(thresholds.min_liquidity),
            "min_volume_24h": _json_number(thresholds.min_volume_24h),
            "min_volume_24h_usdc_only": _json_number(thresholds.min_volume_24h_usdc_only),
        },
        target_tokens=dict(target_tokens),
        configs=[config.to_dict() for config in configs],
        raw_pools=[pool.to_log_dict() for pool in result.filtered],
    )


def log_paths(logs_dir: Path, timestamp: datetime) -> tuple[Path, Path]:
    """JSON and text log paths for the run's UTC date."""
    day = iso_date(timestamp)
    return logs_dir / f"pools-{day}.json", logs_dir / f"pools-{day}.txt"


def load_json_log(path: Path) -> List[Any]:
    """
    Read an existing JSON log.

    Absent file -> []. A non-array document is wrapped as a single entry.
    An unreadable or corrupt file is discarded -> [].
    """
    if not path.exists():
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(
            f"[{ErrorCode.LOG_CORRUPT.value}] Discarding unreadable log {path}: {e}",
            extra={"context": {"error_code": ErrorCode.LOG_CORRUPT.value, "path": str(path)}},
        )
        return []

    if not isinstance(data, list):
        return [data]
    return data


def append_json_log(path: Path, entry: LogEntry) -> Path:
    """Append an entry to the JSON log and rewrite the file."""
    entries = load_json_log(path)
    entries.append(entry.to_dict())

    # Serialize before opening: "w" truncates the previous runs
    text = json.dumps(entries, indent=2)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)

    logger.info(f"JSON log saved: {path}", extra={"context": {"entries": len(entries)}})
    return path


def append_text_log(path: Path, text: str) -> Path:
    """Append a run to the human-readable log."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(text)

    logger.info(f"Text log saved: {path}")
    return path


# =============================================================================
# HUMAN-READABLE LOG
# =============================================================================

def _section(title: str) -> List[str]:
    return [RULE, title, RULE, ""]


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def render_pool_lines(pool: Pool, position: int) -> List[str]:
    """Detail block for one pool."""
    price_change = (pool.price_change_percentage or {}).get("h24", "N/A")
    txs = pool.transactions_in("h24")

    lines = [
        "",
        f"{position}. Pool Address: {pool.address}",
        f"   Name:           {pool.name}",
        f"   DEX:            {pool.dex.name} ({pool.dex.id})",
        f"   Created:        {pool.pool_created_at or 'N/A'}",
        f"   Liquidity:      ${format_usd_cents(pool.liquidity_usd)}",
        f"   Volume 24h:     ${format_usd_cents(pool.volume_24h_usd)}",
        f"   Volume 1h:      ${format_usd_cents(pool.volume_1h_usd)}",
        f"   Price Change:   {price_change}% (24h)",
        f"   Transactions:   {txs.buys} buys, {txs.sells} sells (24h)",
        f"   Base Token:     {pool.base_token.symbol} ({pool.base_token.address})",
        f"   Quote Token:    {pool.quote_token.symbol} ({pool.quote_token.address})",
    ]
    if pool.base_token_price_usd:
        lines.append(f"   Base Price:     ${format_price(pool.base_token_price_usd)}")
    if pool.quote_token_price_usd:
        lines.append(f"   Quote Price:    ${format_price(pool.quote_token_price_usd)}")
    return lines


def render_config_lines(config: PoolConfig, position: int) -> List[str]:
    """Summary block for one generated config."""
    lines = [
        f"{position}. {config.id}",
        f"   Type:        {config.type.value.upper()}",
        f"   Program ID:  {config.program_id}",
        f"   Token A:     {config.token_a.symbol} ({config.token_a.address})",
        f"   Token B:     {config.token_b.symbol} ({config.token_b.address})",
    ]
    labels = (("state", "State:      "), ("ammId", "AMM ID:     "), ("market", "Market:     "))
    for key, label in labels:
        if key in config.accounts:
            lines.append(f"   {label} {config.accounts[key]}")
            break
    lines.append("")
    return lines


def render_text_log(
    timestamp: datetime,
    entry: LogEntry,
    groups: Mapping[str, List[Pool]],
    configs: List[PoolConfig],
) -> str:
    """Render one run for the append-only text log."""
    summary = entry.summary
    lines = [
        HEAVY_RULE,
        "MEGAGECKO POOL FETCHER - FETCH LOG",
        HEAVY_RULE,
        "",
        f"Timestamp: {entry.timestamp}",
        f"Date: {to_local_string(timestamp)}",
        "",
    ]

    lines += _section("SUMMARY")
    lines += [
        f"Total Pools Fetched:      {summary['total_pools_fetched']}",
        f"Relevant Pools:           {summary['relevant_pools']}",
        f"USDC-only Pools:          {summary['usdc_only_pools']}",
        f"Filtered Pools:           {summary['filtered_pools']}",
        f"Configs Generated:        {summary['configs_generated']}",
        f"Min Liquidity Filter:     ${format_usd(summary['min_liquidity'])}",
        f"Min 24h Volume Filter:    ${format_usd(summary['min_volume_24h'])}",
        f"Min 24h Volume (USDC):    ${format_usd(summary['min_volume_24h_usdc_only'])}",
        "",
    ]

    lines += _section("TARGET TOKENS")
    for symbol, address in entry.target_tokens.items():
        lines.append(f"{symbol:<10} {address}")
    lines.append("")

    lines += _section("FILTERED POOLS")
    for pair, pools in groups.items():
        lines.append("")
        lines.append(f"{pair} ({_plural(len(pools), 'pool')}):")
        lines.append(LIGHT_RULE)
        for position, pool in enumerate(pools, 1):
            lines += render_pool_lines(pool, position)
        lines.append("")

    lines.append("")
    lines += _section("GENERATED CONFIGS")
    for position, config in enumerate(configs, 1):
        lines += render_config_lines(config, position)

    lines += [
        HEAVY_RULE,
        f"End of log - {entry.timestamp}",
        HEAVY_RULE,
    ]
    return "\n".join(lines) + "\n"


# =============================================================================
# CONSOLE
# =============================================================================

class PoolReporter:
    """
    Console and file output for a fetch run.

    Narration honours ReportConfig.quiet; the config JSON dump and the log
    files are always produced.
    """

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()

    def _say(self, message: str = "") -> None:
        if not self.config.quiet:
            click.echo(message)

    def banner(self, target_tokens: Mapping[str, str]) -> None:
        self._say(HEAVY_RULE)
        self._say("MEGAGECKO POOL FETCHER")
        self._say(HEAVY_RULE)
        self._say()
        self._say("Target tokens:")
        for symbol, address in target_tokens.items():
            self._say(f"  {symbol}: {address}")
        self._say()

    def fetching(self, symbol: str, address: str) -> None:
        self._say(f"Fetching pools for {symbol} ({address})...")

    def fetched(self, count: int) -> None:
        self._say(f"  Found {count} pools")
        self._say()

    def filter_summary(
        self,
        total_pools: int,
        result: FilterResult,
        thresholds: FilterThresholds,
    ) -> None:
        self._say(f"Total unique pools: {total_pools}")
        self._say()
        self._say(RULE)
        self._say(
            f"Found {len(result.relevant)} target token pair pools "
            f"(out of {total_pools} total)"
        )
        self._say(RULE)
        self._say()
        self._say(
            f"Filtering target token pairs: min liquidity ${format_usd(thresholds.min_liquidity)}, "
            f"min 24h volume ${format_usd(thresholds.min_volume_24h)}"
        )
        self._say(
            f"{len(result.target_pairs)} target token pair pools passed filters "
            f"(out of {len(result.relevant)} relevant pools)"
        )
        self._say()
        self._say(f"Found {len(result.usdc_only)} USDC pools with non-target tokens")
        self._say()
        self._say(
            f"Filtering USDC-only pools: min liquidity ${format_usd(thresholds.min_liquidity)}, "
            f"min 24h volume ${format_usd(thresholds.min_volume_24h_usdc_only)}"
        )
        self._say(
            f"{len(result.usdc_only_filtered)} USDC-only pools passed filters "
            f"(out of {len(result.usdc_only)} USDC-only pools)"
        )
        self._say()
        self._say(
            f"Total filtered pools: {len(result.filtered)} "
            f"({len(result.target_pairs)} target pairs + "
            f"{len(result.usdc_only_filtered)} USDC-only)"
        )
        self._say()

    def pool_groups(self, groups: Mapping[str, List[Pool]]) -> None:
        for pair, pools in groups.items():
            self._say()
            self._say(f"{pair} ({len(pools)} pools):")
            for position, pool in enumerate(pools, 1):
                self._say(f"  {position}. {pool.address}")
                self._say(f"     DEX: {pool.dex.name} ({pool.dex.id})")
                self._say(f"     Liquidity: ${format_usd(pool.liquidity_usd)}")
                self._say(f"     Volume 24h: ${format_usd(pool.volume_24h_usd)}")

        self._say()
        self._say(RULE)
        self._say("GENERATED CONFIG ENTRIES")
        self._say(RULE)
        self._say()

    def emit_configs(self, configs: List[PoolConfig]) -> None:
        """Print the config JSON to stdout regardless of quiet."""
        click.echo(json.dumps([config.to_dict() for config in configs], indent=2))

    def write_logs(
        self,
        entry: LogEntry,
        timestamp: datetime,
        groups: Mapping[str, List[Pool]],
        configs: List[PoolConfig],
    ) -> tuple[Path, Path]:
        """Persist the run to the JSON and text logs."""
        json_path, text_path = log_paths(self.config.logs_dir, timestamp)
        append_json_log(json_path, entry)
        append_text_log(text_path, render_text_log(timestamp, entry, groups, configs))
        return json_path, text_path

    def done(self, json_path: Path, text_path: Path) -> None:
        self._say()
        self._say(RULE)
        self._say("Done! Copy the config entries above to your pool config file")
        self._say(f"Saved JSON log to:     {json_path}")
        self._say(f"Saved readable log to: {text_path}")
        self._say(RULE)
        self._say()
