#!/usr/bin/env python3
"""
strategy/jobs/fetch_pools.py - CLI entrypoint for pool discovery.

Fetches pools for every target token from GeckoTerminal, filters them,
and prints the generated pool configs as JSON.

Usage:
    python -m strategy.jobs.fetch_pools          # Fetch and display pools
    python -m strategy.jobs.fetch_pools --json   # JSON output only
"""

import asyncio
import sys
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable

import click

from config import Settings, load_core_tokens, load_dexes, load_settings
from core.logging import get_logger, set_global_context, setup_logging
from core.models import Pool, PoolConfig
from core.time import now_utc
from discovery.gecko import GeckoTerminalClient
from discovery.registry import PoolSet, TokenRegistry
from monitoring.pool_report import PoolReporter, ReportConfig, build_log_entry
from strategy.filters import FilterResult, FilterThresholds, run_filter_pipeline
from strategy.grouping import group_by_pair
from strategy.pool_config import DexProgramMap, build_configs

logger = get_logger("megagecko.fetch")

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class FetchRun:
    """Everything a run produced, in pipeline order."""
    timestamp: datetime
    pool_set: PoolSet
    result: FilterResult
    groups: dict[str, list[Pool]]
    configs: list[PoolConfig]
    log_paths: tuple[Path, Path] | None = None
    fetch_stats: dict = field(default_factory=dict)


async def collect_pools(
    client: GeckoTerminalClient,
    registry: TokenRegistry,
    reporter: PoolReporter,
    delay_seconds: float,
    sleep: Sleep = asyncio.sleep,
) -> PoolSet:
    """
    Query every registry token in order and merge the results.

    Requests are paced by a fixed delay between consecutive calls.
    """
    pool_set = PoolSet()
    tokens = list(registry)

    for position, (symbol, address) in enumerate(tokens):
        reporter.fetching(symbol, address)
        pools = await client.get_pools_by_token(address)
        pool_set.add_all(pools)
        reporter.fetched(len(pools))

        logger.info(
            f"Fetched {len(pools)} pools for {symbol}",
            extra={"context": {"token": address, "unique_total": len(pool_set)}},
        )

        if position < len(tokens) - 1 and delay_seconds > 0:
            await sleep(delay_seconds)

    return pool_set


async def run_fetch(
    registry: TokenRegistry,
    dex_programs: DexProgramMap,
    client: GeckoTerminalClient,
    reporter: PoolReporter,
    delay_seconds: float,
    thresholds: FilterThresholds | None = None,
    sleep: Sleep = asyncio.sleep,
    timestamp: datetime | None = None,
) -> FetchRun:
    """Run the full pipeline: fetch, merge, filter, group, map, report."""
    thresholds = thresholds or FilterThresholds()

    reporter.banner(registry.to_dict())

    pool_set = await collect_pools(client, registry, reporter, delay_seconds, sleep)
    all_pools = pool_set.pools()

    result = run_filter_pipeline(all_pools, registry, thresholds)
    reporter.filter_summary(len(pool_set), result, thresholds)

    groups = group_by_pair(result.filtered)
    reporter.pool_groups(groups)

    configs = build_configs(groups, dex_programs)
    reporter.emit_configs(configs)

    run_timestamp = timestamp or now_utc()
    entry = build_log_entry(
        run_timestamp,
        total_pools_fetched=len(pool_set),
        result=result,
        configs=configs,
        target_tokens=registry.to_dict(),
        thresholds=thresholds,
    )
    json_path, text_path = reporter.write_logs(entry, run_timestamp, groups, configs)
    reporter.done(json_path, text_path)

    return FetchRun(
        timestamp=run_timestamp,
        pool_set=pool_set,
        result=result,
        groups=groups,
        configs=configs,
        log_paths=(json_path, text_path),
        fetch_stats=client.stats.to_dict(),
    )


async def _main_async(settings: Settings, quiet: bool) -> FetchRun:
    registry = TokenRegistry.from_config(load_core_tokens())
    dex_programs = DexProgramMap.from_config(load_dexes())
    reporter = PoolReporter(ReportConfig(quiet=quiet, logs_dir=settings.logs_dir))

    async with GeckoTerminalClient(
        base_url=settings.api_base_url,
        network=settings.network,
        timeout_seconds=settings.http_timeout_seconds,
    ) as client:
        return await run_fetch(
            registry,
            dex_programs,
            client,
            reporter,
            delay_seconds=settings.request_delay_seconds,
        )


@click.command()
@click.option(
    "--json",
    "json_only",
    is_flag=True,
    default=False,
    help="Only print the generated config JSON",
)
@click.option(
    "--log-level",
    "-l",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (default: LOG_LEVEL env or INFO)",
)
@click.option(
    "--logs-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for run logs (default: POOL_LOGS_DIR env or ./logs)",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Emit stderr logs as JSON lines",
)
def main(
    json_only: bool,
    log_level: str | None,
    logs_dir: Path | None,
    json_logs: bool,
) -> None:
    """
    MegaGecko Pool Fetcher.

    Discovers Solana DEX pools for the target tokens and prints
    config entries for the trading system.
    """
    settings = load_settings()
    if logs_dir is not None:
        settings = replace(settings, logs_dir=logs_dir)

    # In --json mode stderr only carries warnings and errors
    level = (log_level or settings.log_level).upper()
    if json_only and log_level is None:
        level = "WARNING"
    setup_logging(level=level, json_output=json_logs)
    set_global_context(service="megagecko-fetch", network=settings.network)

    try:
        run = asyncio.run(_main_async(settings, quiet=json_only))
    except KeyboardInterrupt:
        logger.info("Pool fetch interrupted")
        sys.exit(130)
    except Exception as e:
        logger.error(
            f"Pool fetch failed: {e}",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        sys.exit(1)

    logger.info(
        "Pool fetch complete",
        extra={"context": {
            "pools": len(run.pool_set),
            "filtered": len(run.result.filtered),
            "configs": len(run.configs),
            **run.fetch_stats,
        }},
    )


if __name__ == "__main__":
    main()
