# PATH: monitoring/__init__.py
"""
Monitoring package for MegaGecko.

Console narration and per-day run logs for the pool fetcher.
"""

from monitoring.pool_report import (
    LogEntry,
    PoolReporter,
    ReportConfig,
    append_json_log,
    append_text_log,
    build_log_entry,
    load_json_log,
    log_paths,
    render_text_log,
)

__all__ = [
    "LogEntry",
    "PoolReporter",
    "ReportConfig",
    "append_json_log",
    "append_text_log",
    "build_log_entry",
    "load_json_log",
    "log_paths",
    "render_text_log",
]
