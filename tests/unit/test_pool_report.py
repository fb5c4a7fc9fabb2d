"""
tests/unit/test_pool_report.py - Run log and console report tests.
"""

import json
from datetime import datetime, timezone

import pytest

from conftest import make_pool
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
from strategy.filters import FilterThresholds, run_filter_pipeline
from strategy.grouping import group_by_pair
from strategy.pool_config import build_configs

RUN_AT = datetime(2026, 10, 18, 9, 30, 0, 250000, tzinfo=timezone.utc)


@pytest.fixture
def run_parts(usdc, wbtc, sol, registry, dex_programs):
    pools = [
        make_pool("UsdcWbtc", usdc, wbtc, pool_created_at="2024-05-01T10:00:00Z"),
        make_pool("UsdcSol", usdc, sol, volume_24h="150000"),
    ]
    result = run_filter_pipeline(pools, registry)
    groups = group_by_pair(result.filtered)
    configs = build_configs(groups, dex_programs)
    entry = build_log_entry(
        RUN_AT,
        total_pools_fetched=len(pools),
        result=result,
        configs=configs,
        target_tokens=registry.to_dict(),
        thresholds=FilterThresholds(),
    )
    return entry, groups, configs


class TestLogEntry:
    def test_summary(self, run_parts):
        entry, _, _ = run_parts
        assert entry.timestamp == "2026-10-18T09:30:00.250Z"
        assert entry.summary == {
            "total_pools_fetched": 2,
            "relevant_pools": 1,
            "usdc_only_pools": 1,
            "filtered_pools": 2,
            "configs_generated": 2,
            "min_liquidity": 1000,
            "min_volume_24h": 1000,
            "min_volume_24h_usdc_only": 100000,
        }

    def test_raw_pools_are_trimmed_filtered_pools(self, run_parts):
        entry, _, _ = run_parts
        assert [p["address"] for p in entry.raw_pools] == ["UsdcWbtc", "UsdcSol"]
        assert entry.raw_pools[0]["pool_created_at"] == "2024-05-01T10:00:00Z"
        assert "prices" not in entry.raw_pools[0]

    def test_configs_serialized(self, run_parts):
        entry, _, configs = run_parts
        assert [c["id"] for c in entry.configs] == [c.id for c in configs]


class TestJsonLog:
    def test_paths_use_utc_date(self, tmp_path):
        json_path, text_path = log_paths(tmp_path, RUN_AT)
        assert json_path.name == "pools-2026-10-18.json"
        assert text_path.name == "pools-2026-10-18.txt"

    def test_absent_file_is_empty(self, tmp_path):
        assert load_json_log(tmp_path / "missing.json") == []

    def test_one_then_two_entries(self, tmp_path, run_parts):
        entry, _, _ = run_parts
        path = tmp_path / "logs" / "pools.json"

        append_json_log(path, entry)
        first = json.loads(path.read_text(encoding="utf-8"))
        assert first == [entry.to_dict()]

        append_json_log(path, entry)
        second = json.loads(path.read_text(encoding="utf-8"))
        assert second == [entry.to_dict(), entry.to_dict()]
        assert second[0] == first[0]

    def test_unserializable_entry_keeps_earlier_runs(self, tmp_path, run_parts):
        entry, _, _ = run_parts
        path = tmp_path / "pools.json"
        append_json_log(path, entry)
        before = path.read_text(encoding="utf-8")

        broken = LogEntry(timestamp="t", summary={"bad": object()}, target_tokens={})
        with pytest.raises(TypeError):
            append_json_log(path, broken)

        assert path.read_text(encoding="utf-8") == before

    def test_corrupt_file_replaced(self, tmp_path, run_parts):
        entry, _, _ = run_parts
        path = tmp_path / "pools.json"
        path.write_text("{not json", encoding="utf-8")

        append_json_log(path, entry)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert len(data) == 1

    def test_non_array_document_wrapped(self, tmp_path, run_parts):
        entry, _, _ = run_parts
        path = tmp_path / "pools.json"
        path.write_text(json.dumps({"legacy": True}), encoding="utf-8")

        append_json_log(path, entry)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0] == {"legacy": True}
        assert len(data) == 2


class TestTextLog:
    def test_render_sections(self, run_parts):
        entry, groups, configs = run_parts
        text = render_text_log(RUN_AT, entry, groups, configs)

        assert text.startswith("=" * 80)
        for heading in ("SUMMARY", "TARGET TOKENS", "FILTERED POOLS", "GENERATED CONFIGS"):
            assert heading in text
        assert "USDC/WBTC (1 pool):" in text
        assert "Liquidity:      $50,000.00" in text
        assert "Min 24h Volume (USDC):    $100,000" in text
        assert "State:       UsdcWbtc" in text
        assert text.rstrip().endswith("=" * 80)

    def test_append_only(self, tmp_path):
        path = tmp_path / "pools.txt"
        append_text_log(path, "first run\n")
        append_text_log(path, "second run\n")
        assert path.read_text(encoding="utf-8") == "first run\nsecond run\n"


class TestPoolReporter:
    def test_quiet_prints_only_json(self, capsys, run_parts):
        _, _, configs = run_parts
        reporter = PoolReporter(ReportConfig(quiet=True))

        reporter.banner({"USDC": "x"})
        reporter.fetching("USDC", "x")
        reporter.emit_configs(configs)

        out = capsys.readouterr().out
        assert [c["id"] for c in json.loads(out)] == [c.id for c in configs]

    def test_narration(self, capsys):
        reporter = PoolReporter()
        reporter.fetching("WBTC", "addr")
        reporter.fetched(3)
        out = capsys.readouterr().out
        assert "Fetching pools for WBTC (addr)..." in out
        assert "Found 3 pools" in out

    def test_write_logs(self, tmp_path, run_parts):
        entry, groups, configs = run_parts
        reporter = PoolReporter(ReportConfig(quiet=True, logs_dir=tmp_path))

        json_path, text_path = reporter.write_logs(entry, RUN_AT, groups, configs)

        assert json_path.exists() and text_path.exists()
        assert len(json.loads(json_path.read_text(encoding="utf-8"))) == 1
        assert isinstance(LogEntry(**json.loads(json_path.read_text())[0]), LogEntry)
