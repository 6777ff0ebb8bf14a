"""Tests for guild_professions.reporting.export."""

from __future__ import annotations

import csv
import json

from guild_professions.analytics.coverage import compute_coverage
from guild_professions.analytics.health import compute_health_metrics
from guild_professions.analytics.ranks import build_member_rank_report
from guild_professions.analytics.supply_chain import audit_supply_chains
from guild_professions.reporting.export import (
    COVERAGE_FIELDS,
    MEMBER_REPORT_FIELDS,
    coverage_to_records,
    export_to_csv,
    export_to_json,
    health_to_dict,
    member_reports_to_records,
    supply_chains_to_dict,
)


# ── File writers ──────────────────────────────────────────────────────────────


def test_export_to_csv_roundtrip(tmp_path) -> None:
    path = export_to_csv([{"a": 1, "b": "x"}, {"a": 2, "b": "y"}], tmp_path / "out" / "t.csv")
    with path.open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert rows == [{"a": "1", "b": "x"}, {"a": "2", "b": "y"}]


def test_export_to_csv_empty(tmp_path) -> None:
    path = export_to_csv([], tmp_path / "empty.csv")
    assert path.read_text(encoding="utf-8") == ""


def test_export_to_json_creates_parent(tmp_path) -> None:
    path = export_to_json({"k": [1, 2]}, tmp_path / "nested" / "out.json")
    assert json.loads(path.read_text(encoding="utf-8")) == {"k": [1, 2]}


# ── Adapters ──────────────────────────────────────────────────────────────────


def test_health_to_dict_is_json_safe(forge_catalog, forge_roster) -> None:
    data = health_to_dict(compute_health_metrics(forge_catalog, forge_roster))
    decoded = json.loads(json.dumps(data))
    assert decoded["overall_score"] == 53
    assert decoded["tier_balance"] == {"gathering": 100, "processing": 0, "crafting": 100}
    assert decoded["critical_gaps"][0]["profession_id"] == "smelting"
    assert decoded["supply_breaks"][0]["missing_dependency_ids"] == ["smelting"]
    assert len(decoded["recommendations"]) == 2


def test_coverage_to_records(forge_catalog, forge_roster) -> None:
    mining, smelting, _ = coverage_to_records(compute_coverage(forge_catalog, forge_roster))
    assert mining["grandmaster"] == "Alice"
    assert mining["highest_rank"] == 4
    assert mining["tier"] == "gathering"
    assert smelting["highest_rank"] == 0
    assert smelting["total_coverage"] == 0


def test_supply_chains_to_dict(forge_catalog, forge_roster) -> None:
    (chain,) = supply_chains_to_dict(audit_supply_chains(forge_catalog, forge_roster))
    assert chain["status"] == "supply_break"
    assert chain["crafters"] == [{"name": "Bob", "rank": 3}]
    assert [d["has_master_provider"] for d in chain["dependencies"]] == [True, False]


def test_member_reports_to_records(member_factory) -> None:
    report = build_member_rank_report(member_factory("Ann", {"a": 4, "b": 2}))
    (row,) = member_reports_to_records([report])
    assert row["name"] == "Ann"
    assert row["grandmaster_or_above"] == 1
    assert row["apprentice_or_above"] == 2
    assert row["warnings"] == ""


def test_export_to_csv_header_only_with_fieldnames(tmp_path) -> None:
    """A named field order still yields a header when there are no rows."""
    path = export_to_csv([], tmp_path / "members.csv", fieldnames=MEMBER_REPORT_FIELDS)
    assert path.read_text(encoding="utf-8").strip() == ",".join(MEMBER_REPORT_FIELDS)


def test_coverage_fields_match_records(forge_catalog, forge_roster) -> None:
    rows = coverage_to_records(compute_coverage(forge_catalog, forge_roster))
    assert tuple(rows[0]) == COVERAGE_FIELDS


def test_member_report_fields_match_records(member_factory) -> None:
    rows = member_reports_to_records([build_member_rank_report(member_factory("Ann"))])
    assert tuple(rows[0]) == MEMBER_REPORT_FIELDS
