"""
Export helpers: analytics results → plain dicts, JSON and CSV files.

The analytics layer returns frozen dataclasses keyed by enums.  The
``*_to_dict`` / ``*_to_records`` adapters turn them into JSON-safe
structures (enum keys become their string values, ranks stay integers) for
``--json`` output and file export.

CSV exports are flat (no nested dicts): one row per profession or member,
holder lists joined with ``"; "``.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from guild_professions.analytics.coverage import ProfessionCoverage
from guild_professions.analytics.health import HealthMetrics
from guild_professions.analytics.ranks import MemberRankReport
from guild_professions.analytics.supply_chain import CraftingSupplyChain
from guild_professions.taxonomy.profession_taxonomy import RANKS_DESCENDING

_RANK_COLUMNS: tuple[str, ...] = tuple(rank.name.lower() for rank in RANKS_DESCENDING)

COVERAGE_FIELDS: tuple[str, ...] = (
    "profession_id", "name", "tier", "total_coverage", "highest_rank", *_RANK_COLUMNS,
)

MEMBER_REPORT_FIELDS: tuple[str, ...] = (
    "name", "summary", *(f"{col}_or_above" for col in _RANK_COLUMNS), "warnings",
)


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: Sequence[str] | None = None,
) -> Path:
    """Write ``records`` as a UTF-8 CSV file and return ``path``.

    With ``fieldnames`` (e.g. ``COVERAGE_FIELDS``) the header is written even
    when there are no rows, so a filtered-down export still loads with its
    columns.  Without it the columns come from the first record and an empty
    export is an empty file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    cols = list(fieldnames) if fieldnames else (list(records[0]) if records else [])
    if not cols:
        path.write_text("", encoding="utf-8")
        return path
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file and return ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


# ── Adapters ──────────────────────────────────────────────────────────────────


def health_to_dict(metrics: HealthMetrics) -> dict[str, Any]:
    """JSON-safe view of ``HealthMetrics`` (full recommendation list)."""
    return {
        "overall_score":     metrics.overall_score,
        "coverage_score":    metrics.coverage_score,
        "mastery_score":     metrics.mastery_score,
        "grandmaster_score": metrics.grandmaster_score,
        "tier_balance":      {tier.value: pct for tier, pct in metrics.tier_balance.items()},
        "critical_gaps": [
            {
                "profession_id": g.profession_id,
                "name":          g.name,
                "tier":          g.tier.value,
                "total_holders": g.total_holders,
            }
            for g in metrics.critical_gaps
        ],
        "supply_breaks": [
            {
                "profession_id":            b.profession_id,
                "profession_name":          b.profession_name,
                "missing_dependency_ids":   list(b.missing_dependency_ids),
                "missing_dependency_names": list(b.missing_dependency_names),
            }
            for b in metrics.supply_breaks
        ],
        "recommendations": list(metrics.recommendations),
    }


def coverage_to_records(records: list[ProfessionCoverage]) -> list[dict[str, Any]]:
    """One flat row per profession; holder names joined per rank."""
    rows: list[dict[str, Any]] = []
    for r in records:
        row: dict[str, Any] = {
            "profession_id":  r.profession_id,
            "name":           r.name,
            "tier":           r.tier.value,
            "total_coverage": r.total_coverage,
            "highest_rank":   int(r.highest_rank) if r.highest_rank is not None else 0,
        }
        for rank in RANKS_DESCENDING:
            row[rank.name.lower()] = "; ".join(r.by_rank[rank])
        rows.append(row)
    return rows


def supply_chains_to_dict(chains: list[CraftingSupplyChain]) -> list[dict[str, Any]]:
    """Nested JSON-safe view of supply-chain audit results."""
    return [
        {
            "profession_id": c.profession_id,
            "name":          c.name,
            "status":        c.status.value,
            "crafters":      [{"name": p.name, "rank": int(p.rank)} for p in c.crafters],
            "dependencies": [
                {
                    "profession_id":       d.profession_id,
                    "name":                d.name,
                    "tier":                d.tier.value,
                    "has_master_provider": d.has_master_provider,
                    "providers": [{"name": p.name, "rank": int(p.rank)} for p in d.providers],
                }
                for d in c.dependencies
            ],
        }
        for c in chains
    ]


def member_reports_to_records(reports: list[MemberRankReport]) -> list[dict[str, Any]]:
    """One flat row per member report."""
    rows: list[dict[str, Any]] = []
    for rep in reports:
        row: dict[str, Any] = {"name": rep.name, "summary": rep.summary}
        for rank in RANKS_DESCENDING:
            row[f"{rank.name.lower()}_or_above"] = rep.effective_counts[rank]
        row["warnings"] = "; ".join(rep.warnings)
        rows.append(row)
    return rows
