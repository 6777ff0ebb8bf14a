"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept analytics results and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).  Scores are
printed as raw numbers; there is no colour or traffic-light mapping.
"""

from __future__ import annotations

from guild_professions.analytics.coverage import CoverageSummary, ProfessionCoverage
from guild_professions.analytics.health import HealthMetrics
from guild_professions.analytics.ranks import MemberRankReport
from guild_professions.analytics.supply_chain import CraftingSupplyChain, SupplyStatus
from guild_professions.catalog.catalog import ProfessionCatalog
from guild_professions.taxonomy.profession_taxonomy import (
    RANK_SHORT_NAMES,
    RANKS_DESCENDING,
    ProfessionTier,
)

_STATUS_TAGS: dict[SupplyStatus, str] = {
    SupplyStatus.SUPPLIED:     "[OK]",
    SupplyStatus.SUPPLY_BREAK: "[SHORTAGE]",
    SupplyStatus.TRAINING_GAP: "[NO MASTER]",
    SupplyStatus.NO_CRAFTERS:  "[UNCRAFTED]",
}


def _bar(score: int, width: int = 20) -> str:
    filled = max(0, min(width, round(score * width / 100)))
    return "#" * filled + "." * (width - filled)


# ── Catalog ───────────────────────────────────────────────────────────────────


def format_catalog_summary(catalog: ProfessionCatalog) -> str:
    """Per-tier profession listing with direct dependencies."""
    lines: list[str] = ["", "=== Profession Catalog ==="]
    for tier in ProfessionTier:
        professions = catalog.by_tier(tier)
        lines.append("")
        lines.append(f"  [{tier.value.upper()}] {len(professions)} profession(s)")
        for p in professions:
            deps = ", ".join(p.dependencies) if p.dependencies else "-"
            lines.append(f"    {p.id:<22}  {p.name:<22}  needs: {deps}")
    return "\n".join(lines)


# ── Health ────────────────────────────────────────────────────────────────────


def format_health_report(metrics: HealthMetrics, show_all: bool = False) -> str:
    """Guild health dashboard: scores, tier balance, gaps, recommendations.

    Args:
        metrics:  Result of ``compute_health_metrics``.
        show_all: Print every recommendation instead of the display limit.
    """
    lines: list[str] = ["", "=== Guild Profession Health ==="]
    lines.append(f"  Overall score:  {metrics.overall_score:>3}/100")
    lines.append("")
    for label, score in (
        ("Any coverage", metrics.coverage_score),
        ("Master+",      metrics.mastery_score),
        ("Grandmaster",  metrics.grandmaster_score),
    ):
        lines.append(f"  {label:<14} [{_bar(score)}] {score:>3}%")

    lines.append("")
    lines.append("  Tier balance (Master+ coverage):")
    for tier, score in metrics.tier_balance.items():
        lines.append(f"    {tier.value.capitalize():<12} [{_bar(score)}] {score:>3}%")

    lines.append("")
    if metrics.critical_gaps:
        lines.append(f"  Critical gaps ({len(metrics.critical_gaps)}, no Master+):")
        lines.append("    " + ", ".join(g.name for g in metrics.critical_gaps))
    else:
        lines.append("  Critical gaps: none")

    if metrics.supply_breaks:
        lines.append("")
        lines.append("  Supply chain issues:")
        for b in metrics.supply_breaks:
            lines.append(
                f"    {b.profession_name} <- missing {', '.join(b.missing_dependency_names)}"
            )

    recs = metrics.recommendations if show_all else metrics.top_recommendations()
    lines.append("")
    if recs:
        lines.append("  Recommendations:")
        for i, rec in enumerate(recs, start=1):
            lines.append(f"    {i}. {rec}")
        hidden = len(metrics.recommendations) - len(recs)
        if hidden > 0:
            lines.append(f"    ... {hidden} more (use --all-recommendations)")
    else:
        lines.append("  Recommendations: none")
    return "\n".join(lines)


# ── Coverage ──────────────────────────────────────────────────────────────────


def format_coverage_table(
    records: list[ProfessionCoverage],
    summary: CoverageSummary,
) -> str:
    """Per-tier coverage matrix with holder counts per rank."""
    lines: list[str] = ["", "=== Guild Coverage ==="]
    lines.append(
        f"  Grandmasters: {summary.total_grandmasters}   Masters: {summary.total_masters}   "
        f"Uncovered: {summary.uncovered_count}"
    )

    shown_ids = {r.profession_id for r in records}
    for tier, tier_records in summary.by_tier.items():
        tier_records = tuple(r for r in tier_records if r.profession_id in shown_ids)
        if not tier_records:
            continue
        lines.append("")
        lines.append(f"  [{tier.value.upper()}]")
        header = (
            f"    {'Profession':<22}  "
            + "  ".join(f"{RANK_SHORT_NAMES[rank]:>3}" for rank in RANKS_DESCENDING)
            + f"  {'Total':>5}  {'Best':>4}"
        )
        lines.append(header)
        lines.append("    " + "-" * (len(header) - 4))
        for r in tier_records:
            best = RANK_SHORT_NAMES[r.highest_rank] if r.highest_rank is not None else "-"
            counts = "  ".join(f"{len(r.by_rank[rank]):>3}" for rank in RANKS_DESCENDING)
            lines.append(f"    {r.name:<22}  {counts}  {r.total_coverage:>5}  {best:>4}")
            for rank in RANKS_DESCENDING:
                if r.by_rank[rank]:
                    lines.append(
                        f"      {rank.display_name}: {', '.join(r.by_rank[rank])}"
                    )
    return "\n".join(lines)


# ── Supply chain ──────────────────────────────────────────────────────────────


def format_supply_chain_report(chains: list[CraftingSupplyChain]) -> str:
    """One block per crafting profession listing each upstream link."""
    lines: list[str] = ["", "=== Crafting Supply Chains ==="]
    if not chains:
        lines.append("")
        lines.append("  (no crafting professions in catalog)")
        return "\n".join(lines)

    for c in chains:
        lines.append("")
        crafters = (
            ", ".join(f"{p.name} ({RANK_SHORT_NAMES[p.rank]})" for p in c.crafters)
            or "none"
        )
        lines.append(f"  {_STATUS_TAGS[c.status]:<12} {c.name}")
        lines.append(f"    Crafters: {crafters}")
        for d in c.dependencies:
            mark = "+" if d.has_master_provider else "!"
            providers = (
                ", ".join(f"{p.name} ({RANK_SHORT_NAMES[p.rank]})" for p in d.providers)
                or "nobody"
            )
            lines.append(
                f"    {mark} {d.name:<20} {d.tier.value:<10}  {providers}"
            )
    return "\n".join(lines)


# ── Members ───────────────────────────────────────────────────────────────────


def format_member_reports(reports: list[MemberRankReport]) -> str:
    """Rank summary line per member with any limit warnings beneath."""
    lines: list[str] = ["", "=== Member Rank Summaries ==="]
    if not reports:
        lines.append("")
        lines.append("  (roster is empty)")
        return "\n".join(lines)

    lines.append("")
    for rep in reports:
        lines.append(f"  {rep.name:<24}  {rep.summary}")
        for w in rep.warnings:
            lines.append(f"    [WARN] {w}")
    over = sum(1 for rep in reports if not rep.within_limits)
    lines.append("")
    lines.append(f"  {len(reports)} member(s), {over} over rank limits.")
    return "\n".join(lines)
