"""
Guild profession health scoring.

Turns the coverage aggregation and the supply-chain audit into a handful of
0–100 scores plus an ordered list of advisory recommendations.

Score formula
-------------
    coverage_score    = % of catalog professions held by anyone
    mastery_score     = % of catalog professions held at Master or above
    grandmaster_score = % of catalog professions held at Grandmaster

    overall = (
        coverage_score      * 0.2
        + mastery_score     * 0.4
        + grandmaster_score * 0.4
    )

Each percentage is rounded half-up to an integer before blending and the
blend is rounded half-up again.  Weights come from ``HealthConfig`` and must
sum to 1.0, so ``overall`` stays in [0, 100] and never decreases when one
component rises with the others fixed.

Tier balance
------------
For each tier, % of *that tier's* professions with Master+ coverage.  Each
tier is measured against its own size, so tiers of different sizes stay
comparable.  A tier with no professions scores 100 (nothing to train).

Recommendations (priority order, at most one per rule)
------------------------------------------------------
    1. Crafting professions with no Master+ holder (names up to 2).
    2. The first supply break: crafters needing unsupplied links.
    3. The weakest tier, if its balance is below 50.
    4. Grandmaster scarcity, if grandmaster_score is below 30.

Consumers show at most ``display_limit`` of them; the full list is always
computed.  Scores are raw numbers; mapping them to colours or labels is a
presentation concern.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from guild_professions.analytics.coverage import ProfessionCoverage, compute_coverage
from guild_professions.analytics.supply_chain import (
    SupplyBreak,
    audit_supply_chains,
    find_supply_breaks,
)
from guild_professions.catalog.catalog import ProfessionCatalog
from guild_professions.config import HealthConfig
from guild_professions.models.member import Member
from guild_professions.taxonomy.profession_taxonomy import ProfessionTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CriticalGap:
    """A profession nobody holds at Master or above."""

    profession_id: str
    name:          str
    tier:          ProfessionTier
    total_holders: int


@dataclass(frozen=True)
class HealthMetrics:
    """Guild health snapshot.

    Frozen, with ``tier_balance`` a read-only mapping; compares by value but
    is not hashable.

    Attributes:
        overall_score:     Weighted blend, 0–100.
        coverage_score:    % of professions held at any rank.
        mastery_score:     % of professions held at Master+.
        grandmaster_score: % of professions held at Grandmaster.
        tier_balance:      Tier → % of that tier's professions at Master+.
        critical_gaps:     Professions without a Master+ holder, catalog order.
        supply_breaks:     Crafting professions with unsupplied links.
        recommendations:   Ordered advisory strings (full list).
        display_limit:     How many recommendations consumers should show.
    """

    overall_score:     int
    coverage_score:    int
    mastery_score:     int
    grandmaster_score: int
    tier_balance:      Mapping[ProfessionTier, int]
    critical_gaps:     tuple[CriticalGap, ...]
    supply_breaks:     tuple[SupplyBreak, ...]
    recommendations:   tuple[str, ...]
    display_limit:     int = 4

    def top_recommendations(self, limit: Optional[int] = None) -> tuple[str, ...]:
        """First ``limit`` recommendations (default: ``display_limit``)."""
        return self.recommendations[: self.display_limit if limit is None else limit]


def compute_health_metrics(
    catalog: ProfessionCatalog,
    roster: Sequence[Member],
    config: Optional[HealthConfig] = None,
) -> HealthMetrics:
    """Score the guild's profession coverage.

    Args:
        catalog: Profession catalog.
        roster:  Member snapshot.
        config:  Weights and thresholds; defaults to ``HealthConfig()``.

    Returns:
        ``HealthMetrics``.

    Raises:
        UnknownProfessionError: If any member holds an id absent from the catalog.
    """
    config = config or HealthConfig()
    coverage = compute_coverage(catalog, roster)
    breaks = find_supply_breaks(audit_supply_chains(catalog, roster))

    total = len(coverage)
    with_any = sum(1 for c in coverage if c.is_covered)
    with_master = sum(1 for c in coverage if c.has_master_plus)
    with_gm = sum(1 for c in coverage if c.has_grandmaster)

    coverage_score = _percent(with_any, total)
    mastery_score = _percent(with_master, total)
    grandmaster_score = _percent(with_gm, total)

    overall_score = _round_half_up(
        coverage_score * config.coverage_weight
        + mastery_score * config.mastery_weight
        + grandmaster_score * config.grandmaster_weight
    )

    tier_balance = compute_tier_balance(coverage)
    critical_gaps = tuple(
        CriticalGap(
            profession_id=c.profession_id,
            name=c.name,
            tier=c.tier,
            total_holders=c.total_coverage,
        )
        for c in coverage
        if not c.has_master_plus
    )

    recommendations = build_recommendations(
        critical_gaps=critical_gaps,
        supply_breaks=breaks,
        tier_balance=tier_balance,
        grandmaster_score=grandmaster_score,
        grandmaster_count=with_gm,
        profession_count=total,
        config=config,
    )

    logger.info(
        "Guild health | professions=%d | members=%d | overall=%d | coverage=%d | "
        "mastery=%d | gm=%d | gaps=%d | breaks=%d",
        total, len(roster), overall_score, coverage_score, mastery_score,
        grandmaster_score, len(critical_gaps), len(breaks),
    )

    return HealthMetrics(
        overall_score=overall_score,
        coverage_score=coverage_score,
        mastery_score=mastery_score,
        grandmaster_score=grandmaster_score,
        tier_balance=MappingProxyType(tier_balance),
        critical_gaps=critical_gaps,
        supply_breaks=tuple(breaks),
        recommendations=tuple(recommendations),
        display_limit=config.display_limit,
    )


def compute_tier_balance(coverage: Sequence[ProfessionCoverage]) -> dict[ProfessionTier, int]:
    """% of each tier's professions with a Master+ holder."""
    balance: dict[ProfessionTier, int] = {}
    for tier in ProfessionTier:
        in_tier = [c for c in coverage if c.tier == tier]
        if not in_tier:
            balance[tier] = 100
            continue
        balance[tier] = _percent(sum(1 for c in in_tier if c.has_master_plus), len(in_tier))
    return balance


def build_recommendations(
    critical_gaps:     Sequence[CriticalGap],
    supply_breaks:     Sequence[SupplyBreak],
    tier_balance:      Mapping[ProfessionTier, int],
    grandmaster_score: int,
    grandmaster_count: int,
    profession_count:  int,
    config:            Optional[HealthConfig] = None,
) -> list[str]:
    """Fixed-priority advisory list; see the module docstring for the rules."""
    config = config or HealthConfig()
    recommendations: list[str] = []

    crafting_gaps = [g for g in critical_gaps if g.tier == ProfessionTier.CRAFTING]
    if crafting_gaps:
        names = ", ".join(g.name for g in crafting_gaps[: config.max_gap_names])
        recommendations.append(f"Priority: Train a Master in {names}")

    if supply_breaks:
        first = supply_breaks[0]
        recommendations.append(
            f"{first.profession_name} crafters need "
            f"{', '.join(first.missing_dependency_names)} suppliers"
        )

    # Ties go to the earliest tier in production order.
    weakest = min(ProfessionTier, key=lambda t: tier_balance[t])
    if tier_balance[weakest] < config.tier_warning_threshold:
        recommendations.append(
            f"{weakest.value.capitalize()} tier is underdeveloped "
            f"({tier_balance[weakest]}% coverage)"
        )

    if grandmaster_score < config.grandmaster_warning_threshold:
        recommendations.append(
            f"Consider promoting more Grandmasters "
            f"(only {grandmaster_count} of {profession_count})"
        )

    return recommendations


# ── Helpers ───────────────────────────────────────────────────────────────────

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _percent(count: int, total: int) -> int:
    if total <= 0:
        return 0
    return _round_half_up(count * 100.0 / total)
