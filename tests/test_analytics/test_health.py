"""
Tests for analytics/health.py — guild health scores and recommendations.

Covers:
  - Forge scenario (Mining GM, Weaponsmithing Master, nobody in Smelting)
  - Empty roster and all-Grandmaster roster extremes
  - Scores stay in [0, 100]; overall never drops when a member improves
  - Recommendation priority, name truncation and weakest-tier tie-break
  - Empty tiers score 100 in tier balance
  - Display limit on recommendations
"""

from __future__ import annotations

import pytest

from guild_professions.analytics.coverage import compute_coverage
from guild_professions.analytics.health import (
    CriticalGap,
    build_recommendations,
    compute_health_metrics,
    compute_tier_balance,
)
from guild_professions.catalog.catalog import ProfessionCatalog, UnknownProfessionError
from guild_professions.config import HealthConfig
from guild_professions.models.profession import Profession
from guild_professions.taxonomy.profession_taxonomy import ProfessionTier

GATHERING, PROCESSING, CRAFTING = (
    ProfessionTier.GATHERING, ProfessionTier.PROCESSING, ProfessionTier.CRAFTING,
)


class TestForgeScenario:
    @pytest.fixture
    def metrics(self, forge_catalog, forge_roster):
        return compute_health_metrics(forge_catalog, forge_roster)

    def test_scores(self, metrics):
        assert metrics.coverage_score == 67
        assert metrics.mastery_score == 67
        assert metrics.grandmaster_score == 33
        assert metrics.overall_score == 53

    def test_tier_balance(self, metrics):
        assert metrics.tier_balance == {GATHERING: 100, PROCESSING: 0, CRAFTING: 100}

    def test_critical_gaps(self, metrics):
        assert [g.profession_id for g in metrics.critical_gaps] == ["smelting"]
        assert metrics.critical_gaps[0].total_holders == 0

    def test_supply_breaks(self, metrics):
        assert len(metrics.supply_breaks) == 1
        assert metrics.supply_breaks[0].missing_dependency_names == ("Smelting",)

    def test_recommendations(self, metrics):
        assert metrics.recommendations == (
            "Weaponsmithing crafters need Smelting suppliers",
            "Processing tier is underdeveloped (0% coverage)",
        )


class TestExtremes:
    def test_unknown_profession_rejected(self, forge_catalog, member_factory):
        roster = [member_factory("Alice", {"mining": 4}), member_factory("Odd", {"bogus": 2})]
        with pytest.raises(UnknownProfessionError, match="bogus"):
            compute_health_metrics(forge_catalog, roster)

    def test_empty_roster(self, forge_catalog):
        metrics = compute_health_metrics(forge_catalog, [])
        assert metrics.overall_score == 0
        assert metrics.coverage_score == 0
        assert len(metrics.critical_gaps) == 3
        assert metrics.supply_breaks == ()
        assert metrics.recommendations == (
            "Priority: Train a Master in Weaponsmithing",
            "Gathering tier is underdeveloped (0% coverage)",
            "Consider promoting more Grandmasters (only 0 of 3)",
        )

    def test_everyone_grandmaster(self, forge_catalog, member_factory):
        roster = [member_factory("Ace", {"mining": 4, "smelting": 4, "weaponsmithing": 4})]
        metrics = compute_health_metrics(forge_catalog, roster)
        assert metrics.overall_score == 100
        assert metrics.critical_gaps == ()
        assert metrics.supply_breaks == ()
        assert metrics.recommendations == ()

    def test_empty_catalog(self):
        metrics = compute_health_metrics(ProfessionCatalog([]), [])
        assert metrics.overall_score == 0
        assert metrics.tier_balance == {GATHERING: 100, PROCESSING: 100, CRAFTING: 100}


class TestScoreProperties:
    def test_scores_bounded(self, shipped_catalog, member_factory):
        rosters = [
            [],
            [member_factory("A", {"mining": 1})],
            [member_factory("B", {p.id: 3 for p in shipped_catalog.crafting})],
            [member_factory("C", {p.id: 4 for p in shipped_catalog})],
        ]
        for roster in rosters:
            m = compute_health_metrics(shipped_catalog, roster)
            for score in (m.overall_score, m.coverage_score, m.mastery_score, m.grandmaster_score):
                assert 0 <= score <= 100
            assert all(0 <= v <= 100 for v in m.tier_balance.values())

    def test_overall_monotone_under_promotion(self, shipped_catalog, member_factory):
        ranks: dict[str, int] = {}
        previous = compute_health_metrics(shipped_catalog, []).overall_score
        for profession in shipped_catalog:
            for rank in (1, 2, 3, 4):
                ranks[profession.id] = rank
                roster = [member_factory("Climber", dict(ranks))]
                current = compute_health_metrics(shipped_catalog, roster).overall_score
                assert current >= previous
                previous = current
        assert previous == 100

    def test_custom_weights(self, forge_catalog, forge_roster):
        config = HealthConfig(coverage_weight=1.0, mastery_weight=0.0, grandmaster_weight=0.0)
        assert compute_health_metrics(forge_catalog, forge_roster, config).overall_score == 67


class TestTierBalance:
    def test_each_tier_against_own_size(self, shipped_catalog, member_factory):
        roster = [member_factory("G", {"mining": 3, "herbalism": 3})]
        balance = compute_tier_balance(compute_coverage(shipped_catalog, roster))
        assert balance == {GATHERING: 40, PROCESSING: 0, CRAFTING: 0}

    def test_empty_tier_scores_full(self, member_factory):
        catalog = ProfessionCatalog([
            Profession(id="mining", name="Mining", tier=GATHERING),
        ])
        balance = compute_tier_balance(compute_coverage(catalog, []))
        assert balance[PROCESSING] == 100
        assert balance[CRAFTING] == 100
        assert balance[GATHERING] == 0


class TestRecommendations:
    def _gap(self, pid: str, tier: ProfessionTier = CRAFTING) -> CriticalGap:
        return CriticalGap(profession_id=pid, name=pid.title(), tier=tier, total_holders=0)

    def test_gap_names_truncated(self):
        recs = build_recommendations(
            critical_gaps=[self._gap("a"), self._gap("b"), self._gap("c")],
            supply_breaks=[],
            tier_balance={GATHERING: 100, PROCESSING: 100, CRAFTING: 100},
            grandmaster_score=100,
            grandmaster_count=3,
            profession_count=3,
        )
        assert recs == ["Priority: Train a Master in A, B"]

    def test_non_crafting_gaps_do_not_prioritise(self):
        recs = build_recommendations(
            critical_gaps=[self._gap("mining", GATHERING)],
            supply_breaks=[],
            tier_balance={GATHERING: 80, PROCESSING: 100, CRAFTING: 100},
            grandmaster_score=50,
            grandmaster_count=1,
            profession_count=2,
        )
        assert recs == []

    def test_weakest_tier_tie_goes_to_earliest(self):
        recs = build_recommendations(
            critical_gaps=[],
            supply_breaks=[],
            tier_balance={GATHERING: 100, PROCESSING: 20, CRAFTING: 20},
            grandmaster_score=100,
            grandmaster_count=1,
            profession_count=1,
        )
        assert recs == ["Processing tier is underdeveloped (20% coverage)"]

    def test_tier_threshold_is_strict(self):
        recs = build_recommendations(
            critical_gaps=[],
            supply_breaks=[],
            tier_balance={GATHERING: 50, PROCESSING: 50, CRAFTING: 50},
            grandmaster_score=30,
            grandmaster_count=1,
            profession_count=3,
        )
        assert recs == []

    def test_max_gap_names_configurable(self):
        recs = build_recommendations(
            critical_gaps=[self._gap("a"), self._gap("b"), self._gap("c")],
            supply_breaks=[],
            tier_balance={GATHERING: 100, PROCESSING: 100, CRAFTING: 100},
            grandmaster_score=100,
            grandmaster_count=3,
            profession_count=3,
            config=HealthConfig(max_gap_names=3),
        )
        assert recs == ["Priority: Train a Master in A, B, C"]

    def test_display_limit(self, forge_catalog):
        metrics = compute_health_metrics(forge_catalog, [], HealthConfig(display_limit=2))
        assert len(metrics.recommendations) == 3
        assert len(metrics.top_recommendations()) == 2
        assert len(metrics.top_recommendations(10)) == 3


class TestMetricsRecord:
    def test_tier_balance_is_read_only(self, forge_catalog, forge_roster):
        metrics = compute_health_metrics(forge_catalog, forge_roster)
        with pytest.raises(TypeError):
            metrics.tier_balance[GATHERING] = 0  # type: ignore[index]

    def test_compares_by_value(self, forge_catalog, forge_roster):
        first = compute_health_metrics(forge_catalog, forge_roster)
        assert first == compute_health_metrics(forge_catalog, forge_roster)
