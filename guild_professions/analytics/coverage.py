"""
Guild-wide profession coverage.

For every catalog profession, who holds it and at which rank.  The
aggregation is a plain nested scan (professions × members); at guild scale
(tens of professions, dozens of members) there is nothing to gain from an
index, and every call recomputes from the roster it is given.

Outputs
-------
``compute_coverage()`` returns one ``ProfessionCoverage`` per catalog
profession, in catalog order.  ``summarize_coverage()`` rolls those records up
into guild totals and a per-tier grouping.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional

from guild_professions.catalog.catalog import ProfessionCatalog
from guild_professions.models.member import Member
from guild_professions.taxonomy.profession_taxonomy import (
    RANKS_DESCENDING,
    ProfessionTier,
    RankLevel,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfessionCoverage:
    """Who in the guild holds one profession.

    Frozen, with ``by_rank`` a read-only mapping.  Records compare by value
    but are not hashable (a mapping field cannot be hashed).

    Attributes:
        profession_id:  Catalog id.
        name:           Display name.
        tier:           Production-chain tier.
        by_rank:        Rank → member names holding exactly that rank, in
                        roster order.  All four ranks are always present.
        total_coverage: Members holding the profession at any rank.
        highest_rank:   Best rank anyone holds, ``None`` when uncovered.
    """

    profession_id:  str
    name:           str
    tier:           ProfessionTier
    by_rank:        Mapping[RankLevel, tuple[str, ...]]
    total_coverage: int
    highest_rank:   Optional[RankLevel]

    @property
    def grandmaster_count(self) -> int:
        return len(self.by_rank[RankLevel.GRANDMASTER])

    @property
    def master_plus_count(self) -> int:
        """Holders at Master or Grandmaster."""
        return len(self.by_rank[RankLevel.GRANDMASTER]) + len(self.by_rank[RankLevel.MASTER])

    @property
    def is_covered(self) -> bool:
        return self.total_coverage > 0

    @property
    def has_master_plus(self) -> bool:
        return self.master_plus_count > 0

    @property
    def has_grandmaster(self) -> bool:
        return self.grandmaster_count > 0


@dataclass(frozen=True)
class CoverageSummary:
    """Guild totals over a set of ``ProfessionCoverage`` records.

    Not hashable, for the same reason as ``ProfessionCoverage``.

    Attributes:
        total_grandmasters: Sum of Grandmaster holders across professions.
        total_masters:      Sum of exact-Master holders across professions.
        uncovered_count:    Professions nobody holds.
        by_tier:            Coverage records grouped by tier, catalog order.
    """

    total_grandmasters: int
    total_masters:      int
    uncovered_count:    int
    by_tier:            Mapping[ProfessionTier, tuple[ProfessionCoverage, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )


def compute_coverage(
    catalog: ProfessionCatalog,
    roster: Sequence[Member],
) -> list[ProfessionCoverage]:
    """Build one coverage record per catalog profession.

    Args:
        catalog: Profession catalog.
        roster:  Member snapshot.

    Returns:
        ``ProfessionCoverage`` list in catalog order.

    Raises:
        UnknownProfessionError: If any member holds an id absent from the catalog.
    """
    catalog.require_roster(roster)

    records: list[ProfessionCoverage] = []
    for profession in catalog:
        holders: dict[RankLevel, list[str]] = {rank: [] for rank in RANKS_DESCENDING}
        total = 0
        highest: Optional[RankLevel] = None

        for member in roster:
            rank = member.rank_for(profession.id)
            if rank is None:
                continue
            holders[rank].append(member.name)
            total += 1
            if highest is None or rank > highest:
                highest = rank

        records.append(
            ProfessionCoverage(
                profession_id=profession.id,
                name=profession.name,
                tier=profession.tier,
                by_rank=MappingProxyType(
                    {rank: tuple(names) for rank, names in holders.items()}
                ),
                total_coverage=total,
                highest_rank=highest,
            )
        )

    logger.debug(
        "Coverage computed | professions=%d | members=%d | covered=%d",
        len(records), len(roster), sum(1 for r in records if r.is_covered),
    )
    return records


def summarize_coverage(records: Sequence[ProfessionCoverage]) -> CoverageSummary:
    """Roll coverage records up into guild totals."""
    by_tier: dict[ProfessionTier, tuple[ProfessionCoverage, ...]] = {
        tier: tuple(r for r in records if r.tier == tier) for tier in ProfessionTier
    }
    return CoverageSummary(
        total_grandmasters=sum(r.grandmaster_count for r in records),
        total_masters=sum(len(r.by_rank[RankLevel.MASTER]) for r in records),
        uncovered_count=sum(1 for r in records if not r.is_covered),
        by_tier=MappingProxyType(by_tier),
    )
