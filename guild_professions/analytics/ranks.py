"""
Per-member rank arithmetic.

Two counting views over one member's rank tuples, deliberately kept apart:

calculate_rank_counts (inherited level counts)
----------------------------------------------
    For each held (profession, rank), credit every level from Apprentice up
    to ``rank`` *for that profession*.  A Grandmaster in Mining satisfies
    Master, Journeyman and Apprentice Mining too.  Used for display totals.

calculate_effective_rank_counts (distinct professions at rank-or-above)
-----------------------------------------------------------------------
    Tally exact ranks, then take suffix sums from Grandmaster downwards:

        effective[4] = exact[4]
        effective[3] = exact[4] + exact[3]
        effective[2] = exact[4] + exact[3] + exact[2]
        effective[1] = exact[4] + exact[3] + exact[2] + exact[1]

    This is what the advisory rank limits are checked against.

For any single member the two views agree level by level (a profession held
at rank r contributes 1 to every level <= r in both), but they answer
different questions and are computed independently.

Limit warnings are advisory strings only; nothing here blocks an assignment.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Protocol

from guild_professions.config import RankLimits
from guild_professions.models.member import Member
from guild_professions.taxonomy.profession_taxonomy import (
    RANK_SHORT_NAMES,
    RANKS_DESCENDING,
    RankLevel,
)


class _HasRank(Protocol):
    rank: RankLevel


RankCounts = dict[RankLevel, int]


def _empty_counts() -> RankCounts:
    return {rank: 0 for rank in RANKS_DESCENDING}


def _exact_counts(profession_ranks: Iterable[_HasRank]) -> RankCounts:
    counts = _empty_counts()
    for entry in profession_ranks:
        counts[RankLevel(entry.rank)] += 1
    return counts


def calculate_rank_counts(profession_ranks: Iterable[_HasRank]) -> RankCounts:
    """Inherited level counts: each held rank also credits every lower level.

    Args:
        profession_ranks: A member's ``MemberProfessionRank`` tuples (anything
            with a ``rank`` attribute).

    Returns:
        ``{GRANDMASTER: n4, MASTER: n3, JOURNEYMAN: n2, APPRENTICE: n1}``.
    """
    counts = _empty_counts()
    for entry in profession_ranks:
        for level in range(int(entry.rank), 0, -1):
            counts[RankLevel(level)] += 1
    return counts


def calculate_effective_rank_counts(profession_ranks: Iterable[_HasRank]) -> RankCounts:
    """Number of distinct professions held at each rank or higher."""
    exact = _exact_counts(profession_ranks)
    effective = _empty_counts()
    running = 0
    for rank in RANKS_DESCENDING:
        running += exact[rank]
        effective[rank] = running
    return effective


def check_rank_limits(
    profession_ranks: Iterable[_HasRank],
    limits: Optional[RankLimits] = None,
) -> list[str]:
    """Advisory warnings for a member above the Grandmaster or Master cap.

    Returns:
        Zero, one or two strings such as ``"Exceeds Grandmaster limit: 3/2"``.
        Grandmaster first, then Master.
    """
    limits = limits or RankLimits()
    effective = calculate_effective_rank_counts(profession_ranks)
    warnings: list[str] = []

    if effective[RankLevel.GRANDMASTER] > limits.grandmaster_limit:
        warnings.append(
            f"Exceeds Grandmaster limit: "
            f"{effective[RankLevel.GRANDMASTER]}/{limits.grandmaster_limit}"
        )

    # Grandmasters count towards the Master cap as well.
    if effective[RankLevel.MASTER] > limits.master_limit:
        warnings.append(
            f"Exceeds Master limit: {effective[RankLevel.MASTER]}/{limits.master_limit}"
        )

    return warnings


def get_rank_summary(profession_ranks: Iterable[_HasRank]) -> str:
    """Exact (non-inherited) counts, e.g. ``"2 GM | 1 M | 0 J | 2 A"``."""
    exact = _exact_counts(profession_ranks)
    return " | ".join(f"{exact[rank]} {RANK_SHORT_NAMES[rank]}" for rank in RANKS_DESCENDING)


@dataclass(frozen=True)
class MemberRankReport:
    """Rank overview for one member, as shown next to their name.

    ``effective_counts`` is read-only; the report is not hashable.

    Attributes:
        name:             Member display name.
        summary:          ``get_rank_summary`` string.
        effective_counts: ``calculate_effective_rank_counts`` result.
        warnings:         ``check_rank_limits`` result (possibly empty).
    """

    name:             str
    summary:          str
    effective_counts: Mapping[RankLevel, int]
    warnings:         tuple[str, ...]

    @property
    def within_limits(self) -> bool:
        return not self.warnings


def build_member_rank_report(
    member: Member,
    limits: Optional[RankLimits] = None,
) -> MemberRankReport:
    """Assemble summary, effective counts and limit warnings for ``member``."""
    return MemberRankReport(
        name=member.name,
        summary=get_rank_summary(member.professions),
        effective_counts=MappingProxyType(calculate_effective_rank_counts(member.professions)),
        warnings=tuple(check_rank_limits(member.professions, limits)),
    )
