"""
Guild member models as consumed by the analytics engine.

``Member`` is a read-only roster snapshot entry: a display name plus the
member's ``MemberProfessionRank`` tuples.  The engine never mutates a member;
rank assignments are created and changed by the membership-management side
of the application and handed over per computation.

Absence of a ``MemberProfessionRank`` means "does not hold this profession".
There is no zero or null rank.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from guild_professions.taxonomy.profession_taxonomy import RankLevel


class MemberProfessionRank(BaseModel):
    """A single (profession, rank) assignment held by one member.

    ``rank`` accepts an int 1-4, a ``RankLevel`` or a rank name
    (``"grandmaster"``).
    """

    model_config = ConfigDict(frozen=True)

    profession_id: str
    rank: RankLevel

    @field_validator("rank", mode="before")
    @classmethod
    def parse_rank(cls, v: object) -> RankLevel:
        if isinstance(v, bool):
            raise ValueError("rank must be an integer 1-4 or a rank name.")
        if isinstance(v, (int, str)):
            return RankLevel.parse(v)
        return v  # type: ignore[return-value]


class Member(BaseModel):
    """One guild member and their profession ranks.

    ``name`` is used for attribution in outputs only; it is not a key and two
    members may share a name.

    Attributes:
        name:        Display name.
        professions: Rank assignments, at most one per profession.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    professions: tuple[MemberProfessionRank, ...] = ()

    @field_validator("name")
    @classmethod
    def validate_name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Member name must not be empty.")
        return v.strip()

    @field_validator("professions")
    @classmethod
    def validate_unique_professions(
        cls, v: tuple[MemberProfessionRank, ...]
    ) -> tuple[MemberProfessionRank, ...]:
        seen: set[str] = set()
        for entry in v:
            if entry.profession_id in seen:
                raise ValueError(
                    f"Profession '{entry.profession_id}' is assigned more than once."
                )
            seen.add(entry.profession_id)
        return v

    def rank_for(self, profession_id: str) -> Optional[RankLevel]:
        """Return this member's rank in ``profession_id``, or ``None``."""
        for entry in self.professions:
            if entry.profession_id == profession_id:
                return entry.rank
        return None
