"""
Profession taxonomy for guild capability analysis.

Two closed vocabularies describe every profession assignment:
  - ``ProfessionTier`` — where a profession sits in the production chain
    (gathering → processing → crafting).
  - ``RankLevel``      — how far a member has progressed in one profession.

Rank is a property of a (member, profession) pair, never of the profession
itself.  ``RankLevel`` is an ``IntEnum`` so ranks compare and sort by
seniority directly (``RankLevel.MASTER > RankLevel.JOURNEYMAN``) and hash
equal to their plain integer values (``{4: 1}`` == ``{RankLevel.GRANDMASTER: 1}``).

This module has NO imports from any other ``guild_professions`` package.
"""

from enum import IntEnum, StrEnum


class ProfessionTier(StrEnum):
    """Stage of the production chain a profession belongs to."""

    GATHERING = "gathering"
    """Harvests raw resources from the world (ore, herbs, hides, timber)."""

    PROCESSING = "processing"
    """Refines raw resources into intermediate materials (ingots, leather)."""

    CRAFTING = "crafting"
    """Turns processed materials into finished goods (weapons, armor)."""


class RankLevel(IntEnum):
    """Ordinal skill rank held by a member in one profession."""

    APPRENTICE = 1
    JOURNEYMAN = 2
    MASTER = 3
    GRANDMASTER = 4

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def short_name(self) -> str:
        return RANK_SHORT_NAMES[self]

    @classmethod
    def parse(cls, value: "int | str | RankLevel") -> "RankLevel":
        """Coerce an int (1-4) or a case-insensitive rank name into a ``RankLevel``.

        Raises:
            ValueError: If ``value`` names no rank.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key.isdigit():
                return cls(int(key))
            try:
                return cls[key]
            except KeyError:
                raise ValueError(
                    f"Unknown rank '{value}'. Expected one of "
                    f"{[r.name.lower() for r in cls]} or 1-4."
                ) from None
        return cls(value)


# Highest rank first: the order summaries and holder listings are printed in.
RANKS_DESCENDING: tuple[RankLevel, ...] = (
    RankLevel.GRANDMASTER,
    RankLevel.MASTER,
    RankLevel.JOURNEYMAN,
    RankLevel.APPRENTICE,
)

RANK_SHORT_NAMES: dict[RankLevel, str] = {
    RankLevel.GRANDMASTER: "GM",
    RankLevel.MASTER:      "M",
    RankLevel.JOURNEYMAN:  "J",
    RankLevel.APPRENTICE:  "A",
}

# Production-chain position; lower sorts first.
TIER_ORDER: dict[ProfessionTier, int] = {
    ProfessionTier.GATHERING:  0,
    ProfessionTier.PROCESSING: 1,
    ProfessionTier.CRAFTING:   2,
}
