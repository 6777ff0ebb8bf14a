"""
In-memory profession catalog.

``ProfessionCatalog`` is the immutable lookup table every analytics function
receives explicitly: O(1) lookup by id plus per-tier partitions that keep
catalog insertion order.  It is built once (see ``catalog.loader``) and read
many times; nothing in it changes after construction.

The catalog assumes it was handed validated entries.  The one check it
performs at analysis time is ``require_roster()``: a roster that names an id
the catalog does not know is a data error and fails loudly instead of being
skipped, since skipping would quietly understate coverage.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType
from typing import Mapping

from guild_professions.models.member import Member
from guild_professions.models.profession import Profession
from guild_professions.taxonomy.profession_taxonomy import ProfessionTier


class UnknownProfessionError(KeyError):
    """Raised when a profession id is not present in the catalog."""

    def __init__(self, profession_id: str, context: str = "") -> None:
        self.profession_id = profession_id
        where = f" ({context})" if context else ""
        super().__init__(f"Unknown profession id '{profession_id}'{where}.")

    def __str__(self) -> str:
        return str(self.args[0])


class ProfessionCatalog:
    """Read-only table of profession definitions.

    Args:
        professions: Catalog entries in insertion order.  Ids are expected to
            be unique and every dependency id to resolve; use
            ``catalog.loader.build_catalog`` to get those checks.
    """

    __slots__ = ("_professions", "_by_id", "_index", "_by_tier")

    def __init__(self, professions: Iterable[Profession]) -> None:
        self._professions: tuple[Profession, ...] = tuple(professions)
        self._by_id: Mapping[str, Profession] = MappingProxyType(
            {p.id: p for p in self._professions}
        )
        self._index: Mapping[str, int] = MappingProxyType(
            {p.id: i for i, p in enumerate(self._professions)}
        )
        self._by_tier: Mapping[ProfessionTier, tuple[Profession, ...]] = MappingProxyType({
            tier: tuple(p for p in self._professions if p.tier == tier)
            for tier in ProfessionTier
        })

    # ── Lookup ────────────────────────────────────────────────────────────────

    def get(self, profession_id: str) -> Profession:
        """Return the profession with ``profession_id``.

        Raises:
            UnknownProfessionError: If the id is not in the catalog.
        """
        try:
            return self._by_id[profession_id]
        except KeyError:
            raise UnknownProfessionError(profession_id) from None

    def index_of(self, profession_id: str) -> int:
        """Position of ``profession_id`` in catalog insertion order."""
        try:
            return self._index[profession_id]
        except KeyError:
            raise UnknownProfessionError(profession_id) from None

    def __contains__(self, profession_id: object) -> bool:
        return profession_id in self._by_id

    def __iter__(self) -> Iterator[Profession]:
        return iter(self._professions)

    def __len__(self) -> int:
        return len(self._professions)

    def __repr__(self) -> str:
        counts = ", ".join(f"{t.value}={len(self._by_tier[t])}" for t in ProfessionTier)
        return f"ProfessionCatalog({counts})"

    @property
    def professions(self) -> tuple[Profession, ...]:
        return self._professions

    # ── Tier partitions ───────────────────────────────────────────────────────

    def by_tier(self, tier: ProfessionTier | str) -> tuple[Profession, ...]:
        return self._by_tier[ProfessionTier(tier)]

    @property
    def gathering(self) -> tuple[Profession, ...]:
        return self._by_tier[ProfessionTier.GATHERING]

    @property
    def processing(self) -> tuple[Profession, ...]:
        return self._by_tier[ProfessionTier.PROCESSING]

    @property
    def crafting(self) -> tuple[Profession, ...]:
        return self._by_tier[ProfessionTier.CRAFTING]

    # ── Roster consistency ────────────────────────────────────────────────────

    def require_roster(self, roster: Iterable[Member]) -> None:
        """Check that every rank tuple in ``roster`` names a catalog profession.

        Raises:
            UnknownProfessionError: On the first unknown id, naming the member.
        """
        for member in roster:
            for entry in member.professions:
                if entry.profession_id not in self._by_id:
                    raise UnknownProfessionError(
                        entry.profession_id, context=f"held by member '{member.name}'"
                    )
