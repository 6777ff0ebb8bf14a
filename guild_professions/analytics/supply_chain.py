"""
Supply-chain audit for crafting professions.

For each crafting profession the auditor resolves the full upstream chain
(``full_dependency_chain``), orders it gathering → processing → crafting,
and lists who in the guild can supply each link.  A link is *supplied* when
at least one member holds it at Master or above.

Status per crafting profession (``SupplyStatus``)
-------------------------------------------------
    no_crafters   : nobody holds the crafting profession
    training_gap  : holders exist, none at Master+ (a training problem)
    supply_break  : a Master+ crafter exists but >= 1 link is unsupplied
                    (an actionable shortage)
    supplied      : a Master+ crafter exists and every link is supplied

Only ``supply_break`` professions produce ``SupplyBreak`` entries; a
profession without a master crafter is a training gap, not a supply problem.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from guild_professions.analytics.dependencies import ordered_dependency_chain
from guild_professions.catalog.catalog import ProfessionCatalog
from guild_professions.models.member import Member
from guild_professions.taxonomy.profession_taxonomy import ProfessionTier, RankLevel

logger = logging.getLogger(__name__)


class SupplyStatus(StrEnum):
    """Outcome of auditing one crafting profession."""

    NO_CRAFTERS = "no_crafters"
    TRAINING_GAP = "training_gap"
    SUPPLY_BREAK = "supply_break"
    SUPPLIED = "supplied"


@dataclass(frozen=True)
class Provider:
    """A member holding a profession, with their rank."""

    name: str
    rank: RankLevel


@dataclass(frozen=True)
class DependencySupply:
    """One upstream link of a crafting profession's chain.

    Attributes:
        profession_id:       Dependency id.
        name:                Dependency display name.
        tier:                Dependency tier (chain is ordered by this).
        providers:           Members holding it, roster order.
        has_master_provider: True if any provider is Master or above.
    """

    profession_id:       str
    name:                str
    tier:                ProfessionTier
    providers:           tuple[Provider, ...]
    has_master_provider: bool


@dataclass(frozen=True)
class CraftingSupplyChain:
    """Supply detail for one crafting profession.

    Attributes:
        profession_id: Crafting profession id.
        name:          Crafting profession display name.
        crafters:      Holders of the crafting profession, highest rank first.
        dependencies:  Full upstream chain, gathering before processing
                       before crafting.
    """

    profession_id: str
    name:          str
    crafters:      tuple[Provider, ...]
    dependencies:  tuple[DependencySupply, ...]

    @property
    def has_crafters(self) -> bool:
        return bool(self.crafters)

    @property
    def has_master_crafter(self) -> bool:
        return any(c.rank >= RankLevel.MASTER for c in self.crafters)

    @property
    def missing_dependencies(self) -> tuple[DependencySupply, ...]:
        """Links without a Master+ provider, in chain order."""
        return tuple(d for d in self.dependencies if not d.has_master_provider)

    @property
    def status(self) -> SupplyStatus:
        if not self.has_crafters:
            return SupplyStatus.NO_CRAFTERS
        if not self.has_master_crafter:
            return SupplyStatus.TRAINING_GAP
        if self.missing_dependencies:
            return SupplyStatus.SUPPLY_BREAK
        return SupplyStatus.SUPPLIED


@dataclass(frozen=True)
class SupplyBreak:
    """A masterable crafting profession the guild cannot supply itself.

    Attributes:
        profession_id:            Crafting profession id.
        profession_name:          Crafting profession display name.
        missing_dependency_ids:   Unsupplied links, chain order.
        missing_dependency_names: Display names of the same links.
    """

    profession_id:            str
    profession_name:          str
    missing_dependency_ids:   tuple[str, ...]
    missing_dependency_names: tuple[str, ...]


def _providers(roster: Sequence[Member], profession_id: str) -> list[Provider]:
    providers: list[Provider] = []
    for member in roster:
        rank = member.rank_for(profession_id)
        if rank is not None:
            providers.append(Provider(name=member.name, rank=rank))
    return providers


def audit_supply_chains(
    catalog: ProfessionCatalog,
    roster: Sequence[Member],
) -> list[CraftingSupplyChain]:
    """Audit every crafting profession's upstream chain against the roster.

    Args:
        catalog: Profession catalog.
        roster:  Member snapshot.

    Returns:
        One ``CraftingSupplyChain`` per crafting profession, catalog order.

    Raises:
        UnknownProfessionError: If any member holds an id absent from the catalog.
    """
    catalog.require_roster(roster)

    chains: list[CraftingSupplyChain] = []
    for profession in catalog.crafting:
        crafters = sorted(
            _providers(roster, profession.id), key=lambda c: c.rank, reverse=True
        )

        links: list[DependencySupply] = []
        for dep in ordered_dependency_chain(catalog, profession.id):
            providers = _providers(roster, dep.id)
            links.append(
                DependencySupply(
                    profession_id=dep.id,
                    name=dep.name,
                    tier=dep.tier,
                    providers=tuple(providers),
                    has_master_provider=any(p.rank >= RankLevel.MASTER for p in providers),
                )
            )

        chains.append(
            CraftingSupplyChain(
                profession_id=profession.id,
                name=profession.name,
                crafters=tuple(crafters),
                dependencies=tuple(links),
            )
        )

    logger.debug(
        "Supply audit | crafting=%d | breaks=%d",
        len(chains),
        sum(1 for c in chains if c.status == SupplyStatus.SUPPLY_BREAK),
    )
    return chains


def find_supply_breaks(chains: Sequence[CraftingSupplyChain]) -> list[SupplyBreak]:
    """Extract ``SupplyBreak`` entries from audited chains, preserving order."""
    breaks: list[SupplyBreak] = []
    for chain in chains:
        if chain.status != SupplyStatus.SUPPLY_BREAK:
            continue
        missing = chain.missing_dependencies
        breaks.append(
            SupplyBreak(
                profession_id=chain.profession_id,
                profession_name=chain.name,
                missing_dependency_ids=tuple(d.profession_id for d in missing),
                missing_dependency_names=tuple(d.name for d in missing),
            )
        )
    return breaks
