"""
Shared pytest fixtures for the guild-professions test suite.

Provides:
  - ``forge_catalog``: the three-profession Mining → Smelting → Weaponsmithing
    chain used throughout the analytics tests.
  - ``shipped_catalog``: the real ``config/professions.toml`` catalog.
  - ``member_factory``: builds a ``Member`` from ``{profession_id: rank}``.
  - ``forge_roster``: Alice (Mining GM) and Bob (Weaponsmithing Master).
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from guild_professions.catalog.catalog import ProfessionCatalog
from guild_professions.catalog.loader import load_catalog
from guild_professions.models.member import Member, MemberProfessionRank
from guild_professions.models.profession import Profession
from guild_professions.taxonomy.profession_taxonomy import ProfessionTier

PROJECT_ROOT = Path(__file__).parent.parent

MemberFactory = Callable[..., Member]


@pytest.fixture
def forge_catalog() -> ProfessionCatalog:
    """Mining (gathering) → Smelting (processing) → Weaponsmithing (crafting)."""
    return ProfessionCatalog([
        Profession(id="mining", name="Mining", tier=ProfessionTier.GATHERING),
        Profession(
            id="smelting", name="Smelting", tier=ProfessionTier.PROCESSING,
            dependencies=("mining",),
        ),
        Profession(
            id="weaponsmithing", name="Weaponsmithing", tier=ProfessionTier.CRAFTING,
            dependencies=("smelting",),
        ),
    ])


@pytest.fixture
def shipped_catalog() -> ProfessionCatalog:
    """The catalog committed under config/professions.toml."""
    return load_catalog(PROJECT_ROOT / "config" / "professions.toml")


@pytest.fixture
def member_factory() -> MemberFactory:
    """Return ``make(name, ranks=None)`` building a ``Member``."""

    def make(name: str, ranks: dict[str, int] | None = None) -> Member:
        return Member(
            name=name,
            professions=tuple(
                MemberProfessionRank(profession_id=pid, rank=rank)
                for pid, rank in (ranks or {}).items()
            ),
        )

    return make


@pytest.fixture
def forge_roster(member_factory: MemberFactory) -> list[Member]:
    """Alice holds Mining at Grandmaster, Bob Weaponsmithing at Master."""
    return [
        member_factory("Alice", {"mining": 4}),
        member_factory("Bob", {"weaponsmithing": 3}),
    ]
