"""
Dependency resolution over the profession graph.

``full_dependency_chain`` answers "which professions must be practised for
this one to be supplied?" — the transitive closure of ``dependencies``.

The walk uses an explicit stack and a ``visited`` set, never recursion.  A
node is pushed only the first time it is seen, so the traversal visits each
profession at most once and finishes in O(V + E) even if a malformed catalog
contains a cycle.  The starting profession is never part of its own chain,
even when a cycle leads back to it.

Iteration order of the returned set carries no meaning; use
``sort_by_tier`` (or ``ordered_dependency_chain``) when a
gathering → processing → crafting order is needed.
"""

from __future__ import annotations

from collections.abc import Iterable

from guild_professions.catalog.catalog import ProfessionCatalog
from guild_professions.models.profession import Profession
from guild_professions.taxonomy.profession_taxonomy import TIER_ORDER


def full_dependency_chain(catalog: ProfessionCatalog, profession_id: str) -> frozenset[str]:
    """Return every profession id ``profession_id`` transitively depends on.

    Args:
        catalog:       Profession catalog.
        profession_id: Profession whose upstream chain is wanted.

    Returns:
        Duplicate-free set of ids, excluding ``profession_id`` itself.

    Raises:
        UnknownProfessionError: If ``profession_id`` (or a dependency reached
            during the walk) is not in the catalog.
    """
    root = catalog.get(profession_id)
    visited: set[str] = set()
    stack: list[str] = []

    for dep in root.dependencies:
        if dep not in visited:
            visited.add(dep)
            stack.append(dep)

    while stack:
        current = catalog.get(stack.pop())
        for dep in current.dependencies:
            if dep not in visited:
                visited.add(dep)
                stack.append(dep)

    visited.discard(profession_id)
    return frozenset(visited)


def sort_by_tier(catalog: ProfessionCatalog, profession_ids: Iterable[str]) -> list[Profession]:
    """Resolve ids and order them gathering → processing → crafting.

    Within a tier, professions keep catalog order so the result is stable.
    """
    professions = [catalog.get(pid) for pid in profession_ids]
    return sorted(
        professions,
        key=lambda p: (TIER_ORDER[p.tier], catalog.index_of(p.id)),
    )


def ordered_dependency_chain(catalog: ProfessionCatalog, profession_id: str) -> list[Profession]:
    """``full_dependency_chain`` resolved to professions and sorted by tier."""
    return sort_by_tier(catalog, full_dependency_chain(catalog, profession_id))
