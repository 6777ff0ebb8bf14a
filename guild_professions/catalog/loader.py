"""
Profession catalog loader: TOML → validated ``ProfessionCatalog``.

This is the configuration-time collaborator that guarantees the catalog the
analytics engine receives is well formed.  Every integrity problem is fatal
here so that nothing downstream has to special-case it.

TOML structure expected
-----------------------
One array-of-tables per tier; order inside each array is the catalog order::

    [[gathering]]
    id           = "mining"
    name         = "Mining"
    dependencies = []

    [[processing]]
    id           = "metalworking"
    name         = "Metalworking"
    dependencies = ["mining"]

    [[crafting]]
    id           = "weapon_smithing"
    name         = "Weapon Smithing"
    dependencies = ["metalworking", "lumber_milling"]

The final catalog lists all gathering entries, then processing, then
crafting, regardless of the order the tables appear in the file.

Validation rules
----------------
- Every entry needs ``id`` and ``name``; ``dependencies`` defaults to ``[]``.
- Profession ids are unique across all tiers.
- Every dependency id resolves to a profession in the catalog.
- No profession depends on itself; no dependency is listed twice.
- Top-level keys other than the three tier names are rejected.
- The catalog defines at least one profession.

Usage
-----
    from guild_professions.catalog.loader import load_catalog

    catalog = load_catalog(Path("config/professions.toml"))
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from guild_professions.catalog.catalog import ProfessionCatalog
from guild_professions.models.profession import Profession
from guild_professions.taxonomy.profession_taxonomy import ProfessionTier

log = logging.getLogger(__name__)

_TIER_KEYS: tuple[str, ...] = tuple(t.value for t in ProfessionTier)


class CatalogIntegrityError(ValueError):
    """Raised when a profession catalog fails validation.

    Attributes:
        errors: One message per problem found.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        shown = "\n".join(f"  - {e}" for e in self.errors[:10])
        more = f"\n  ... and {len(self.errors) - 10} more." if len(self.errors) > 10 else ""
        super().__init__(
            f"Profession catalog failed validation ({len(self.errors)} error(s)):\n"
            f"{shown}{more}"
        )


def build_catalog(raw: dict[str, Any]) -> ProfessionCatalog:
    """Validate a parsed catalog mapping and build a ``ProfessionCatalog``.

    Args:
        raw: Mapping of tier name → list of entry dicts (the parsed TOML).

    Returns:
        Validated, immutable catalog.

    Raises:
        CatalogIntegrityError: Listing every problem found.
    """
    errors: list[str] = []

    unknown_keys = sorted(set(raw) - set(_TIER_KEYS))
    if unknown_keys:
        errors.append(
            f"Unknown top-level key(s) {unknown_keys}; expected only {list(_TIER_KEYS)}."
        )

    professions: list[Profession] = []
    for tier in _TIER_KEYS:
        entries = raw.get(tier, [])
        if not isinstance(entries, list):
            errors.append(f"[{tier}] must be an array of tables.")
            continue
        for i, entry in enumerate(entries):
            label = f"{tier}[{i}]"
            if not isinstance(entry, dict):
                errors.append(f"{label}: expected a table, got {type(entry).__name__}.")
                continue
            if "tier" in entry and entry["tier"] != tier:
                errors.append(
                    f"{label}: declares tier '{entry['tier']}' inside [[{tier}]]."
                )
                continue
            try:
                professions.append(
                    Profession(
                        id=entry.get("id", ""),
                        name=entry.get("name", ""),
                        tier=ProfessionTier(tier),
                        dependencies=tuple(entry.get("dependencies", ())),
                    )
                )
            except (ValidationError, TypeError) as exc:
                errors.append(f"{label} ({entry.get('id', '?')}): {exc}")

    errors.extend(_check_references(professions))

    if not professions and not errors:
        errors.append("Catalog defines no professions.")

    if errors:
        raise CatalogIntegrityError(errors)

    catalog = ProfessionCatalog(professions)
    log.info(
        "Catalog loaded | gathering=%d | processing=%d | crafting=%d",
        len(catalog.gathering), len(catalog.processing), len(catalog.crafting),
    )
    return catalog


def load_catalog(catalog_path: Path | str) -> ProfessionCatalog:
    """Load and validate a profession catalog TOML file.

    Raises:
        FileNotFoundError: If ``catalog_path`` does not exist.
        tomllib.TOMLDecodeError: If the TOML is malformed.
        CatalogIntegrityError: If the catalog fails validation.
    """
    path = Path(catalog_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Profession catalog not found: {path}\n"
            "Set [catalog] path in config/default.toml or pass --catalog."
        )

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    log.debug("Parsing profession catalog from %s", path)
    return build_catalog(raw)


def _check_references(professions: list[Profession]) -> list[str]:
    """Duplicate-id and dangling-dependency checks across the whole catalog."""
    errors: list[str] = []
    seen: set[str] = set()
    for p in professions:
        if p.id in seen:
            errors.append(f"Duplicate profession id '{p.id}'.")
        seen.add(p.id)

    for p in professions:
        for dep in p.dependencies:
            if dep not in seen:
                errors.append(
                    f"Profession '{p.id}' depends on unknown profession '{dep}'."
                )
    return errors
