"""
Profession catalog: the static table every analysis runs against.

  catalog/catalog.py — ``ProfessionCatalog`` lookup table and tier partitions.
  catalog/loader.py  — TOML loader with fail-fast integrity checks.
"""

from guild_professions.catalog.catalog import ProfessionCatalog, UnknownProfessionError
from guild_professions.catalog.loader import (
    CatalogIntegrityError,
    build_catalog,
    load_catalog,
)

__all__ = [
    "CatalogIntegrityError",
    "ProfessionCatalog",
    "UnknownProfessionError",
    "build_catalog",
    "load_catalog",
]
