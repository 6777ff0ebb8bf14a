"""
Profession catalog entry model.

A ``Profession`` is an immutable record: an id, a display name, its tier and
the ordered ids of the professions it directly depends on.  Professions form
a directed graph through ``dependencies``; the graph lives in
``ProfessionCatalog`` and is walked by ``analytics.dependencies``.

Cross-entry integrity (unknown dependency ids, duplicate ids) cannot be
checked on a single record and is enforced by ``catalog.loader``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from guild_professions.taxonomy.profession_taxonomy import ProfessionTier


class Profession(BaseModel):
    """One gathering, processing or crafting profession.

    Attributes:
        id:           Unique lowercase key, e.g. ``"metalworking"``.
        name:         Human-readable label, e.g. ``"Metalworking"``.
        tier:         Production-chain stage.
        dependencies: Ids of the professions this one directly requires,
                      in declaration order, without duplicates.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    tier: ProfessionTier
    dependencies: tuple[str, ...] = ()

    @field_validator("id")
    @classmethod
    def validate_id_format(cls, v: str) -> str:
        if not v or " " in v or v != v.lower():
            raise ValueError(
                f"Profession id '{v}' must be lowercase with no spaces."
            )
        return v

    @field_validator("name")
    @classmethod
    def validate_name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Profession name must not be empty.")
        return v.strip()

    @model_validator(mode="after")
    def validate_dependencies(self) -> "Profession":
        if self.id in self.dependencies:
            raise ValueError(f"Profession '{self.id}' cannot depend on itself.")
        if len(set(self.dependencies)) != len(self.dependencies):
            raise ValueError(
                f"Profession '{self.id}' lists a dependency more than once: "
                f"{list(self.dependencies)}."
            )
        return self
