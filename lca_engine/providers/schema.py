"""Pydantic models for factor catalog payloads (JSON files and HTTP responses)."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from lca_engine.models.enums import MaterialCategory, ProvenanceTier
from lca_engine.models.factor import FactorCatalog, FactorRecord, GHGSpeciationFactors


class SpeciationEntry(BaseModel):
    fossil_co2e: float = Field(default=0.0, ge=0)
    biogenic_co2e: float = Field(default=0.0, ge=0)
    dluc_co2e: float = Field(default=0.0, ge=0)
    ch4_fossil_kg: float = Field(default=0.0, ge=0)
    ch4_biogenic_kg: float = Field(default=0.0, ge=0)
    n2o_kg: float = Field(default=0.0, ge=0)


class FactorEntry(BaseModel):
    """One factor as published by the reference-data store."""

    id: str
    name: str
    reference_unit: str = "kg"
    climate: float = Field(ge=0)
    water: float = Field(default=0.0, ge=0)
    land: float = Field(default=0.0, ge=0)
    waste: float = Field(default=0.0, ge=0)
    category: MaterialCategory = MaterialCategory.OTHER
    source: str = ""
    methodology: str = ""
    geography: Optional[str] = None
    aliases: list[str] = Field(default_factory=list)
    supplier_reference: Optional[str] = None
    speciation: Optional[SpeciationEntry] = None

    def to_record(self, tier: ProvenanceTier) -> FactorRecord:
        speciation = None
        if self.speciation is not None:
            speciation = GHGSpeciationFactors(**self.speciation.model_dump())
        return FactorRecord(
            factor_id=self.id,
            name=self.name,
            reference_unit=self.reference_unit,
            climate=self.climate,
            water=self.water,
            land=self.land,
            waste=self.waste,
            tier=tier,
            category=self.category,
            source_reference=self.source,
            methodology=self.methodology,
            geography=self.geography,
            speciation=speciation,
            supplier_reference=self.supplier_reference,
            aliases=tuple(self.aliases),
        )


class CatalogPayload(BaseModel):
    """Top-level catalog document."""

    version: str = "unversioned"
    supplier_factors: list[FactorEntry] = Field(default_factory=list)
    proxy_factors: list[FactorEntry] = Field(default_factory=list)
    category_defaults: list[FactorEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_references(self) -> CatalogPayload:
        for entry in self.supplier_factors:
            if not entry.supplier_reference:
                raise ValueError(f"Supplier factor '{entry.id}' has no supplier_reference")
        seen: set[MaterialCategory] = set()
        for entry in self.category_defaults:
            if entry.category in seen:
                raise ValueError(f"Duplicate category default for '{entry.category.value}'")
            seen.add(entry.category)
        return self

    def to_catalog(self) -> FactorCatalog:
        return FactorCatalog(
            version=self.version,
            supplier_factors={
                e.supplier_reference: e.to_record(ProvenanceTier.PRIMARY)
                for e in self.supplier_factors
            },
            proxy_factors=tuple(e.to_record(ProvenanceTier.SECONDARY) for e in self.proxy_factors),
            category_defaults={
                e.category: e.to_record(ProvenanceTier.TERTIARY) for e in self.category_defaults
            },
        )
