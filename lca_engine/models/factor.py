from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Optional

from .enums import ImpactCategory, MaterialCategory, ProvenanceTier


@dataclass(frozen=True)
class GHGSpeciationFactors:
    """Per-reference-unit greenhouse gas sub-factors.

    CO2 components are already in kg CO2e; CH4 and N2O are gas masses in kg
    and are weighted by their GWP when reconciled against the total.
    """

    fossil_co2e: float = 0.0
    biogenic_co2e: float = 0.0
    dluc_co2e: float = 0.0
    ch4_fossil_kg: float = 0.0
    ch4_biogenic_kg: float = 0.0
    n2o_kg: float = 0.0

    def __post_init__(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"speciation factor {f.name} cannot be negative")


@dataclass(frozen=True)
class FactorRecord:
    """Emission/resource factors for one material, per reference unit.

    ``tier`` and ``confidence`` describe how the record was matched; the
    resolver overwrites them with the values of the waterfall tier that
    produced the match.
    """

    factor_id: str
    name: str
    reference_unit: str
    climate: float
    water: float = 0.0
    land: float = 0.0
    waste: float = 0.0
    tier: ProvenanceTier = ProvenanceTier.SECONDARY
    confidence: float = 1.0
    category: MaterialCategory = MaterialCategory.OTHER
    source_reference: str = ""
    methodology: str = ""
    geography: Optional[str] = None
    speciation: Optional[GHGSpeciationFactors] = None
    supplier_reference: Optional[str] = None
    aliases: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("climate", "water", "land", "waste"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} factor for '{self.name}' cannot be negative")
        if not (0.0 <= self.confidence <= 1.0):
            raise ValueError(f"confidence must be 0-1.0, got {self.confidence}")

    def value_for(self, category: ImpactCategory) -> float:
        return getattr(self, category.value)

    def as_match(self, tier: ProvenanceTier, confidence: float) -> FactorRecord:
        """Return a copy stamped with the tier and confidence of a match."""
        return replace(self, tier=tier, confidence=confidence)


@dataclass(frozen=True)
class FactorCatalog:
    """Read-only snapshot of the reference-data factor catalog for one run.

    - ``supplier_factors``: supplier product reference -> supplier-specific record
    - ``proxy_factors``: curated proxy records matched by name
    - ``category_defaults``: one fallback record per material category
    """

    version: str = "unversioned"
    supplier_factors: dict[str, FactorRecord] = field(default_factory=dict)
    proxy_factors: tuple[FactorRecord, ...] = ()
    category_defaults: dict[MaterialCategory, FactorRecord] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Copy the containers so later changes by the caller never reach the snapshot.
        object.__setattr__(self, "supplier_factors", dict(self.supplier_factors))
        object.__setattr__(self, "proxy_factors", tuple(self.proxy_factors))
        object.__setattr__(self, "category_defaults", dict(self.category_defaults))

    @property
    def is_empty(self) -> bool:
        return not (self.supplier_factors or self.proxy_factors or self.category_defaults)

    def size(self) -> int:
        return len(self.supplier_factors) + len(self.proxy_factors) + len(self.category_defaults)
