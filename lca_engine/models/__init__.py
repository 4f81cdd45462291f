from .enums import (
    ImpactCategory,
    LifecycleStage,
    MaterialCategory,
    ProvenanceTier,
    SystemBoundary,
    TransportMode,
)
from .factor import FactorCatalog, FactorRecord, GHGSpeciationFactors
from .material import CalculationRun, MaterialLineItem, MeteredEntry

__all__ = [
    "ImpactCategory",
    "LifecycleStage",
    "MaterialCategory",
    "ProvenanceTier",
    "SystemBoundary",
    "TransportMode",
    "FactorCatalog",
    "FactorRecord",
    "GHGSpeciationFactors",
    "CalculationRun",
    "MaterialLineItem",
    "MeteredEntry",
]
