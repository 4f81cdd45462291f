from .classifier import detect_material_category
from .matching import match_score, normalize_name
from .sources import (
    CategoryDefaultSource,
    FactorSource,
    ProxyCatalogSource,
    SupplierFactorSource,
)
from .waterfall import FactorResolver

__all__ = [
    "detect_material_category",
    "match_score",
    "normalize_name",
    "CategoryDefaultSource",
    "FactorSource",
    "ProxyCatalogSource",
    "SupplierFactorSource",
    "FactorResolver",
]
