from .base import CatalogProvider
from .file_provider import FileCatalogProvider
from .http_provider import HttpCatalogProvider
from .schema import CatalogPayload, FactorEntry, SpeciationEntry

__all__ = [
    "CatalogProvider",
    "FileCatalogProvider",
    "HttpCatalogProvider",
    "CatalogPayload",
    "FactorEntry",
    "SpeciationEntry",
]
