"""Catalog helpers: normalization, validation and reordering."""

from messuopas.services.catalog.normalization import (
    CatalogSection,
    CatalogSubsection,
    SectionKind,
    build_catalog,
    normalize_additional,
    normalize_initial,
)
from messuopas.services.catalog.reordering import CatalogReorderer
from messuopas.services.catalog.validation import CatalogValidator, slugify

__all__ = [
    "CatalogSection",
    "CatalogSubsection",
    "SectionKind",
    "build_catalog",
    "normalize_initial",
    "normalize_additional",
    "CatalogReorderer",
    "CatalogValidator",
    "slugify",
]
