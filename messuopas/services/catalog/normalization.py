"""Normalization of both section hierarchies into one tagged shape.

Initial and additional sections come from different collections with
differently named child lists. Everything downstream of the catalog only sees
:class:`CatalogSection`, whose ``kind`` tells the two apart.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from messuopas.models.section import (
    AdditionalSection,
    AdditionalSubsection,
    InitialSection,
    InitialSubsection,
)


class SectionKind(str, Enum):
    """Which hierarchy a section belongs to."""

    INITIAL = "initial"
    ADDITIONAL = "additional"

    @property
    def section_collection(self) -> str:
        return f"{self.value}_sections"

    @property
    def subsection_collection(self) -> str:
        return f"{self.value}_subsections"


@dataclass
class CatalogSubsection:
    """A subsection as the resolver sees it.

    ``active`` is None when the flag was never set on the stored document.
    """

    id: str
    title: str
    path: str
    order: int = 0
    active: Optional[bool] = None
    html: str = ""

    @property
    def is_active(self) -> bool:
        return self.active is True


@dataclass
class CatalogSection:
    """A section from either hierarchy with its subsections in stored order."""

    id: str
    kind: SectionKind
    title: str
    path: str
    order: int = 0
    subsections: list[CatalogSubsection] = field(default_factory=list)
    event_id: Optional[str] = None


def _normalize_subsections(
    subsections: Iterable[InitialSubsection | AdditionalSubsection],
) -> list[CatalogSubsection]:
    normalized = [
        CatalogSubsection(
            id=sub.id,
            title=sub.title,
            path=sub.path,
            order=sub.order or 0,
            active=sub.active,
            html=sub.html or "",
        )
        for sub in subsections
    ]
    # Stable: equal orders keep their stored sequence
    normalized.sort(key=lambda sub: sub.order)
    return normalized


def normalize_initial(section: InitialSection) -> CatalogSection:
    """Convert an initial section document into a catalog section."""
    return CatalogSection(
        id=section.id,
        kind=SectionKind.INITIAL,
        title=section.title,
        path=section.path,
        order=section.order or 0,
        subsections=_normalize_subsections(section.subsections),
    )


def normalize_additional(section: AdditionalSection) -> CatalogSection:
    """Convert an additional section document into a catalog section."""
    return CatalogSection(
        id=section.id,
        kind=SectionKind.ADDITIONAL,
        title=section.title,
        path=section.path,
        order=section.order or 0,
        subsections=_normalize_subsections(section.subsections),
        event_id=section.event_id,
    )


def build_catalog(
    initial_sections: Iterable[InitialSection],
    additional_sections: Iterable[AdditionalSection],
) -> list[CatalogSection]:
    """Initial sections first, then additional ones, each in enumeration order."""
    catalog = [normalize_initial(section) for section in initial_sections]
    catalog.extend(normalize_additional(section) for section in additional_sections)
    return catalog
