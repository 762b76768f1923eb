"""Resolution of a user's section preferences against the catalog.

The resolver merges the initial and additional catalogs into one ordered list
for a single user and event. It is a pure function of the catalog and the
stored preference document: nothing is read from or written to the store here.

A preference sub-entry resolves as active only when its ``active`` field is
exactly ``true``. A subsection never mentioned in a preference keeps its stored
value; a stored value that was never set reads as inactive and is written back
that way. Subsections created through the catalog are stored active.
"""

import copy
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence

from messuopas.services.catalog.normalization import (
    CatalogSection,
    CatalogSubsection,
    SectionKind,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubsectionPreference:
    id: str
    order: int
    active: bool


@dataclass(frozen=True)
class SectionPreference:
    id: str
    order: int
    # None when the entry carries no subsection array at all
    subsections: Optional[tuple[SubsectionPreference, ...]] = None


@dataclass
class ResolvedSection:
    """A section in its resolved position with its derived visibility."""

    id: str
    kind: SectionKind
    title: str
    path: str
    order: int
    subsections: list[CatalogSubsection] = field(default_factory=list)
    active: bool = False
    # Subsection flags captured when the section was last toggled off
    snapshot: Optional[dict[str, Optional[bool]]] = None
    event_id: Optional[str] = None

    @property
    def displayable(self) -> bool:
        """Sections without subsections are never hidden for lacking them."""
        return self.active or not self.subsections

    def derive_active(self) -> bool:
        self.active = any(sub.is_active for sub in self.subsections)
        return self.active


def _coerce_order(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def parse_ordered_active_sections(raw: Optional[str]) -> Optional[list[SectionPreference]]:
    """
    Parse the serialized ``orderedActiveSections`` field.

    Args:
        raw: JSON string of ``[{id, order, subsections: [{id, order, active}]}]``

    Returns:
        Parsed entries, or None when the field is empty or not parseable
    """
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Could not parse orderedActiveSections, using default order")
        return None
    if not isinstance(data, list):
        logger.warning("orderedActiveSections is not a list, using default order")
        return None

    entries = []
    for item in data:
        if not isinstance(item, dict) or "id" not in item:
            continue
        subsections = None
        raw_subs = item.get("subsections")
        if isinstance(raw_subs, list):
            subsections = tuple(
                SubsectionPreference(
                    id=str(sub["id"]),
                    order=_coerce_order(sub.get("order")),
                    active=sub.get("active") is True,
                )
                for sub in raw_subs
                if isinstance(sub, dict) and "id" in sub
            )
        entries.append(
            SectionPreference(
                id=str(item["id"]),
                order=_coerce_order(item.get("order")),
                subsections=subsections,
            )
        )
    return entries


def _to_resolved(section: CatalogSection) -> ResolvedSection:
    return ResolvedSection(
        id=section.id,
        kind=section.kind,
        title=section.title,
        path=section.path,
        order=section.order,
        subsections=[copy.copy(sub) for sub in section.subsections],
        event_id=section.event_id,
    )


def _apply_subsection_order(
    section: ResolvedSection, preferences: Iterable[SubsectionPreference]
) -> None:
    pool = list(section.subsections)
    ordered = []
    for sub_pref in sorted(preferences, key=lambda p: p.order):
        for index, sub in enumerate(pool):
            if sub.id == sub_pref.id:
                sub = pool.pop(index)
                sub.active = sub_pref.active
                ordered.append(sub)
                break
    # Unreferenced subsections keep their own active value
    ordered.extend(pool)
    section.subsections = ordered


def _attach_snapshot(section: ResolvedSection, snapshots: Optional[dict[str, Any]]) -> None:
    if not isinstance(snapshots, dict):
        return
    stored = snapshots.get(section.id)
    if not isinstance(stored, dict):
        return
    live_ids = {sub.id for sub in section.subsections}
    section.snapshot = {
        sub_id: None if active is None else bool(active)
        for sub_id, active in stored.items()
        if sub_id in live_ids
    }


def resolve_sections(
    catalog: Sequence[CatalogSection],
    preference: Any = None,
) -> list[ResolvedSection]:
    """
    Merge the catalog with a user's preference document.

    Args:
        catalog: Initial and additional sections, in enumeration order
        preference: Object with ``ordered_active_sections`` (JSON string) and
                    optionally ``visibility_snapshots``; None when the user has
                    no preference for the event

    Returns:
        Sections in display order with each section's ``active`` derived
        from its subsections
    """
    pool = [_to_resolved(section) for section in catalog]

    raw = getattr(preference, "ordered_active_sections", None) if preference else None
    entries = parse_ordered_active_sections(raw)

    if entries is None:
        resolved = sorted(pool, key=lambda s: s.order)
    else:
        resolved = []
        for entry in sorted(entries, key=lambda e: e.order):
            for index, section in enumerate(pool):
                if section.id == entry.id:
                    section = pool.pop(index)
                    if entry.subsections is not None:
                        _apply_subsection_order(section, entry.subsections)
                    resolved.append(section)
                    break

        # Sections the preference never mentioned, typically created later
        resolved.extend(pool)

    snapshots = getattr(preference, "visibility_snapshots", None) if preference else None
    for section in resolved:
        section.derive_active()
        _attach_snapshot(section, snapshots)
    return resolved


def visible_sections(sections: Sequence[ResolvedSection]) -> list[ResolvedSection]:
    """
    Filter a resolved list down to what the non-edit view shows.

    Keeps displayable sections and, within them, only active subsections.
    """
    visible = []
    for section in sections:
        if not section.displayable:
            continue
        shown = copy.copy(section)
        shown.subsections = [sub for sub in section.subsections if sub.is_active]
        visible.append(shown)
    return visible
