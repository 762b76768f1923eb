"""In-memory mutations of a resolved section list and their projection.

Every mutation works on a deep copy and returns the new list, leaving the
caller's structure untouched until the write has succeeded.
"""

import copy
import json
from typing import Any, Optional, Sequence

from messuopas.exceptions import NotFoundError, ValidationError
from messuopas.services.catalog.normalization import CatalogSubsection
from messuopas.services.preferences.resolver import ResolvedSection


def _find_section(sections: list[ResolvedSection], section_id: str) -> ResolvedSection:
    for section in sections:
        if section.id == section_id:
            return section
    raise NotFoundError("Section", section_id)


def _find_subsection(section: ResolvedSection, subsection_id: str) -> CatalogSubsection:
    for sub in section.subsections:
        if sub.id == subsection_id:
            return sub
    raise NotFoundError("Subsection", subsection_id)


def _reordered(items: list[Any], ordered_ids: Sequence[str], field: str) -> list[Any]:
    """Listed items first in the given order, the rest after in current order."""
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValidationError(f"{field} contains duplicate IDs", field)
    by_id = {item.id: item for item in items}
    unknown = [item_id for item_id in ordered_ids if item_id not in by_id]
    if unknown:
        raise ValidationError(f"Unknown IDs in {field}: {', '.join(unknown)}", field)
    listed = set(ordered_ids)
    return [by_id[item_id] for item_id in ordered_ids] + [
        item for item in items if item.id not in listed
    ]


def _moved(items: list[Any], item_id: str, new_index: int) -> list[Any]:
    if isinstance(new_index, bool) or not isinstance(new_index, int):
        raise ValidationError("Index must be an integer", "new_index")
    if not 0 <= new_index < len(items):
        raise ValidationError(
            f"Index {new_index} is out of range for {len(items)} items", "new_index"
        )
    index = next(i for i, item in enumerate(items) if item.id == item_id)
    moved = list(items)
    moved.insert(new_index, moved.pop(index))
    return moved


def toggle_subsection_active(
    sections: Sequence[ResolvedSection], section_id: str, subsection_id: str
) -> list[ResolvedSection]:
    """
    Flip one subsection's visibility and re-derive its section's flag.

    Any snapshot held for the section is discarded since the section's
    subsection flags have now been changed individually.
    """
    sections = copy.deepcopy(list(sections))
    section = _find_section(sections, section_id)
    sub = _find_subsection(section, subsection_id)
    sub.active = not sub.is_active
    section.snapshot = None
    section.derive_active()
    return sections


def toggle_section_active(
    sections: Sequence[ResolvedSection], section_id: str
) -> list[ResolvedSection]:
    """
    Flip a section's visibility, cascading the new flag to every subsection.

    Turning a section off records each subsection's flag first. Turning it
    back on restores those flags, or makes every subsection visible when no
    record exists.
    """
    sections = copy.deepcopy(list(sections))
    section = _find_section(sections, section_id)

    if section.active:
        section.snapshot = {sub.id: sub.active for sub in section.subsections}
        for sub in section.subsections:
            sub.active = False
    else:
        snapshot = section.snapshot or {}
        for sub in section.subsections:
            sub.active = snapshot.get(sub.id, True)
        section.snapshot = None
        if section.subsections and not any(sub.is_active for sub in section.subsections):
            # Restoring an all-hidden record would leave the section hidden
            for sub in section.subsections:
                sub.active = True

    section.derive_active()
    return sections


def reorder_sections(
    sections: Sequence[ResolvedSection], ordered_ids: Sequence[str]
) -> list[ResolvedSection]:
    """
    Reorder sections by ID.

    Sections left out of ``ordered_ids`` keep their relative order after the
    listed ones.

    Raises:
        ValidationError: If an ID is unknown or listed twice
    """
    sections = copy.deepcopy(list(sections))
    return _reordered(sections, list(ordered_ids), "section_ids")


def reorder_subsections(
    sections: Sequence[ResolvedSection], section_id: str, ordered_ids: Sequence[str]
) -> list[ResolvedSection]:
    """Reorder the subsections of one section; active flags are unchanged."""
    sections = copy.deepcopy(list(sections))
    section = _find_section(sections, section_id)
    section.subsections = _reordered(section.subsections, list(ordered_ids), "subsection_ids")
    return sections


def move_section(
    sections: Sequence[ResolvedSection], section_id: str, new_index: int
) -> list[ResolvedSection]:
    """Move one section to a new position (a single drag-and-drop step)."""
    sections = copy.deepcopy(list(sections))
    _find_section(sections, section_id)
    return _moved(sections, section_id, new_index)


def move_subsection(
    sections: Sequence[ResolvedSection],
    section_id: str,
    subsection_id: str,
    new_index: int,
) -> list[ResolvedSection]:
    """Move one subsection to a new position inside its section."""
    sections = copy.deepcopy(list(sections))
    section = _find_section(sections, section_id)
    _find_subsection(section, subsection_id)
    section.subsections = _moved(section.subsections, subsection_id, new_index)
    return sections


def build_ordered_active_sections(sections: Sequence[ResolvedSection]) -> list[dict[str, Any]]:
    """
    Project the full resolved list into the persisted preference shape.

    Orders are position indexes. Each subsection is written with the flag the
    view shows, so a never-set flag is stored as inactive.
    """
    return [
        {
            "id": section.id,
            "order": index,
            "subsections": [
                {
                    "id": sub.id,
                    "order": sub_index,
                    "active": sub.is_active,
                }
                for sub_index, sub in enumerate(section.subsections)
            ],
        }
        for index, section in enumerate(sections)
    ]


def serialize_ordered_active_sections(sections: Sequence[ResolvedSection]) -> str:
    """Serialize the projection for the ``ordered_active_sections`` field."""
    return json.dumps(build_ordered_active_sections(sections), separators=(",", ":"))


def collect_visibility_snapshots(
    sections: Sequence[ResolvedSection],
) -> dict[str, dict[str, Optional[bool]]]:
    """Gather the per-section flag records to persist beside the projection."""
    return {
        section.id: dict(section.snapshot)
        for section in sections
        if section.snapshot is not None
    }
