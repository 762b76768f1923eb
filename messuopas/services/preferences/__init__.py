"""Per-user section preference resolution and mutation."""

from messuopas.services.preferences.mutations import (
    build_ordered_active_sections,
    collect_visibility_snapshots,
    move_section,
    move_subsection,
    reorder_sections,
    reorder_subsections,
    serialize_ordered_active_sections,
    toggle_section_active,
    toggle_subsection_active,
)
from messuopas.services.preferences.resolver import (
    ResolvedSection,
    SectionPreference,
    SubsectionPreference,
    parse_ordered_active_sections,
    resolve_sections,
    visible_sections,
)

__all__ = [
    "ResolvedSection",
    "SectionPreference",
    "SubsectionPreference",
    "parse_ordered_active_sections",
    "resolve_sections",
    "visible_sections",
    "toggle_subsection_active",
    "toggle_section_active",
    "reorder_sections",
    "reorder_subsections",
    "move_section",
    "move_subsection",
    "build_ordered_active_sections",
    "serialize_ordered_active_sections",
    "collect_visibility_snapshots",
]
