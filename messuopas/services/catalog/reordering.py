"""Catalog-level reordering: persisting each sibling's ``order`` field."""

from typing import Any

from sqlalchemy.orm import Session

from messuopas.exceptions import DatabaseError, NotFoundError, ValidationError
from messuopas.services.catalog.normalization import SectionKind
from messuopas.storage.document_store import DocumentStore


class CatalogReorderer:
    """Writes new sibling orders for sections and subsections."""

    def __init__(self, session: Session, store: DocumentStore):
        """
        Initialize reorderer with session and document store.

        Args:
            session: SQLAlchemy database session
            store: Document store for data access
        """
        self.session = session
        self.store = store

    def reorder_sections(self, kind: SectionKind, section_order: list[str]) -> list[Any]:
        """
        Reorder top-level sections of one hierarchy.

        Additional sections must all share one event and owner scope.

        Args:
            kind: Hierarchy the sections belong to
            section_order: Section IDs in desired order

        Returns:
            Reordered sections

        Raises:
            ValidationError: If the sections do not share a scope
            NotFoundError: If any section is not found
            DatabaseError: If database operation fails
        """
        try:
            sections = [
                self.store.get_document(kind.section_collection, section_id)
                for section_id in section_order
            ]

            if kind is SectionKind.ADDITIONAL:
                scopes = {
                    (s.event_id, s.organization_id, s.user_id) for s in sections
                }
                if len(scopes) > 1:
                    raise ValidationError(
                        "Sections must belong to the same event and owner", "section_order"
                    )

            for order, section in enumerate(sections):
                section.order = order
            self.session.flush()
            self.session.commit()
            return sections

        except (NotFoundError, ValidationError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to reorder sections: {str(e)}", e) from e

    def reorder_subsections(
        self,
        kind: SectionKind,
        section_id: str,
        subsection_order: list[str],
    ) -> list[Any]:
        """
        Reorder the subsections of one section.

        Subsections not listed keep their relative order after the listed ones.

        Raises:
            ValidationError: If a subsection belongs to another section
            NotFoundError: If the section or any subsection is not found
            DatabaseError: If database operation fails
        """
        try:
            section = self.store.get_document(kind.section_collection, section_id)
            siblings = {sub.id: sub for sub in section.subsections}

            for subsection_id in subsection_order:
                if subsection_id not in siblings:
                    # Distinguish a missing subsection from one that lives elsewhere
                    self.store.get_document(kind.subsection_collection, subsection_id)
                    raise ValidationError(
                        f"Subsection {subsection_id} does not belong to section {section_id}",
                        "subsection_order",
                    )

            listed = [siblings[sub_id] for sub_id in subsection_order]
            listed_ids = set(subsection_order)
            rest = [
                sub
                for sub in sorted(section.subsections, key=lambda s: s.order or 0)
                if sub.id not in listed_ids
            ]
            updated = listed + rest
            for order, subsection in enumerate(updated):
                subsection.order = order
            self.session.flush()
            self.session.commit()
            return updated

        except (NotFoundError, ValidationError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to reorder subsections: {str(e)}", e) from e
