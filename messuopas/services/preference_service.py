"""Preference service: loading and persisting a user's section view."""

import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from messuopas.exceptions import PreferenceWriteError
from messuopas.models import User, UserSectionPreference
from messuopas.services.catalog_service import CatalogService
from messuopas.services.preferences import mutations
from messuopas.services.preferences.resolver import (
    ResolvedSection,
    resolve_sections,
    visible_sections,
)
from messuopas.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)

Mutation = Callable[[list[ResolvedSection]], list[ResolvedSection]]


class PreferenceService:
    """Resolves and mutates the per-(user, event) section preference.

    Every mutation is applied to a copy of the resolved view first and only
    then written as one full preference document. When the write fails the
    session is rolled back and the view is re-read from the store, so callers
    always end up with a state that matches what is persisted.
    """

    def __init__(self, session: Session, catalog_service: Optional[CatalogService] = None):
        """
        Initialize preference service with database session.

        Args:
            session: SQLAlchemy database session
            catalog_service: Catalog service to read sections through. Created
                             from the session when not given.
        """
        self.session = session
        self.store = DocumentStore(session)
        self.catalog_service = catalog_service or CatalogService(session)

    def get_preference(
        self, user_id: str, event_id: Optional[str]
    ) -> Optional[UserSectionPreference]:
        """Get the preference document for a user and event, if one exists."""
        return self.store.find_one(
            "user_section_preferences", user_id=user_id, event_id=event_id
        )

    def load(self, user: User, event_id: Optional[str] = None) -> list[ResolvedSection]:
        """
        Resolve the ordered section view for a user.

        A preference that cannot be read is treated as absent, giving the
        default order.

        Raises:
            DatabaseError: If the sections themselves cannot be read
        """
        event_id = event_id or user.active_event_id
        catalog = self.catalog_service.load_catalog(user, event_id)
        try:
            preference = self.get_preference(user.id, event_id)
        except Exception:
            logger.exception(
                "Failed to read section preference for user %s, using default order", user.id
            )
            self.session.rollback()
            preference = None
        return resolve_sections(catalog, preference)

    def visible_sections(self, user: User, event_id: Optional[str] = None) -> list[ResolvedSection]:
        """Resolved view filtered to what the non-edit dashboard shows."""
        return visible_sections(self.load(user, event_id))

    def save(
        self, user: User, event_id: Optional[str], sections: list[ResolvedSection]
    ) -> UserSectionPreference:
        """
        Write the full projection of ``sections`` as the user's preference.

        Creates the preference document on first use, otherwise replaces its
        fields in place. Does not commit.
        """
        fields = {
            "ordered_active_sections": mutations.serialize_ordered_active_sections(sections),
            "visibility_snapshots": mutations.collect_visibility_snapshots(sections),
        }
        preference = self.get_preference(user.id, event_id)
        if preference is None:
            return self.store.create_document(
                "user_section_preferences",
                {"user_id": user.id, "event_id": event_id, **fields},
            )
        return self.store.update_document("user_section_preferences", preference.id, **fields)

    def _apply(
        self,
        user: User,
        event_id: Optional[str],
        mutation: Mutation,
        action: str,
    ) -> list[ResolvedSection]:
        event_id = event_id or user.active_event_id
        current = self.load(user, event_id)
        # Validation and lookup errors surface here, before anything is written
        updated = mutation(current)

        try:
            self.save(user, event_id, updated)
            self.session.commit()
            return updated

        except Exception as e:
            self.session.rollback()
            logger.exception("Failed to %s for user %s", action, user.id)
            try:
                refetched = self.load(user, event_id)
            except Exception:
                logger.exception("Failed to re-read sections after a failed write")
                refetched = current
            raise PreferenceWriteError(
                f"Failed to {action}: {str(e)}", refetched, e
            ) from e

    def toggle_subsection(
        self,
        user: User,
        section_id: str,
        subsection_id: str,
        event_id: Optional[str] = None,
    ) -> list[ResolvedSection]:
        """
        Flip one subsection's visibility.

        Returns:
            The updated resolved view

        Raises:
            NotFoundError: If the section or subsection is not in the view
            PreferenceWriteError: If the preference could not be written
        """
        return self._apply(
            user,
            event_id,
            lambda sections: mutations.toggle_subsection_active(
                sections, section_id, subsection_id
            ),
            "toggle subsection",
        )

    def toggle_section(
        self, user: User, section_id: str, event_id: Optional[str] = None
    ) -> list[ResolvedSection]:
        """Flip a section's visibility together with all of its subsections."""
        return self._apply(
            user,
            event_id,
            lambda sections: mutations.toggle_section_active(sections, section_id),
            "toggle section",
        )

    def reorder_sections(
        self, user: User, section_ids: list[str], event_id: Optional[str] = None
    ) -> list[ResolvedSection]:
        """
        Store a new section order.

        Raises:
            ValidationError: If an ID is unknown or repeated
            PreferenceWriteError: If the preference could not be written
        """
        return self._apply(
            user,
            event_id,
            lambda sections: mutations.reorder_sections(sections, section_ids),
            "reorder sections",
        )

    def reorder_subsections(
        self,
        user: User,
        section_id: str,
        subsection_ids: list[str],
        event_id: Optional[str] = None,
    ) -> list[ResolvedSection]:
        """Store a new subsection order inside one section."""
        return self._apply(
            user,
            event_id,
            lambda sections: mutations.reorder_subsections(sections, section_id, subsection_ids),
            "reorder subsections",
        )

    def move_section(
        self, user: User, section_id: str, new_index: int, event_id: Optional[str] = None
    ) -> list[ResolvedSection]:
        return self._apply(
            user,
            event_id,
            lambda sections: mutations.move_section(sections, section_id, new_index),
            "move section",
        )

    def move_subsection(
        self,
        user: User,
        section_id: str,
        subsection_id: str,
        new_index: int,
        event_id: Optional[str] = None,
    ) -> list[ResolvedSection]:
        return self._apply(
            user,
            event_id,
            lambda sections: mutations.move_subsection(
                sections, section_id, subsection_id, new_index
            ),
            "move subsection",
        )
