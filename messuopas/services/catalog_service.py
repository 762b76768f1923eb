"""Catalog service: both section hierarchies, scoped per tenant and event."""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from messuopas.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from messuopas.models import AdditionalSection, InitialSection, User
from messuopas.roles import Role
from messuopas.services.catalog import (
    CatalogReorderer,
    CatalogSection,
    CatalogValidator,
    SectionKind,
    build_catalog,
    slugify,
)
from messuopas.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for section and subsection CRUD with permission checks."""

    def __init__(self, session: Session):
        """
        Initialize catalog service with database session.

        Args:
            session: SQLAlchemy database session
        """
        self.session = session
        self.store = DocumentStore(session)
        self.validator = CatalogValidator()
        self.reorderer = CatalogReorderer(session, self.store)

    # Reading

    def list_initial_sections(self, user: User) -> list[InitialSection]:
        """
        List the initial sections a user may see.

        Admins see every section, organization members see the sections
        applied to their organization and users without one see none.
        """
        sections = self.store.list_documents("initial_sections")
        return [s for s in sections if self.can_view(user, SectionKind.INITIAL, s)]

    def list_additional_sections(
        self, user: User, event_id: Optional[str] = None
    ) -> list[AdditionalSection]:
        """List the additional sections owned by the user's tenant for one event."""
        event_id = event_id or user.active_event_id
        if not event_id:
            return []
        if user.organization_id:
            return self.store.list_documents(
                "additional_sections",
                event_id=event_id,
                organization_id=user.organization_id,
            )
        return self.store.list_documents(
            "additional_sections", event_id=event_id, user_id=user.id
        )

    def load_catalog(self, user: User, event_id: Optional[str] = None) -> list[CatalogSection]:
        """
        Load and normalize both hierarchies for a user.

        Raises:
            DatabaseError: If the store cannot be read
        """
        try:
            return build_catalog(
                self.list_initial_sections(user),
                self.list_additional_sections(user, event_id),
            )
        except Exception as e:
            raise DatabaseError(f"Failed to load sections: {str(e)}", e) from e

    def can_view(self, user: User, kind: SectionKind, section: Any) -> bool:
        """
        Whether a section is part of the user's catalog.

        Initial sections are visible to organizations they are applied to,
        additional sections to the organization or private user owning them.
        """
        if user.role == Role.ADMIN.value:
            return True
        if kind is SectionKind.INITIAL:
            return bool(user.organization_id) and user.organization_id in (
                section.applied_organizations or []
            )
        if section.organization_id:
            return section.organization_id == user.organization_id
        return section.user_id == user.id

    def _ensure_visible(self, viewer: Optional[User], kind: SectionKind, section: Any) -> None:
        if viewer is not None and not self.can_view(viewer, kind, section):
            raise PermissionDeniedError(f"Section {section.id} is not available to this user")

    def get_section(
        self, kind: SectionKind, section_id: str, viewer: Optional[User] = None
    ) -> Any:
        """
        Get a section of either hierarchy by ID.

        Args:
            kind: Which hierarchy to read
            section_id: Section ID
            viewer: When given, the section must be visible to this user

        Raises:
            NotFoundError: If the section does not exist
            PermissionDeniedError: If the viewer may not see it
        """
        self.validator.validate_id(section_id, "section_id")
        section = self.store.get_document(kind.section_collection, section_id)
        self._ensure_visible(viewer, kind, section)
        return section

    def get_subsection(
        self, kind: SectionKind, subsection_id: str, viewer: Optional[User] = None
    ) -> Any:
        """Get a subsection of either hierarchy by ID, checked like ``get_section``."""
        self.validator.validate_id(subsection_id, "subsection_id")
        subsection = self.store.get_document(kind.subsection_collection, subsection_id)
        self._ensure_visible(viewer, kind, subsection.section)
        return subsection

    def get_subsection_by_path(
        self,
        kind: SectionKind,
        section_path: str,
        subsection_path: str,
        viewer: Optional[User] = None,
    ) -> Any:
        """
        Look up a subsection by its section's and its own path slugs.

        Sections the viewer cannot see are skipped.

        Raises:
            NotFoundError: If no subsection matches
        """
        for section in self.store.list_documents(kind.section_collection, path=section_path):
            if viewer is not None and not self.can_view(viewer, kind, section):
                continue
            for sub in section.subsections:
                if sub.path == subsection_path:
                    return sub
        raise NotFoundError("Subsection", f"{section_path}/{subsection_path}")

    # Permissions

    def _require_admin(self, actor: User) -> None:
        if actor.role != Role.ADMIN.value:
            raise PermissionDeniedError("Only administrators can edit initial sections")

    def _require_editor(self, actor: User, kind: SectionKind, section: Any) -> None:
        if kind is SectionKind.INITIAL:
            self._require_admin(actor)
            return
        if actor.role == Role.ADMIN.value:
            return
        if section.organization_id:
            if section.organization_id != actor.organization_id:
                raise PermissionDeniedError("Section belongs to another organization")
        elif section.user_id != actor.id:
            raise PermissionDeniedError("Section belongs to another user")

    def _additional_owner(self, actor: User) -> dict[str, Optional[str]]:
        """Owner fields for a new additional section created by ``actor``."""
        if not actor.organization_id:
            return {"organization_id": None, "user_id": actor.id}
        organization = self.store.get_document("organizations", actor.organization_id)
        if actor.role != Role.ADMIN.value and actor.id not in (organization.owners or []):
            raise PermissionDeniedError("Only organization owners can create sections")
        return {"organization_id": actor.organization_id, "user_id": None}

    # Sections

    def create_section(
        self,
        actor: User,
        kind: SectionKind,
        title: str,
        event_id: Optional[str] = None,
        section_id: Optional[str] = None,
    ) -> Any:
        """
        Create a section at the end of its siblings.

        Args:
            actor: Acting user
            kind: Hierarchy to create the section in
            title: Section title (required, non-empty)
            event_id: Event for an additional section, defaults to the actor's
                      active event
            section_id: Optional ID. If not provided, generates a UUID.

        Returns:
            Created section

        Raises:
            ValidationError: If the title or event is invalid
            PermissionDeniedError: If the actor may not create sections here
            DuplicateError: If a section with the same ID already exists
            DatabaseError: If database operation fails
        """
        self.validator.validate_title(title)
        if section_id is not None:
            self.validator.validate_id(section_id)

        data: dict[str, Any] = {"title": title.strip(), "path": slugify(title)}
        if kind is SectionKind.INITIAL:
            self._require_admin(actor)
            siblings = self.store.list_documents("initial_sections")
        else:
            event_id = event_id or actor.active_event_id
            if not event_id:
                raise ValidationError("An event is required for additional sections", "event_id")
            self.store.get_document("events", event_id)
            owner = self._additional_owner(actor)
            data.update(owner, event_id=event_id)
            siblings = self.store.list_documents(
                "additional_sections", event_id=event_id, **owner
            )
        data["order"] = len(siblings)

        try:
            section = self.store.create_document(kind.section_collection, data, section_id)
            self.session.commit()
            logger.info("Created %s section %s", kind.value, section.id)
            return section

        except (DuplicateError, ValidationError, NotFoundError, PermissionDeniedError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to create section: {str(e)}", e) from e

    def update_section(
        self, actor: User, kind: SectionKind, section_id: str, title: str
    ) -> Any:
        """Rename a section; its path slug follows the title."""
        self.validator.validate_title(title)
        section = self.get_section(kind, section_id)
        self._require_editor(actor, kind, section)

        try:
            section = self.store.update_document(
                kind.section_collection, section_id, title=title.strip(), path=slugify(title)
            )
            self.session.commit()
            return section

        except (ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to update section: {str(e)}", e) from e

    def delete_section(self, actor: User, kind: SectionKind, section_id: str) -> bool:
        """
        Delete a section together with its subsections.

        Returns:
            True if deleted, False if the section did not exist
        """
        self.validator.validate_id(section_id, "section_id")
        section = self.session.get(
            self.store.model_for(kind.section_collection), section_id
        )
        if section is None:
            return False
        self._require_editor(actor, kind, section)

        try:
            deleted = self.store.delete_document(kind.section_collection, section_id)
            self.session.commit()
            logger.info("Deleted %s section %s", kind.value, section_id)
            return deleted

        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to delete section: {str(e)}", e) from e

    # Subsections

    def create_subsection(
        self,
        actor: User,
        kind: SectionKind,
        section_id: str,
        title: str,
        html: str = "",
        subsection_id: Optional[str] = None,
    ) -> Any:
        """
        Append a new subsection to a section.

        New subsections are visible until a preference says otherwise.
        """
        self.validator.validate_title(title)
        self.validator.validate_html(html)
        if subsection_id is not None:
            self.validator.validate_id(subsection_id)
        section = self.get_section(kind, section_id)
        self._require_editor(actor, kind, section)

        try:
            subsection = self.store.create_document(
                kind.subsection_collection,
                {
                    "section_id": section_id,
                    "title": title.strip(),
                    "path": slugify(title),
                    "html": html,
                    "order": len(section.subsections),
                    "active": True,
                },
                subsection_id,
            )
            self.session.commit()
            self.session.refresh(section)
            return subsection

        except (DuplicateError, ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to create subsection: {str(e)}", e) from e

    def update_subsection(
        self,
        actor: User,
        kind: SectionKind,
        subsection_id: str,
        title: Optional[str] = None,
        html: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> Any:
        """Update a subsection's title, content or catalog-level active flag."""
        fields: dict[str, Any] = {}
        if title is not None:
            self.validator.validate_title(title)
            fields.update(title=title.strip(), path=slugify(title))
        if html is not None:
            self.validator.validate_html(html)
            fields["html"] = html
        if active is not None:
            fields["active"] = bool(active)

        subsection = self.get_subsection(kind, subsection_id)
        self._require_editor(actor, kind, subsection.section)
        if not fields:
            return subsection

        try:
            subsection = self.store.update_document(
                kind.subsection_collection, subsection_id, **fields
            )
            self.session.commit()
            return subsection

        except (ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to update subsection: {str(e)}", e) from e

    def delete_subsection(self, actor: User, kind: SectionKind, subsection_id: str) -> bool:
        """Delete a subsection and remove it from its parent section."""
        self.validator.validate_id(subsection_id, "subsection_id")
        subsection = self.session.get(
            self.store.model_for(kind.subsection_collection), subsection_id
        )
        if subsection is None:
            return False
        section = subsection.section
        self._require_editor(actor, kind, section)

        try:
            section.subsections.remove(subsection)
            self.session.flush()
            self.session.commit()
            return True

        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to delete subsection: {str(e)}", e) from e

    # Catalog-level ordering

    def reorder_sections(
        self, actor: User, kind: SectionKind, section_ids: list[str]
    ) -> list[Any]:
        """Persist a new sibling order for sections of one hierarchy."""
        self.validator.validate_id_order(section_ids, "section_ids")
        for section_id in section_ids:
            self._require_editor(actor, kind, self.get_section(kind, section_id))
        return self.reorderer.reorder_sections(kind, section_ids)

    def reorder_subsections(
        self, actor: User, kind: SectionKind, section_id: str, subsection_ids: list[str]
    ) -> list[Any]:
        """Persist a new sibling order for the subsections of one section."""
        self.validator.validate_id_order(subsection_ids, "subsection_ids")
        self._require_editor(actor, kind, self.get_section(kind, section_id))
        return self.reorderer.reorder_subsections(kind, section_id, subsection_ids)

    def reorder_initial_sections(self, actor: User, section_ids: list[str]) -> list[Any]:
        return self.reorder_sections(actor, SectionKind.INITIAL, section_ids)

    def reorder_initial_subsections(
        self, actor: User, section_id: str, subsection_ids: list[str]
    ) -> list[Any]:
        return self.reorder_subsections(actor, SectionKind.INITIAL, section_id, subsection_ids)

    def reorder_additional_subsections(
        self, actor: User, section_id: str, subsection_ids: list[str]
    ) -> list[Any]:
        return self.reorder_subsections(
            actor, SectionKind.ADDITIONAL, section_id, subsection_ids
        )

    # Tenant assignment

    def confirm_section(self, section_id: str, organization_id: str) -> InitialSection:
        """
        Apply an initial section to an organization.

        Adding an organization that is already applied is a no-op.
        """
        self.validator.validate_id(section_id, "section_id")
        self.validator.validate_id(organization_id, "organization_id")
        section = self.store.get_document("initial_sections", section_id)
        self.store.get_document("organizations", organization_id)

        applied = list(section.applied_organizations or [])
        if organization_id in applied:
            return section

        try:
            section = self.store.update_document(
                "initial_sections",
                section_id,
                applied_organizations=applied + [organization_id],
            )
            self.session.commit()
            logger.info("Applied section %s to organization %s", section_id, organization_id)
            return section

        except (ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to confirm section: {str(e)}", e) from e
