"""Content service: notes, to-dos, document records and collaborators."""

from typing import Any, Optional

from sqlalchemy.orm import Session

from messuopas.exceptions import DatabaseError, DuplicateError, NotFoundError, ValidationError
from messuopas.services.catalog.normalization import SectionKind
from messuopas.services.catalog.validation import CatalogValidator
from messuopas.storage.document_store import DocumentStore

TODO_STATUSES = ("todo", "in_progress", "done")

# Fields a caller may set per content collection
CONTENT_FIELDS: dict[str, tuple[str, ...]] = {
    "notes": ("title", "text"),
    "todos": ("title", "text", "status"),
    "documents": ("file_id", "name", "description"),
}

REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "notes": ("title",),
    "todos": ("title",),
    "documents": ("file_id", "name"),
}

COLLABORATOR_FIELDS = (
    "name",
    "web",
    "description",
    "contact_email",
    "contact_name",
    "logo",
    "initial_section_id",
    "subsection_ids",
)


def subsection_reference(kind: SectionKind, subsection_id: str) -> dict[str, Optional[str]]:
    """Reference columns pointing content at exactly one subsection."""
    if kind is SectionKind.INITIAL:
        return {"initial_subsection_id": subsection_id, "additional_subsection_id": None}
    return {"initial_subsection_id": None, "additional_subsection_id": subsection_id}


class ContentService:
    """Service layer for per-subsection content scoped to an event."""

    def __init__(self, session: Session):
        """
        Initialize content service with database session.

        Args:
            session: SQLAlchemy database session
        """
        self.session = session
        self.store = DocumentStore(session)
        self.validator = CatalogValidator()

    def _validate_fields(self, collection: str, fields: dict[str, Any]) -> None:
        allowed = CONTENT_FIELDS[collection]
        for field in fields:
            if field not in allowed:
                raise ValidationError(f"Unknown field '{field}'", field)
        if "title" in fields:
            self.validator.validate_title(fields["title"])
        if "name" in fields:
            self.validator.validate_title(fields["name"])
        if "file_id" in fields:
            self.validator.validate_id(fields["file_id"], "file_id")
        if "status" in fields and fields["status"] not in TODO_STATUSES:
            raise ValidationError(
                f"Status must be one of: {', '.join(TODO_STATUSES)}", "status"
            )

    def list_content(
        self, collection: str, kind: SectionKind, subsection_id: str, event_id: str
    ) -> list[Any]:
        """List notes, to-dos or documents of a subsection within one event."""
        if collection not in CONTENT_FIELDS:
            raise ValidationError(f"Unknown content collection '{collection}'", "collection")
        return self.store.list_documents(
            collection, event_id=event_id, **subsection_reference(kind, subsection_id)
        )

    def get_content(
        self, collection: str, kind: SectionKind, subsection_id: str, document_id: str
    ) -> Any:
        """
        Get a note, to-do or document record filed under the given subsection.

        Raises:
            NotFoundError: If no such record exists under that subsection
        """
        if collection not in CONTENT_FIELDS:
            raise ValidationError(f"Unknown content collection '{collection}'", "collection")
        document = self.store.get_document(collection, document_id)
        reference = subsection_reference(kind, subsection_id)
        if any(getattr(document, column) != value for column, value in reference.items()):
            raise NotFoundError(collection, document_id)
        return document

    def create_content(
        self,
        collection: str,
        kind: SectionKind,
        subsection_id: str,
        event_id: str,
        **fields: Any,
    ) -> Any:
        """
        Create a note, to-do or document record under a subsection.

        Raises:
            ValidationError: If a field is unknown or invalid
            NotFoundError: If the subsection or event does not exist
            DatabaseError: If database operation fails
        """
        if collection not in CONTENT_FIELDS:
            raise ValidationError(f"Unknown content collection '{collection}'", "collection")
        self._validate_fields(collection, fields)
        for field in REQUIRED_FIELDS[collection]:
            if field not in fields:
                raise ValidationError(f"Field '{field}' is required", field)
        self.store.get_document(kind.subsection_collection, subsection_id)
        self.store.get_document("events", event_id)

        try:
            document = self.store.create_document(
                collection,
                {"event_id": event_id, **subsection_reference(kind, subsection_id), **fields},
            )
            self.session.commit()
            return document

        except (DuplicateError, ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to create {collection}: {str(e)}", e) from e

    def update_content(self, collection: str, document_id: str, **fields: Any) -> Any:
        if collection not in CONTENT_FIELDS:
            raise ValidationError(f"Unknown content collection '{collection}'", "collection")
        self._validate_fields(collection, fields)

        try:
            document = self.store.update_document(collection, document_id, **fields)
            self.session.commit()
            return document

        except (ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to update {collection}: {str(e)}", e) from e

    def delete_content(self, collection: str, document_id: str) -> bool:
        if collection not in CONTENT_FIELDS:
            raise ValidationError(f"Unknown content collection '{collection}'", "collection")
        try:
            deleted = self.store.delete_document(collection, document_id)
            self.session.commit()
            return deleted
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to delete {collection}: {str(e)}", e) from e

    # Collaborators

    def list_collaborators(
        self,
        initial_section_id: Optional[str] = None,
        subsection_id: Optional[str] = None,
    ) -> list[Any]:
        """List collaborators of an initial section, of a subsection, or all."""
        if initial_section_id is not None:
            collaborators = self.store.list_documents(
                "collaborators", initial_section_id=initial_section_id
            )
        else:
            collaborators = self.store.list_documents("collaborators")
        if subsection_id is not None:
            collaborators = [
                c for c in collaborators if subsection_id in (c.subsection_ids or [])
            ]
        return collaborators

    def _validate_collaborator(self, fields: dict[str, Any]) -> None:
        for field in fields:
            if field not in COLLABORATOR_FIELDS:
                raise ValidationError(f"Unknown field '{field}'", field)
        if "name" in fields:
            self.validator.validate_title(fields["name"])
        if "subsection_ids" in fields and not isinstance(fields["subsection_ids"], list):
            raise ValidationError("subsection_ids must be a list", "subsection_ids")

    def create_collaborator(self, name: str, **fields: Any) -> Any:
        self._validate_collaborator({"name": name, **fields})
        if fields.get("initial_section_id"):
            self.store.get_document("initial_sections", fields["initial_section_id"])

        try:
            collaborator = self.store.create_document(
                "collaborators", {"name": name.strip(), **fields}
            )
            self.session.commit()
            return collaborator

        except (DuplicateError, ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to create collaborator: {str(e)}", e) from e

    def update_collaborator(self, collaborator_id: str, **fields: Any) -> Any:
        self._validate_collaborator(fields)
        try:
            collaborator = self.store.update_document("collaborators", collaborator_id, **fields)
            self.session.commit()
            return collaborator

        except (ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to update collaborator: {str(e)}", e) from e

    def delete_collaborator(self, collaborator_id: str) -> bool:
        try:
            deleted = self.store.delete_document("collaborators", collaborator_id)
            self.session.commit()
            return deleted
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to delete collaborator: {str(e)}", e) from e
