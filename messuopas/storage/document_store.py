"""Collection-addressed document store client.

The rest of the application talks to the database through this thin layer
using the same five operations a hosted document database offers: list with
equality filters, get, create, update and delete.
"""

from __future__ import annotations

import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from messuopas.exceptions import DuplicateError, NotFoundError, ValidationError
from messuopas.models import (
    AdditionalSection,
    AdditionalSubsection,
    AuthSession,
    Collaborator,
    Event,
    InitialSection,
    InitialSubsection,
    InvitationToken,
    Note,
    Organization,
    SectionInvitation,
    StoredDocument,
    Todo,
    User,
    UserSectionPreference,
)
from messuopas.models.base import Base

COLLECTIONS: dict[str, type[Base]] = {
    "organizations": Organization,
    "users": User,
    "sessions": AuthSession,
    "events": Event,
    "initial_sections": InitialSection,
    "initial_subsections": InitialSubsection,
    "additional_sections": AdditionalSection,
    "additional_subsections": AdditionalSubsection,
    "user_section_preferences": UserSectionPreference,
    "invitation_tokens": InvitationToken,
    "section_invitations": SectionInvitation,
    "notes": Note,
    "todos": Todo,
    "documents": StoredDocument,
    "collaborators": Collaborator,
}

# Human readable names used in NotFoundError messages
RESOURCE_NAMES: dict[str, str] = {
    "organizations": "Organization",
    "users": "User",
    "sessions": "Session",
    "events": "Event",
    "initial_sections": "InitialSection",
    "initial_subsections": "InitialSubsection",
    "additional_sections": "AdditionalSection",
    "additional_subsections": "AdditionalSubsection",
    "user_section_preferences": "UserSectionPreference",
    "invitation_tokens": "InvitationToken",
    "section_invitations": "SectionInvitation",
    "notes": "Note",
    "todos": "Todo",
    "documents": "Document",
    "collaborators": "Collaborator",
}

_READ_ONLY_FIELDS = frozenset({"id", "created_at", "updated_at"})


class DocumentStore:
    """Document CRUD against named collections."""

    def __init__(self, session: Session):
        """Initialize the store with a database session."""
        self.session = session

    def model_for(self, collection: str) -> type[Base]:
        """Resolve a collection name to its model class."""
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValidationError(f"Unknown collection '{collection}'", "collection") from None

    def list_documents(
        self,
        collection: str,
        limit: Optional[int] = None,
        **equals: Any,
    ) -> list[Any]:
        """
        List documents of a collection in natural creation order.

        Args:
            collection: Collection name
            limit: Optional maximum number of documents
            **equals: Field equality filters. A list or tuple value matches any
                      of its members.

        Returns:
            Matching documents
        """
        model = self.model_for(collection)
        stmt = select(model)
        for field, value in equals.items():
            column = self._column(model, field)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            elif value is None:
                stmt = stmt.where(column.is_(None))
            else:
                stmt = stmt.where(column == value)
        stmt = stmt.order_by(model.created_at, model.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.scalars(stmt))

    def find_one(self, collection: str, **equals: Any) -> Optional[Any]:
        """Return the first document matching the filters, or None."""
        found = self.list_documents(collection, limit=1, **equals)
        return found[0] if found else None

    def get_document(self, collection: str, document_id: str) -> Any:
        """
        Get a document by ID.

        Raises:
            NotFoundError: If the document does not exist
        """
        document = self.session.get(self.model_for(collection), document_id)
        if document is None:
            raise NotFoundError(RESOURCE_NAMES[collection], document_id)
        return document

    def create_document(
        self,
        collection: str,
        data: dict[str, Any],
        document_id: Optional[str] = None,
    ) -> Any:
        """
        Create a document, generating a UUID when no ID is given.

        Raises:
            DuplicateError: If a document with the same ID exists
            ValidationError: If a field does not exist on the collection
        """
        model = self.model_for(collection)
        document_id = document_id or str(uuid.uuid4())
        if self.session.get(model, document_id) is not None:
            raise DuplicateError(RESOURCE_NAMES[collection], "id", document_id)
        for field in data:
            self._column(model, field)
        document = model(id=document_id, **data)
        self.session.add(document)
        self.session.flush()
        return document

    def update_document(self, collection: str, document_id: str, **fields: Any) -> Any:
        """
        Update fields of a document.

        Raises:
            NotFoundError: If the document does not exist
            ValidationError: If a field is unknown or read-only
        """
        model = self.model_for(collection)
        document = self.get_document(collection, document_id)
        for field, value in fields.items():
            if field in _READ_ONLY_FIELDS:
                raise ValidationError(f"Field '{field}' is read-only", field)
            self._column(model, field)
            setattr(document, field, value)
        self.session.flush()
        return document

    def delete_document(self, collection: str, document_id: str) -> bool:
        """Delete a document by ID. Returns False when it did not exist."""
        document = self.session.get(self.model_for(collection), document_id)
        if document is None:
            return False
        self.session.delete(document)
        self.session.flush()
        return True

    @staticmethod
    def _column(model: type[Base], field: str) -> Any:
        if field not in model.__table__.columns:
            raise ValidationError(
                f"Unknown field '{field}' for {model.__tablename__}", field
            )
        return getattr(model, field)
