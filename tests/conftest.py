"""Shared pytest fixtures and test utilities for Messuopas tests."""

import os
import tempfile
import uuid
from typing import Generator, Optional

import pytest

from messuopas.models import (
    AdditionalSection,
    Event,
    InitialSection,
    Organization,
    User,
)
from messuopas.roles import Role
from messuopas.services.access_service import AccessService
from messuopas.services.catalog import CatalogSection, CatalogSubsection, SectionKind
from messuopas.services.catalog_service import CatalogService
from messuopas.services.content_service import ContentService
from messuopas.services.invitation_service import InvitationService
from messuopas.services.preference_service import PreferenceService
from messuopas.storage.database import Database, reset_db
from messuopas.storage.document_store import DocumentStore


@pytest.fixture(scope="function")
def temp_db() -> Generator[Database, None, None]:
    """
    Create a temporary SQLite database for testing.

    Yields:
        Database instance with tables created
    """
    # Create temporary database file
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Reset global database instance
    reset_db()

    # Create database
    database = Database(f"sqlite:///{db_path}")
    database.create_tables()

    yield database

    # Cleanup
    database.drop_tables()
    database.engine.dispose()
    reset_db()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def db_session(temp_db):
    """Get a database session from temp_db."""
    with temp_db.session() as session:
        yield session


@pytest.fixture
def store(db_session):
    return DocumentStore(db_session)


@pytest.fixture
def catalog_service(db_session):
    return CatalogService(db_session)


@pytest.fixture
def preference_service(db_session):
    return PreferenceService(db_session)


@pytest.fixture
def access_service(db_session):
    return AccessService(db_session)


@pytest.fixture
def invitation_service(db_session):
    return InvitationService(db_session)


@pytest.fixture
def content_service(db_session):
    return ContentService(db_session)


class DataBuilder:
    """Writes tenants, events and sections straight into the document store."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def organization(self, name: str = "Messutalo Oy", owners: Optional[list] = None) -> Organization:
        return self.store.create_document(
            "organizations", {"name": name, "owners": owners or []}
        )

    def user(
        self,
        name: str = "Testi Käyttäjä",
        role: str = Role.PREMIUM_USER.value,
        organization: Optional[Organization] = None,
        events: Optional[list[Event]] = None,
        email: Optional[str] = None,
    ) -> User:
        event_ids = [event.id for event in events or []]
        return self.store.create_document(
            "users",
            {
                "name": name,
                "email": email or f"{uuid.uuid4().hex[:8]}@example.com",
                "role": role,
                "organization_id": organization.id if organization else None,
                "accessible_event_ids": event_ids,
                "active_event_id": event_ids[0] if event_ids else None,
            },
        )

    def event(
        self,
        name: str = "Kevätmessut",
        organization: Optional[Organization] = None,
        user: Optional[User] = None,
    ) -> Event:
        return self.store.create_document(
            "events",
            {
                "name": name,
                "organization_id": organization.id if organization else None,
                "user_id": user.id if user else None,
            },
        )

    def initial_section(
        self,
        section_id: str,
        order: int = 0,
        subsections: tuple = (),
        organizations: Optional[list[Organization]] = None,
    ) -> InitialSection:
        """Create an initial section; ``subsections`` holds (id, active) pairs."""
        section = self.store.create_document(
            "initial_sections",
            {
                "title": f"Osio {section_id}",
                "path": section_id.lower(),
                "order": order,
                "applied_organizations": [o.id for o in organizations or []],
            },
            section_id,
        )
        self._subsections("initial_subsections", section, subsections)
        return section

    def additional_section(
        self,
        section_id: str,
        event: Event,
        organization: Optional[Organization] = None,
        user: Optional[User] = None,
        order: int = 0,
        subsections: tuple = (),
    ) -> AdditionalSection:
        section = self.store.create_document(
            "additional_sections",
            {
                "title": f"Lisäosio {section_id}",
                "path": section_id.lower(),
                "order": order,
                "event_id": event.id,
                "organization_id": organization.id if organization else None,
                "user_id": user.id if user else None,
            },
            section_id,
        )
        self._subsections("additional_subsections", section, subsections)
        return section

    def _subsections(self, collection: str, section, subsections: tuple) -> None:
        for order, (sub_id, active) in enumerate(subsections):
            self.store.create_document(
                collection,
                {
                    "section_id": section.id,
                    "title": f"Alaosio {sub_id}",
                    "path": sub_id.lower(),
                    "order": order,
                    "active": active,
                },
                sub_id,
            )
        self.store.session.commit()
        self.store.session.refresh(section)


@pytest.fixture
def builder(store) -> DataBuilder:
    return DataBuilder(store)


@pytest.fixture
def tenant(builder, db_session):
    """An organization with an owner, a member and one event."""
    organization = builder.organization()
    event = builder.event(organization=organization)
    owner = builder.user(
        name="Omistaja",
        role=Role.CUSTOMER_ADMIN.value,
        organization=organization,
        events=[event],
    )
    member = builder.user(name="Jäsen", organization=organization, events=[event])
    organization.owners = [owner.id]
    db_session.commit()
    return {"organization": organization, "event": event, "owner": owner, "member": member}


def catalog_section(
    section_id: str,
    subsections: tuple = (),
    order: int = 0,
    kind: SectionKind = SectionKind.INITIAL,
) -> CatalogSection:
    """Build an in-memory catalog section; ``subsections`` holds (id, active) pairs."""
    return CatalogSection(
        id=section_id,
        kind=kind,
        title=f"Osio {section_id}",
        path=section_id.lower(),
        order=order,
        subsections=[
            CatalogSubsection(id=sub_id, title=sub_id, path=sub_id.lower(), order=i, active=active)
            for i, (sub_id, active) in enumerate(subsections)
        ],
    )


@pytest.fixture
def make_section():
    """Provide the in-memory catalog section builder."""
    return catalog_section
