"""Basic tests for database schema."""

import os
import tempfile
import uuid

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError

pytestmark = pytest.mark.unit

from messuopas.models import (
    Event,
    InitialSection,
    InitialSubsection,
    Organization,
    User,
    UserSectionPreference,
)
from messuopas.storage.database import Database
from messuopas.storage.document_store import COLLECTIONS


@pytest.fixture
def db():
    """Create a temporary database for testing."""
    # Use SQLite for testing
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    database = Database(f"sqlite:///{db_path}")
    database.create_tables()

    yield database

    # Cleanup
    database.drop_tables()
    database.engine.dispose()
    os.unlink(db_path)


def test_every_collection_has_a_table(db):
    """Test that each store collection maps to a created table."""
    tables = set(inspect(db.engine).get_table_names())
    assert {model.__tablename__ for model in COLLECTIONS.values()} <= tables


def test_json_columns_round_trip(db):
    """Test that list-valued fields come back as lists."""
    with db.session() as session:
        organization = Organization(id=str(uuid.uuid4()), name="Messutalo Oy", owners=["u1"])
        session.add(organization)
        session.commit()

        session.expire_all()
        retrieved = session.get(Organization, organization.id)
        assert retrieved.owners == ["u1"]


def test_subsection_active_may_be_unset(db):
    """Test that a subsection can be stored without an active flag."""
    with db.session() as session:
        section = InitialSection(id="A", title="Osio", path="osio")
        session.add(section)
        session.flush()
        session.add(InitialSubsection(id="A1", section_id="A", title="Ala", path="ala"))
        session.commit()

        session.expire_all()
        assert session.get(InitialSubsection, "A1").active is None


def test_cascade_delete(db):
    """Test that deleting a section cascades to its subsections."""
    with db.session() as session:
        section = InitialSection(id="A", title="Osio", path="osio")
        session.add(section)
        session.flush()
        session.add(InitialSubsection(id="A1", section_id="A", title="Ala", path="ala"))
        session.commit()

        session.delete(section)
        session.commit()

        assert session.get(InitialSubsection, "A1") is None


def test_one_preference_per_user_and_event(db):
    """Test that a user holds a single preference document per event."""
    with db.session() as session:
        user = User(id="u1", name="Testi", email="testi@example.com")
        event = Event(id="e1", name="Kevätmessut")
        session.add_all([user, event])
        session.flush()

        session.add(UserSectionPreference(id="p1", user_id="u1", event_id="e1"))
        session.flush()
        session.add(UserSectionPreference(id="p2", user_id="u1", event_id="e1"))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()
