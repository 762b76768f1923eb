"""Tests for subsection content and collaborators."""

from datetime import timedelta

import pytest

pytestmark = pytest.mark.unit

from messuopas.exceptions import NotFoundError, ValidationError
from messuopas.models.base import utcnow
from messuopas.services.catalog import SectionKind
from messuopas.services.session_service import SessionService


@pytest.fixture
def subsection(builder, tenant):
    builder.initial_section("A", subsections=(("A1", True),))
    return "A1"


class TestSubsectionContent:
    """Tests for notes, to-dos and document records."""

    def test_note_is_scoped_to_subsection_and_event(
        self, content_service, builder, tenant, subsection
    ):
        event_id = tenant["event"].id
        note = content_service.create_content(
            "notes", SectionKind.INITIAL, subsection, event_id, title="Muistiinpano"
        )
        assert note.initial_subsection_id == subsection
        assert note.additional_subsection_id is None

        other_event = builder.event("Syysmessut", organization=tenant["organization"])
        listed = content_service.list_content("notes", SectionKind.INITIAL, subsection, event_id)
        assert [n.id for n in listed] == [note.id]
        assert (
            content_service.list_content(
                "notes", SectionKind.INITIAL, subsection, other_event.id
            )
            == []
        )

    def test_todo_status_lifecycle(self, content_service, tenant, subsection):
        todo = content_service.create_content(
            "todos", SectionKind.INITIAL, subsection, tenant["event"].id, title="Varaa osasto"
        )
        assert todo.status == "todo"
        todo = content_service.update_content("todos", todo.id, status="done")
        assert todo.status == "done"

        with pytest.raises(ValidationError):
            content_service.update_content("todos", todo.id, status="someday")

    def test_document_requires_file_id(self, content_service, tenant, subsection):
        with pytest.raises(ValidationError) as exc_info:
            content_service.create_content(
                "documents", SectionKind.INITIAL, subsection, tenant["event"].id, name="Esite.pdf"
            )
        assert exc_info.value.field == "file_id"

    def test_unknown_field(self, content_service, tenant, subsection):
        with pytest.raises(ValidationError):
            content_service.create_content(
                "notes",
                SectionKind.INITIAL,
                subsection,
                tenant["event"].id,
                title="Otsikko",
                status="done",
            )

    def test_unknown_collection(self, content_service, tenant, subsection):
        with pytest.raises(ValidationError):
            content_service.list_content("memos", SectionKind.INITIAL, subsection, "e")

    def test_missing_subsection(self, content_service, tenant):
        with pytest.raises(NotFoundError):
            content_service.create_content(
                "notes", SectionKind.ADDITIONAL, "nope", tenant["event"].id, title="Otsikko"
            )

    def test_get_content_checks_subsection(self, content_service, builder, tenant, subsection):
        builder.initial_section("B", order=1, subsections=(("B1", True),))
        note = content_service.create_content(
            "notes", SectionKind.INITIAL, subsection, tenant["event"].id, title="Muistiinpano"
        )

        found = content_service.get_content("notes", SectionKind.INITIAL, subsection, note.id)
        assert found.id == note.id
        with pytest.raises(NotFoundError):
            content_service.get_content("notes", SectionKind.INITIAL, "B1", note.id)
        with pytest.raises(NotFoundError):
            content_service.get_content("notes", SectionKind.ADDITIONAL, subsection, note.id)

    def test_delete(self, content_service, tenant, subsection):
        note = content_service.create_content(
            "notes", SectionKind.INITIAL, subsection, tenant["event"].id, title="Poistettava"
        )
        assert content_service.delete_content("notes", note.id) is True
        assert content_service.delete_content("notes", note.id) is False


class TestCollaborators:
    """Tests for partner companies listed under sections."""

    def test_filter_by_section_and_subsection(self, content_service, builder):
        builder.initial_section("A", subsections=(("A1", True), ("A2", True)))
        first = content_service.create_collaborator(
            "Painotalo Oy", initial_section_id="A", subsection_ids=["A1"]
        )
        second = content_service.create_collaborator(
            "Rakennus Oy", initial_section_id="A", subsection_ids=["A2"]
        )
        content_service.create_collaborator("Muu Oy")

        assert [c.id for c in content_service.list_collaborators("A")] == [first.id, second.id]
        assert [c.id for c in content_service.list_collaborators("A", "A2")] == [second.id]
        assert len(content_service.list_collaborators()) == 3

    def test_unknown_section(self, content_service):
        with pytest.raises(NotFoundError):
            content_service.create_collaborator("Painotalo Oy", initial_section_id="nope")

    def test_update_and_delete(self, content_service):
        collaborator = content_service.create_collaborator("Painotalo Oy")
        collaborator = content_service.update_collaborator(
            collaborator.id, web="https://painotalo.fi"
        )
        assert collaborator.web == "https://painotalo.fi"
        assert content_service.delete_collaborator(collaborator.id) is True

    def test_subsection_ids_must_be_list(self, content_service):
        with pytest.raises(ValidationError):
            content_service.create_collaborator("Painotalo Oy", subsection_ids="A1")


class TestSessions:
    """Tests for cookie session resolution."""

    def test_resolve_and_end(self, db_session, tenant):
        service = SessionService(db_session)
        auth_session = service.create_session(tenant["member"].id)

        assert service.resolve_user(auth_session.secret).id == tenant["member"].id
        assert service.end_session(auth_session.secret) is True
        assert service.resolve_user(auth_session.secret) is None

    def test_expired_session(self, db_session, tenant):
        service = SessionService(db_session)
        auth_session = service.create_session(
            tenant["member"].id, expires_at=utcnow() - timedelta(minutes=1)
        )
        assert service.resolve_user(auth_session.secret) is None

    @pytest.mark.parametrize("secret", [None, "", "tuntematon"])
    def test_unknown_secret(self, db_session, secret):
        assert SessionService(db_session).resolve_user(secret) is None
