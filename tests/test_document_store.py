"""Tests for the collection-addressed document store."""

import pytest

pytestmark = pytest.mark.unit

from messuopas.exceptions import DuplicateError, NotFoundError, ValidationError
from messuopas.roles import Role, get_role_label_fi, sees_all_events


class TestDocumentStore:
    """Tests for the five store operations."""

    def test_create_generates_id(self, store):
        organization = store.create_document("organizations", {"name": "Messutalo Oy"})
        assert organization.id
        assert store.get_document("organizations", organization.id) is organization

    def test_create_with_explicit_id(self, store):
        store.create_document("organizations", {"name": "Messutalo Oy"}, "org-1")
        with pytest.raises(DuplicateError):
            store.create_document("organizations", {"name": "Toinen"}, "org-1")

    def test_unknown_collection(self, store):
        with pytest.raises(ValidationError):
            store.list_documents("widgets")

    def test_unknown_field(self, store):
        with pytest.raises(ValidationError):
            store.create_document("organizations", {"name": "X", "colour": "red"})

    def test_missing_document(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            store.get_document("events", "nope")
        assert exc_info.value.resource_type == "Event"

    def test_list_filters(self, store, builder):
        first = builder.organization("Yksi Oy")
        second = builder.organization("Kaksi Oy")
        builder.event("Kevät", organization=first)
        builder.event("Syksy", organization=second)
        builder.event("Yksityinen")

        assert [e.name for e in store.list_documents("events", organization_id=first.id)] == [
            "Kevät"
        ]
        assert {
            e.name
            for e in store.list_documents("events", organization_id=[first.id, second.id])
        } == {"Kevät", "Syksy"}
        assert [e.name for e in store.list_documents("events", organization_id=None)] == [
            "Yksityinen"
        ]

    def test_find_one(self, store, builder):
        builder.user(email="haettava@example.com")
        assert store.find_one("users", email="haettava@example.com") is not None
        assert store.find_one("users", email="puuttuu@example.com") is None

    def test_update_rejects_read_only_fields(self, store, builder):
        organization = builder.organization()
        with pytest.raises(ValidationError):
            store.update_document("organizations", organization.id, id="other")

    def test_update_and_delete(self, store, builder):
        organization = builder.organization()
        store.update_document("organizations", organization.id, name="Uusi nimi")
        assert organization.name == "Uusi nimi"
        assert store.delete_document("organizations", organization.id) is True
        assert store.delete_document("organizations", organization.id) is False


class TestRoles:
    """Tests for role labels and event visibility."""

    @pytest.mark.parametrize(
        "role,label",
        [
            ("admin", "Ylläpitäjä"),
            ("customer_admin", "Organisaation ylläpitäjä"),
            ("premium_user", "Premium käyttäjä"),
            ("user", "Käyttäjä"),
            ("unknown", "Käyttäjä"),
            (None, "Ei määritetty"),
            ("", "Ei määritetty"),
        ],
    )
    def test_finnish_labels(self, role, label):
        assert get_role_label_fi(role) == label

    def test_event_visibility(self):
        assert sees_all_events(Role.ADMIN.value)
        assert sees_all_events(Role.CUSTOMER_ADMIN.value)
        assert not sees_all_events(Role.PREMIUM_USER.value)
        assert not sees_all_events(None)
