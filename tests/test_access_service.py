"""Tests for organizations, membership and event access."""

import pytest

pytestmark = pytest.mark.unit

from messuopas.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from messuopas.roles import Role


class TestOrganizations:
    """Tests for organization and ownership management."""

    def test_create_with_owner(self, access_service, builder):
        user = builder.user(name="Perustaja")
        organization = access_service.create_organization("Uusi Oy", owner=user)

        assert organization.owners == [user.id]
        assert user.organization_id == organization.id
        assert user.role == Role.CUSTOMER_ADMIN.value

    def test_create_without_owner(self, access_service):
        organization = access_service.create_organization(
            "  Tyhjä Oy ", contact_email="info@tyhja.fi"
        )
        assert organization.name == "Tyhjä Oy"
        assert organization.owners == []
        assert organization.contact_email == "info@tyhja.fi"

    def test_invalid_contact_email(self, access_service, tenant):
        with pytest.raises(ValidationError) as exc_info:
            access_service.set_contact_email(tenant["organization"].id, "ei-sahkopostia")
        assert exc_info.value.field == "email"

    def test_rename(self, access_service, tenant):
        organization = access_service.rename_organization(tenant["organization"].id, "Uusi nimi")
        assert organization.name == "Uusi nimi"

    def test_list_members(self, access_service, tenant):
        members = access_service.list_members(tenant["organization"].id)
        assert {m.id for m in members} == {tenant["owner"].id, tenant["member"].id}

    def test_add_and_remove_owner(self, access_service, tenant):
        organization_id = tenant["organization"].id
        member = tenant["member"]

        organization = access_service.add_owner(organization_id, member.id)
        assert member.id in organization.owners
        assert member.role == Role.CUSTOMER_ADMIN.value

        organization = access_service.remove_owner(organization_id, member.id)
        assert member.id not in organization.owners
        assert member.role == Role.PREMIUM_USER.value

    def test_outsider_cannot_become_owner(self, access_service, builder, tenant):
        outsider = builder.user(name="Ulkopuolinen")
        with pytest.raises(ValidationError):
            access_service.add_owner(tenant["organization"].id, outsider.id)

    def test_remove_member_clears_access(self, access_service, tenant):
        member = access_service.remove_member(tenant["organization"].id, tenant["member"].id)
        assert member.organization_id is None
        assert member.accessible_event_ids == []
        assert member.active_event_id is None

    def test_owner_must_be_demoted_before_removal(self, access_service, tenant):
        with pytest.raises(ValidationError):
            access_service.remove_member(tenant["organization"].id, tenant["owner"].id)


class TestEvents:
    """Tests for creating, listing and deleting events."""

    def test_create_event_grants_access(self, access_service, tenant):
        owner = tenant["owner"]
        event = access_service.create_event(owner, "Syysmessut")

        assert event.organization_id == tenant["organization"].id
        assert event.id in owner.accessible_event_ids
        assert owner.active_event_id == tenant["event"].id

    def test_private_event_becomes_active(self, access_service, builder):
        user = builder.user(name="Yksityinen")
        event = access_service.create_event(user, "Omat messut")
        assert event.user_id == user.id
        assert event.organization_id is None
        assert user.active_event_id == event.id

    def test_list_events_respects_access(self, access_service, builder, tenant):
        other = builder.event("Syysmessut", organization=tenant["organization"])

        owner_events = access_service.list_events(tenant["owner"])
        member_events = access_service.list_events(tenant["member"])
        assert {e.id for e in owner_events} == {tenant["event"].id, other.id}
        assert [e.id for e in member_events] == [tenant["event"].id]

    def test_delete_event_moves_active_event(self, access_service, builder, tenant, db_session):
        member = tenant["member"]
        other = builder.event("Syysmessut", organization=tenant["organization"])
        member.accessible_event_ids = [tenant["event"].id, other.id]
        db_session.commit()

        assert access_service.delete_event(tenant["event"].id) is True
        assert member.accessible_event_ids == [other.id]
        assert member.active_event_id == other.id

    def test_delete_missing_event(self, access_service):
        assert access_service.delete_event("nope") is False

    def test_rename_missing_event(self, access_service):
        with pytest.raises(NotFoundError):
            access_service.rename_event("nope", "Nimi")


class TestEventAccess:
    """Tests for granting and revoking event access in bulk."""

    @pytest.fixture
    def second_event(self, builder, tenant):
        return builder.event("Syysmessut", organization=tenant["organization"])

    def test_grant_access(self, access_service, tenant, second_event):
        member = tenant["member"]
        updated = access_service.set_event_access(second_event.id, {member.id: True})
        assert [u.id for u in updated] == [member.id]
        assert member.accessible_event_ids == [tenant["event"].id, second_event.id]

    def test_organization_admins_are_skipped(self, access_service, tenant, second_event):
        owner = tenant["owner"]
        updated = access_service.set_event_access(tenant["event"].id, {owner.id: False})
        assert updated == []
        assert owner.accessible_event_ids == [tenant["event"].id]

    def test_revoking_active_event_switches_it(
        self, access_service, tenant, second_event, db_session
    ):
        member = tenant["member"]
        member.accessible_event_ids = [tenant["event"].id, second_event.id]
        db_session.commit()

        access_service.set_event_access(tenant["event"].id, {member.id: False})
        assert member.accessible_event_ids == [second_event.id]
        assert member.active_event_id == second_event.id

    def test_last_event_cannot_be_revoked(
        self, access_service, builder, tenant, second_event
    ):
        """A rejected change leaves every member untouched."""
        member = tenant["member"]
        colleague = builder.user(
            name="Kollega", organization=tenant["organization"], events=[tenant["event"]]
        )
        with pytest.raises(ValidationError):
            access_service.set_event_access(
                tenant["event"].id, {colleague.id: True, member.id: False}
            )
        assert member.accessible_event_ids == [tenant["event"].id]

    def test_member_of_another_organization(self, access_service, builder, tenant):
        outsider = builder.user(organization=builder.organization("Toinen Oy"))
        with pytest.raises(ValidationError):
            access_service.set_event_access(tenant["event"].id, {outsider.id: True})


class TestActiveEvent:
    """Tests for switching the event a user works in."""

    def test_switch_to_accessible_event(self, access_service, tenant):
        member = access_service.set_active_event(tenant["member"].id, tenant["event"].id)
        assert member.active_event_id == tenant["event"].id

    def test_inaccessible_event_is_denied(self, access_service, builder, tenant):
        other = builder.event("Syysmessut", organization=tenant["organization"])
        with pytest.raises(PermissionDeniedError):
            access_service.set_active_event(tenant["member"].id, other.id)

    def test_owner_sees_all_organization_events(self, access_service, builder, tenant):
        other = builder.event("Syysmessut", organization=tenant["organization"])
        owner = access_service.set_active_event(tenant["owner"].id, other.id)
        assert owner.active_event_id == other.id

    def test_owner_cannot_open_foreign_event(self, access_service, builder, tenant):
        foreign = builder.event("Vieras", organization=builder.organization("Toinen Oy"))
        with pytest.raises(PermissionDeniedError):
            access_service.set_active_event(tenant["owner"].id, foreign.id)

    def test_clear_active_event(self, access_service, tenant):
        member = access_service.set_active_event(tenant["member"].id, None)
        assert member.active_event_id is None

    def test_ensure_event_access(self, access_service, builder, tenant):
        event = tenant["event"]
        foreign = builder.event("Vieras", organization=builder.organization("Toinen Oy"))
        outsider = builder.user(name="Ulkopuolinen", events=[foreign])
        admin = builder.user(name="Ylläpitäjä", role=Role.ADMIN.value)

        assert access_service.ensure_event_access(tenant["member"], event.id).id == event.id
        assert access_service.ensure_event_access(admin, foreign.id).id == foreign.id
        with pytest.raises(PermissionDeniedError):
            access_service.ensure_event_access(outsider, event.id)
        with pytest.raises(NotFoundError):
            access_service.ensure_event_access(tenant["member"], "nope")
