"""Tests for invitation tokens and section offers."""

from datetime import timedelta

import pytest

pytestmark = pytest.mark.unit

from messuopas.config import get_settings
from messuopas.exceptions import (
    DuplicateError,
    InvitationError,
    NotFoundError,
    ValidationError,
)
from messuopas.models.base import utcnow
from messuopas.roles import Role


@pytest.fixture
def invite(invitation_service, tenant):
    """Create an invitation from the tenant owner for the tenant's event."""

    def _invite(email="uusi@example.com"):
        return invitation_service.create_invitation(
            email,
            tenant["organization"].id,
            [tenant["event"].id],
            tenant["owner"].id,
        )

    return _invite


def expire(store, invitation):
    store.update_document(
        "invitation_tokens", invitation.id, expires_at=utcnow() - timedelta(hours=1)
    )
    store.session.commit()


class TestCreateInvitation:
    """Tests for issuing registration tokens."""

    def test_token_is_random_hex(self, invite):
        created = invite()
        assert len(created.token) == 64
        int(created.token, 16)
        assert invite("toinen@example.com").token != created.token

    def test_link_carries_token(self, invite):
        created = invite()
        settings = get_settings()
        assert created.link == f"{settings.app_url.rstrip('/')}/register?token={created.token}"

    def test_email_is_normalized(self, invite):
        invitation = invite("  Uusi@Example.COM ").invitation
        assert invitation.email == "uusi@example.com"
        assert invitation.used is False

    def test_invalid_email(self, invitation_service, tenant):
        with pytest.raises(ValidationError):
            invitation_service.create_invitation(
                "ei-osoite", tenant["organization"].id, [tenant["event"].id], tenant["owner"].id
            )

    def test_events_required(self, invitation_service, tenant):
        with pytest.raises(ValidationError):
            invitation_service.create_invitation(
                "uusi@example.com", tenant["organization"].id, [], tenant["owner"].id
            )

    def test_unknown_event(self, invitation_service, tenant):
        with pytest.raises(NotFoundError):
            invitation_service.create_invitation(
                "uusi@example.com", tenant["organization"].id, ["nope"], tenant["owner"].id
            )


class TestValidateAndRegister:
    """Tests for consuming registration tokens."""

    def test_validate_fresh_token(self, invitation_service, invite):
        created = invite()
        assert invitation_service.validate_invitation(created.token).id == created.invitation.id

    def test_unknown_token(self, invitation_service):
        with pytest.raises(InvitationError, match="not found"):
            invitation_service.validate_invitation("0" * 64)

    def test_expired_token(self, invitation_service, invite, store):
        created = invite()
        expire(store, created.invitation)
        with pytest.raises(InvitationError, match="expired"):
            invitation_service.validate_invitation(created.token)

    def test_register_creates_member(self, invitation_service, invite, tenant):
        created = invite()
        user = invitation_service.register_with_invitation(created.token, "Uusi Jäsen")

        assert user.email == "uusi@example.com"
        assert user.role == Role.PREMIUM_USER.value
        assert user.organization_id == tenant["organization"].id
        assert user.accessible_event_ids == [tenant["event"].id]
        assert user.active_event_id == tenant["event"].id
        assert created.invitation.used is True
        assert created.invitation.used_at is not None

    def test_token_is_single_use(self, invitation_service, invite):
        created = invite()
        invitation_service.register_with_invitation(created.token, "Uusi Jäsen")
        with pytest.raises(InvitationError, match="already used"):
            invitation_service.register_with_invitation(created.token, "Toinen kerta")

    def test_existing_email_is_rejected(self, invitation_service, invite, builder):
        builder.user(email="varattu@example.com")
        created = invite("varattu@example.com")
        with pytest.raises(DuplicateError):
            invitation_service.register_with_invitation(created.token, "Kaksoisolento")
        assert invitation_service.validate_invitation(created.token).used is False


class TestHousekeeping:
    """Tests for listing, revoking and cleaning up tokens."""

    def test_cleanup_removes_only_expired(self, invitation_service, invite, store):
        stale = invite("vanha@example.com")
        fresh = invite("tuore@example.com")
        expire(store, stale.invitation)

        assert invitation_service.cleanup_expired_invitations() == 1
        assert invitation_service.validate_invitation(fresh.token)
        with pytest.raises(InvitationError):
            invitation_service.validate_invitation(stale.token)

    def test_pending_excludes_used_and_expired(
        self, invitation_service, invite, store, tenant
    ):
        used = invite("kaytetty@example.com")
        stale = invite("vanha@example.com")
        pending = invite("odottaa@example.com")
        invitation_service.register_with_invitation(used.token, "Käytetty")
        expire(store, stale.invitation)

        listed = invitation_service.list_pending_invitations(tenant["organization"].id)
        assert [i.id for i in listed] == [pending.invitation.id]

    def test_revoke(self, invitation_service, invite):
        created = invite()
        assert invitation_service.revoke_invitation(created.invitation.id) is True
        assert invitation_service.revoke_invitation(created.invitation.id) is False


class TestSectionOffers:
    """Tests for offering initial sections to organizations."""

    def test_offer_starts_pending(self, invitation_service, builder, tenant):
        builder.initial_section("A")
        offer = invitation_service.offer_section("A", tenant["organization"].id)
        assert offer.status == "pending"
        assert invitation_service.list_section_invitations(tenant["organization"].id) == [offer]

    def test_duplicate_offer(self, invitation_service, builder, tenant):
        builder.initial_section("A")
        invitation_service.offer_section("A", tenant["organization"].id)
        with pytest.raises(DuplicateError):
            invitation_service.offer_section("A", tenant["organization"].id)

    def test_viewed_is_stamped(self, invitation_service, builder, tenant):
        builder.initial_section("A")
        organization_id = tenant["organization"].id
        invitation_service.offer_section("A", organization_id)
        offer = invitation_service.set_section_invitation_status(organization_id, "A", "viewed")
        assert offer.status == "viewed"
        assert offer.viewed_at is not None
        assert offer.accepted_at is None

    def test_accept_applies_section(self, invitation_service, builder, store, tenant):
        builder.initial_section("A")
        organization_id = tenant["organization"].id
        invitation_service.offer_section("A", organization_id)

        offer = invitation_service.set_section_invitation_status(organization_id, "A", "accepted")
        assert offer.accepted_at is not None
        section = store.get_document("initial_sections", "A")
        assert section.applied_organizations == [organization_id]

    def test_decline_does_not_apply(self, invitation_service, builder, store, tenant):
        builder.initial_section("A")
        organization_id = tenant["organization"].id
        invitation_service.offer_section("A", organization_id)

        invitation_service.set_section_invitation_status(organization_id, "A", "declined")
        assert store.get_document("initial_sections", "A").applied_organizations == []

    def test_unknown_status(self, invitation_service, builder, tenant):
        builder.initial_section("A")
        with pytest.raises(ValidationError):
            invitation_service.set_section_invitation_status(
                tenant["organization"].id, "A", "maybe"
            )

    def test_status_without_offer(self, invitation_service, tenant):
        with pytest.raises(NotFoundError):
            invitation_service.set_section_invitation_status(
                tenant["organization"].id, "A", "viewed"
            )
