"""Invitation service: registration tokens and section offers."""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from messuopas.config import get_settings
from messuopas.exceptions import (
    DatabaseError,
    DuplicateError,
    InvitationError,
    NotFoundError,
    ValidationError,
)
from messuopas.models import InvitationToken, SectionInvitation, User
from messuopas.models.base import utcnow
from messuopas.roles import Role
from messuopas.services.catalog.validation import CatalogValidator
from messuopas.services.catalog_service import CatalogService
from messuopas.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)

SECTION_INVITATION_STATUSES = ("pending", "viewed", "accepted", "declined")


@dataclass
class CreatedInvitation:
    token: str
    link: str
    invitation: InvitationToken


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class InvitationService:
    """Service layer for the invitation token lifecycle and section offers."""

    def __init__(self, session: Session, catalog_service: Optional[CatalogService] = None):
        """
        Initialize invitation service with database session.

        Args:
            session: SQLAlchemy database session
            catalog_service: Used to apply accepted sections to organizations
        """
        self.session = session
        self.store = DocumentStore(session)
        self.validator = CatalogValidator()
        self.catalog_service = catalog_service or CatalogService(session)
        self.settings = get_settings()

    # Registration tokens

    def create_invitation(
        self,
        email: str,
        organization_id: str,
        event_ids: list[str],
        inviter_user_id: str,
    ) -> CreatedInvitation:
        """
        Create a single-use registration token for an organization.

        Args:
            email: Address the invitation is meant for
            organization_id: Organization the new user joins
            event_ids: Events the new user may open; the first becomes active
            inviter_user_id: User sending the invitation

        Returns:
            The token, its registration link and the stored token document

        Raises:
            ValidationError: If the e-mail or event list is invalid
            NotFoundError: If the organization does not exist
            DatabaseError: If database operation fails
        """
        if not isinstance(email, str) or "@" not in email:
            raise ValidationError("Invalid e-mail address", "email")
        if not isinstance(event_ids, list) or not event_ids:
            raise ValidationError("At least one event is required", "event_ids")
        self.validator.validate_id(organization_id, "organization_id")
        self.validator.validate_id(inviter_user_id, "inviter_user_id")
        self.store.get_document("organizations", organization_id)
        for event_id in event_ids:
            self.store.get_document("events", event_id)

        token = secrets.token_hex(self.settings.invitation_token_bytes)
        expires_at = utcnow() + timedelta(hours=self.settings.invitation_token_ttl_hours)

        try:
            invitation = self.store.create_document(
                "invitation_tokens",
                {
                    "token": token,
                    "email": email.strip().lower(),
                    "organization_id": organization_id,
                    "event_ids": list(event_ids),
                    "inviter_user_id": inviter_user_id,
                    "expires_at": expires_at,
                    "used": False,
                },
            )
            self.session.commit()
            logger.info("Created invitation for organization %s", organization_id)
            return CreatedInvitation(
                token=token,
                link=self.settings.registration_link(token),
                invitation=invitation,
            )

        except (DuplicateError, ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to create invitation: {str(e)}", e) from e

    def validate_invitation(self, token: str) -> InvitationToken:
        """
        Check that a token exists, is unused and has not expired.

        Raises:
            InvitationError: If the token cannot be used
        """
        if not token:
            raise InvitationError("Invitation token is required")
        invitation = self.store.find_one("invitation_tokens", token=token, used=False)
        if invitation is None:
            raise InvitationError("Invitation not found or already used")
        if utcnow() > _as_utc(invitation.expires_at):
            raise InvitationError("Invitation has expired")
        return invitation

    def register_with_invitation(self, token: str, name: str) -> User:
        """
        Create the invited user and consume the token.

        The user joins the inviting organization as a premium user with
        access to the invited events, the first of which becomes active.

        Raises:
            InvitationError: If the token cannot be used
            DuplicateError: If a user with the e-mail already exists
            DatabaseError: If database operation fails
        """
        self.validator.validate_title(name)
        invitation = self.validate_invitation(token)
        if self.store.find_one("users", email=invitation.email) is not None:
            raise DuplicateError("User", "email", invitation.email)

        event_ids = list(invitation.event_ids or [])
        try:
            user = self.store.create_document(
                "users",
                {
                    "name": name.strip(),
                    "email": invitation.email,
                    "role": Role.PREMIUM_USER.value,
                    "organization_id": invitation.organization_id,
                    "accessible_event_ids": event_ids,
                    "active_event_id": event_ids[0] if event_ids else None,
                },
            )
            self.store.update_document(
                "invitation_tokens", invitation.id, used=True, used_at=utcnow()
            )
            self.session.commit()
            logger.info("Registered user %s from invitation", user.id)
            return user

        except (DuplicateError, ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to register user: {str(e)}", e) from e

    def cleanup_expired_invitations(self) -> int:
        """Delete every expired token. Returns the number deleted."""
        now = utcnow()
        try:
            expired = [
                invitation
                for invitation in self.store.list_documents("invitation_tokens")
                if _as_utc(invitation.expires_at) < now
            ]
            for invitation in expired:
                self.store.delete_document("invitation_tokens", invitation.id)
            self.session.commit()
            if expired:
                logger.info("Cleaned up %d expired invitations", len(expired))
            return len(expired)

        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to clean up invitations: {str(e)}", e) from e

    def revoke_invitation(self, invitation_id: str) -> bool:
        """Delete an invitation token before it is used."""
        self.validator.validate_id(invitation_id, "invitation_id")
        try:
            deleted = self.store.delete_document("invitation_tokens", invitation_id)
            self.session.commit()
            return deleted
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to revoke invitation: {str(e)}", e) from e

    def list_pending_invitations(self, organization_id: str) -> list[InvitationToken]:
        """Unused, unexpired invitations of an organization."""
        now = utcnow()
        return [
            invitation
            for invitation in self.store.list_documents(
                "invitation_tokens", organization_id=organization_id, used=False
            )
            if _as_utc(invitation.expires_at) >= now
        ]

    # Section offers

    def offer_section(self, section_id: str, organization_id: str) -> SectionInvitation:
        """
        Offer an initial section to an organization.

        Raises:
            DuplicateError: If the section was already offered to it
        """
        self.store.get_document("initial_sections", section_id)
        self.store.get_document("organizations", organization_id)
        existing = self.store.find_one(
            "section_invitations", section_id=section_id, organization_id=organization_id
        )
        if existing is not None:
            raise DuplicateError("SectionInvitation", "section_id", section_id)

        try:
            offer = self.store.create_document(
                "section_invitations",
                {
                    "section_id": section_id,
                    "organization_id": organization_id,
                    "status": "pending",
                },
            )
            self.session.commit()
            return offer

        except (DuplicateError, ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to offer section: {str(e)}", e) from e

    def list_section_invitations(self, organization_id: str) -> list[SectionInvitation]:
        return self.store.list_documents("section_invitations", organization_id=organization_id)

    def set_section_invitation_status(
        self, organization_id: str, section_id: str, status: str
    ) -> SectionInvitation:
        """
        Record an organization's response to a section offer.

        Accepting also applies the section to the organization.

        Raises:
            ValidationError: If the status is unknown
            NotFoundError: If no offer exists for the pair
        """
        if status not in SECTION_INVITATION_STATUSES:
            raise ValidationError(
                f"Status must be one of: {', '.join(SECTION_INVITATION_STATUSES)}", "status"
            )
        offer = self.store.find_one(
            "section_invitations", section_id=section_id, organization_id=organization_id
        )
        if offer is None:
            raise NotFoundError("SectionInvitation", f"{section_id}/{organization_id}")

        stamp_field = {
            "viewed": "viewed_at",
            "accepted": "accepted_at",
            "declined": "declined_at",
        }.get(status)
        fields: dict[str, Any] = {"status": status}
        if stamp_field:
            fields[stamp_field] = utcnow()

        try:
            offer = self.store.update_document("section_invitations", offer.id, **fields)
            self.session.commit()

        except (ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to update section invitation: {str(e)}", e) from e

        if status == "accepted":
            self.catalog_service.confirm_section(section_id, organization_id)
        return offer
