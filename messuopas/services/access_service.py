"""Access service: organizations, membership, events and event access."""

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
from messuopas.models import Event, Organization, User
from messuopas.roles import Role, sees_all_events
from messuopas.services.catalog.validation import CatalogValidator
from messuopas.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)


class AccessService:
    """Service layer for tenant membership and per-member event access."""

    EMAIL_MAX_LENGTH = 320

    def __init__(self, session: Session):
        """
        Initialize access service with database session.

        Args:
            session: SQLAlchemy database session
        """
        self.session = session
        self.store = DocumentStore(session)
        self.validator = CatalogValidator()

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to {action}: {str(e)}", e) from e

    def _validate_email(self, email: Optional[str]) -> None:
        if email is None:
            return
        if not isinstance(email, str) or "@" not in email:
            raise ValidationError("Invalid e-mail address", "email")
        if len(email) > self.EMAIL_MAX_LENGTH:
            raise ValidationError(
                f"E-mail must be at most {self.EMAIL_MAX_LENGTH} characters", "email"
            )

    # Organizations

    def get_organization(self, organization_id: str) -> Organization:
        self.validator.validate_id(organization_id, "organization_id")
        return self.store.get_document("organizations", organization_id)

    def create_organization(
        self,
        name: str,
        owner: Optional[User] = None,
        contact_email: Optional[str] = None,
    ) -> Organization:
        """
        Create an organization, optionally with a first owner.

        The owner joins the organization and becomes its administrator.

        Raises:
            ValidationError: If the name or e-mail is invalid
            DatabaseError: If database operation fails
        """
        self.validator.validate_title(name)
        self._validate_email(contact_email)

        try:
            organization = self.store.create_document(
                "organizations",
                {
                    "name": name.strip(),
                    "owners": [owner.id] if owner else [],
                    "contact_email": contact_email,
                },
            )
            if owner is not None:
                self.store.update_document(
                    "users",
                    owner.id,
                    organization_id=organization.id,
                    role=Role.CUSTOMER_ADMIN.value,
                )
            self.session.commit()
            logger.info("Created organization %s", organization.id)
            return organization

        except (DuplicateError, ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to create organization: {str(e)}", e) from e

    def rename_organization(self, organization_id: str, name: str) -> Organization:
        self.validator.validate_title(name)
        self.get_organization(organization_id)
        organization = self.store.update_document(
            "organizations", organization_id, name=name.strip()
        )
        self._commit("rename organization")
        return organization

    def set_contact_email(self, organization_id: str, email: Optional[str]) -> Organization:
        """Set or clear the organization's contact e-mail."""
        self._validate_email(email)
        self.get_organization(organization_id)
        organization = self.store.update_document(
            "organizations", organization_id, contact_email=email
        )
        self._commit("update contact e-mail")
        return organization

    def list_members(self, organization_id: str) -> list[User]:
        self.get_organization(organization_id)
        return self.store.list_documents("users", organization_id=organization_id)

    def _get_member(self, organization: Organization, member_id: str) -> User:
        member = self.store.get_document("users", member_id)
        if member.organization_id != organization.id:
            raise ValidationError(
                f"User {member_id} is not a member of organization {organization.id}",
                "member_id",
            )
        return member

    def add_owner(self, organization_id: str, member_id: str) -> Organization:
        """Make a member an owner; owners administer the organization."""
        organization = self.get_organization(organization_id)
        self._get_member(organization, member_id)
        owners = list(organization.owners or [])
        if member_id not in owners:
            owners.append(member_id)
        self.store.update_document("organizations", organization_id, owners=owners)
        self.store.update_document("users", member_id, role=Role.CUSTOMER_ADMIN.value)
        self._commit("add owner")
        return organization

    def remove_owner(self, organization_id: str, member_id: str) -> Organization:
        """Demote an owner back to a premium member."""
        organization = self.get_organization(organization_id)
        self._get_member(organization, member_id)
        owners = [owner for owner in organization.owners or [] if owner != member_id]
        self.store.update_document("organizations", organization_id, owners=owners)
        self.store.update_document("users", member_id, role=Role.PREMIUM_USER.value)
        self._commit("remove owner")
        return organization

    def remove_member(self, organization_id: str, member_id: str) -> User:
        """
        Detach a member from the organization.

        Raises:
            ValidationError: If the member is an owner or not a member
        """
        organization = self.get_organization(organization_id)
        member = self._get_member(organization, member_id)
        if member_id in (organization.owners or []):
            raise ValidationError("Owners must be demoted before removal", "member_id")
        member = self.store.update_document(
            "users",
            member_id,
            organization_id=None,
            accessible_event_ids=[],
            active_event_id=None,
        )
        self._commit("remove member")
        return member

    # Events

    def get_event(self, event_id: str) -> Event:
        self.validator.validate_id(event_id, "event_id")
        return self.store.get_document("events", event_id)

    def list_events(self, user: User) -> list[Event]:
        """
        List the events a user can open.

        Organization admins see every event of their organization, other
        members only those in their access list.
        """
        if user.organization_id:
            events = self.store.list_documents("events", organization_id=user.organization_id)
        else:
            events = self.store.list_documents("events", user_id=user.id)
        if sees_all_events(user.role) or not user.organization_id:
            return events
        allowed = set(user.accessible_event_ids or [])
        return [event for event in events if event.id in allowed]

    def create_event(self, creator: User, name: str) -> Event:
        """
        Create an event for the creator's organization, or privately.

        The creator gains access to the event and it becomes their active
        event when they have none.
        """
        self.validator.validate_title(name)
        if creator.organization_id:
            owner = {"organization_id": creator.organization_id, "user_id": None}
        else:
            owner = {"organization_id": None, "user_id": creator.id}

        try:
            event = self.store.create_document("events", {"name": name.strip(), **owner})
            fields: dict[str, Any] = {
                "accessible_event_ids": list(creator.accessible_event_ids or []) + [event.id]
            }
            if not creator.active_event_id:
                fields["active_event_id"] = event.id
            self.store.update_document("users", creator.id, **fields)
            self.session.commit()
            logger.info("Created event %s", event.id)
            return event

        except (DuplicateError, ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to create event: {str(e)}", e) from e

    def rename_event(self, event_id: str, name: str) -> Event:
        self.validator.validate_title(name)
        self.get_event(event_id)
        event = self.store.update_document("events", event_id, name=name.strip())
        self._commit("rename event")
        return event

    def delete_event(self, event_id: str) -> bool:
        """
        Delete an event and drop it from every user's access list.

        Users whose active event it was switch to their first remaining event.
        """
        self.validator.validate_id(event_id, "event_id")
        event = self.session.get(Event, event_id)
        if event is None:
            return False

        try:
            for user in self.store.list_documents("users"):
                if event_id not in (user.accessible_event_ids or []) and (
                    user.active_event_id != event_id
                ):
                    continue
                remaining = [e for e in user.accessible_event_ids or [] if e != event_id]
                fields: dict[str, Any] = {"accessible_event_ids": remaining}
                if user.active_event_id == event_id:
                    fields["active_event_id"] = remaining[0] if remaining else None
                self.store.update_document("users", user.id, **fields)
            self.store.delete_document("events", event_id)
            self.session.commit()
            logger.info("Deleted event %s", event_id)
            return True

        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to delete event: {str(e)}", e) from e

    def set_event_access(self, event_id: str, access: dict[str, bool]) -> list[User]:
        """
        Grant or revoke event access for several members at once.

        Organization admins always see every event and are skipped. All
        changes are validated before the first write.

        Args:
            event_id: Event to grant or revoke
            access: Member ID -> whether the member should have access

        Returns:
            Members whose documents were updated

        Raises:
            ValidationError: If a change would leave a member without events
            NotFoundError: If the event or a member does not exist
            DatabaseError: If database operation fails
        """
        event = self.get_event(event_id)

        updates: list[tuple[User, dict[str, Any]]] = []
        for member_id, should_have_access in access.items():
            member = self.store.get_document("users", member_id)
            if event.organization_id and member.organization_id != event.organization_id:
                raise ValidationError(
                    f"User {member_id} is not a member of the event's organization", "access"
                )
            current = list(member.accessible_event_ids or [])
            has_access = event_id in current
            if member.role == Role.CUSTOMER_ADMIN.value or bool(should_have_access) == has_access:
                continue

            if should_have_access:
                updates.append((member, {"accessible_event_ids": current + [event_id]}))
                continue

            remaining = [e for e in current if e != event_id]
            if not remaining:
                raise ValidationError(
                    f"User {member.name} must keep access to at least one event", "access"
                )
            fields: dict[str, Any] = {"accessible_event_ids": remaining}
            if member.active_event_id == event_id:
                fields["active_event_id"] = remaining[0]
            updates.append((member, fields))

        try:
            updated = [
                self.store.update_document("users", member.id, **fields)
                for member, fields in updates
            ]
            self.session.commit()
            return updated

        except (ValidationError, NotFoundError):
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to update event access: {str(e)}", e) from e

    def ensure_event_access(self, user: User, event_id: str) -> Event:
        """
        Get an event the user may work in.

        Organization admins reach every event of their organization, other
        users only the events in their access list.

        Raises:
            NotFoundError: If the event does not exist
            PermissionDeniedError: If the user has no access to the event
        """
        event = self.get_event(event_id)
        if sees_all_events(user.role):
            if user.role != Role.ADMIN.value and event.organization_id != user.organization_id:
                raise PermissionDeniedError("Event belongs to another organization")
        elif event_id not in (user.accessible_event_ids or []):
            raise PermissionDeniedError(f"No access to event {event_id}")
        return event

    def set_active_event(self, user_id: str, event_id: Optional[str]) -> User:
        """
        Switch the event a user is working in, or clear it.

        Raises:
            PermissionDeniedError: If the user has no access to the event
        """
        user = self.store.get_document("users", user_id)
        if event_id is not None:
            self.ensure_event_access(user, event_id)
        user = self.store.update_document("users", user_id, active_event_id=event_id)
        self._commit("set active event")
        return user
