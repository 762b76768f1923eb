"""Database models for Messuopas."""

from messuopas.models.base import Base
from messuopas.models.content import Collaborator, Note, StoredDocument, Todo
from messuopas.models.invitation import InvitationToken, SectionInvitation
from messuopas.models.organization import Event, Organization
from messuopas.models.preference import UserSectionPreference
from messuopas.models.section import (
    AdditionalSection,
    AdditionalSubsection,
    InitialSection,
    InitialSubsection,
)
from messuopas.models.user import AuthSession, User

__all__ = [
    "Base",
    "Organization",
    "Event",
    "User",
    "AuthSession",
    "InitialSection",
    "InitialSubsection",
    "AdditionalSection",
    "AdditionalSubsection",
    "UserSectionPreference",
    "InvitationToken",
    "SectionInvitation",
    "Note",
    "Todo",
    "StoredDocument",
    "Collaborator",
]
