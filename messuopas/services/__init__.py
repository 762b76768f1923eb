"""Service layer for business logic and validation."""

from messuopas.services.access_service import AccessService
from messuopas.services.catalog_service import CatalogService
from messuopas.services.content_service import ContentService
from messuopas.services.invitation_service import InvitationService
from messuopas.services.preference_service import PreferenceService
from messuopas.services.session_service import SessionService

__all__ = [
    "AccessService",
    "CatalogService",
    "ContentService",
    "InvitationService",
    "PreferenceService",
    "SessionService",
]
