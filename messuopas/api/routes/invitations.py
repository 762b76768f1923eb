"""Registration invitations and section offers."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from messuopas.api.dependencies import (
    ensure_organization_admin,
    get_current_user,
    get_db_session,
    require_admin,
)
from messuopas.api.schemas import InvitationCreate, Registration, SectionOffer, SectionOfferStatus
from messuopas.api.serializers import serialize_model, serialize_user
from messuopas.config import get_settings
from messuopas.exceptions import ValidationError
from messuopas.models import Organization, User
from messuopas.services.invitation_service import InvitationService
from messuopas.services.session_service import SessionService
from messuopas.storage.document_store import DocumentStore

router = APIRouter(prefix="/invitations", tags=["invitations"])


def _own_organization(user: User, db: Session) -> Organization:
    if not user.organization_id:
        raise ValidationError("User does not belong to an organization", "organization_id")
    organization = DocumentStore(db).get_document("organizations", user.organization_id)
    ensure_organization_admin(user, organization)
    return organization


@router.post("", status_code=201)
def create_invitation(
    body: InvitationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """Invite a new member; the link is returned instead of being e-mailed."""
    organization = _own_organization(user, db)
    created = InvitationService(db).create_invitation(
        body.email, organization.id, body.event_ids, user.id
    )
    return {
        "token": created.token,
        "link": created.link,
        "expires_at": created.invitation.expires_at.isoformat(),
    }


@router.get("")
def list_pending_invitations(
    user: User = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    organization = _own_organization(user, db)
    invitations = InvitationService(db).list_pending_invitations(organization.id)
    return {
        "invitations": [
            {
                "id": invitation.id,
                "email": invitation.email,
                "event_ids": invitation.event_ids,
                "expires_at": invitation.expires_at.isoformat(),
            }
            for invitation in invitations
        ]
    }


@router.post("/register", status_code=201)
def register(body: Registration, response: Response, db: Session = Depends(get_db_session)):
    """Create the invited user and sign them in."""
    user = InvitationService(db).register_with_invitation(body.token, body.name)
    auth_session = SessionService(db).create_session(user.id)
    response.set_cookie(
        get_settings().session_cookie_name, auth_session.secret, httponly=True, samesite="lax"
    )
    return serialize_user(user)


@router.post("/cleanup")
def cleanup_expired(user: User = Depends(require_admin), db: Session = Depends(get_db_session)):
    return {"deleted": InvitationService(db).cleanup_expired_invitations()}


@router.post("/sections", status_code=201)
def offer_section(
    body: SectionOffer,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    offer = InvitationService(db).offer_section(body.section_id, body.organization_id)
    return serialize_model(offer)


@router.get("/sections")
def list_section_offers(
    user: User = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    organization = _own_organization(user, db)
    offers = InvitationService(db).list_section_invitations(organization.id)
    return {"offers": [serialize_model(offer) for offer in offers]}


@router.put("/sections/{section_id}")
def respond_to_section_offer(
    section_id: str,
    body: SectionOfferStatus,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    organization = _own_organization(user, db)
    offer = InvitationService(db).set_section_invitation_status(
        organization.id, section_id, body.status
    )
    return serialize_model(offer)


@router.get("/{token}")
def validate_invitation(token: str, db: Session = Depends(get_db_session)):
    """Public check used by the registration page before asking for a name."""
    invitation = InvitationService(db).validate_invitation(token)
    return {
        "email": invitation.email,
        "organization_id": invitation.organization_id,
        "event_ids": invitation.event_ids,
    }


@router.delete("/{invitation_id}", status_code=204)
def revoke_invitation(
    invitation_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    organization = _own_organization(user, db)
    invitation = DocumentStore(db).get_document("invitation_tokens", invitation_id)
    if invitation.organization_id != organization.id:
        raise ValidationError("Invitation belongs to another organization", "invitation_id")
    InvitationService(db).revoke_invitation(invitation_id)
    return Response(status_code=204)
