"""Organizations and their members."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from messuopas.api.dependencies import (
    ensure_organization_admin,
    get_current_user,
    get_db_session,
)
from messuopas.api.schemas import OrganizationCreate, OrganizationUpdate
from messuopas.api.serializers import serialize_model, serialize_user
from messuopas.models import User
from messuopas.roles import Role
from messuopas.services.access_service import AccessService

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.post("", status_code=201)
def create_organization(
    body: OrganizationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """Admins create bare organizations; anyone else becomes the first owner."""
    owner = None if user.role == Role.ADMIN.value else user
    organization = AccessService(db).create_organization(body.name, owner, body.contact_email)
    return serialize_model(organization)


@router.get("/{organization_id}")
def get_organization(
    organization_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return serialize_model(AccessService(db).get_organization(organization_id))


@router.patch("/{organization_id}")
def update_organization(
    organization_id: str,
    body: OrganizationUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    service = AccessService(db)
    organization = service.get_organization(organization_id)
    ensure_organization_admin(user, organization)
    fields = body.model_dump(exclude_unset=True)
    if "name" in fields:
        organization = service.rename_organization(organization_id, fields["name"])
    if "contact_email" in fields:
        organization = service.set_contact_email(organization_id, fields["contact_email"])
    return serialize_model(organization)


@router.get("/{organization_id}/members")
def list_members(
    organization_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    members = AccessService(db).list_members(organization_id)
    return {"members": [serialize_user(member) for member in members]}


@router.post("/{organization_id}/owners/{member_id}")
def add_owner(
    organization_id: str,
    member_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    service = AccessService(db)
    ensure_organization_admin(user, service.get_organization(organization_id))
    return serialize_model(service.add_owner(organization_id, member_id))


@router.delete("/{organization_id}/owners/{member_id}")
def remove_owner(
    organization_id: str,
    member_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    service = AccessService(db)
    ensure_organization_admin(user, service.get_organization(organization_id))
    return serialize_model(service.remove_owner(organization_id, member_id))


@router.delete("/{organization_id}/members/{member_id}")
def remove_member(
    organization_id: str,
    member_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    service = AccessService(db)
    ensure_organization_admin(user, service.get_organization(organization_id))
    return serialize_user(service.remove_member(organization_id, member_id))
