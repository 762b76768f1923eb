"""FastAPI dependencies: database session and the signed-in user."""

from typing import Generator, Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from messuopas.config import get_settings
from messuopas.exceptions import PermissionDeniedError
from messuopas.models import Event, Organization, User
from messuopas.roles import Role
from messuopas.services.session_service import SessionService
from messuopas.storage.database import get_db


def get_db_session() -> Generator[Session, None, None]:
    """Yield a session per request; services commit their own work."""
    session = get_db().get_session()
    try:
        yield session
    finally:
        session.close()


def _session_secret(request: Request) -> Optional[str]:
    secret = request.cookies.get(get_settings().session_cookie_name)
    if secret:
        return secret
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def get_current_user(request: Request, db: Session = Depends(get_db_session)) -> User:
    """Resolve the session cookie (or bearer secret) to a user, else 401."""
    user = SessionService(db).resolve_user(_session_secret(request))
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.ADMIN.value:
        raise PermissionDeniedError("Administrator role required")
    return user


def ensure_organization_admin(user: User, organization: Organization) -> None:
    """Allow platform admins and owners of the organization."""
    if user.role == Role.ADMIN.value:
        return
    if user.id not in (organization.owners or []):
        raise PermissionDeniedError("Only organization owners can do this")


def ensure_event_admin(user: User, event: Event, db: Session) -> None:
    """Allow the private owner of an event or an admin of its organization."""
    if user.role == Role.ADMIN.value:
        return
    if event.organization_id is None:
        if event.user_id != user.id:
            raise PermissionDeniedError("Event belongs to another user")
        return
    organization = db.get(Organization, event.organization_id)
    if organization is None or user.id not in (organization.owners or []):
        raise PermissionDeniedError("Only organization owners can do this")
