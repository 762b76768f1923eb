"""Events, per-member event access and the active event."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from messuopas.api.dependencies import ensure_event_admin, get_current_user, get_db_session
from messuopas.api.schemas import ActiveEvent, EventAccess, EventCreate
from messuopas.api.serializers import serialize_model, serialize_user
from messuopas.models import User
from messuopas.services.access_service import AccessService

router = APIRouter(prefix="/events", tags=["events"])


@router.get("")
def list_events(user: User = Depends(get_current_user), db: Session = Depends(get_db_session)):
    events = AccessService(db).list_events(user)
    return {
        "events": [serialize_model(event) for event in events],
        "active_event_id": user.active_event_id,
    }


@router.post("", status_code=201)
def create_event(
    body: EventCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return serialize_model(AccessService(db).create_event(user, body.name))


@router.put("/active")
def set_active_event(
    body: ActiveEvent,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return serialize_user(AccessService(db).set_active_event(user.id, body.event_id))


@router.patch("/{event_id}")
def rename_event(
    event_id: str,
    body: EventCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    service = AccessService(db)
    ensure_event_admin(user, service.get_event(event_id), db)
    return serialize_model(service.rename_event(event_id, body.name))


@router.delete("/{event_id}", status_code=204)
def delete_event(
    event_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    service = AccessService(db)
    ensure_event_admin(user, service.get_event(event_id), db)
    if not service.delete_event(event_id):
        raise HTTPException(status_code=404, detail=f"Event {event_id} not found")
    return Response(status_code=204)


@router.put("/{event_id}/access")
def set_event_access(
    event_id: str,
    body: EventAccess,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    service = AccessService(db)
    ensure_event_admin(user, service.get_event(event_id), db)
    updated = service.set_event_access(event_id, body.access)
    return {"updated": [serialize_user(member) for member in updated]}
