"""Notes, to-dos and document records under subsections, plus collaborators."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from messuopas.api.dependencies import get_current_user, get_db_session, require_admin
from messuopas.api.schemas import CollaboratorBody, ContentCreate
from messuopas.api.serializers import serialize_model
from messuopas.exceptions import ValidationError
from messuopas.models import User
from messuopas.services.access_service import AccessService
from messuopas.services.catalog import SectionKind
from messuopas.services.catalog_service import CatalogService
from messuopas.services.content_service import ContentService

router = APIRouter(prefix="/subsections", tags=["content"])
collaborators_router = APIRouter(prefix="/collaborators", tags=["collaborators"])

ContentCollection = Literal["notes", "todos", "documents"]


def _event_id(
    db: Session, user: User, kind: SectionKind, subsection_id: str, event_id: Optional[str]
) -> str:
    """Resolve the event and check the user may work on the subsection in it."""
    event_id = event_id or user.active_event_id
    if not event_id:
        raise ValidationError("No active event selected", "event_id")
    AccessService(db).ensure_event_access(user, event_id)
    subsection = CatalogService(db).get_subsection(kind, subsection_id, viewer=user)
    if kind is SectionKind.ADDITIONAL and subsection.section.event_id != event_id:
        raise ValidationError("Subsection belongs to another event", "event_id")
    return event_id


@router.get("/{kind}/{subsection_id}/{collection}")
def list_content(
    kind: SectionKind,
    subsection_id: str,
    collection: ContentCollection,
    event_id: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    items = ContentService(db).list_content(
        collection, kind, subsection_id, _event_id(db, user, kind, subsection_id, event_id)
    )
    return {collection: [serialize_model(item) for item in items]}


@router.post("/{kind}/{subsection_id}/{collection}", status_code=201)
def create_content(
    kind: SectionKind,
    subsection_id: str,
    collection: ContentCollection,
    body: ContentCreate,
    event_id: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    item = ContentService(db).create_content(
        collection,
        kind,
        subsection_id,
        _event_id(db, user, kind, subsection_id, event_id),
        **body.model_dump(exclude_unset=True),
    )
    return serialize_model(item)


@router.patch("/{kind}/{subsection_id}/{collection}/{document_id}")
def update_content(
    kind: SectionKind,
    subsection_id: str,
    collection: ContentCollection,
    document_id: str,
    body: ContentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    service = ContentService(db)
    item = service.get_content(collection, kind, subsection_id, document_id)
    _event_id(db, user, kind, subsection_id, item.event_id)
    item = service.update_content(
        collection, document_id, **body.model_dump(exclude_unset=True)
    )
    return serialize_model(item)


@router.delete("/{kind}/{subsection_id}/{collection}/{document_id}", status_code=204)
def delete_content(
    kind: SectionKind,
    subsection_id: str,
    collection: ContentCollection,
    document_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    service = ContentService(db)
    item = service.get_content(collection, kind, subsection_id, document_id)
    _event_id(db, user, kind, subsection_id, item.event_id)
    if not service.delete_content(collection, document_id):
        raise HTTPException(status_code=404, detail=f"{collection} {document_id} not found")
    return Response(status_code=204)


@collaborators_router.get("")
def list_collaborators(
    initial_section_id: Optional[str] = None,
    subsection_id: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    collaborators = ContentService(db).list_collaborators(initial_section_id, subsection_id)
    return {"collaborators": [serialize_model(c) for c in collaborators]}


@collaborators_router.post("", status_code=201)
def create_collaborator(
    body: CollaboratorBody,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    fields = body.model_dump(exclude_unset=True)
    name = fields.pop("name", None)
    if not name:
        raise ValidationError("Name is required", "name")
    return serialize_model(ContentService(db).create_collaborator(name, **fields))


@collaborators_router.patch("/{collaborator_id}")
def update_collaborator(
    collaborator_id: str,
    body: CollaboratorBody,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    collaborator = ContentService(db).update_collaborator(
        collaborator_id, **body.model_dump(exclude_unset=True)
    )
    return serialize_model(collaborator)


@collaborators_router.delete("/{collaborator_id}", status_code=204)
def delete_collaborator(
    collaborator_id: str,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    if not ContentService(db).delete_collaborator(collaborator_id):
        raise HTTPException(status_code=404, detail=f"Collaborator {collaborator_id} not found")
    return Response(status_code=204)
