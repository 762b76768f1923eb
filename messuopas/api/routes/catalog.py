"""Catalog administration: sections and subsections of both hierarchies."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from messuopas.api.dependencies import get_current_user, get_db_session, require_admin
from messuopas.api.schemas import (
    ConfirmSection,
    IdOrder,
    SectionCreate,
    SubsectionCreate,
    SubsectionUpdate,
    TitleBody,
)
from messuopas.api.serializers import serialize_model, serialize_section
from messuopas.models import User
from messuopas.services.catalog import SectionKind
from messuopas.services.catalog_service import CatalogService

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/{kind}/sections")
def list_sections(
    kind: SectionKind,
    event_id: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    service = CatalogService(db)
    if kind is SectionKind.INITIAL:
        sections = service.list_initial_sections(user)
    else:
        sections = service.list_additional_sections(user, event_id)
    return {"sections": [serialize_section(section) for section in sections]}


@router.post("/{kind}/sections", status_code=status.HTTP_201_CREATED)
def create_section(
    kind: SectionKind,
    body: SectionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    section = CatalogService(db).create_section(user, kind, body.title, body.event_id)
    return serialize_section(section)


@router.put("/{kind}/sections/order")
def reorder_sections(
    kind: SectionKind,
    body: IdOrder,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    sections = CatalogService(db).reorder_sections(user, kind, body.ids)
    return {"sections": [serialize_model(section) for section in sections]}


@router.get("/{kind}/sections/{section_id}")
def get_section(
    kind: SectionKind,
    section_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return serialize_section(CatalogService(db).get_section(kind, section_id, viewer=user))


@router.patch("/{kind}/sections/{section_id}")
def rename_section(
    kind: SectionKind,
    section_id: str,
    body: TitleBody,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    section = CatalogService(db).update_section(user, kind, section_id, body.title)
    return serialize_section(section)


@router.delete("/{kind}/sections/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_section(
    kind: SectionKind,
    section_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    if not CatalogService(db).delete_section(user, kind, section_id):
        raise HTTPException(status_code=404, detail=f"Section {section_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{kind}/sections/{section_id}/subsections", status_code=status.HTTP_201_CREATED)
def create_subsection(
    kind: SectionKind,
    section_id: str,
    body: SubsectionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    subsection = CatalogService(db).create_subsection(
        user, kind, section_id, body.title, body.html
    )
    return serialize_model(subsection)


@router.put("/{kind}/sections/{section_id}/subsections/order")
def reorder_subsections(
    kind: SectionKind,
    section_id: str,
    body: IdOrder,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    subsections = CatalogService(db).reorder_subsections(user, kind, section_id, body.ids)
    return {"subsections": [serialize_model(sub) for sub in subsections]}


@router.post("/initial/sections/{section_id}/confirm")
def confirm_section(
    section_id: str,
    body: ConfirmSection,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return serialize_section(CatalogService(db).confirm_section(section_id, body.organization_id))


@router.get("/{kind}/subsections/{subsection_id}")
def get_subsection(
    kind: SectionKind,
    subsection_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return serialize_model(CatalogService(db).get_subsection(kind, subsection_id, viewer=user))


@router.patch("/{kind}/subsections/{subsection_id}")
def update_subsection(
    kind: SectionKind,
    subsection_id: str,
    body: SubsectionUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    subsection = CatalogService(db).update_subsection(
        user, kind, subsection_id, body.title, body.html, body.active
    )
    return serialize_model(subsection)


@router.delete("/{kind}/subsections/{subsection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subsection(
    kind: SectionKind,
    subsection_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    if not CatalogService(db).delete_subsection(user, kind, subsection_id):
        raise HTTPException(status_code=404, detail=f"Subsection {subsection_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{kind}/paths/{section_path}/{subsection_path}")
def get_subsection_by_path(
    kind: SectionKind,
    section_path: str,
    subsection_path: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    subsection = CatalogService(db).get_subsection_by_path(
        kind, section_path, subsection_path, viewer=user
    )
    return serialize_model(subsection)
