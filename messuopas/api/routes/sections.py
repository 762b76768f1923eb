"""Resolved section view and preference mutations for the signed-in user."""

from typing import Any, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from messuopas.api.dependencies import get_current_user, get_db_session
from messuopas.api.schemas import (
    MoveSection,
    MoveSubsection,
    SectionOrder,
    SubsectionOrder,
    ToggleSection,
    ToggleSubsection,
)
from messuopas.api.serializers import serialize_resolved
from messuopas.models import User
from messuopas.services.preference_service import PreferenceService
from messuopas.services.preferences.resolver import ResolvedSection, visible_sections

router = APIRouter(prefix="/sections", tags=["sections"])


def _response(sections: list[ResolvedSection]) -> dict[str, Any]:
    return {"sections": serialize_resolved(sections)}


@router.get("")
def get_sections(
    visible_only: bool = False,
    event_id: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """Sections in the user's order; ``visible_only`` applies the dashboard filter."""
    sections = PreferenceService(db).load(user, event_id)
    if visible_only:
        sections = visible_sections(sections)
    return _response(sections)


@router.post("/preferences/toggle-subsection")
def toggle_subsection(
    body: ToggleSubsection,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return _response(
        PreferenceService(db).toggle_subsection(
            user, body.section_id, body.subsection_id, body.event_id
        )
    )


@router.post("/preferences/toggle-section")
def toggle_section(
    body: ToggleSection,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return _response(PreferenceService(db).toggle_section(user, body.section_id, body.event_id))


@router.put("/preferences/order")
def reorder_sections(
    body: SectionOrder,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return _response(
        PreferenceService(db).reorder_sections(user, body.section_ids, body.event_id)
    )


@router.put("/preferences/sections/{section_id}/order")
def reorder_subsections(
    section_id: str,
    body: SubsectionOrder,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return _response(
        PreferenceService(db).reorder_subsections(
            user, section_id, body.subsection_ids, body.event_id
        )
    )


@router.post("/preferences/move-section")
def move_section(
    body: MoveSection,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return _response(
        PreferenceService(db).move_section(user, body.section_id, body.new_index, body.event_id)
    )


@router.post("/preferences/move-subsection")
def move_subsection(
    body: MoveSubsection,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return _response(
        PreferenceService(db).move_subsection(
            user, body.section_id, body.subsection_id, body.new_index, body.event_id
        )
    )
