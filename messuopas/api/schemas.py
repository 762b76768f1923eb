"""Request bodies for the HTTP API."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class TitleBody(BaseModel):
    title: str


class SectionCreate(BaseModel):
    title: str
    event_id: Optional[str] = None


class SubsectionCreate(BaseModel):
    title: str
    html: str = ""


class SubsectionUpdate(BaseModel):
    title: Optional[str] = None
    html: Optional[str] = None
    active: Optional[bool] = None


class IdOrder(BaseModel):
    ids: list[str] = Field(min_length=1)


class ConfirmSection(BaseModel):
    organization_id: str


class ToggleSubsection(BaseModel):
    section_id: str
    subsection_id: str
    event_id: Optional[str] = None


class ToggleSection(BaseModel):
    section_id: str
    event_id: Optional[str] = None


class SectionOrder(BaseModel):
    section_ids: list[str]
    event_id: Optional[str] = None


class SubsectionOrder(BaseModel):
    subsection_ids: list[str]
    event_id: Optional[str] = None


class MoveSection(BaseModel):
    section_id: str
    new_index: int
    event_id: Optional[str] = None


class MoveSubsection(BaseModel):
    section_id: str
    subsection_id: str
    new_index: int
    event_id: Optional[str] = None


class OrganizationCreate(BaseModel):
    name: str
    contact_email: Optional[str] = None


class OrganizationUpdate(BaseModel):
    name: Optional[str] = None
    contact_email: Optional[str] = None


class EventCreate(BaseModel):
    name: str


class EventAccess(BaseModel):
    access: dict[str, bool]


class ActiveEvent(BaseModel):
    event_id: Optional[str] = None


class InvitationCreate(BaseModel):
    email: str
    event_ids: list[str]


class Registration(BaseModel):
    token: str
    name: str


class SectionOffer(BaseModel):
    section_id: str
    organization_id: str


class SectionOfferStatus(BaseModel):
    status: Literal["pending", "viewed", "accepted", "declined"]


class ContentCreate(BaseModel):
    title: Optional[str] = None
    text: Optional[str] = None
    status: Optional[str] = None
    file_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


class CollaboratorBody(BaseModel):
    name: Optional[str] = None
    web: Optional[str] = None
    description: Optional[str] = None
    contact_email: Optional[str] = None
    contact_name: Optional[str] = None
    logo: Optional[str] = None
    initial_section_id: Optional[str] = None
    subsection_ids: Optional[list[str]] = None
