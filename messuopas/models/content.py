"""Per-subsection content: notes, to-dos, document records, collaborators."""

from typing import Optional

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from messuopas.models.base import Base, TimestampMixin


class SubsectionContentMixin:
    """Event scope plus a reference to exactly one subsection kind."""

    event_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    initial_subsection_id: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, index=True
    )
    additional_subsection_id: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, index=True
    )


class Note(Base, TimestampMixin, SubsectionContentMixin):
    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")


class Todo(Base, TimestampMixin, SubsectionContentMixin):
    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="todo")


class StoredDocument(Base, TimestampMixin, SubsectionContentMixin):
    """Metadata record for an uploaded file held in blob storage."""

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    file_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")


class Collaborator(Base, TimestampMixin):
    """Partner company listed under an initial section and its subsections."""

    __tablename__ = "collaborators"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    web: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    contact_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    contact_name: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    logo: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    initial_section_id: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, index=True
    )
    subsection_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
