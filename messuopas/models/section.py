"""Section and subsection models for both catalog hierarchies."""

from typing import Optional

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from messuopas.models.base import Base, TimestampMixin


class InitialSection(Base, TimestampMixin):
    """Platform-seeded section, shared across tenants it is applied to."""

    __tablename__ = "initial_sections"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    path: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    applied_organizations: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    subsections: Mapped[list["InitialSubsection"]] = relationship(
        "InitialSubsection",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="InitialSubsection.order",
    )

    def __repr__(self) -> str:
        return f"<InitialSection(id={self.id!r}, title={self.title!r})>"


class InitialSubsection(Base, TimestampMixin):
    """Subsection of an initial section."""

    __tablename__ = "initial_subsections"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    section_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("initial_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    path: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    html: Mapped[str] = mapped_column(Text, nullable=False, default="")
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # NULL means "never set"; see the resolver for how each reader defaults it
    active: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    section: Mapped["InitialSection"] = relationship("InitialSection", back_populates="subsections")

    def __repr__(self) -> str:
        return f"<InitialSubsection(id={self.id!r}, title={self.title!r})>"


class AdditionalSection(Base, TimestampMixin):
    """Tenant-created section scoped to an owner and an event."""

    __tablename__ = "additional_sections"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    path: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    event_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    organization_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)

    subsections: Mapped[list["AdditionalSubsection"]] = relationship(
        "AdditionalSubsection",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="AdditionalSubsection.order",
    )

    def __repr__(self) -> str:
        return f"<AdditionalSection(id={self.id!r}, title={self.title!r})>"


class AdditionalSubsection(Base, TimestampMixin):
    """Subsection of an additional section."""

    __tablename__ = "additional_subsections"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    section_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("additional_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    path: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    html: Mapped[str] = mapped_column(Text, nullable=False, default="")
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    section: Mapped["AdditionalSection"] = relationship(
        "AdditionalSection", back_populates="subsections"
    )

    def __repr__(self) -> str:
        return f"<AdditionalSubsection(id={self.id!r}, title={self.title!r})>"
