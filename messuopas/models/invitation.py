"""Invitation token models."""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from messuopas.models.base import Base, TimestampMixin


class InvitationToken(Base, TimestampMixin):
    """Single-use registration invitation into an organization."""

    __tablename__ = "invitation_tokens"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    token: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    organization_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    event_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    inviter_user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<InvitationToken(email={self.email!r}, used={self.used!r})>"


class SectionInvitation(Base, TimestampMixin):
    """Offer of an initial section to an organization."""

    __tablename__ = "section_invitations"
    __table_args__ = (
        UniqueConstraint("section_id", "organization_id", name="uq_section_invitation"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    section_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    organization_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    viewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    accepted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    declined_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
