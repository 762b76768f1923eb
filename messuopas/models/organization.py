"""Organization and event models."""

from typing import Optional

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from messuopas.models.base import Base, TimestampMixin


class Organization(Base, TimestampMixin):
    """A tenant organization; ``owners`` lists user ids."""

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    owners: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    contact_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)

    def __repr__(self) -> str:
        return f"<Organization(id={self.id!r}, name={self.name!r})>"


class Event(Base, TimestampMixin):
    """A single trade fair owned by an organization or a private user."""

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    organization_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    user_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<Event(id={self.id!r}, name={self.name!r})>"
