"""Per-(user, event) section display preference."""

from typing import Any, Optional

from sqlalchemy import JSON, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from messuopas.models.base import Base, TimestampMixin


class UserSectionPreference(Base, TimestampMixin):
    """Serialized section order and visibility for one user in one event.

    ``ordered_active_sections`` is stored verbatim as a JSON string of
    ``[{id, order, subsections: [{id, order, active}]}]``.
    """

    __tablename__ = "user_section_preferences"
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_preference_user_event"),)

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_id: Mapped[Optional[str]] = mapped_column(
        String(255), ForeignKey("events.id", ondelete="CASCADE"), nullable=True, index=True
    )
    ordered_active_sections: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    # section id -> {subsection id: active} captured when a section is toggled off
    visibility_snapshots: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSON, nullable=True, default=dict
    )

    def __repr__(self) -> str:
        return f"<UserSectionPreference(user_id={self.user_id!r}, event_id={self.event_id!r})>"
