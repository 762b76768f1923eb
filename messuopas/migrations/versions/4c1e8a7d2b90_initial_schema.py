"""Initial schema: tenants, catalog, preferences, invitations, content

Revision ID: 4c1e8a7d2b90
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "4c1e8a7d2b90"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Detect database type
    bind = op.get_bind()
    is_postgresql = bind.dialect.name == "postgresql"
    is_sqlite = bind.dialect.name == "sqlite"

    # Use JSONB for PostgreSQL, JSON elsewhere
    if is_postgresql:
        json_type = postgresql.JSONB(astext_type=sa.Text())
    else:
        json_type = sa.JSON()

    # Use appropriate timestamp defaults
    if is_sqlite:
        now_default = sa.text("(datetime('now'))")
        timestamp_type = sa.DateTime()
    else:
        now_default = sa.text("now()")
        timestamp_type = sa.DateTime(timezone=True)

    def timestamps() -> list[sa.Column]:
        return [
            sa.Column("created_at", timestamp_type, server_default=now_default, nullable=False),
            sa.Column("updated_at", timestamp_type, server_default=now_default, nullable=False),
        ]

    op.create_table(
        "organizations",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=500), nullable=False),
        sa.Column("owners", json_type, nullable=False),
        sa.Column("contact_email", sa.String(length=320), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_organizations_name"), "organizations", ["name"], unique=False)

    op.create_table(
        "events",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=500), nullable=False),
        sa.Column("organization_id", sa.String(length=255), nullable=True),
        sa.Column("user_id", sa.String(length=255), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_events_organization_id"), "events", ["organization_id"], unique=False)
    op.create_index(op.f("ix_events_user_id"), "events", ["user_id"], unique=False)

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=500), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column("organization_id", sa.String(length=255), nullable=True),
        sa.Column("active_event_id", sa.String(length=255), nullable=True),
        sa.Column("accessible_event_ids", json_type, nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_organization_id"), "users", ["organization_id"], unique=False)

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("secret", sa.String(length=255), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("expires_at", timestamp_type, nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sessions_secret"), "sessions", ["secret"], unique=True)
    op.create_index(op.f("ix_sessions_user_id"), "sessions", ["user_id"], unique=False)

    op.create_table(
        "initial_sections",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("path", sa.String(length=500), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("applied_organizations", json_type, nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_initial_sections_path"), "initial_sections", ["path"], unique=False)

    op.create_table(
        "additional_sections",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("path", sa.String(length=500), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.String(length=255), nullable=False),
        sa.Column("organization_id", sa.String(length=255), nullable=True),
        sa.Column("user_id", sa.String(length=255), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_additional_sections_path"), "additional_sections", ["path"], unique=False
    )
    op.create_index(
        op.f("ix_additional_sections_event_id"), "additional_sections", ["event_id"], unique=False
    )
    op.create_index(
        op.f("ix_additional_sections_organization_id"),
        "additional_sections",
        ["organization_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_additional_sections_user_id"), "additional_sections", ["user_id"], unique=False
    )

    for table, parent in (
        ("initial_subsections", "initial_sections"),
        ("additional_subsections", "additional_sections"),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.String(length=255), nullable=False),
            sa.Column("section_id", sa.String(length=255), nullable=False),
            sa.Column("title", sa.String(length=500), nullable=False),
            sa.Column("path", sa.String(length=500), nullable=False),
            sa.Column("html", sa.Text(), nullable=False),
            sa.Column("order", sa.Integer(), nullable=False),
            sa.Column("active", sa.Boolean(), nullable=True),
            *timestamps(),
            sa.ForeignKeyConstraint(["section_id"], [f"{parent}.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f(f"ix_{table}_section_id"), table, ["section_id"], unique=False)
        op.create_index(op.f(f"ix_{table}_path"), table, ["path"], unique=False)

    op.create_table(
        "user_section_preferences",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("event_id", sa.String(length=255), nullable=True),
        sa.Column("ordered_active_sections", sa.Text(), nullable=False),
        sa.Column("visibility_snapshots", json_type, nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "event_id", name="uq_preference_user_event"),
    )
    op.create_index(
        op.f("ix_user_section_preferences_user_id"),
        "user_section_preferences",
        ["user_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_user_section_preferences_event_id"),
        "user_section_preferences",
        ["event_id"],
        unique=False,
    )

    op.create_table(
        "invitation_tokens",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("token", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("organization_id", sa.String(length=255), nullable=False),
        sa.Column("event_ids", json_type, nullable=False),
        sa.Column("inviter_user_id", sa.String(length=255), nullable=False),
        sa.Column("expires_at", timestamp_type, nullable=False),
        sa.Column("used", sa.Boolean(), nullable=False),
        sa.Column("used_at", timestamp_type, nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_invitation_tokens_token"), "invitation_tokens", ["token"], unique=True)
    op.create_index(
        op.f("ix_invitation_tokens_organization_id"),
        "invitation_tokens",
        ["organization_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_invitation_tokens_expires_at"), "invitation_tokens", ["expires_at"], unique=False
    )
    op.create_index(op.f("ix_invitation_tokens_used"), "invitation_tokens", ["used"], unique=False)

    op.create_table(
        "section_invitations",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("section_id", sa.String(length=255), nullable=False),
        sa.Column("organization_id", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("viewed_at", timestamp_type, nullable=True),
        sa.Column("accepted_at", timestamp_type, nullable=True),
        sa.Column("declined_at", timestamp_type, nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("section_id", "organization_id", name="uq_section_invitation"),
    )
    op.create_index(
        op.f("ix_section_invitations_section_id"),
        "section_invitations",
        ["section_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_section_invitations_organization_id"),
        "section_invitations",
        ["organization_id"],
        unique=False,
    )

    content_columns = {
        "notes": [
            sa.Column("title", sa.String(length=500), nullable=False),
            sa.Column("text", sa.Text(), nullable=False),
        ],
        "todos": [
            sa.Column("title", sa.String(length=500), nullable=False),
            sa.Column("text", sa.Text(), nullable=False),
            sa.Column("status", sa.String(length=20), nullable=False),
        ],
        "documents": [
            sa.Column("file_id", sa.String(length=255), nullable=False),
            sa.Column("name", sa.String(length=500), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
        ],
    }
    for table, columns in content_columns.items():
        op.create_table(
            table,
            sa.Column("id", sa.String(length=255), nullable=False),
            *columns,
            sa.Column("event_id", sa.String(length=255), nullable=False),
            sa.Column("initial_subsection_id", sa.String(length=255), nullable=True),
            sa.Column("additional_subsection_id", sa.String(length=255), nullable=True),
            *timestamps(),
            sa.PrimaryKeyConstraint("id"),
        )
        for column in ("event_id", "initial_subsection_id", "additional_subsection_id"):
            op.create_index(op.f(f"ix_{table}_{column}"), table, [column], unique=False)

    op.create_table(
        "collaborators",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=500), nullable=False),
        sa.Column("web", sa.String(length=500), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("contact_email", sa.String(length=320), nullable=True),
        sa.Column("contact_name", sa.String(length=500), nullable=True),
        sa.Column("logo", sa.String(length=500), nullable=True),
        sa.Column("initial_section_id", sa.String(length=255), nullable=True),
        sa.Column("subsection_ids", json_type, nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_collaborators_initial_section_id"),
        "collaborators",
        ["initial_section_id"],
        unique=False,
    )

    # Index created_at, the natural listing order of every collection
    for table in (
        "organizations",
        "events",
        "users",
        "sessions",
        "initial_sections",
        "initial_subsections",
        "additional_sections",
        "additional_subsections",
        "user_section_preferences",
        "invitation_tokens",
        "section_invitations",
        "notes",
        "todos",
        "documents",
        "collaborators",
    ):
        op.create_index(op.f(f"ix_{table}_created_at"), table, ["created_at"], unique=False)


def downgrade() -> None:
    # Drop in reverse dependency order; indexes go with their tables
    for table in (
        "collaborators",
        "documents",
        "todos",
        "notes",
        "section_invitations",
        "invitation_tokens",
        "user_section_preferences",
        "additional_subsections",
        "initial_subsections",
        "additional_sections",
        "initial_sections",
        "sessions",
        "users",
        "events",
        "organizations",
    ):
        op.drop_table(table)
