"""create placement schema

Revision ID: b7c1d2e3f4a5
Revises:
Create Date: 2026-10-12 09:00:00.000000

This migration:
1. Creates the user_role, drive_status and application_status enum types
2. Creates users and password_resets
3. Creates student_profiles (one row per student account)
4. Creates placement_drives and drive_applications

Both drive_applications foreign keys use ON DELETE RESTRICT: neither a
drive nor a student account can be removed while an application row
references it.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "b7c1d2e3f4a5"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

USER_ROLE_VALUES = ("admin", "student")
DRIVE_STATUS_VALUES = ("open", "closed", "cancelled", "on_hold", "completed")
APPLICATION_STATUS_VALUES = ("opted_in", "shortlisted", "placed", "rejected", "withdrawn")


def _timestamps(*names: str) -> list[sa.Column]:
    return [
        sa.Column(
            name,
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        )
        for name in names
    ]


def upgrade() -> None:
    """Create the placement portal tables."""
    bind = op.get_bind()

    user_role_enum = postgresql.ENUM(*USER_ROLE_VALUES, name="user_role", create_type=False)
    drive_status_enum = postgresql.ENUM(
        *DRIVE_STATUS_VALUES, name="drive_status", create_type=False
    )
    application_status_enum = postgresql.ENUM(
        *APPLICATION_STATUS_VALUES, name="application_status", create_type=False
    )
    user_role_enum.create(bind, checkfirst=True)
    drive_status_enum.create(bind, checkfirst=True)
    application_status_enum.create(bind, checkfirst=True)

    # Accounts
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", user_role_enum, nullable=False, server_default="student"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_blocked", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps("created_at", "updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "password_resets",
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=6), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps("created_at"),
        sa.PrimaryKeyConstraint("email"),
    )
    op.create_index(
        op.f("ix_password_resets_expires_at"), "password_resets", ["expires_at"], unique=False
    )

    # Academic record
    op.create_table(
        "student_profiles",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("register_number", sa.String(length=50), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("batch_year", sa.Integer(), nullable=False),
        sa.Column("cgpa", sa.Float(), nullable=False, server_default="0"),
        sa.Column("current_backlogs", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps("created_at", "updated_at"),
        sa.PrimaryKeyConstraint("user_id"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_student_profiles_user_id",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("register_number", name="uq_student_profiles_register_number"),
    )
    op.create_index(
        "ix_student_profiles_department", "student_profiles", ["department"], unique=False
    )
    op.create_index(
        "ix_student_profiles_batch_year", "student_profiles", ["batch_year"], unique=False
    )

    # Drives
    op.create_table(
        "placement_drives",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("posted_by", sa.Integer(), nullable=True),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("job_role", sa.String(length=200), nullable=False),
        sa.Column("job_description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("drive_type", sa.String(length=50), nullable=False),
        sa.Column("company_category", sa.String(length=50), nullable=False),
        sa.Column("ctc_min", sa.Float(), nullable=False),
        sa.Column("ctc_max", sa.Float(), nullable=False),
        sa.Column("ctc_display", sa.String(length=100), nullable=True),
        sa.Column("min_cgpa", sa.Float(), nullable=False),
        sa.Column("max_backlogs_allowed", sa.Integer(), nullable=False),
        sa.Column(
            "eligible_departments",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
        ),
        sa.Column(
            "eligible_batch_years",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
        ),
        sa.Column("drive_date", sa.Date(), nullable=False),
        sa.Column("deadline_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", drive_status_enum, nullable=False, server_default="open"),
        *_timestamps("created_at", "updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["posted_by"],
            ["users.id"],
            name="fk_placement_drives_posted_by",
            ondelete="SET NULL",
        ),
    )
    op.create_index(
        "ix_placement_drives_status_deadline",
        "placement_drives",
        ["status", "deadline_date"],
        unique=False,
    )
    op.create_index(
        "ix_placement_drives_company_category",
        "placement_drives",
        ["company_category"],
        unique=False,
    )

    # Applications
    op.create_table(
        "drive_applications",
        sa.Column("drive_id", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("status", application_status_enum, nullable=False, server_default="opted_in"),
        sa.Column(
            "applied_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        *_timestamps("updated_at"),
        sa.PrimaryKeyConstraint("drive_id", "student_id"),
        sa.ForeignKeyConstraint(
            ["drive_id"],
            ["placement_drives.id"],
            name="fk_drive_applications_drive_id",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["users.id"],
            name="fk_drive_applications_student_id",
            ondelete="RESTRICT",
        ),
    )
    op.create_index(
        "ix_drive_applications_student_id", "drive_applications", ["student_id"], unique=False
    )
    op.create_index(
        "ix_drive_applications_drive_status",
        "drive_applications",
        ["drive_id", "status"],
        unique=False,
    )


def downgrade() -> None:
    """Drop the placement portal tables and enum types."""
    op.drop_index("ix_drive_applications_drive_status", table_name="drive_applications")
    op.drop_index("ix_drive_applications_student_id", table_name="drive_applications")
    op.drop_table("drive_applications")

    op.drop_index("ix_placement_drives_company_category", table_name="placement_drives")
    op.drop_index("ix_placement_drives_status_deadline", table_name="placement_drives")
    op.drop_table("placement_drives")

    op.drop_index("ix_student_profiles_batch_year", table_name="student_profiles")
    op.drop_index("ix_student_profiles_department", table_name="student_profiles")
    op.drop_table("student_profiles")

    op.drop_index(op.f("ix_password_resets_expires_at"), table_name="password_resets")
    op.drop_table("password_resets")

    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    postgresql.ENUM(*APPLICATION_STATUS_VALUES, name="application_status").drop(
        bind, checkfirst=True
    )
    postgresql.ENUM(*DRIVE_STATUS_VALUES, name="drive_status").drop(bind, checkfirst=True)
    postgresql.ENUM(*USER_ROLE_VALUES, name="user_role").drop(bind, checkfirst=True)
