"""add student document urls

Revision ID: c4e8a1f09d23
Revises: b7c1d2e3f4a5
Create Date: 2026-10-19 11:30:00.000000

This migration adds the object-store URLs of a student's uploaded
documents (resume, aadhar card, PAN card, profile photo) to
student_profiles. All columns are nullable: a document is absent until
the student uploads it.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c4e8a1f09d23"
down_revision: str | Sequence[str] | None = "b7c1d2e3f4a5"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DOCUMENT_COLUMNS = ("resume_url", "aadhar_card_url", "pan_card_url", "profile_photo_url")


def upgrade() -> None:
    """Add the document URL columns."""
    for column in DOCUMENT_COLUMNS:
        op.add_column("student_profiles", sa.Column(column, sa.String(length=500), nullable=True))


def downgrade() -> None:
    """Drop the document URL columns."""
    for column in reversed(DOCUMENT_COLUMNS):
        op.drop_column("student_profiles", column)
