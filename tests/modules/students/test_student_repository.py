"""
Unit tests for students repository layer.

Statements are compiled with the PostgreSQL dialect and inspected.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from placement_portal.modules.applications.models import Application
from placement_portal.modules.drives.eligibility import StudentSnapshot
from placement_portal.modules.students import repository
from placement_portal.modules.students.models import DocumentType


def _compiled_sql(mock_db):
    statement = mock_db.execute.call_args.args[0]
    return str(statement.compile(dialect=postgresql.dialect()))


class TestAcademics:
    """Tests for the writes and reads of the academic record."""

    @pytest.mark.asyncio
    async def test_update_academics_sets_only_given_columns(self, mock_db):
        mock_db.execute.return_value = MagicMock(rowcount=1)

        updated = await repository.update_academics(mock_db, 5, {"cgpa": 8.2})

        assert updated == 1
        sql = _compiled_sql(mock_db)
        assert sql.startswith("UPDATE student_profiles SET cgpa=")
        assert "current_backlogs" not in sql
        assert "WHERE student_profiles.user_id =" in sql
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_snapshot_reflects_stored_academics(self, mock_db):
        result = MagicMock()
        result.first.return_value = ("CSE", 2026, 8.2, 1)
        mock_db.execute.return_value = result

        snapshot = await repository.get_snapshot(mock_db, 5)

        assert snapshot == StudentSnapshot(
            department="CSE", batch_year=2026, cgpa=8.2, current_backlogs=1
        )

    @pytest.mark.asyncio
    async def test_snapshot_of_missing_profile(self, mock_db):
        result = MagicMock()
        result.first.return_value = None
        mock_db.execute.return_value = result

        assert await repository.get_snapshot(mock_db, 404) is None


class TestDocuments:
    """Tests for set_document_url."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("document_type", "column"),
        [
            (DocumentType.RESUME, "resume_url"),
            (DocumentType.AADHAR, "aadhar_card_url"),
            (DocumentType.PAN, "pan_card_url"),
            (DocumentType.PROFILE_PIC, "profile_photo_url"),
        ],
    )
    async def test_writes_the_column_of_the_document_type(self, mock_db, document_type, column):
        mock_db.execute.return_value = MagicMock(rowcount=1)

        await repository.set_document_url(mock_db, 5, document_type, "https://files.test/x")

        assert _compiled_sql(mock_db).startswith(f"UPDATE student_profiles SET {column}=")


class TestDeletionGuards:
    """Tests for the application counts that guard deletes."""

    def test_application_rows_restrict_account_deletion(self):
        (foreign_key,) = Application.__table__.c.student_id.foreign_keys

        assert foreign_key.ondelete == "RESTRICT"

    @pytest.mark.asyncio
    async def test_count_applications_matching_filters(self, mock_db):
        result = MagicMock()
        result.scalar_one.return_value = 4
        mock_db.execute.return_value = result

        count = await repository.count_applications_matching(mock_db, department="CSE")

        assert count == 4
        sql = _compiled_sql(mock_db)
        assert "FROM drive_applications" in sql
        assert "drive_applications.student_id IN (SELECT student_profiles.user_id" in sql
        assert "student_profiles.department =" in sql
