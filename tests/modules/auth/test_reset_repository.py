"""
Unit tests for password-reset code statements.
"""

from datetime import UTC, datetime

import pytest
from sqlalchemy.dialects import postgresql

from placement_portal.modules.users.repository import PasswordResetRepository


def _compiled_sql(mock_db):
    statement = mock_db.execute.call_args.args[0]
    return str(statement.compile(dialect=postgresql.dialect()))


class TestPasswordResetRepository:
    """Tests for PasswordResetRepository."""

    @pytest.mark.asyncio
    async def test_upsert_keeps_one_code_per_email(self, mock_db):
        expires_at = datetime(2026, 3, 1, 10, 15, tzinfo=UTC)

        await PasswordResetRepository.upsert_code(mock_db, "asha@college.edu", "123456", expires_at)

        sql = _compiled_sql(mock_db)
        assert "ON CONFLICT (email) DO UPDATE SET code = excluded.code" in sql
        assert "expires_at = excluded.expires_at" in sql

    @pytest.mark.asyncio
    async def test_valid_code_checked_against_database_clock(self, mock_db):
        await PasswordResetRepository.get_valid(mock_db, "asha@college.edu", "123456")

        assert "password_resets.expires_at > now()" in _compiled_sql(mock_db)

    @pytest.mark.asyncio
    async def test_delete_expired(self, mock_db):
        mock_db.execute.return_value.rowcount = 4

        removed = await PasswordResetRepository.delete_expired(mock_db)

        assert removed == 4
        sql = _compiled_sql(mock_db)
        assert sql.startswith("DELETE FROM password_resets")
        assert "password_resets.expires_at < now()" in sql
