"""
Unit tests for drives repository statements.

Statements are captured from the mocked session and compiled with the
PostgreSQL dialect.
"""

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from placement_portal.modules.drives import repository
from placement_portal.modules.drives.models import Drive, DriveStatus
from placement_portal.modules.drives.repository import DriveFilters


def _compile(statement):
    return statement.compile(dialect=postgresql.dialect())


def _executed_statement(mock_db):
    return mock_db.execute.call_args.args[0]


class TestDriveFilters:
    """Tests for DriveFilters.predicates."""

    def test_no_filters(self):
        assert DriveFilters().predicates() == []

    def test_all_filters_are_bound_parameters(self):
        filters = DriveFilters(category="it", min_salary=10.0, drive_type="internship")

        compiled = _compile(select(Drive).where(*filters.predicates()))

        assert set(compiled.params.values()) == {"it", 10.0, "internship"}
        sql = str(compiled)
        assert "placement_drives.company_category =" in sql
        assert "placement_drives.ctc_max >=" in sql
        assert "placement_drives.drive_type =" in sql

    def test_filter_text_never_reaches_sql(self):
        payload = "it' OR '1'='1"

        compiled = _compile(select(Drive).where(*DriveFilters(category=payload).predicates()))

        assert payload not in str(compiled)
        assert payload in compiled.params.values()

    def test_zero_min_salary_still_filters(self):
        assert len(DriveFilters(min_salary=0).predicates()) == 1


class TestCloseExpiredDrives:
    """Tests for the reconciler sweep statement."""

    @pytest.mark.asyncio
    async def test_conditional_on_open_and_past_deadline(self, mock_db):
        mock_db.execute.return_value.rowcount = 3

        closed = await repository.close_expired_drives(mock_db)

        assert closed == 3
        mock_db.commit.assert_awaited_once()
        compiled = _compile(_executed_statement(mock_db))
        sql = str(compiled)
        assert sql.startswith("UPDATE placement_drives SET status=")
        assert "placement_drives.deadline_date < now()" in sql
        assert DriveStatus.OPEN in compiled.params.values()
        assert DriveStatus.CLOSED in compiled.params.values()


class TestUpdateIfStatus:
    """Tests for the conditional admin update."""

    @pytest.mark.asyncio
    async def test_update_guards_on_observed_status(self, mock_db):
        mock_db.execute.return_value.rowcount = 0

        updated = await repository.update_if_status(
            mock_db, 7, DriveStatus.OPEN, {"company_name": "Globex"}
        )

        assert updated == 0
        compiled = _compile(_executed_statement(mock_db))
        sql = str(compiled)
        assert "WHERE placement_drives.id =" in sql
        assert "AND placement_drives.status =" in sql
        assert 7 in compiled.params.values()
        assert "Globex" in compiled.params.values()


class TestListOpenUnexpired:
    """Tests for the eligible-listing prefilter."""

    @pytest.mark.asyncio
    async def test_uses_database_clock(self, mock_db):
        await repository.list_open_unexpired(mock_db)

        sql = str(_compile(_executed_statement(mock_db)))
        assert "placement_drives.deadline_date > now()" in sql
        assert "ORDER BY placement_drives.deadline_date ASC" in sql
