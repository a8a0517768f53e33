"""
Unit tests for drive applications repository layer.

Covers the state machine and the atomic statements used for applying,
force-registering and conditional status updates.
"""

import pytest
from sqlalchemy.dialects import postgresql

from placement_portal.modules.applications import repository
from placement_portal.modules.applications.models import ApplicationStatus
from placement_portal.modules.applications.repository import (
    ADMIN_SETTABLE_STATUSES,
    VALID_STATUS_TRANSITIONS,
    allowed_predecessors,
)


def _compiled_sql(mock_db):
    statement = mock_db.execute.call_args.args[0]
    return str(statement.compile(dialect=postgresql.dialect()))


class TestStatusTransitions:
    """Tests for the application state machine."""

    def test_valid_transitions_from_opted_in(self):
        valid = VALID_STATUS_TRANSITIONS[ApplicationStatus.OPTED_IN]
        assert valid == {
            ApplicationStatus.SHORTLISTED,
            ApplicationStatus.REJECTED,
            ApplicationStatus.WITHDRAWN,
        }

    def test_valid_transitions_from_shortlisted(self):
        valid = VALID_STATUS_TRANSITIONS[ApplicationStatus.SHORTLISTED]
        assert ApplicationStatus.PLACED in valid
        assert ApplicationStatus.REJECTED in valid
        # Too late to withdraw
        assert ApplicationStatus.WITHDRAWN not in valid
        assert ApplicationStatus.OPTED_IN not in valid

    def test_terminal_states_have_no_transitions(self):
        assert VALID_STATUS_TRANSITIONS[ApplicationStatus.PLACED] == set()
        assert VALID_STATUS_TRANSITIONS[ApplicationStatus.REJECTED] == set()
        assert VALID_STATUS_TRANSITIONS[ApplicationStatus.WITHDRAWN] == set()

    def test_all_statuses_are_in_transition_map(self):
        for status in ApplicationStatus:
            assert status in VALID_STATUS_TRANSITIONS

    def test_admin_cannot_set_opted_in_or_withdrawn(self):
        assert ApplicationStatus.OPTED_IN not in ADMIN_SETTABLE_STATUSES
        assert ApplicationStatus.WITHDRAWN not in ADMIN_SETTABLE_STATUSES

    def test_allowed_predecessors_include_target(self):
        assert allowed_predecessors(ApplicationStatus.REJECTED) == {
            ApplicationStatus.OPTED_IN,
            ApplicationStatus.SHORTLISTED,
            ApplicationStatus.REJECTED,
        }


class TestAtomicStatements:
    """Tests for the statements issued by the repository."""

    @pytest.mark.asyncio
    async def test_insert_if_absent_does_nothing_on_conflict(self, mock_db):
        mock_db.execute.return_value.rowcount = 0

        created = await repository.insert_if_absent(mock_db, 10, 5)

        assert created is False
        sql = _compiled_sql(mock_db)
        assert sql.startswith("INSERT INTO drive_applications")
        assert "ON CONFLICT (drive_id, student_id) DO NOTHING" in sql

    @pytest.mark.asyncio
    async def test_insert_if_absent_reports_new_row(self, mock_db):
        mock_db.execute.return_value.rowcount = 1
        assert await repository.insert_if_absent(mock_db, 10, 5) is True

    @pytest.mark.asyncio
    async def test_force_register_resets_to_opted_in(self, mock_db):
        await repository.force_register(mock_db, 10, 5)

        sql = _compiled_sql(mock_db)
        assert "ON CONFLICT (drive_id, student_id) DO UPDATE SET status =" in sql
        assert "updated_at = now()" in sql

    @pytest.mark.asyncio
    async def test_update_status_from_is_conditional(self, mock_db):
        await repository.update_status_from(
            mock_db,
            10,
            5,
            ApplicationStatus.PLACED,
            {ApplicationStatus.SHORTLISTED},
        )

        sql = _compiled_sql(mock_db)
        assert sql.startswith("UPDATE drive_applications SET status=")
        assert "drive_applications.status IN" in sql
        mock_db.commit.assert_not_called()
