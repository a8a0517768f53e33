"""
Fixtures for drives tests.
"""

from datetime import UTC, date, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from placement_portal.modules.drives.eligibility import StudentSnapshot
from placement_portal.modules.drives.models import Drive, DriveStatus

NOW = datetime(2026, 3, 1, 10, 0, tzinfo=UTC)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock(return_value=MagicMock(rowcount=0))
    db.add = MagicMock()
    return db


@pytest.fixture
def make_drive():
    """Factory for drive models with permissive criteria."""

    def _make(**overrides):
        drive = MagicMock(spec=Drive)
        drive.id = 1
        drive.company_name = "Acme Systems"
        drive.job_role = "Graduate Engineer"
        drive.drive_type = "full_time"
        drive.company_category = "it"
        drive.ctc_min = 4.0
        drive.ctc_max = 8.0
        drive.min_cgpa = 0.0
        drive.max_backlogs_allowed = 0
        drive.eligible_departments = None
        drive.eligible_batch_years = None
        drive.drive_date = date(2026, 4, 1)
        drive.deadline_date = NOW + timedelta(days=7)
        drive.status = DriveStatus.OPEN
        for field, value in overrides.items():
            setattr(drive, field, value)
        return drive

    return _make


@pytest.fixture
def snapshot():
    """A student with a clean record."""
    return StudentSnapshot(department="CSE", batch_year=2026, cgpa=8.0, current_backlogs=0)
