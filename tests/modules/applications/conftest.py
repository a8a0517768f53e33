"""
Fixtures for drive applications tests.
"""

from datetime import UTC, date, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from placement_portal.modules.applications.models import Application, ApplicationStatus
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
    db.execute = AsyncMock(return_value=MagicMock(rowcount=1))
    db.add = MagicMock()
    return db


@pytest.fixture
def open_drive():
    """Open drive requiring a CGPA of 7.5, deadline a week away."""
    drive = MagicMock(spec=Drive)
    drive.id = 10
    drive.status = DriveStatus.OPEN
    drive.deadline_date = NOW + timedelta(days=7)
    drive.drive_date = date(2026, 3, 20)
    drive.min_cgpa = 7.5
    drive.max_backlogs_allowed = 0
    drive.eligible_departments = ["CSE", "IT"]
    drive.eligible_batch_years = [2026]
    return drive


@pytest.fixture
def good_student():
    return StudentSnapshot(department="CSE", batch_year=2026, cgpa=8.0, current_backlogs=0)


@pytest.fixture
def weak_student():
    return StudentSnapshot(department="CSE", batch_year=2026, cgpa=6.0, current_backlogs=0)


@pytest.fixture
def make_application():
    def _make(status=ApplicationStatus.OPTED_IN, drive_id=10, student_id=5):
        application = MagicMock(spec=Application)
        application.drive_id = drive_id
        application.student_id = student_id
        application.status = status
        application.applied_at = NOW
        application.updated_at = NOW
        return application

    return _make
