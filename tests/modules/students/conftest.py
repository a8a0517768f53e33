"""
Fixtures for student management tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from placement_portal.modules.students.schemas import BulkStudentRow

CSV_HEADER = "email,name,regNo,dept,batchYear,password\n"


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def csv_bytes():
    """Build an upload file from data lines."""

    def _build(*lines: str) -> bytes:
        return (CSV_HEADER + "".join(f"{line}\n" for line in lines)).encode("utf-8")

    return _build


@pytest.fixture
def bulk_rows():
    return [
        BulkStudentRow(
            line_number=2,
            email="Asha.K@college.edu",
            name="Asha K",
            register_number="21CS001",
            department="CSE",
            batch_year=2025,
            password="secret1",
        ),
        BulkStudentRow(
            line_number=3,
            email="ravi.m@college.edu",
            name="Ravi M",
            register_number="21CS002",
            department="CSE",
            batch_year=2025,
            password="secret2",
        ),
    ]
