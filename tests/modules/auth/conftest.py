"""
Fixtures for auth tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from placement_portal.modules.users.models import User, UserRole


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.execute = AsyncMock(return_value=MagicMock())
    return db


@pytest.fixture
def student_user():
    user = MagicMock(spec=User)
    user.id = 5
    user.email = "asha@college.edu"
    user.password_hash = "stored-hash"
    user.role = UserRole.STUDENT
    user.is_active = True
    user.is_blocked = False
    return user


@pytest.fixture
def db_now():
    return datetime(2026, 3, 1, 10, 0, tzinfo=UTC)
