"""
Fixtures for lifecycle job tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from placement_portal.core.scheduler import clear_registry


@pytest.fixture(autouse=True)
def empty_job_registry():
    """Each test starts and ends with no registered jobs."""
    clear_registry()
    yield
    clear_registry()


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
def session_factory(mock_db):
    """Session factory whose sessions are all mock_db."""
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=mock_db)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory
