"""
Unit tests for the student apply endpoint.

The endpoint function is awaited directly with the service and rate
limiter patched.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from placement_portal.core.auth import CurrentUser
from placement_portal.modules.applications.router import apply_to_drive
from placement_portal.modules.applications.schemas import ApplyResponse
from placement_portal.modules.drives.eligibility import REASON_CGPA

ROUTER = "placement_portal.modules.applications.router"


@pytest.fixture
def student():
    return CurrentUser(id=5, role="student", email="asha@college.edu")


class TestApplyEndpoint:
    """Tests for POST /drives/{drive_id}/apply."""

    @pytest.mark.asyncio
    async def test_accepted_outcome_is_returned(self, mock_db, student):
        with (
            patch(f"{ROUTER}.service") as mock_service,
            patch(f"{ROUTER}.enforce_rate_limit", new=AsyncMock()),
        ):
            mock_service.apply_to_drive = AsyncMock(
                return_value=ApplyResponse(accepted=True, reason="")
            )

            outcome = await apply_to_drive(drive_id=10, db=mock_db, student=student)

            assert outcome.accepted is True
            mock_service.apply_to_drive.assert_awaited_once_with(mock_db, 5, 10)

    @pytest.mark.asyncio
    async def test_ineligible_is_400_with_reason_and_accepted_flag(self, mock_db, student):
        with (
            patch(f"{ROUTER}.service") as mock_service,
            patch(f"{ROUTER}.enforce_rate_limit", new=AsyncMock()),
        ):
            mock_service.apply_to_drive = AsyncMock(
                return_value=ApplyResponse(accepted=False, reason=REASON_CGPA)
            )

            with pytest.raises(HTTPException) as exc_info:
                await apply_to_drive(drive_id=10, db=mock_db, student=student)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == {
            "error": "NOT_ELIGIBLE",
            "message": REASON_CGPA,
            "accepted": False,
        }
