"""
Applications Routers

Student endpoints (student role required):
- POST /drives/{drive_id}/apply - Apply to a drive
- POST /drives/{drive_id}/withdraw - Withdraw an opted-in application
- GET /applications/me - The student's applications, newest first

Admin endpoints (admin role required):
- GET /admin/drives/{drive_id}/applications - Applicants for a drive
- POST /admin/drives/{drive_id}/applications/{student_id}/force-register
- PATCH /admin/drives/{drive_id}/applications/{student_id} - Update status
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.core.auth import CurrentUser, get_current_admin_user, get_current_student
from placement_portal.core.database import get_db
from placement_portal.core.errors import ServiceError, raise_http_error, unexpected_error
from placement_portal.core.rate_limit import enforce_rate_limit
from placement_portal.modules.applications import service
from placement_portal.modules.applications.models import ApplicationStatus
from placement_portal.modules.applications.schemas import (
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplyResponse,
    DriveApplicantItem,
    StudentApplicationItem,
)

logger = logging.getLogger(__name__)

student_router = APIRouter()
admin_router = APIRouter()

# Applies per student
RATE_LIMIT_APPLY = (30, 60)


# ============================================
# Student Endpoints
# ============================================


@student_router.post(
    "/drives/{drive_id}/apply",
    response_model=ApplyResponse,
    summary="Apply to Drive",
    responses={
        400: {"description": "Not eligible - the message carries the reason"},
        404: {"description": "Drive or student profile not found"},
    },
)
async def apply_to_drive(
    drive_id: int,
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(get_current_student),
) -> ApplyResponse:
    """
    Apply to a drive.

    Applying again is harmless and reports success. When the student does
    not meet the drive's criteria the response is 400 with the reason.
    """
    await enforce_rate_limit(f"apply:{student.id}", *RATE_LIMIT_APPLY)

    try:
        outcome = await service.apply_to_drive(db, student.id, drive_id)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error applying student {student.id} to drive {drive_id}: {e}")
        raise unexpected_error(e) from e

    if not outcome.accepted:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "NOT_ELIGIBLE",
                "message": outcome.reason,
                "accepted": False,
            },
        )
    return outcome


@student_router.post(
    "/drives/{drive_id}/withdraw",
    response_model=ApplicationResponse,
    summary="Withdraw Application",
)
async def withdraw_application(
    drive_id: int,
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(get_current_student),
) -> ApplicationResponse:
    try:
        return await service.withdraw_application(db, student.id, drive_id)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error withdrawing student {student.id} from drive {drive_id}: {e}")
        raise unexpected_error(e) from e


@student_router.get(
    "/applications/me",
    response_model=list[StudentApplicationItem],
    summary="My Applications",
)
async def my_applications(
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(get_current_student),
) -> list[StudentApplicationItem]:
    try:
        return await service.list_student_applications(db, student.id)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error listing applications for student {student.id}: {e}")
        raise unexpected_error(e) from e


# ============================================
# Admin Endpoints
# ============================================


@admin_router.get(
    "/{drive_id}/applications",
    response_model=list[DriveApplicantItem],
    summary="List Drive Applicants",
)
async def list_drive_applications(
    drive_id: int,
    application_status: ApplicationStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> list[DriveApplicantItem]:
    try:
        return await service.list_drive_applications(db, drive_id, application_status)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error listing applicants for drive {drive_id}: {e}")
        raise unexpected_error(e) from e


@admin_router.post(
    "/{drive_id}/applications/{student_id}/force-register",
    response_model=ApplicationResponse,
    summary="Force Register Student",
)
async def force_register(
    drive_id: int,
    student_id: int,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApplicationResponse:
    """
    Register a student for a drive, bypassing eligibility and deadline checks.

    This is an explicit override: academic criteria are not re-validated,
    and a withdrawn application is reactivated as opted_in.
    """
    try:
        return await service.force_register(db, drive_id, student_id, admin.id)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error force-registering {student_id} for drive {drive_id}: {e}")
        raise unexpected_error(e) from e


@admin_router.patch(
    "/{drive_id}/applications/{student_id}",
    response_model=ApplicationResponse,
    summary="Update Application Status",
)
async def update_application_status(
    drive_id: int,
    student_id: int,
    request: ApplicationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApplicationResponse:
    try:
        return await service.update_application_status(
            db, drive_id, student_id, request.status, admin.id
        )
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error updating application ({drive_id}, {student_id}): {e}")
        raise unexpected_error(e) from e
