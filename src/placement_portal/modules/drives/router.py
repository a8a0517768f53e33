"""
Drives Routers

Endpoints:
- GET /drives/home - Drives grouped for the home page (public)
- GET /drives/eligible - Drives the signed-in student may apply to

Admin (admin role required):
- GET /admin/drives - List drives with filters
- POST /admin/drives - Create a drive
- GET /admin/drives/{drive_id} - Get one drive
- PATCH /admin/drives/{drive_id} - Partially update a drive
- DELETE /admin/drives/{drive_id} - Delete a drive without applications
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.core.auth import CurrentUser, get_current_admin_user, get_current_student
from placement_portal.core.database import get_db
from placement_portal.core.errors import ServiceError, raise_http_error, unexpected_error
from placement_portal.modules.drives import service
from placement_portal.modules.drives.repository import DriveFilters
from placement_portal.modules.drives.schemas import (
    DriveCreate,
    DriveResponse,
    DriveUpdate,
    HomePageGroupsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()


# ============================================
# Public & Student Endpoints
# ============================================


@router.get("/home", response_model=HomePageGroupsResponse, summary="Home Page Drives")
async def home_page_drives(db: AsyncSession = Depends(get_db)) -> HomePageGroupsResponse:
    """Drives grouped into upcoming, ongoing, completed and on hold."""
    try:
        groups = await service.home_page_groups(db)
        return HomePageGroupsResponse(
            **{
                group.value: [DriveResponse.model_validate(drive) for drive in drives]
                for group, drives in groups.items()
            }
        )
    except Exception as e:
        logger.exception(f"Error building home page drives: {e}")
        raise unexpected_error(e) from e


@router.get("/eligible", response_model=list[DriveResponse], summary="Eligible Drives")
async def eligible_drives(
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(get_current_student),
) -> list[DriveResponse]:
    """Open drives the student currently meets every criterion for, earliest deadline first."""
    try:
        return await service.list_eligible_drives(db, student.id)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error listing eligible drives for student {student.id}: {e}")
        raise unexpected_error(e) from e


# ============================================
# Admin Endpoints
# ============================================


@admin_router.get("", response_model=list[DriveResponse], summary="List Drives")
async def list_drives(
    category: str | None = Query(None, max_length=50, description="Company category"),
    min_salary: float | None = Query(None, ge=0, description="Minimum of the CTC upper bound"),
    drive_type: str | None = Query(None, alias="type", max_length=50),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> list[DriveResponse]:
    try:
        filters = DriveFilters(category=category, min_salary=min_salary, drive_type=drive_type)
        return await service.list_drives(db, filters)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error listing drives: {e}")
        raise unexpected_error(e) from e


@admin_router.post(
    "",
    response_model=DriveResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Drive",
)
async def create_drive(
    data: DriveCreate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> DriveResponse:
    try:
        return await service.create_drive(db, admin.id, data)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error creating drive: {e}")
        raise unexpected_error(e) from e


@admin_router.get("/{drive_id}", response_model=DriveResponse, summary="Get Drive")
async def get_drive(
    drive_id: int,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> DriveResponse:
    try:
        return await service.get_drive(db, drive_id)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error fetching drive {drive_id}: {e}")
        raise unexpected_error(e) from e


@admin_router.patch("/{drive_id}", response_model=DriveResponse, summary="Update Drive")
async def update_drive(
    drive_id: int,
    data: DriveUpdate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> DriveResponse:
    """
    Partially update a drive.

    Status changes follow the drive lifecycle; an update that races a
    concurrent status change is refused with 409.
    """
    try:
        return await service.update_drive(db, drive_id, data, admin.id)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error updating drive {drive_id}: {e}")
        raise unexpected_error(e) from e


@admin_router.delete(
    "/{drive_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Drive",
)
async def delete_drive(
    drive_id: int,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> None:
    try:
        await service.delete_drive(db, drive_id, admin.id)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error deleting drive {drive_id}: {e}")
        raise unexpected_error(e) from e
