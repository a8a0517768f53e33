"""
Drives Service Layer

Business logic for placement drives:

1. Administration:
   - Create drives (always start open)
   - Partial updates, with status changes checked against the lifecycle map
     and written conditionally on the status that was read
   - Delete drives that have no applications

2. Read views:
   - Admin listing with category / minimum salary / drive type filters
   - Student listing of drives they are currently eligible for
   - Home-page grouping (upcoming / ongoing / completed / on hold)

Every decision re-reads the database; nothing is cached between requests.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.core.config import settings
from placement_portal.core.errors import (
    STORAGE_ERRORS,
    ConflictError,
    NotFoundError,
    ValidationError,
    translate_storage_error,
)
from placement_portal.modules.drives import repository
from placement_portal.modules.drives.eligibility import evaluate
from placement_portal.modules.drives.lifecycle import (
    DisplayGroup,
    group_for_home_page,
    validate_transition,
)
from placement_portal.modules.drives.models import Drive, DriveStatus
from placement_portal.modules.drives.repository import DriveFilters
from placement_portal.modules.drives.schemas import DriveCreate, DriveUpdate, check_drive_ranges
from placement_portal.modules.students import repository as student_repository
from placement_portal.modules.students.service import StudentNotFoundError

logger = logging.getLogger(__name__)

# Fields an update may explicitly clear
NULLABLE_FIELDS = {
    "job_description",
    "location",
    "ctc_display",
    "eligible_departments",
    "eligible_batch_years",
}


class DriveNotFoundError(NotFoundError):
    """Raised when a drive is not found."""

    def __init__(self, drive_id: int | None = None):
        message = f"Drive {drive_id} not found" if drive_id else "Drive not found"
        super().__init__(message=message, error_code="DRIVE_NOT_FOUND")


class DriveHasApplicationsError(ConflictError):
    """Raised when deleting a drive that students have applied to."""

    def __init__(self, drive_id: int, count: int):
        super().__init__(
            message=(
                f"Drive {drive_id} has {count} application(s) and cannot be deleted. "
                "Cancel the drive instead."
            ),
            error_code="DRIVE_HAS_APPLICATIONS",
        )


class DriveStatusChangedError(ConflictError):
    """Raised when the drive status changed between read and write."""

    def __init__(self, drive_id: int):
        super().__init__(
            message=f"Drive {drive_id} was modified concurrently. Reload and try again.",
            error_code="DRIVE_STATUS_CHANGED",
        )


async def get_drive(db: AsyncSession, drive_id: int) -> Drive:
    drive = await repository.get_by_id(db, drive_id)
    if not drive:
        raise DriveNotFoundError(drive_id)
    return drive


async def create_drive(db: AsyncSession, admin_id: int, data: DriveCreate) -> Drive:
    """
    Create a drive posted by an admin. The initial status is always open.

    Raises:
        TransientStorageError: If storage is unavailable
    """
    try:
        drive = await repository.create(db, posted_by=admin_id, values=data.model_dump())
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e

    logger.info(f"Admin {admin_id} created drive {drive.id} ({drive.company_name})")
    return drive


def _merged_changes(drive: Drive, data: DriveUpdate) -> dict:
    changes = data.model_dump(exclude_unset=True)

    for field, value in changes.items():
        if value is None and field not in NULLABLE_FIELDS:
            raise ValidationError(f"{field} cannot be null")

    try:
        check_drive_ranges(
            changes.get("ctc_min", drive.ctc_min),
            changes.get("ctc_max", drive.ctc_max),
            changes.get("deadline_date", drive.deadline_date),
            changes.get("drive_date", drive.drive_date),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e

    return changes


async def update_drive(
    db: AsyncSession,
    drive_id: int,
    data: DriveUpdate,
    admin_id: int,
) -> Drive:
    """
    Apply a partial update to a drive.

    The write only lands if the drive still has the status that was read,
    so an edit can never resurrect a drive the reconciler just closed.

    Raises:
        DriveNotFoundError: If the drive does not exist
        ValidationError: If the merged values break a cross-field rule
        InvalidStatusTransitionError: If the status change is not allowed
        DriveStatusChangedError: If the status changed concurrently
    """
    drive = await get_drive(db, drive_id)
    observed_status = drive.status
    changes = _merged_changes(drive, data)

    new_status = changes.get("status")
    if new_status is not None:
        validate_transition(observed_status, new_status)

        if new_status == DriveStatus.OPEN and observed_status != DriveStatus.OPEN:
            deadline = changes.get("deadline_date", drive.deadline_date)
            if deadline <= await repository.get_database_now(db):
                raise ValidationError("Extend the deadline before reopening the drive.")

    if not changes:
        return drive

    try:
        updated = await repository.update_if_status(db, drive_id, observed_status, changes)
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e

    if updated == 0:
        logger.warning(
            f"Admin {admin_id} update of drive {drive_id} lost a race "
            f"(expected status {observed_status.value})"
        )
        raise DriveStatusChangedError(drive_id)

    await db.refresh(drive)
    logger.info(f"Admin {admin_id} updated drive {drive_id}: fields={sorted(changes)}")
    return drive


async def delete_drive(db: AsyncSession, drive_id: int, admin_id: int) -> None:
    """
    Delete a drive with no applications.

    Raises:
        DriveNotFoundError: If the drive does not exist
        DriveHasApplicationsError: If any student has applied
    """
    await get_drive(db, drive_id)

    count = await repository.count_applications(db, drive_id)
    if count > 0:
        raise DriveHasApplicationsError(drive_id, count)

    try:
        removed = await repository.delete_drive(db, drive_id)
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e

    if removed == 0:
        raise DriveNotFoundError(drive_id)

    logger.info(f"Admin {admin_id} deleted drive {drive_id}")


async def list_drives(db: AsyncSession, filters: DriveFilters) -> list[Drive]:
    return await repository.list_drives(db, filters)


async def list_eligible_drives(db: AsyncSession, student_id: int) -> list[Drive]:
    """
    Drives the student could apply to right now, earliest deadline first.

    Uses the same evaluator as applying, against the database clock.

    Raises:
        StudentNotFoundError: If the student has no profile
    """
    snapshot = await student_repository.get_snapshot(db, student_id)
    if snapshot is None:
        raise StudentNotFoundError(student_id)

    now = await repository.get_database_now(db)
    drives = await repository.list_open_unexpired(db)

    return [drive for drive in drives if evaluate(snapshot, drive, now).eligible]


async def home_page_groups(
    db: AsyncSession,
    now: datetime | None = None,
) -> dict[DisplayGroup, list[Drive]]:
    """Group drives for the home page. Recomputed on every call."""
    drives = await repository.list_for_home_page(db)
    return group_for_home_page(
        drives,
        now or datetime.now(UTC),
        settings.homepage_upcoming_days,
    )
