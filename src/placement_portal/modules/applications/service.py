"""
Applications Service Layer

The application state machine:

    none -> opted_in -> {shortlisted, rejected, withdrawn}
    shortlisted -> {placed, rejected}

placed, rejected and withdrawn are terminal. Only an admin force-register
brings a withdrawn application back to opted_in.

Operations:
1. Apply (student): re-reads drive and academic record, runs the
   eligibility rules against the database clock, then inserts-or-no-ops.
   Ineligibility is a normal outcome ({accepted: false, reason}), not an error.
2. Force-register (admin): bypasses eligibility and deadline entirely.
3. Status update (admin): shortlisted / placed / rejected, forward only.
4. Withdraw (student): opted_in -> withdrawn.

Each operation is a single transaction; any storage failure rolls it back
in full, so no partial application row is ever left behind.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.core.errors import (
    STORAGE_ERRORS,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
    translate_storage_error,
)
from placement_portal.modules.applications import repository
from placement_portal.modules.applications.models import Application, ApplicationStatus
from placement_portal.modules.applications.repository import (
    ADMIN_SETTABLE_STATUSES,
    VALID_STATUS_TRANSITIONS,
    allowed_predecessors,
)
from placement_portal.modules.applications.schemas import (
    ApplyResponse,
    DriveApplicantItem,
    StudentApplicationItem,
)
from placement_portal.modules.drives import repository as drive_repository
from placement_portal.modules.drives.eligibility import evaluate
from placement_portal.modules.drives.service import DriveNotFoundError
from placement_portal.modules.students import repository as student_repository
from placement_portal.modules.students.service import StudentNotFoundError

logger = logging.getLogger(__name__)

REASON_APPLIED = "applied"
REASON_WITHDRAWN = "application was withdrawn; contact the placement cell to re-register"


class ApplicationNotFoundError(NotFoundError):
    """Raised when a student has no application for a drive."""

    def __init__(self, drive_id: int, student_id: int):
        super().__init__(
            message=f"No application by student {student_id} for drive {drive_id}",
            error_code="APPLICATION_NOT_FOUND",
        )


def _invalid_transition(current: ApplicationStatus, new: ApplicationStatus) -> Exception:
    allowed = VALID_STATUS_TRANSITIONS.get(current, set())
    return InvalidStatusTransitionError(
        current.value, new.value, [status.value for status in allowed]
    )


async def apply_to_drive(db: AsyncSession, student_id: int, drive_id: int) -> ApplyResponse:
    """
    Apply a student to a drive.

    Idempotent: applying again (or concurrently) leaves exactly one
    opted_in row and reports success.

    Args:
        db: Database session
        student_id: Authenticated student's user id
        drive_id: Drive to apply to

    Returns:
        ApplyResponse with accepted=False and the failing rule when ineligible

    Raises:
        DriveNotFoundError: If the drive does not exist
        StudentNotFoundError: If the student has no academic profile
        TransientStorageError: If storage fails (nothing is written)
    """
    try:
        drive = await drive_repository.get_by_id(db, drive_id)
        if not drive:
            raise DriveNotFoundError(drive_id)

        snapshot = await student_repository.get_snapshot(db, student_id)
        if snapshot is None:
            raise StudentNotFoundError(student_id)

        now = await drive_repository.get_database_now(db)
        result = evaluate(snapshot, drive, now)
        if not result.eligible:
            await db.rollback()
            logger.info(
                f"Student {student_id} not eligible for drive {drive_id}: {result.reason}"
            )
            return ApplyResponse(accepted=False, reason=result.reason)

        created = await repository.insert_if_absent(db, drive_id, student_id)
        if not created:
            existing = await repository.get(db, drive_id, student_id)
            if existing is not None and existing.status == ApplicationStatus.WITHDRAWN:
                await db.rollback()
                return ApplyResponse(accepted=False, reason=REASON_WITHDRAWN)

        await db.commit()
    except STORAGE_ERRORS as e:
        await db.rollback()
        logger.error(f"Apply failed for student {student_id}, drive {drive_id}: {e}")
        raise translate_storage_error(e) from e

    if created:
        logger.info(f"Student {student_id} applied to drive {drive_id}")
    return ApplyResponse(accepted=True, reason=REASON_APPLIED)


async def force_register(
    db: AsyncSession,
    drive_id: int,
    student_id: int,
    admin_id: int,
) -> Application:
    """
    Register a student for a drive regardless of eligibility or deadline.

    Creates the application or resets an existing one (including a
    withdrawn one) to opted_in.

    Raises:
        DriveNotFoundError: If the drive does not exist
        StudentNotFoundError: If the student does not exist
    """
    try:
        if not await drive_repository.get_by_id(db, drive_id):
            raise DriveNotFoundError(drive_id)
        if not await student_repository.get_by_user_id(db, student_id):
            raise StudentNotFoundError(student_id)

        await repository.force_register(db, drive_id, student_id)
        await db.commit()

        application = await repository.get(db, drive_id, student_id)
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e

    logger.info(f"Admin {admin_id} force-registered student {student_id} for drive {drive_id}")
    return application


async def _transition(
    db: AsyncSession,
    drive_id: int,
    student_id: int,
    new_status: ApplicationStatus,
    allowed_from: set[ApplicationStatus],
) -> Application:
    try:
        updated = await repository.update_status_from(
            db, drive_id, student_id, new_status, allowed_from
        )
        if updated == 0:
            await db.rollback()
            existing = await repository.get(db, drive_id, student_id)
            if existing is None:
                raise ApplicationNotFoundError(drive_id, student_id)
            raise _invalid_transition(existing.status, new_status)

        await db.commit()
        return await repository.get(db, drive_id, student_id)
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e


async def update_application_status(
    db: AsyncSession,
    drive_id: int,
    student_id: int,
    new_status: ApplicationStatus,
    admin_id: int,
) -> Application:
    """
    Move an application forward (shortlisted, placed or rejected).

    The write is conditional on the row being in an allowed predecessor
    state, so concurrent updates cannot move an application backwards.

    Raises:
        ValidationError: If new_status is not admin-settable
        ApplicationNotFoundError: If there is no application
        InvalidStatusTransitionError: If the transition is not allowed
    """
    if new_status not in ADMIN_SETTABLE_STATUSES:
        raise ValidationError(
            f"Status must be one of {sorted(s.value for s in ADMIN_SETTABLE_STATUSES)}"
        )

    application = await _transition(
        db, drive_id, student_id, new_status, allowed_predecessors(new_status)
    )
    logger.info(
        f"Admin {admin_id} set application ({drive_id}, {student_id}) to {new_status.value}"
    )
    return application


async def withdraw_application(db: AsyncSession, student_id: int, drive_id: int) -> Application:
    """
    Withdraw a student's application. Only opted_in applications can be withdrawn.

    Raises:
        ApplicationNotFoundError: If there is no application
        InvalidStatusTransitionError: If the application has moved past opted_in
    """
    application = await _transition(
        db,
        drive_id,
        student_id,
        ApplicationStatus.WITHDRAWN,
        allowed_predecessors(ApplicationStatus.WITHDRAWN),
    )
    logger.info(f"Student {student_id} withdrew from drive {drive_id}")
    return application


async def list_student_applications(
    db: AsyncSession, student_id: int
) -> list[StudentApplicationItem]:
    rows = await repository.list_for_student(db, student_id)
    return [
        StudentApplicationItem(
            drive_id=application.drive_id,
            company_name=company_name,
            job_role=job_role,
            drive_date=drive_date,
            drive_status=drive_status,
            status=application.status,
            applied_at=application.applied_at,
            updated_at=application.updated_at,
        )
        for application, company_name, job_role, drive_date, drive_status in rows
    ]


async def list_drive_applications(
    db: AsyncSession,
    drive_id: int,
    status: ApplicationStatus | None = None,
) -> list[DriveApplicantItem]:
    """
    Applicants for a drive, optionally filtered by status.

    Raises:
        DriveNotFoundError: If the drive does not exist
    """
    if not await drive_repository.get_by_id(db, drive_id):
        raise DriveNotFoundError(drive_id)

    rows = await repository.list_for_drive(db, drive_id, status)
    return [
        DriveApplicantItem(
            student_id=application.student_id,
            email=email,
            full_name=profile.full_name,
            register_number=profile.register_number,
            department=profile.department,
            batch_year=profile.batch_year,
            cgpa=profile.cgpa,
            current_backlogs=profile.current_backlogs,
            status=application.status,
            applied_at=application.applied_at,
            updated_at=application.updated_at,
        )
        for application, profile, email in rows
    ]
