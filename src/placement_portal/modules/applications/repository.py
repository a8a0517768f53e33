"""
Applications Repository

Database operations for drive applications.

Concurrency is delegated to single atomic statements:
- Applying is INSERT ... ON CONFLICT DO NOTHING, so racing applies converge
  on one row and never fail with a duplicate key
- Force-register is INSERT ... ON CONFLICT DO UPDATE
- Status changes are conditional UPDATEs on the allowed predecessor states

Writes do not commit; the service owns the transaction.
"""

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.modules.applications.models import Application, ApplicationStatus
from placement_portal.modules.drives.models import Drive
from placement_portal.modules.students.models import StudentProfile
from placement_portal.modules.users.models import User

# Valid status transitions - forward only
VALID_STATUS_TRANSITIONS: dict[ApplicationStatus, set[ApplicationStatus]] = {
    ApplicationStatus.OPTED_IN: {
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    },
    ApplicationStatus.SHORTLISTED: {
        ApplicationStatus.PLACED,
        ApplicationStatus.REJECTED,
    },
    # Terminal states - only force-register leaves withdrawn
    ApplicationStatus.PLACED: set(),
    ApplicationStatus.REJECTED: set(),
    ApplicationStatus.WITHDRAWN: set(),
}

# Statuses an admin may set through a status update
ADMIN_SETTABLE_STATUSES = frozenset(
    {
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.PLACED,
        ApplicationStatus.REJECTED,
    }
)


def allowed_predecessors(new_status: ApplicationStatus) -> set[ApplicationStatus]:
    """
    Statuses from which ``new_status`` may be reached.

    Includes ``new_status`` itself: re-applying the current status is an
    idempotent no-op change.
    """
    predecessors = {
        status for status, targets in VALID_STATUS_TRANSITIONS.items() if new_status in targets
    }
    predecessors.add(new_status)
    return predecessors


async def get(db: AsyncSession, drive_id: int, student_id: int) -> Application | None:
    """Read one application, bypassing any stale copy in the session."""
    result = await db.execute(
        select(Application)
        .where(Application.drive_id == drive_id, Application.student_id == student_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def insert_if_absent(db: AsyncSession, drive_id: int, student_id: int) -> bool:
    """
    Insert an opted_in application unless one already exists for the pair.

    Returns:
        True if this call created the row
    """
    stmt = (
        insert(Application)
        .values(drive_id=drive_id, student_id=student_id, status=ApplicationStatus.OPTED_IN)
        .on_conflict_do_nothing(index_elements=[Application.drive_id, Application.student_id])
    )
    result = await db.execute(stmt)
    return result.rowcount == 1


async def force_register(db: AsyncSession, drive_id: int, student_id: int) -> None:
    """Create the application, or reset an existing one to opted_in."""
    stmt = insert(Application).values(
        drive_id=drive_id, student_id=student_id, status=ApplicationStatus.OPTED_IN
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Application.drive_id, Application.student_id],
        set_={"status": ApplicationStatus.OPTED_IN, "updated_at": func.now()},
    )
    await db.execute(stmt)


async def update_status_from(
    db: AsyncSession,
    drive_id: int,
    student_id: int,
    new_status: ApplicationStatus,
    allowed_from: set[ApplicationStatus],
) -> int:
    """
    Set the status only if the row is currently in one of ``allowed_from``.

    Returns:
        Number of rows updated (0 if the row is missing or in another state)
    """
    result = await db.execute(
        update(Application)
        .where(
            Application.drive_id == drive_id,
            Application.student_id == student_id,
            Application.status.in_(allowed_from),
        )
        .values(status=new_status, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def list_for_student(db: AsyncSession, student_id: int) -> list[tuple]:
    """
    A student's applications with drive details, newest first.

    Returns:
        Rows of (Application, company_name, job_role, drive_date, drive_status)
    """
    result = await db.execute(
        select(
            Application,
            Drive.company_name,
            Drive.job_role,
            Drive.drive_date,
            Drive.status,
        )
        .join(Drive, Drive.id == Application.drive_id)
        .where(Application.student_id == student_id)
        .order_by(Application.applied_at.desc())
    )
    return list(result.all())


async def list_for_drive(
    db: AsyncSession,
    drive_id: int,
    status: ApplicationStatus | None = None,
) -> list[tuple]:
    """
    Applicants for a drive with their academic record, earliest first.

    Returns:
        Rows of (Application, StudentProfile, email)
    """
    query = (
        select(Application, StudentProfile, User.email)
        .join(StudentProfile, StudentProfile.user_id == Application.student_id)
        .join(User, User.id == Application.student_id)
        .where(Application.drive_id == drive_id)
        .order_by(Application.applied_at.asc())
    )
    if status is not None:
        query = query.where(Application.status == status)

    result = await db.execute(query)
    return list(result.all())
