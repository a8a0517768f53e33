"""
Students Repository

Database operations for student profiles and student accounts.

All filters are bound parameters; nothing is interpolated into SQL text.
Writes only flush, the service decides when to commit.
"""

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.modules.applications.models import Application
from placement_portal.modules.drives.eligibility import StudentSnapshot
from placement_portal.modules.students.models import (
    DOCUMENT_URL_COLUMNS,
    DocumentType,
    StudentProfile,
)
from placement_portal.modules.users.models import User, UserRole


async def get_by_user_id(db: AsyncSession, user_id: int) -> StudentProfile | None:
    """Get a student profile by the owning account id."""
    return await db.get(StudentProfile, user_id)


async def get_snapshot(db: AsyncSession, user_id: int) -> StudentSnapshot | None:
    """
    Read the academic facts used for eligibility.

    Always queries the database; callers must not reuse a snapshot across
    decisions.
    """
    result = await db.execute(
        select(
            StudentProfile.department,
            StudentProfile.batch_year,
            func.coalesce(StudentProfile.cgpa, 0.0),
            func.coalesce(StudentProfile.current_backlogs, 0),
        ).where(StudentProfile.user_id == user_id)
    )
    row = result.first()
    if row is None:
        return None

    department, batch_year, cgpa, backlogs = row
    return StudentSnapshot(
        department=department,
        batch_year=batch_year,
        cgpa=float(cgpa),
        current_backlogs=int(backlogs),
    )


async def register_number_exists(db: AsyncSession, register_number: str) -> bool:
    result = await db.execute(
        select(StudentProfile.user_id).where(StudentProfile.register_number == register_number)
    )
    return result.first() is not None


async def create_profile(
    db: AsyncSession,
    *,
    user_id: int,
    full_name: str,
    register_number: str,
    department: str,
    batch_year: int,
) -> StudentProfile:
    """Create the profile row for a freshly created student account."""
    profile = StudentProfile(
        user_id=user_id,
        full_name=full_name,
        register_number=register_number,
        department=department,
        batch_year=batch_year,
    )
    db.add(profile)
    await db.flush()
    return profile


async def get_register_number(db: AsyncSession, user_id: int) -> str | None:
    result = await db.execute(
        select(StudentProfile.register_number).where(StudentProfile.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def update_academics(db: AsyncSession, user_id: int, values: dict) -> int:
    """
    Overwrite academic fields of a profile.

    Args:
        db: Database session
        user_id: Owning account id
        values: Column values, a subset of cgpa and current_backlogs

    Returns:
        Number of profiles updated (0 or 1)
    """
    result = await db.execute(
        update(StudentProfile)
        .where(StudentProfile.user_id == user_id)
        .values(**values, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def set_document_url(
    db: AsyncSession, user_id: int, document_type: DocumentType, url: str
) -> int:
    """Record the stored URL of one document kind. Returns rows updated."""
    column = DOCUMENT_URL_COLUMNS[document_type]
    result = await db.execute(
        update(StudentProfile)
        .where(StudentProfile.user_id == user_id)
        .values({column: url, "updated_at": func.now()})
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def _student_filters(department: str | None, batch_year: int | None) -> list:
    conditions = []
    if department:
        conditions.append(StudentProfile.department == department)
    if batch_year is not None:
        conditions.append(StudentProfile.batch_year == batch_year)
    return conditions


async def list_students(
    db: AsyncSession,
    department: str | None = None,
    batch_year: int | None = None,
    search: str | None = None,
) -> list[tuple[StudentProfile, str, bool]]:
    """
    List students with optional filters.

    Args:
        db: Database session
        department: Exact department match
        batch_year: Exact batch year match
        search: Case-insensitive match on name or register number

    Returns:
        List of (profile, email, is_blocked) ordered by register number
    """
    query = (
        select(StudentProfile, User.email, User.is_blocked)
        .join(User, User.id == StudentProfile.user_id)
        .where(*_student_filters(department, batch_year))
        .order_by(StudentProfile.register_number.asc())
    )

    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                StudentProfile.full_name.ilike(pattern),
                StudentProfile.register_number.ilike(pattern),
            )
        )

    result = await db.execute(query)
    return [(profile, email, is_blocked) for profile, email, is_blocked in result.all()]


async def count_applications(db: AsyncSession, user_id: int) -> int:
    """Number of application rows referencing a student account."""
    result = await db.execute(
        select(func.count()).select_from(Application).where(Application.student_id == user_id)
    )
    return result.scalar_one()


async def count_applications_matching(
    db: AsyncSession,
    department: str | None = None,
    batch_year: int | None = None,
) -> int:
    """Number of application rows held by students matching the filters."""
    matching = select(StudentProfile.user_id).where(*_student_filters(department, batch_year))
    result = await db.execute(
        select(func.count())
        .select_from(Application)
        .where(Application.student_id.in_(matching))
    )
    return result.scalar_one()


async def delete_student(db: AsyncSession, user_id: int) -> int:
    """
    Delete a student account. The profile cascades; application rows
    block the delete (ON DELETE RESTRICT).

    Returns:
        Number of accounts removed (0 or 1)
    """
    result = await db.execute(
        delete(User)
        .where(User.id == user_id, User.role == UserRole.STUDENT)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def bulk_delete_students(
    db: AsyncSession,
    department: str | None = None,
    batch_year: int | None = None,
) -> int:
    """
    Delete every student account matching the filters.

    The caller must guarantee at least one filter is set.

    Returns:
        Number of accounts removed
    """
    conditions = _student_filters(department, batch_year)
    if not conditions:
        raise ValueError("bulk_delete_students requires at least one filter")

    matching = select(StudentProfile.user_id).where(*conditions)
    result = await db.execute(
        delete(User)
        .where(User.id.in_(matching), User.role == UserRole.STUDENT)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
