"""
Students Service Layer

Admin management of student accounts: bulk creation, listing, deletion
and blocking. Also the student's own profile: the academic record read by
the eligibility engine and uploaded documents.

Bulk creation is all-or-nothing: the first failing row rolls back the
whole batch and is reported by its line number in the upload file.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.core.errors import (
    STORAGE_ERRORS,
    ConflictError,
    NotFoundError,
    ServiceError,
    ValidationError,
    translate_storage_error,
)
from placement_portal.core.security import hash_password
from placement_portal.core.storage import FileStorageError, FileStore
from placement_portal.modules.students import repository
from placement_portal.modules.students.models import DocumentType, StudentProfile
from placement_portal.modules.students.schemas import (
    AcademicsUpdate,
    BulkStudentRow,
    DocumentUploadResponse,
    StudentListItem,
)
from placement_portal.modules.users.models import UserRole
from placement_portal.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class StudentNotFoundError(NotFoundError):
    """Raised when a student account or profile does not exist."""

    def __init__(self, student_id: int | None = None):
        message = f"Student {student_id} not found" if student_id else "Student profile not found"
        super().__init__(message=message, error_code="STUDENT_NOT_FOUND")


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int):
        super().__init__(message=f"User {user_id} not found", error_code="USER_NOT_FOUND")


class DuplicateAccountError(ConflictError):
    """Raised when a bulk row reuses an existing email or register number."""

    def __init__(self, line_number: int, field: str, value: str):
        super().__init__(
            message=f"Row {line_number}: {field} '{value}' already exists.",
            error_code="DUPLICATE_ACCOUNT",
        )


class StudentHasApplicationsError(ConflictError):
    """Raised when deleting students who have applied to drives."""

    def __init__(self, count: int, student_id: int | None = None):
        subject = f"Student {student_id} has" if student_id else "Matching students have"
        super().__init__(
            message=(
                f"{subject} {count} application(s) and cannot be deleted. "
                "Block the account instead."
            ),
            error_code="STUDENT_HAS_APPLICATIONS",
        )


class UnscopedBulkDeleteError(ConflictError):
    """Raised when a bulk delete is requested without any filter."""

    def __init__(self):
        super().__init__(
            message="Bulk delete requires a department or batch year filter.",
            error_code="UNSCOPED_BULK_DELETE",
        )


class DocumentStorageUnavailableError(ServiceError):
    def __init__(self):
        super().__init__(
            message="Document uploads are not configured.",
            error_code="DOCUMENT_STORAGE_UNAVAILABLE",
            status_code=503,
        )


class DocumentUploadFailedError(ServiceError):
    """Raised when the object store rejects or fails an upload."""

    def __init__(self):
        super().__init__(
            message="Document upload failed. Please retry.",
            error_code="DOCUMENT_UPLOAD_FAILED",
            status_code=502,
        )


async def _check_row_unique(
    db: AsyncSession,
    row: BulkStudentRow,
    line_number: int,
    seen_emails: set[str],
    seen_register_numbers: set[str],
) -> None:
    email = row.email.lower()
    if email in seen_emails or await UserRepository.email_exists(db, email):
        raise DuplicateAccountError(line_number, "email", row.email)
    if row.register_number in seen_register_numbers or await repository.register_number_exists(
        db, row.register_number
    ):
        raise DuplicateAccountError(line_number, "register number", row.register_number)
    seen_emails.add(email)
    seen_register_numbers.add(row.register_number)


async def bulk_create_students(db: AsyncSession, rows: list[BulkStudentRow]) -> int:
    """
    Create a student account and profile for every row, in one transaction.

    Args:
        db: Database session
        rows: Parsed upload rows, in file order

    Returns:
        Number of students created

    Raises:
        DuplicateAccountError: If a row reuses an email or register number
        ConflictError: If the database rejects a row on a constraint
        TransientStorageError: If storage fails mid-batch
    """
    seen_emails: set[str] = set()
    seen_register_numbers: set[str] = set()
    line_number = rows[0].line_number if rows else 0

    try:
        for row in rows:
            line_number = row.line_number
            await _check_row_unique(db, row, line_number, seen_emails, seen_register_numbers)

            user = await UserRepository.create(
                db,
                email=row.email.lower(),
                password_hash=hash_password(row.password),
                role=UserRole.STUDENT,
            )
            await repository.create_profile(
                db,
                user_id=user.id,
                full_name=row.name,
                register_number=row.register_number,
                department=row.department,
                batch_year=row.batch_year,
            )

        await db.commit()
    except DuplicateAccountError:
        await db.rollback()
        raise
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Bulk student import rejected at row {line_number}: {e.orig}")
        raise ConflictError(
            f"Row {line_number}: violates a data constraint.", "CONSTRAINT_VIOLATION"
        ) from e
    except STORAGE_ERRORS as e:
        await db.rollback()
        logger.error(f"Bulk student import failed at row {line_number}: {e}")
        raise translate_storage_error(e) from e

    logger.info(f"Bulk imported {len(rows)} students")
    return len(rows)


async def list_students(
    db: AsyncSession,
    department: str | None = None,
    batch_year: int | None = None,
    search: str | None = None,
) -> list[StudentListItem]:
    """List students for the admin dashboard."""
    results = await repository.list_students(
        db, department=department, batch_year=batch_year, search=search
    )
    return [
        StudentListItem(
            user_id=profile.user_id,
            email=email,
            full_name=profile.full_name,
            register_number=profile.register_number,
            department=profile.department,
            batch_year=profile.batch_year,
            cgpa=profile.cgpa,
            current_backlogs=profile.current_backlogs,
            is_blocked=is_blocked,
        )
        for profile, email, is_blocked in results
    ]


async def delete_student(db: AsyncSession, student_id: int) -> None:
    """
    Delete a student account.

    Application rows are never removed, so a student who has applied to
    any drive cannot be deleted.

    Raises:
        StudentNotFoundError: If no student account has this id
        StudentHasApplicationsError: If the student has applications
    """
    try:
        count = await repository.count_applications(db, student_id)
        if count > 0:
            raise StudentHasApplicationsError(count, student_id)

        removed = await repository.delete_student(db, student_id)
        if removed == 0:
            await db.rollback()
            raise StudentNotFoundError(student_id)
        await db.commit()
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e


async def bulk_delete_students(
    db: AsyncSession,
    department: str | None = None,
    batch_year: int | None = None,
) -> int:
    """
    Delete all students matching the filters.

    Refused as a whole when any matching student has applications.

    Raises:
        UnscopedBulkDeleteError: If neither filter is set
        StudentHasApplicationsError: If matching students have applications
    """
    department = department.strip() if department else None
    if not department and batch_year is None:
        raise UnscopedBulkDeleteError()

    try:
        count = await repository.count_applications_matching(
            db, department=department, batch_year=batch_year
        )
        if count > 0:
            raise StudentHasApplicationsError(count)

        removed = await repository.bulk_delete_students(
            db, department=department, batch_year=batch_year
        )
        await db.commit()
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e

    return removed


async def set_user_blocked(db: AsyncSession, user_id: int, blocked: bool) -> None:
    """
    Block or unblock an account. Blocked accounts cannot sign in.

    Raises:
        UserNotFoundError: If the account does not exist
    """
    try:
        updated = await UserRepository.set_blocked(db, user_id, blocked)
        if updated == 0:
            await db.rollback()
            raise UserNotFoundError(user_id)
        await db.commit()
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e


async def get_profile(db: AsyncSession, user_id: int) -> StudentProfile:
    profile = await repository.get_by_user_id(db, user_id)
    if profile is None:
        raise StudentNotFoundError()
    return profile


async def update_academics(db: AsyncSession, user_id: int, data: AcademicsUpdate) -> StudentProfile:
    """
    Update the CGPA and/or current backlogs of a student.

    Used by students on their own profile and by admins correcting records.
    Eligibility reads the new values on the next decision.

    Raises:
        ValidationError: If a field is sent as null
        StudentNotFoundError: If the student has no profile
    """
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None:
            raise ValidationError(f"{field} cannot be null")

    if not changes:
        return await get_profile(db, user_id)

    try:
        updated = await repository.update_academics(db, user_id, changes)
        if updated == 0:
            await db.rollback()
            raise StudentNotFoundError(user_id)
        await db.commit()
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e

    logger.info(f"Updated academics of student {user_id}: fields={sorted(changes)}")
    return await get_profile(db, user_id)


async def upload_document(
    db: AsyncSession,
    store: FileStore | None,
    user_id: int,
    document_type: DocumentType,
    content: bytes,
    filename: str | None = None,
) -> DocumentUploadResponse:
    """
    Store a document and record its URL on the student's profile.

    Files are keyed by register number, so a new upload of the same kind
    replaces the old one.

    Raises:
        DocumentStorageUnavailableError: If no object store is configured
        ValidationError: If the file is empty
        StudentNotFoundError: If the student has no profile yet
        DocumentUploadFailedError: If the object store fails
    """
    if store is None:
        raise DocumentStorageUnavailableError()
    if not content:
        raise ValidationError("Uploaded file is empty.")

    register_number = await repository.get_register_number(db, user_id)
    if register_number is None:
        raise StudentNotFoundError()

    try:
        url = await store.store(register_number, document_type.value, content, filename)
    except FileStorageError as e:
        raise DocumentUploadFailedError() from e

    try:
        await repository.set_document_url(db, user_id, document_type, url)
        await db.commit()
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e

    logger.info(f"Student {user_id} uploaded {document_type.value}")
    return DocumentUploadResponse(register_number=register_number, type=document_type, url=url)
