"""
Students Routers

Student endpoints (student role required):
- GET /students/me/profile - The student's own profile
- PUT /students/me/profile - Update CGPA and/or current backlogs
- POST /students/me/documents?type= - Upload resume, aadhar, pan or profile_pic

Admin endpoints (admin role required):
- POST /admin/students/bulk-upload - Create students from a CSV upload
- GET /admin/students - List students with filters
- DELETE /admin/students - Bulk delete by department and/or batch year
- DELETE /admin/students/{student_id} - Delete one student
- POST /admin/students/{user_id}/block - Block or unblock an account
- PATCH /admin/students/{student_id}/academics - Correct a student's academics
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.core.auth import CurrentUser, get_current_admin_user, get_current_student
from placement_portal.core.database import get_db
from placement_portal.core.errors import ServiceError, raise_http_error, unexpected_error
from placement_portal.core.rate_limit import enforce_rate_limit
from placement_portal.core.storage import FileStore, get_file_store
from placement_portal.modules.students import service
from placement_portal.modules.students.helpers import parse_bulk_rows
from placement_portal.modules.students.models import DocumentType
from placement_portal.modules.students.schemas import (
    AcademicsUpdate,
    BlockUserRequest,
    BlockUserResponse,
    BulkCreateResponse,
    BulkDeleteResponse,
    DocumentUploadResponse,
    StudentListItem,
    StudentProfileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()
student_router = APIRouter()

# Bulk operations per admin
RATE_LIMIT_BULK = (10, 60)

# Document uploads per student
RATE_LIMIT_UPLOAD = (10, 60)

MAX_UPLOAD_BYTES = 5 * 1024 * 1024


# ============================================
# Student Endpoints
# ============================================


@student_router.get("/me/profile", response_model=StudentProfileResponse, summary="My Profile")
async def my_profile(
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(get_current_student),
) -> StudentProfileResponse:
    try:
        profile = await service.get_profile(db, student.id)
        return StudentProfileResponse.model_validate(profile)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error loading profile of student {student.id}: {e}")
        raise unexpected_error(e) from e


@student_router.put(
    "/me/profile", response_model=StudentProfileResponse, summary="Update My Academics"
)
async def update_my_academics(
    request: AcademicsUpdate,
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(get_current_student),
) -> StudentProfileResponse:
    """Update CGPA (0 to 10) and/or current backlogs. Eligibility uses the new values."""
    try:
        profile = await service.update_academics(db, student.id, request)
        return StudentProfileResponse.model_validate(profile)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error updating academics of student {student.id}: {e}")
        raise unexpected_error(e) from e


@student_router.post(
    "/me/documents",
    response_model=DocumentUploadResponse,
    summary="Upload Document",
    responses={
        404: {"description": "Profile incomplete: no register number"},
        503: {"description": "Document storage not configured"},
    },
)
async def upload_my_document(
    document_type: DocumentType = Query(..., alias="type"),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    store: FileStore | None = Depends(get_file_store),
    student: CurrentUser = Depends(get_current_student),
) -> DocumentUploadResponse:
    """
    Upload a document. A new upload of the same type replaces the old one.
    """
    await enforce_rate_limit(f"upload:{student.id}", *RATE_LIMIT_UPLOAD)

    try:
        content = await file.read(MAX_UPLOAD_BYTES + 1)
        if len(content) > MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail={"error": "FILE_TOO_LARGE", "message": "Upload exceeds 5 MB."},
            )

        return await service.upload_document(
            db, store, student.id, document_type, content, file.filename
        )
    except HTTPException:
        raise
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error uploading {document_type.value} for student {student.id}: {e}")
        raise unexpected_error(e) from e


# ============================================
# Admin Endpoints
# ============================================


@router.post(
    "/bulk-upload",
    response_model=BulkCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Bulk Create Students",
)
async def bulk_upload_students(
    file: UploadFile = File(..., description="CSV: email,name,regNo,dept,batchYear,password"),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> BulkCreateResponse:
    """
    Create student accounts from a CSV file.

    The whole file is imported in one transaction: if any row fails,
    no students are created and the failing row is reported.
    """
    await enforce_rate_limit(f"admin:bulk:{admin.id}", *RATE_LIMIT_BULK)

    try:
        content = await file.read(MAX_UPLOAD_BYTES + 1)
        if len(content) > MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail={"error": "FILE_TOO_LARGE", "message": "Upload exceeds 5 MB."},
            )

        rows = parse_bulk_rows(content)
        created = await service.bulk_create_students(db, rows)

        logger.info(f"Admin {admin.id} bulk created {created} students from {file.filename}")
        return BulkCreateResponse(created=created, message=f"Created {created} students.")

    except HTTPException:
        raise
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error importing students: {e}")
        raise unexpected_error(e) from e


@router.get("", response_model=list[StudentListItem], summary="List Students")
async def list_students(
    department: str | None = Query(None, max_length=100),
    batch_year: int | None = Query(None, ge=1900, le=2200),
    search: str | None = Query(None, min_length=1, max_length=100),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> list[StudentListItem]:
    try:
        return await service.list_students(
            db, department=department, batch_year=batch_year, search=search
        )
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error listing students: {e}")
        raise unexpected_error(e) from e


@router.delete("", response_model=BulkDeleteResponse, summary="Bulk Delete Students")
async def bulk_delete_students(
    department: str | None = Query(None, max_length=100),
    batch_year: int | None = Query(None, ge=1900, le=2200),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> BulkDeleteResponse:
    """
    Delete every student in a department and/or batch.

    At least one filter is required; an unscoped request is refused with 409.
    """
    await enforce_rate_limit(f"admin:bulk:{admin.id}", *RATE_LIMIT_BULK)

    try:
        deleted = await service.bulk_delete_students(
            db, department=department, batch_year=batch_year
        )
        logger.info(
            f"Admin {admin.id} bulk deleted {deleted} students "
            f"(department={department}, batch_year={batch_year})"
        )
        return BulkDeleteResponse(deleted=deleted, message=f"Deleted {deleted} students.")
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error bulk deleting students: {e}")
        raise unexpected_error(e) from e


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Student",
)
async def delete_student(
    student_id: int,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> None:
    try:
        await service.delete_student(db, student_id)
        logger.info(f"Admin {admin.id} deleted student {student_id}")
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error deleting student {student_id}: {e}")
        raise unexpected_error(e) from e


@router.post("/{user_id}/block", response_model=BlockUserResponse, summary="Block/Unblock User")
async def set_blocked(
    user_id: int,
    request: BlockUserRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> BlockUserResponse:
    try:
        await service.set_user_blocked(db, user_id, request.blocked)
        logger.info(f"Admin {admin.id} set blocked={request.blocked} for user {user_id}")
        return BlockUserResponse(user_id=user_id, blocked=request.blocked)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error updating block status for user {user_id}: {e}")
        raise unexpected_error(e) from e


@router.patch(
    "/{student_id}/academics",
    response_model=StudentProfileResponse,
    summary="Update Student Academics",
)
async def update_student_academics(
    student_id: int,
    request: AcademicsUpdate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> StudentProfileResponse:
    try:
        profile = await service.update_academics(db, student_id, request)
        logger.info(f"Admin {admin.id} updated academics of student {student_id}")
        return StudentProfileResponse.model_validate(profile)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error updating academics of student {student_id}: {e}")
        raise unexpected_error(e) from e
