"""
Students Schemas

Pydantic schemas for student account management.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from placement_portal.modules.students.models import DocumentType


class BulkStudentRow(BaseModel):
    """One parsed row of a bulk upload file."""

    # 1-based line in the upload file; the header is line 1
    line_number: int = Field(..., ge=2)
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    register_number: str = Field(..., min_length=1, max_length=50)
    department: str = Field(..., min_length=1, max_length=100)
    batch_year: int = Field(..., ge=1900, le=2200)
    password: str = Field(..., min_length=6, max_length=128)


class BulkCreateResponse(BaseModel):
    created: int
    message: str


class BulkDeleteResponse(BaseModel):
    deleted: int
    message: str


class StudentListItem(BaseModel):
    """Student as shown in the admin listing."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    email: str
    full_name: str
    register_number: str
    department: str
    batch_year: int
    cgpa: float
    current_backlogs: int
    is_blocked: bool


class BlockUserRequest(BaseModel):
    blocked: bool


class BlockUserResponse(BaseModel):
    user_id: int
    blocked: bool


class AcademicsUpdate(BaseModel):
    """
    Partial update of the academic record read by the eligibility engine.

    Only fields that are sent are changed; neither may be null.
    """

    cgpa: float | None = Field(None, ge=0, le=10)
    current_backlogs: int | None = Field(None, ge=0)


class StudentProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    full_name: str
    register_number: str
    department: str
    batch_year: int
    cgpa: float
    current_backlogs: int
    resume_url: str | None = None
    aadhar_card_url: str | None = None
    pan_card_url: str | None = None
    profile_photo_url: str | None = None


class DocumentUploadResponse(BaseModel):
    register_number: str
    type: DocumentType
    url: str
    message: str = "Upload successful"
