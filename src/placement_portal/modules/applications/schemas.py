"""
Applications Schemas

Pydantic schemas for drive applications.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from placement_portal.modules.applications.models import ApplicationStatus
from placement_portal.modules.drives.models import DriveStatus


class ApplyResponse(BaseModel):
    """Outcome of applying to a drive."""

    accepted: bool
    reason: str


class ApplicationStatusUpdate(BaseModel):
    """Admin status change. Only shortlisted, placed and rejected are accepted."""

    status: ApplicationStatus


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    drive_id: int
    student_id: int
    status: ApplicationStatus
    applied_at: datetime
    updated_at: datetime


class StudentApplicationItem(BaseModel):
    """An application as the student sees it."""

    drive_id: int
    company_name: str
    job_role: str
    drive_date: date
    drive_status: DriveStatus
    status: ApplicationStatus
    applied_at: datetime
    updated_at: datetime


class DriveApplicantItem(BaseModel):
    """An applicant as the admin sees it."""

    student_id: int
    email: str
    full_name: str
    register_number: str
    department: str
    batch_year: int
    cgpa: float
    current_backlogs: int
    status: ApplicationStatus
    applied_at: datetime
    updated_at: datetime
