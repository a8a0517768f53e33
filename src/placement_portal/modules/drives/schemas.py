"""
Drives Schemas

Pydantic schemas for drive request validation and response serialization.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from placement_portal.modules.drives.models import DriveStatus


def check_drive_ranges(
    ctc_min: float | None,
    ctc_max: float | None,
    deadline_date: datetime | None,
    drive_date: date | None,
) -> None:
    if ctc_min is not None and ctc_max is not None and ctc_min > ctc_max:
        raise ValueError("ctc_min cannot be greater than ctc_max")
    if deadline_date is not None and drive_date is not None and deadline_date.date() > drive_date:
        raise ValueError("deadline_date cannot be after drive_date")


class DriveBase(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=200)
    job_role: str = Field(..., min_length=1, max_length=200)
    job_description: str | None = Field(None, max_length=10000)
    location: str | None = Field(None, max_length=200)
    drive_type: str = Field(..., min_length=1, max_length=50)
    company_category: str = Field(..., min_length=1, max_length=50)

    ctc_min: float = Field(0.0, ge=0)
    ctc_max: float = Field(0.0, ge=0)
    ctc_display: str | None = Field(None, max_length=100)

    min_cgpa: float = Field(0.0, ge=0, le=10)
    max_backlogs_allowed: int = Field(0, ge=0)
    eligible_departments: list[str] | None = None
    eligible_batch_years: list[int] | None = None

    drive_date: date
    deadline_date: datetime


class DriveCreate(DriveBase):
    """Request body for creating a drive. New drives always start open."""

    @field_validator("deadline_date")
    @classmethod
    def require_timezone(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("deadline_date must include a timezone offset")
        return value

    @model_validator(mode="after")
    def validate_drive(self) -> "DriveCreate":
        check_drive_ranges(self.ctc_min, self.ctc_max, self.deadline_date, self.drive_date)
        return self


class DriveUpdate(BaseModel):
    """
    Partial update. Only fields that are sent are changed.

    Cross-field rules are re-checked by the service against the merged values.
    """

    company_name: str | None = Field(None, min_length=1, max_length=200)
    job_role: str | None = Field(None, min_length=1, max_length=200)
    job_description: str | None = Field(None, max_length=10000)
    location: str | None = Field(None, max_length=200)
    drive_type: str | None = Field(None, min_length=1, max_length=50)
    company_category: str | None = Field(None, min_length=1, max_length=50)

    ctc_min: float | None = Field(None, ge=0)
    ctc_max: float | None = Field(None, ge=0)
    ctc_display: str | None = Field(None, max_length=100)

    min_cgpa: float | None = Field(None, ge=0, le=10)
    max_backlogs_allowed: int | None = Field(None, ge=0)
    eligible_departments: list[str] | None = None
    eligible_batch_years: list[int] | None = None

    drive_date: date | None = None
    deadline_date: datetime | None = None

    status: DriveStatus | None = None

    @field_validator("deadline_date")
    @classmethod
    def require_timezone(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            raise ValueError("deadline_date must include a timezone offset")
        return value


class DriveResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    posted_by: int | None
    company_name: str
    job_role: str
    job_description: str | None
    location: str | None
    drive_type: str
    company_category: str
    ctc_min: float
    ctc_max: float
    ctc_display: str | None
    min_cgpa: float
    max_backlogs_allowed: int
    eligible_departments: list[str] | None
    eligible_batch_years: list[int] | None
    drive_date: date
    deadline_date: datetime
    status: DriveStatus
    created_at: datetime


class HomePageGroupsResponse(BaseModel):
    """Drives grouped for the public home page."""

    upcoming: list[DriveResponse]
    ongoing: list[DriveResponse]
    completed: list[DriveResponse]
    on_hold: list[DriveResponse]
