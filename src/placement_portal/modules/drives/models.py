"""
Placement Drive Models

A drive is a posted job or internship opportunity with eligibility
criteria and an application deadline.
"""

import enum
from datetime import date, datetime

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from placement_portal.core.database import Base


class DriveStatus(str, enum.Enum):
    """Stored lifecycle status of a drive."""

    OPEN = "open"
    CLOSED = "closed"
    CANCELLED = "cancelled"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"


class Drive(Base):
    """
    Placement drive.

    Business rules assume deadline_date falls on or before drive_date;
    the service validates it on create and update.
    """

    __tablename__ = "placement_drives"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Admin who posted the drive
    posted_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Descriptive fields
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    job_role: Mapped[str] = mapped_column(String(200), nullable=False)
    job_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    drive_type: Mapped[str] = mapped_column(String(50), nullable=False)
    company_category: Mapped[str] = mapped_column(String(50), nullable=False)

    # Compensation range (ctc_min <= ctc_max)
    ctc_min: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    ctc_max: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    ctc_display: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Eligibility criteria. NULL sets mean "no restriction"; an empty set admits nobody.
    min_cgpa: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    max_backlogs_allowed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    eligible_departments: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    eligible_batch_years: Mapped[list[int] | None] = mapped_column(JSONB, nullable=True)

    drive_date: Mapped[date] = mapped_column(Date, nullable=False)
    deadline_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    status: Mapped[DriveStatus] = mapped_column(
        Enum(
            DriveStatus,
            name="drive_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=DriveStatus.OPEN,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        # Reconciler sweep and eligible listing both filter on (status, deadline)
        Index("ix_placement_drives_status_deadline", "status", "deadline_date"),
        Index("ix_placement_drives_company_category", "company_category"),
    )

    def __repr__(self) -> str:
        return f"<Drive(id={self.id}, company={self.company_name}, status={self.status.value})>"
