"""
Drive Application Models

One row per (drive, student) pair. Rows are never physically deleted
through the API: withdrawn is the logical removal.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from placement_portal.core.database import Base


class ApplicationStatus(str, enum.Enum):
    """Status of a student's application to a drive."""

    OPTED_IN = "opted_in"
    SHORTLISTED = "shortlisted"
    PLACED = "placed"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class Application(Base):
    """A student's application to one drive."""

    __tablename__ = "drive_applications"

    # Composite identity: at most one row per pair
    drive_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("placement_drives.id", ondelete="RESTRICT"),
        primary_key=True,
    )
    student_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        primary_key=True,
    )

    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(
            ApplicationStatus,
            name="application_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=ApplicationStatus.OPTED_IN,
    )

    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_drive_applications_student_id", "student_id"),
        Index("ix_drive_applications_drive_status", "drive_id", "status"),
    )
