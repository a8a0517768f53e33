"""
Student Models

Academic profile attached to a student account, plus the URLs of the
student's uploaded documents. The eligibility engine only reads these rows.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from placement_portal.core.database import Base
from placement_portal.modules.users.models import User


class DocumentType(str, enum.Enum):
    """Kinds of document a student can upload."""

    RESUME = "resume"
    AADHAR = "aadhar"
    PAN = "pan"
    PROFILE_PIC = "profile_pic"


# Profile column holding the URL of each document kind
DOCUMENT_URL_COLUMNS: dict[DocumentType, str] = {
    DocumentType.RESUME: "resume_url",
    DocumentType.AADHAR: "aadhar_card_url",
    DocumentType.PAN: "pan_card_url",
    DocumentType.PROFILE_PIC: "profile_photo_url",
}


class StudentProfile(Base):
    """Academic record of a student, one row per student account."""

    __tablename__ = "student_profiles"

    # Same id as the owning account; deleting the account removes the profile
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    register_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    batch_year: Mapped[int] = mapped_column(Integer, nullable=False)

    cgpa: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default="0")
    current_backlogs: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    # Document URLs returned by the object store
    resume_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    aadhar_card_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    pan_card_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    profile_photo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    user: Mapped[User] = relationship(User, lazy="joined")

    __table_args__ = (
        Index("ix_student_profiles_department", "department"),
        Index("ix_student_profiles_batch_year", "batch_year"),
    )
