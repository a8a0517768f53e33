"""
Drive Eligibility

Pure rules deciding whether a student may apply to a drive. The same
function backs both "can I apply" and "which drives do I see", so a rule
change applies to both.

Rules are checked in a fixed order and the first failing rule decides the
reason:
1. Drive is open
2. Deadline is strictly in the future
3. CGPA is at least the drive minimum
4. Backlogs do not exceed the drive maximum
5. Department is in the eligible set (None means any department)
6. Batch year is in the eligible set (None means any batch)

An empty eligible set admits nobody.
"""

from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from placement_portal.modules.drives.models import DriveStatus

REASON_ELIGIBLE = "eligible"
REASON_NOT_OPEN = "drive is not open"
REASON_DEADLINE_PASSED = "deadline has passed"
REASON_CGPA = "cgpa below minimum"
REASON_BACKLOGS = "backlogs exceed maximum allowed"
REASON_DEPARTMENT = "department not eligible"
REASON_BATCH = "batch year not eligible"


@dataclass(frozen=True)
class StudentSnapshot:
    """Academic facts about a student, read fresh for every decision."""

    department: str
    batch_year: int
    cgpa: float
    current_backlogs: int


@dataclass(frozen=True)
class EligibilityResult:
    eligible: bool
    reason: str


class DriveCriteria(Protocol):
    status: DriveStatus
    deadline_date: datetime
    min_cgpa: float
    max_backlogs_allowed: int
    eligible_departments: Collection[str] | None
    eligible_batch_years: Collection[int] | None


def _ineligible(reason: str) -> EligibilityResult:
    return EligibilityResult(eligible=False, reason=reason)


def evaluate(
    snapshot: StudentSnapshot,
    drive: DriveCriteria,
    now: datetime,
) -> EligibilityResult:
    """
    Decide whether a student may apply to a drive.

    Args:
        snapshot: The student's current academic record
        drive: Drive (or anything carrying the same criteria fields)
        now: Authoritative current time, normally read from the database

    Returns:
        EligibilityResult with the first failing rule as the reason
    """
    if drive.status != DriveStatus.OPEN:
        return _ineligible(REASON_NOT_OPEN)

    if drive.deadline_date <= now:
        return _ineligible(REASON_DEADLINE_PASSED)

    if snapshot.cgpa < drive.min_cgpa:
        return _ineligible(REASON_CGPA)

    if snapshot.current_backlogs > drive.max_backlogs_allowed:
        return _ineligible(REASON_BACKLOGS)

    if (
        drive.eligible_departments is not None
        and snapshot.department not in drive.eligible_departments
    ):
        return _ineligible(REASON_DEPARTMENT)

    if (
        drive.eligible_batch_years is not None
        and snapshot.batch_year not in drive.eligible_batch_years
    ):
        return _ineligible(REASON_BATCH)

    return EligibilityResult(eligible=True, reason=REASON_ELIGIBLE)
