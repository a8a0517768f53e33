"""
Drive Lifecycle

Allowed status changes for a drive and the derived home-page grouping.

Only the reconciler moves a drive autonomously (open -> closed, once the
deadline passes). Every other transition is an explicit admin action.
"""

import enum
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Protocol

from placement_portal.core.errors import InvalidStatusTransitionError
from placement_portal.modules.drives.models import DriveStatus

# Valid status transitions for admin edits
DRIVE_STATUS_TRANSITIONS: dict[DriveStatus, set[DriveStatus]] = {
    DriveStatus.OPEN: {
        DriveStatus.CLOSED,
        DriveStatus.CANCELLED,
        DriveStatus.ON_HOLD,
        DriveStatus.COMPLETED,
    },
    DriveStatus.CLOSED: {
        DriveStatus.ON_HOLD,
        DriveStatus.COMPLETED,
        DriveStatus.OPEN,  # Reopened after the deadline is extended
    },
    DriveStatus.ON_HOLD: {
        DriveStatus.OPEN,
        DriveStatus.COMPLETED,
    },
    DriveStatus.CANCELLED: {
        DriveStatus.COMPLETED,
    },
    # Terminal
    DriveStatus.COMPLETED: set(),
}


class DisplayGroup(str, enum.Enum):
    """Home-page grouping, recomputed on every read."""

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


class _Classifiable(Protocol):
    status: DriveStatus
    drive_date: date


def validate_transition(current: DriveStatus, new: DriveStatus) -> None:
    """
    Check an admin status change against the transition map.

    Setting the current status again is a no-op and always allowed.

    Raises:
        InvalidStatusTransitionError: If the change is not allowed
    """
    if new == current:
        return
    allowed = DRIVE_STATUS_TRANSITIONS.get(current, set())
    if new not in allowed:
        raise InvalidStatusTransitionError(
            current.value, new.value, [status.value for status in allowed]
        )


def classify(drive: _Classifiable, now: datetime, upcoming_days: int) -> DisplayGroup | None:
    """
    Place a drive into its home-page group.

    Open drives more than ``upcoming_days`` away are upcoming, the rest are
    ongoing. Cancelled drives are not shown (None).
    """
    if drive.status == DriveStatus.OPEN:
        horizon = (now + timedelta(days=upcoming_days)).date()
        if drive.drive_date > horizon:
            return DisplayGroup.UPCOMING
        return DisplayGroup.ONGOING
    if drive.status in (DriveStatus.COMPLETED, DriveStatus.CLOSED):
        return DisplayGroup.COMPLETED
    if drive.status == DriveStatus.ON_HOLD:
        return DisplayGroup.ON_HOLD
    return None


def group_for_home_page(
    drives: Iterable[_Classifiable],
    now: datetime,
    upcoming_days: int,
) -> dict[DisplayGroup, list]:
    """Bucket drives by display group, preserving input order within each group."""
    groups: dict[DisplayGroup, list] = {group: [] for group in DisplayGroup}
    for drive in drives:
        group = classify(drive, now, upcoming_days)
        if group is not None:
            groups[group].append(drive)
    return groups
