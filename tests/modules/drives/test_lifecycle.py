"""
Unit tests for drive status transitions and home-page grouping.
"""

from datetime import date

import pytest

from placement_portal.core.errors import InvalidStatusTransitionError
from placement_portal.modules.drives.lifecycle import (
    DRIVE_STATUS_TRANSITIONS,
    DisplayGroup,
    classify,
    group_for_home_page,
    validate_transition,
)
from placement_portal.modules.drives.models import DriveStatus


class TestDriveStatusTransitions:
    """Tests for the drive transition map."""

    def test_every_status_is_in_transition_map(self):
        for status in DriveStatus:
            assert status in DRIVE_STATUS_TRANSITIONS

    def test_completed_is_terminal(self):
        assert DRIVE_STATUS_TRANSITIONS[DriveStatus.COMPLETED] == set()

    def test_cancelled_can_only_complete(self):
        assert DRIVE_STATUS_TRANSITIONS[DriveStatus.CANCELLED] == {DriveStatus.COMPLETED}

    def test_closed_can_reopen(self):
        validate_transition(DriveStatus.CLOSED, DriveStatus.OPEN)

    def test_same_status_is_allowed(self):
        for status in DriveStatus:
            validate_transition(status, status)

    @pytest.mark.parametrize(
        ("current", "new"),
        [
            (DriveStatus.COMPLETED, DriveStatus.OPEN),
            (DriveStatus.CANCELLED, DriveStatus.OPEN),
            (DriveStatus.ON_HOLD, DriveStatus.CLOSED),
        ],
    )
    def test_invalid_transition_raises(self, current, new):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            validate_transition(current, new)

        assert exc_info.value.status_code == 409
        assert exc_info.value.error_code == "INVALID_STATUS_TRANSITION"
        assert current.value in exc_info.value.message
        assert new.value in exc_info.value.message


class TestClassify:
    """Tests for home-page classification."""

    def test_open_drive_beyond_window_is_upcoming(self, make_drive, now):
        # now is 2026-03-01, window of 5 days ends 2026-03-06
        drive = make_drive(drive_date=date(2026, 3, 7))
        assert classify(drive, now, upcoming_days=5) == DisplayGroup.UPCOMING

    def test_open_drive_on_window_edge_is_ongoing(self, make_drive, now):
        drive = make_drive(drive_date=date(2026, 3, 6))
        assert classify(drive, now, upcoming_days=5) == DisplayGroup.ONGOING

    def test_open_drive_in_past_is_ongoing(self, make_drive, now):
        drive = make_drive(drive_date=date(2026, 2, 1))
        assert classify(drive, now, upcoming_days=5) == DisplayGroup.ONGOING

    @pytest.mark.parametrize("status", [DriveStatus.CLOSED, DriveStatus.COMPLETED])
    def test_closed_and_completed_are_completed(self, make_drive, now, status):
        assert classify(make_drive(status=status), now, 5) == DisplayGroup.COMPLETED

    def test_on_hold(self, make_drive, now):
        assert classify(make_drive(status=DriveStatus.ON_HOLD), now, 5) == DisplayGroup.ON_HOLD

    def test_cancelled_is_hidden(self, make_drive, now):
        assert classify(make_drive(status=DriveStatus.CANCELLED), now, 5) is None


class TestGroupForHomePage:
    """Tests for group_for_home_page."""

    def test_groups_preserve_order_and_drop_cancelled(self, make_drive, now):
        first = make_drive(id=1, drive_date=date(2026, 3, 2))
        second = make_drive(id=2, drive_date=date(2026, 3, 3))
        later = make_drive(id=3, drive_date=date(2026, 5, 1))
        held = make_drive(id=4, status=DriveStatus.ON_HOLD)
        cancelled = make_drive(id=5, status=DriveStatus.CANCELLED)

        groups = group_for_home_page([first, second, later, held, cancelled], now, 5)

        assert groups[DisplayGroup.ONGOING] == [first, second]
        assert groups[DisplayGroup.UPCOMING] == [later]
        assert groups[DisplayGroup.ON_HOLD] == [held]
        assert groups[DisplayGroup.COMPLETED] == []

    def test_all_groups_present_for_empty_input(self, now):
        groups = group_for_home_page([], now, 5)
        assert set(groups) == set(DisplayGroup)
