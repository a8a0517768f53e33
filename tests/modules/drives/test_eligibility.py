"""
Unit tests for the drive eligibility rules.
"""

from dataclasses import replace
from datetime import timedelta

import pytest

from placement_portal.modules.drives.eligibility import (
    REASON_BACKLOGS,
    REASON_BATCH,
    REASON_CGPA,
    REASON_DEADLINE_PASSED,
    REASON_DEPARTMENT,
    REASON_ELIGIBLE,
    REASON_NOT_OPEN,
    evaluate,
)
from placement_portal.modules.drives.models import DriveStatus


class TestEvaluate:
    """Tests for evaluate."""

    def test_cgpa_above_minimum_is_eligible(self, make_drive, snapshot, now):
        drive = make_drive(min_cgpa=7.5)

        result = evaluate(snapshot, drive, now)

        assert result.eligible is True
        assert result.reason == REASON_ELIGIBLE

    def test_cgpa_below_minimum_is_rejected(self, make_drive, snapshot, now):
        drive = make_drive(min_cgpa=7.5)

        result = evaluate(replace(snapshot, cgpa=6.0), drive, now)

        assert result.eligible is False
        assert result.reason == REASON_CGPA

    def test_cgpa_equal_to_minimum_is_eligible(self, make_drive, snapshot, now):
        drive = make_drive(min_cgpa=8.0)
        assert evaluate(snapshot, drive, now).eligible is True

    @pytest.mark.parametrize(
        "status",
        [DriveStatus.CLOSED, DriveStatus.CANCELLED, DriveStatus.ON_HOLD, DriveStatus.COMPLETED],
    )
    def test_drive_not_open(self, make_drive, snapshot, now, status):
        result = evaluate(snapshot, make_drive(status=status), now)
        assert result.reason == REASON_NOT_OPEN

    def test_deadline_equal_to_now_has_passed(self, make_drive, snapshot, now):
        result = evaluate(snapshot, make_drive(deadline_date=now), now)
        assert result.reason == REASON_DEADLINE_PASSED

    def test_deadline_one_second_ahead_is_open(self, make_drive, snapshot, now):
        drive = make_drive(deadline_date=now + timedelta(seconds=1))
        assert evaluate(snapshot, drive, now).eligible is True

    def test_backlogs_over_maximum(self, make_drive, snapshot, now):
        drive = make_drive(max_backlogs_allowed=1)

        assert evaluate(replace(snapshot, current_backlogs=1), drive, now).eligible is True
        result = evaluate(replace(snapshot, current_backlogs=2), drive, now)
        assert result.reason == REASON_BACKLOGS

    def test_department_not_in_set(self, make_drive, snapshot, now):
        drive = make_drive(eligible_departments=["ECE", "EEE"])
        assert evaluate(snapshot, drive, now).reason == REASON_DEPARTMENT

    def test_batch_year_not_in_set(self, make_drive, snapshot, now):
        drive = make_drive(eligible_batch_years=[2025])
        assert evaluate(snapshot, drive, now).reason == REASON_BATCH

    def test_none_sets_admit_everyone(self, make_drive, snapshot, now):
        drive = make_drive(eligible_departments=None, eligible_batch_years=None)
        assert evaluate(snapshot, drive, now).eligible is True

    def test_empty_sets_admit_nobody(self, make_drive, snapshot, now):
        assert (
            evaluate(snapshot, make_drive(eligible_departments=[]), now).reason
            == REASON_DEPARTMENT
        )
        assert evaluate(snapshot, make_drive(eligible_batch_years=[]), now).reason == REASON_BATCH

    def test_first_failing_rule_decides_reason(self, make_drive, snapshot, now):
        """Every rule fails; the status check comes first."""
        drive = make_drive(
            status=DriveStatus.CLOSED,
            deadline_date=now - timedelta(days=1),
            min_cgpa=9.5,
            eligible_departments=[],
        )
        assert evaluate(snapshot, drive, now).reason == REASON_NOT_OPEN

        drive.status = DriveStatus.OPEN
        assert evaluate(snapshot, drive, now).reason == REASON_DEADLINE_PASSED

        drive.deadline_date = now + timedelta(days=1)
        assert evaluate(snapshot, drive, now).reason == REASON_CGPA

        drive.min_cgpa = 0.0
        assert evaluate(snapshot, drive, now).reason == REASON_DEPARTMENT

    def test_raising_cgpa_never_makes_student_ineligible(self, make_drive, snapshot, now):
        drive = make_drive(min_cgpa=7.0, eligible_departments=["CSE"])
        results = [
            evaluate(replace(snapshot, cgpa=cgpa), drive, now).eligible
            for cgpa in (5.0, 6.9, 7.0, 8.5, 10.0)
        ]
        assert results == [False, False, True, True, True]

    def test_tightening_criteria_never_admits_more(self, make_drive, snapshot, now):
        loose = make_drive(min_cgpa=6.0, max_backlogs_allowed=2)
        strict = make_drive(min_cgpa=8.5, max_backlogs_allowed=0)
        students = [
            replace(snapshot, cgpa=cgpa, current_backlogs=backlogs)
            for cgpa in (5.5, 7.0, 9.0)
            for backlogs in (0, 1, 3)
        ]
        for student in students:
            if evaluate(student, strict, now).eligible:
                assert evaluate(student, loose, now).eligible
