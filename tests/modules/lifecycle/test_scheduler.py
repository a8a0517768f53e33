"""
Unit tests for the job registry, manual triggering and the scheduler
start/stop lifecycle.
"""

from unittest.mock import AsyncMock

import pytest
from apscheduler.triggers.interval import IntervalTrigger

from placement_portal.core.scheduler import (
    get_scheduler,
    is_running,
    list_registered_jobs,
    pause_job,
    register_job,
    resume_job,
    start_scheduler,
    stop_scheduler,
    trigger_job_manually,
)
from placement_portal.modules.lifecycle.jobs import JOB_ID_RECONCILE, register_lifecycle_jobs


class TestTriggerJobManually:
    """Tests for trigger_job_manually."""

    @pytest.mark.asyncio
    async def test_unknown_job_raises(self):
        with pytest.raises(ValueError):
            await trigger_job_manually("missing")

    @pytest.mark.asyncio
    async def test_success_returns_job_result(self):
        job = AsyncMock(return_value={"closed": 2})
        register_job("sample", job, IntervalTrigger(minutes=5))

        result = await trigger_job_manually("sample")

        assert result["status"] == "success"
        assert result["result"] == {"closed": 2}
        job.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_is_reported_not_raised(self):
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        register_job("broken", failing, IntervalTrigger(minutes=5))

        result = await trigger_job_manually("broken")

        assert result["status"] == "error"
        assert result["error"] == "boom"


class TestRegistry:
    """Tests for the registry without a running scheduler."""

    def test_registered_job_is_listed_as_not_scheduled(self):
        register_job("sample", AsyncMock(), IntervalTrigger(minutes=5))

        assert list_registered_jobs() == [
            {"job_id": "sample", "next_run_time": None, "is_paused": True}
        ]

    def test_pause_and_resume_need_a_running_scheduler(self):
        register_job("sample", AsyncMock(), IntervalTrigger(minutes=5))

        assert pause_job("sample") is False
        assert resume_job("sample") is False


class TestSchedulerLifecycle:
    """Tests for start_scheduler and stop_scheduler."""

    @pytest.mark.asyncio
    async def test_start_schedules_registered_reconciler(self, session_factory):
        register_lifecycle_jobs(session_factory)
        scheduler = await start_scheduler()
        try:
            job = scheduler.get_job(JOB_ID_RECONCILE)

            assert is_running()
            assert job is not None
            assert job.next_run_time is not None
            assert list_registered_jobs()[0]["is_paused"] is False
        finally:
            await stop_scheduler()

    @pytest.mark.asyncio
    async def test_stop_leaves_nothing_ticking(self, session_factory):
        register_lifecycle_jobs(session_factory)
        scheduler = await start_scheduler()

        await stop_scheduler()

        assert scheduler.running is False
        assert is_running() is False
        assert get_scheduler() is None
        assert list_registered_jobs()[0]["next_run_time"] is None

    @pytest.mark.asyncio
    async def test_stop_without_start_is_a_no_op(self):
        await stop_scheduler()

        assert get_scheduler() is None

    @pytest.mark.asyncio
    async def test_job_registered_after_start_is_scheduled(self):
        scheduler = await start_scheduler()
        try:
            register_job("late", AsyncMock(), IntervalTrigger(minutes=1))

            assert scheduler.get_job("late") is not None
        finally:
            await stop_scheduler()

    @pytest.mark.asyncio
    async def test_pause_and_resume_running_job(self, session_factory):
        register_lifecycle_jobs(session_factory)
        scheduler = await start_scheduler()
        try:
            assert pause_job(JOB_ID_RECONCILE) is True
            assert scheduler.get_job(JOB_ID_RECONCILE).next_run_time is None

            assert resume_job(JOB_ID_RECONCILE) is True
            assert scheduler.get_job(JOB_ID_RECONCILE).next_run_time is not None
        finally:
            await stop_scheduler()
