"""
Background Job Admin Router

Manual control of scheduled jobs. In normal operation jobs run on their
schedule; these endpoints exist for operations and debugging.

Endpoints (admin role required):
- GET /admin/jobs - List registered jobs
- POST /admin/jobs/{job_id}/trigger - Run a job now
- POST /admin/jobs/{job_id}/pause - Pause a scheduled job
- POST /admin/jobs/{job_id}/resume - Resume a paused job
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from placement_portal.core.auth import CurrentUser, get_current_admin_user
from placement_portal.core.scheduler import (
    list_registered_jobs,
    pause_job,
    resume_job,
    trigger_job_manually,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _job_not_found(job_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": "JOB_NOT_FOUND", "message": f"Job {job_id} is not scheduled."},
    )


@router.get("", summary="List Jobs")
async def list_jobs(
    admin: CurrentUser = Depends(get_current_admin_user),
) -> dict[str, Any]:
    """List all registered background jobs with next run time and pause status."""
    return {"jobs": list_registered_jobs()}


@router.post("/{job_id}/trigger", summary="Trigger Job")
async def trigger_job(
    job_id: str,
    admin: CurrentUser = Depends(get_current_admin_user),
) -> dict[str, Any]:
    """Run a job immediately, bypassing the schedule."""
    try:
        result = await trigger_job_manually(job_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "JOB_NOT_FOUND", "message": str(e)},
        ) from e

    logger.info(f"Admin {admin.id} triggered job {job_id}: {result['status']}")
    return result


@router.post("/{job_id}/pause", summary="Pause Job")
async def pause_job_endpoint(
    job_id: str,
    admin: CurrentUser = Depends(get_current_admin_user),
) -> dict[str, Any]:
    if not pause_job(job_id):
        raise _job_not_found(job_id)
    logger.info(f"Admin {admin.id} paused job {job_id}")
    return {"job_id": job_id, "paused": True}


@router.post("/{job_id}/resume", summary="Resume Job")
async def resume_job_endpoint(
    job_id: str,
    admin: CurrentUser = Depends(get_current_admin_user),
) -> dict[str, Any]:
    if not resume_job(job_id):
        raise _job_not_found(job_id)
    logger.info(f"Admin {admin.id} resumed job {job_id}")
    return {"job_id": job_id, "resumed": True}
