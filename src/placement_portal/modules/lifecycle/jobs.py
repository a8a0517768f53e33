"""
Lifecycle Background Jobs

Periodic reconciler correcting state that goes stale with the passage of
time:
1. Close open drives whose deadline has passed
2. Purge expired password-reset codes

Design Principles:
- Both sweeps are single conditional bulk statements (idempotent, no
  read-then-write loop, safe alongside concurrent admin edits)
- Each sweep opens its own session and runs under its own timeout
- A failing or timed-out sweep is logged and never blocks the other sweep
  or the next tick; it is retried on the next tick, not immediately
- Jobs never raise into the scheduler

Schedule:
- Every RECONCILER_INTERVAL_MINUTES (default 5)
- Can also be triggered manually via the admin job endpoints
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from functools import partial
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from placement_portal.core.config import settings
from placement_portal.core.scheduler import register_job
from placement_portal.modules.drives import repository as drive_repository
from placement_portal.modules.users.repository import PasswordResetRepository

logger = logging.getLogger(__name__)

SessionFactory = async_sessionmaker[AsyncSession]

# Job ID for registration and manual triggering
JOB_ID_RECONCILE = "lifecycle_reconcile"


async def close_expired_drives(session_factory: SessionFactory) -> int:
    """
    Move every open drive past its deadline to closed.

    Returns:
        Number of drives closed
    """
    async with session_factory() as db:
        closed = await drive_repository.close_expired_drives(db)

    if closed:
        logger.info(f"Closed {closed} expired drive(s)")
    return closed


async def purge_expired_credentials(session_factory: SessionFactory) -> int:
    """
    Delete every password-reset code past its expiry.

    Returns:
        Number of codes removed
    """
    async with session_factory() as db:
        removed = await PasswordResetRepository.delete_expired(db)
        await db.commit()

    if removed:
        logger.info(f"Purged {removed} expired password reset code(s)")
    return removed


async def _run_sweep(
    name: str,
    sweep: Callable[[], Awaitable[int]],
    timeout_seconds: float,
) -> dict[str, Any]:
    """Run one sweep under its own deadline. Failures are logged, never raised."""
    try:
        affected = await asyncio.wait_for(sweep(), timeout=timeout_seconds)
        return {"sweep": name, "status": "success", "affected": affected}
    except TimeoutError:
        logger.error(f"Reconciler sweep '{name}' timed out after {timeout_seconds}s")
        return {"sweep": name, "status": "timeout", "affected": 0}
    except Exception as e:
        logger.error(f"Reconciler sweep '{name}' failed: {e}", exc_info=True)
        return {"sweep": name, "status": "error", "affected": 0, "error": str(e)}


async def reconcile(
    session_factory: SessionFactory,
    timeout_seconds: float | None = None,
) -> dict[str, Any]:
    """
    Run both sweeps back-to-back.

    Args:
        session_factory: Session factory bound to the application's engine
        timeout_seconds: Per-sweep deadline (defaults to RECONCILER_SWEEP_TIMEOUT_SECONDS)

    Returns:
        Dict with executed_at, per-sweep results and total_errors
    """
    timeout = timeout_seconds or settings.reconciler_sweep_timeout_seconds
    executed_at = datetime.now(UTC)

    results = [
        await _run_sweep(
            "close_expired_drives", partial(close_expired_drives, session_factory), timeout
        ),
        await _run_sweep(
            "purge_expired_credentials",
            partial(purge_expired_credentials, session_factory),
            timeout,
        ),
    ]
    total_errors = sum(1 for result in results if result["status"] != "success")

    if total_errors:
        logger.warning(f"Reconciler tick finished with {total_errors} failed sweep(s)")
    else:
        logger.debug("Reconciler tick completed")

    return {
        "executed_at": executed_at.isoformat(),
        "sweeps": results,
        "total_errors": total_errors,
    }


def register_lifecycle_jobs(session_factory: SessionFactory) -> None:
    """
    Register the reconciler with the scheduler.

    Call during application startup, before the scheduler is started.
    """
    interval = settings.reconciler_interval_minutes

    register_job(
        job_id=JOB_ID_RECONCILE,
        func=partial(reconcile, session_factory),
        trigger=IntervalTrigger(minutes=interval),
    )
    logger.info(f"Registered job: {JOB_ID_RECONCILE} (interval: {interval} minutes)")
