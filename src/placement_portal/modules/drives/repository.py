"""
Drives Repository

Database operations for placement drives.

Design Principles:
- All dynamic filters are compiled to bound parameters (no string building)
- Bulk lifecycle writes are single conditional statements, never read-then-write
- Time comparisons use the database clock (func.now())
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.modules.applications.models import Application
from placement_portal.modules.drives.models import Drive, DriveStatus


@dataclass(frozen=True)
class DriveFilters:
    """Admin listing filters. Every field is independently optional."""

    category: str | None = None
    min_salary: float | None = None
    drive_type: str | None = None

    def predicates(self) -> list:
        conditions = []
        if self.category:
            conditions.append(Drive.company_category == self.category)
        if self.min_salary is not None:
            conditions.append(Drive.ctc_max >= self.min_salary)
        if self.drive_type:
            conditions.append(Drive.drive_type == self.drive_type)
        return conditions


async def get_database_now(db: AsyncSession) -> datetime:
    """Read the authoritative current time from the database."""
    result = await db.execute(select(func.now()))
    return result.scalar_one()


async def create(db: AsyncSession, posted_by: int, values: dict[str, Any]) -> Drive:
    """Insert a new drive in status open."""
    drive = Drive(posted_by=posted_by, status=DriveStatus.OPEN, **values)

    db.add(drive)
    await db.commit()
    await db.refresh(drive)

    return drive


async def get_by_id(db: AsyncSession, drive_id: int) -> Drive | None:
    """Get drive by ID."""
    return await db.get(Drive, drive_id)


async def list_drives(db: AsyncSession, filters: DriveFilters) -> list[Drive]:
    """List drives matching the filters, earliest deadline first."""
    result = await db.execute(
        select(Drive).where(*filters.predicates()).order_by(Drive.deadline_date.asc(), Drive.id)
    )
    return list(result.scalars().all())


async def list_open_unexpired(db: AsyncSession) -> list[Drive]:
    """
    Drives still accepting applications, earliest deadline first.

    This is only a coarse prefilter; per-student rules are applied by the
    eligibility evaluator.
    """
    result = await db.execute(
        select(Drive)
        .where(
            Drive.status == DriveStatus.OPEN,
            Drive.deadline_date > func.now(),
        )
        .order_by(Drive.deadline_date.asc(), Drive.id)
    )
    return list(result.scalars().all())


async def list_for_home_page(db: AsyncSession) -> list[Drive]:
    """Every drive except cancelled ones, by drive date."""
    result = await db.execute(
        select(Drive)
        .where(Drive.status != DriveStatus.CANCELLED)
        .order_by(Drive.drive_date.asc(), Drive.id)
    )
    return list(result.scalars().all())


async def update_if_status(
    db: AsyncSession,
    drive_id: int,
    observed_status: DriveStatus,
    values: dict[str, Any],
) -> int:
    """
    Apply an admin edit only if the drive still has the status that was read.

    A concurrent reconciler close (or another admin edit) makes this a no-op
    instead of being overwritten.

    Returns:
        Number of rows updated (0 if the status changed underneath)
    """
    result = await db.execute(
        update(Drive)
        .where(Drive.id == drive_id, Drive.status == observed_status)
        .values(**values, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount


async def count_applications(db: AsyncSession, drive_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(Application).where(Application.drive_id == drive_id)
    )
    return result.scalar_one()


async def delete_drive(db: AsyncSession, drive_id: int) -> int:
    """Delete a drive row. Returns the number of rows removed."""
    result = await db.execute(
        delete(Drive).where(Drive.id == drive_id).execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount


async def close_expired_drives(db: AsyncSession) -> int:
    """
    Close every open drive whose deadline has passed.

    One conditional bulk UPDATE: only rows still open are touched, so an
    admin moving a drive to on_hold or cancelled is never overwritten.
    Running it twice in a row is a no-op the second time.

    Returns:
        Number of drives closed
    """
    result = await db.execute(
        update(Drive)
        .where(
            Drive.status == DriveStatus.OPEN,
            Drive.deadline_date < func.now(),
        )
        .values(status=DriveStatus.CLOSED, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount
