"""
Seed Admin User

Creates the initial placement-office admin account.
Run this script once to set up the admin account.

Usage:
    ADMIN_EMAIL=office@example.edu ADMIN_PASSWORD=... python scripts/seed_admin.py
"""

import asyncio
import os
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from placement_portal.core.config import settings
from placement_portal.core.database import create_engine, create_session_factory
from placement_portal.core.security import hash_password
from placement_portal.modules import models  # noqa: F401 - needed for relationship resolution
from placement_portal.modules.users.models import UserRole
from placement_portal.modules.users.repository import UserRepository


async def seed_admin(email: str, password: str) -> None:
    """Create the admin user if it doesn't exist."""
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)

    try:
        async with session_factory() as db:
            existing_user = await UserRepository.get_by_email(db, email)
            if existing_user:
                print(f"Admin already exists: {email}")
                print(f"  ID: {existing_user.id}")
                print(f"  Role: {existing_user.role.value}")
                return

            admin_user = await UserRepository.create(
                db,
                email=email.lower(),
                password_hash=hash_password(password),
                role=UserRole.ADMIN,
            )
            await db.commit()

            print("Admin created successfully!")
            print(f"  Email: {admin_user.email}")
            print(f"  ID: {admin_user.id}")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    admin_email = os.environ.get("ADMIN_EMAIL")
    admin_password = os.environ.get("ADMIN_PASSWORD")
    if not admin_email or not admin_password:
        sys.exit("ADMIN_EMAIL and ADMIN_PASSWORD must be set")
    asyncio.run(seed_admin(admin_email, admin_password))
