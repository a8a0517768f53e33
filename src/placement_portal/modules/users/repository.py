"""
User Repository

Database operations for accounts and password-reset codes.

Writes only flush; the calling service owns the transaction so that a
password change and the consumption of its reset code commit together.
"""

import logging
from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.modules.users.models import PasswordReset, User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        role: UserRole,
        is_active: bool = True,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            email: User's email address (unique)
            password_hash: Hashed password
            role: User's role
            is_active: Whether user is active

        Returns:
            Created User instance (flushed, id assigned)
        """
        user = User(
            email=email,
            password_hash=password_hash,
            role=role,
            is_active=is_active,
        )

        db.add(user)
        await db.flush()

        logger.debug(f"Created user: {user.id} - {user.email} ({role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
        """Get a user by ID."""
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """
        Get a user by email address (case-insensitive).

        Args:
            db: Database session
            email: Email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        """Check if an email address is already registered."""
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def set_blocked(db: AsyncSession, user_id: int, blocked: bool) -> int:
        """
        Block or unblock an account.

        Returns:
            Number of rows updated (0 if the user does not exist)
        """
        result = await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(is_blocked=blocked, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    async def update_password_hash(db: AsyncSession, email: str, password_hash: str) -> int:
        """Replace the password hash for the account with this email."""
        result = await db.execute(
            update(User)
            .where(func.lower(User.email) == email.lower())
            .values(password_hash=password_hash, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


class PasswordResetRepository:
    """Repository for one-time password-reset codes."""

    @staticmethod
    async def upsert_code(db: AsyncSession, email: str, code: str, expires_at: datetime) -> None:
        """
        Store a reset code, replacing any previous code for the email.

        Keeps at most one live row per email under concurrent requests.
        """
        stmt = insert(PasswordReset).values(email=email, code=code, expires_at=expires_at)
        stmt = stmt.on_conflict_do_update(
            index_elements=[PasswordReset.email],
            set_={
                "code": stmt.excluded.code,
                "expires_at": stmt.excluded.expires_at,
                "created_at": func.now(),
            },
        )
        await db.execute(stmt)

    @staticmethod
    async def get_valid(db: AsyncSession, email: str, code: str) -> PasswordReset | None:
        """
        Return the reset row if the code matches and has not expired.

        Expiry is judged by the database clock.
        """
        result = await db.execute(
            select(PasswordReset).where(
                PasswordReset.email == email,
                PasswordReset.code == code,
                PasswordReset.expires_at > func.now(),
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def delete_for_email(db: AsyncSession, email: str) -> None:
        """Consume the reset code for an email."""
        await db.execute(delete(PasswordReset).where(PasswordReset.email == email))

    @staticmethod
    async def delete_expired(db: AsyncSession) -> int:
        """
        Delete every code whose expiry has passed.

        Single bulk statement; safe to run repeatedly.

        Returns:
            Number of rows removed
        """
        result = await db.execute(
            delete(PasswordReset)
            .where(PasswordReset.expires_at < func.now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
