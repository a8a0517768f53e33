"""
Auth Service Layer

Sign-in and password reset with one-time codes.

Security considerations:
- Codes are 6 digits from the ``secrets`` CSPRNG
- At most one live code per email (upsert), valid for OTP_EXPIRY_MINUTES
- Expiry is checked against the database clock
- Resetting the password and consuming the code happen in one transaction
- Codes are never logged
"""

import logging
import secrets
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.core.config import settings
from placement_portal.core.errors import (
    STORAGE_ERRORS,
    NotFoundError,
    ServiceError,
    ValidationError,
    translate_storage_error,
)
from placement_portal.core.security import create_access_token, hash_password, verify_password
from placement_portal.modules.auth.schemas import LoginResponse, UserResponse
from placement_portal.modules.drives.repository import get_database_now
from placement_portal.modules.users.repository import PasswordResetRepository, UserRepository

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


class InvalidCredentialsError(ServiceError):
    def __init__(self):
        super().__init__(
            message="Invalid email or password.",
            error_code="INVALID_CREDENTIALS",
            status_code=401,
        )


class AccountBlockedError(ServiceError):
    def __init__(self):
        super().__init__(
            message="Your account has been blocked. Contact the placement cell.",
            error_code="ACCOUNT_BLOCKED",
            status_code=403,
        )


class AccountInactiveError(ServiceError):
    def __init__(self):
        super().__init__(
            message="Your account has been deactivated.",
            error_code="ACCOUNT_INACTIVE",
            status_code=403,
        )


class AccountNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(
            message="No account is registered with this email.",
            error_code="USER_NOT_FOUND",
        )


def generate_otp() -> str:
    """Return a zero-padded 6-digit numeric code."""
    return f"{secrets.randbelow(10**OTP_LENGTH):0{OTP_LENGTH}d}"


async def login(db: AsyncSession, email: str, password: str) -> LoginResponse:
    """
    Verify credentials and issue an access token.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        AccountBlockedError: The account is blocked
        AccountInactiveError: The account is deactivated
    """
    user = await UserRepository.get_by_email(db, email)

    if not user:
        logger.warning("Login attempt for non-existent email")
        raise InvalidCredentialsError()

    if not verify_password(password, user.password_hash):
        logger.warning(f"Invalid password for user {user.id}")
        raise InvalidCredentialsError()

    if user.is_blocked:
        logger.warning(f"Login attempt for blocked account {user.id}")
        raise AccountBlockedError()

    if not user.is_active:
        logger.warning(f"Login attempt for inactive account {user.id}")
        raise AccountInactiveError()

    access_token = create_access_token(
        subject=str(user.id),
        additional_claims={"email": user.email, "role": user.role.value},
    )

    logger.info(f"User logged in: {user.id} (role: {user.role.value})")

    return LoginResponse(
        access_token=access_token,
        user=UserResponse(id=user.id, email=user.email, role=user.role.value),
    )


async def request_password_reset(db: AsyncSession, email: str) -> str:
    """
    Issue a fresh reset code for an account, replacing any earlier code.

    Returns:
        The generated code, for the caller to hand to the notifier

    Raises:
        AccountNotFoundError: If no account uses this email
    """
    user = await UserRepository.get_by_email(db, email)
    if not user:
        raise AccountNotFoundError()

    code = generate_otp()

    try:
        expires_at = await get_database_now(db) + timedelta(minutes=settings.otp_expiry_minutes)
        await PasswordResetRepository.upsert_code(db, user.email, code, expires_at)
        await db.commit()
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e

    logger.info(f"Password reset code issued for user {user.id}")
    return code


async def reset_password(db: AsyncSession, email: str, code: str, new_password: str) -> None:
    """
    Set a new password using a valid reset code, consuming the code.

    Raises:
        ValidationError: If the code does not match or has expired
    """
    user = await UserRepository.get_by_email(db, email)
    if not user:
        raise ValidationError("Invalid or expired code")

    try:
        reset = await PasswordResetRepository.get_valid(db, user.email, code)
        if reset is None:
            await db.rollback()
            raise ValidationError("Invalid or expired code")

        await UserRepository.update_password_hash(db, user.email, hash_password(new_password))
        await PasswordResetRepository.delete_for_email(db, user.email)
        await db.commit()
    except STORAGE_ERRORS as e:
        await db.rollback()
        raise translate_storage_error(e) from e

    logger.info(f"Password reset completed for user {user.id}")
