"""
Authentication router.

Endpoints:
- POST /auth/login - Exchange email and password for an access token
- POST /auth/forgot-password - Email a one-time reset code
- POST /auth/reset-password - Set a new password with the code
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.core.config import settings
from placement_portal.core.database import get_db
from placement_portal.core.email import send_password_reset_code
from placement_portal.core.errors import ServiceError, raise_http_error, unexpected_error
from placement_portal.core.rate_limit import enforce_rate_limit
from placement_portal.modules.auth import service
from placement_portal.modules.auth.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ResetPasswordRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Reset codes per email address
RATE_LIMIT_FORGOT_PASSWORD = (3, 3600)
# Reset attempts per email address
RATE_LIMIT_RESET_PASSWORD = (10, 3600)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate user and return a JWT access token.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account blocked or inactive
    """
    try:
        return await service.login(db, credentials.email, credentials.password)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error during login: {e}")
        raise unexpected_error(e) from e


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """
    Send a 6-digit reset code to the account's email.

    Delivery happens after the response is sent; a delivery failure is
    logged and not reported to the caller.
    """
    await enforce_rate_limit(
        f"forgot_password:{request.email.lower()}", *RATE_LIMIT_FORGOT_PASSWORD
    )

    try:
        code = await service.request_password_reset(db, request.email)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error issuing password reset code: {e}")
        raise unexpected_error(e) from e

    background_tasks.add_task(
        send_password_reset_code,
        to_email=request.email,
        code=code,
        expires_in_minutes=settings.otp_expiry_minutes,
    )
    return MessageResponse(message="A reset code has been sent to your email.")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Set a new password using a valid, unexpired reset code."""
    await enforce_rate_limit(f"reset_password:{request.email.lower()}", *RATE_LIMIT_RESET_PASSWORD)

    try:
        await service.reset_password(db, request.email, request.code, request.new_password)
    except ServiceError as e:
        raise_http_error(e)
    except Exception as e:
        logger.exception(f"Error resetting password: {e}")
        raise unexpected_error(e) from e

    return MessageResponse(message="Password updated successfully.")
