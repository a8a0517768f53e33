"""Authentication module."""

from placement_portal.modules.auth.router import router
from placement_portal.modules.auth.schemas import LoginRequest, LoginResponse

__all__ = ["router", "LoginRequest", "LoginResponse"]
