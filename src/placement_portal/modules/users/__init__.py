"""
Users module - Accounts and password-reset codes.
"""

from placement_portal.modules.users.models import PasswordReset, User, UserRole
from placement_portal.modules.users.repository import PasswordResetRepository, UserRepository

__all__ = ["User", "UserRole", "PasswordReset", "UserRepository", "PasswordResetRepository"]
