"""
Model registry.

Importing this module registers every table on ``Base.metadata``
(used by ``init_db(create_tables=True)`` and Alembic autogenerate).
"""

from placement_portal.modules.applications.models import Application, ApplicationStatus
from placement_portal.modules.drives.models import Drive, DriveStatus
from placement_portal.modules.students.models import StudentProfile
from placement_portal.modules.users.models import PasswordReset, User, UserRole

__all__ = [
    "Application",
    "ApplicationStatus",
    "Drive",
    "DriveStatus",
    "PasswordReset",
    "StudentProfile",
    "User",
    "UserRole",
]
