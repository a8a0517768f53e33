from fastapi import APIRouter

from placement_portal.modules.applications.router import admin_router as admin_applications_router
from placement_portal.modules.applications.router import student_router as applications_router
from placement_portal.modules.auth import router as auth_router
from placement_portal.modules.drives.router import admin_router as admin_drives_router
from placement_portal.modules.drives.router import router as drives_router
from placement_portal.modules.lifecycle.router import router as admin_jobs_router
from placement_portal.modules.students.router import router as admin_students_router
from placement_portal.modules.students.router import student_router as students_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(drives_router, prefix="/drives", tags=["Drives"])
api_router.include_router(applications_router, tags=["Applications"])
api_router.include_router(students_router, prefix="/students", tags=["Students"])

api_router.include_router(admin_drives_router, prefix="/admin/drives", tags=["Admin - Drives"])
api_router.include_router(
    admin_applications_router,
    prefix="/admin/drives",
    tags=["Admin - Applications"],
)
api_router.include_router(
    admin_students_router,
    prefix="/admin/students",
    tags=["Admin - Students"],
)
api_router.include_router(admin_jobs_router, prefix="/admin/jobs", tags=["Admin - Jobs"])
