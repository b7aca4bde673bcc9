from fastapi import APIRouter

from app.modules.applications import router as applications_router
from app.modules.applications.admin_router import router as admin_applications_router

api_router = APIRouter()

api_router.include_router(applications_router, prefix="/applications", tags=["Applications"])

api_router.include_router(
    admin_applications_router,
    prefix="/admin/applications",
    tags=["Admin - Applications"],
)
