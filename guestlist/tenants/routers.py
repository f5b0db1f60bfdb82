from fastapi import APIRouter

from .features.event_settings.router import router as event_settings_router
from .features.login.router import router as login_router
from .features.manage_tenants.router import router as manage_tenants_router

router = APIRouter()

router.include_router(login_router)
router.include_router(manage_tenants_router)
router.include_router(event_settings_router)
