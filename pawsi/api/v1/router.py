from fastapi import APIRouter
from pawsi.api.v1 import admin, auth, health, listings, maintenance, me, notifications, reports
from pawsi.core.config import settings

api_router = APIRouter(prefix=settings.API_V1_PREFIX)

api_router.include_router(health.router, tags=['health'])
api_router.include_router(auth.router)
api_router.include_router(me.router)
api_router.include_router(listings.router)
api_router.include_router(reports.router)
api_router.include_router(admin.router)
api_router.include_router(notifications.router)
api_router.include_router(maintenance.router)
