from fastapi import APIRouter

from storehours.api.v1.routers import business_hours as business_hours_router
from storehours.api.v1.routers import admin_business_hours as admin_business_hours_router

router = APIRouter()

# public routes
router.include_router(business_hours_router.router)

# admin routes
router.include_router(admin_business_hours_router.router)
