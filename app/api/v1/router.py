"""API v1 router aggregation."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, navigation, profiles

api_router = APIRouter()

# Include routers
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(navigation.router, prefix="/navigation", tags=["Navigation"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
