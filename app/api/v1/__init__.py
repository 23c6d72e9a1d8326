from fastapi import APIRouter

from app.api.v1.routers import admin, health, loans

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(loans.router)
api_router.include_router(admin.router)

__all__ = ["api_router"]
