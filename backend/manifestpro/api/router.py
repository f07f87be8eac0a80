from fastapi import APIRouter

from manifestpro.api.v1 import customs, health, manifests

api_router = APIRouter()

api_router.include_router(health.router, prefix="/v1", tags=["health"])
api_router.include_router(manifests.router, prefix="/v1/manifests", tags=["manifests"])
api_router.include_router(customs.router, prefix="/v1/customs", tags=["customs"])
