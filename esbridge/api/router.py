"""
API router - aggregates all endpoint modules (RESTful structure).
"""

from fastapi import APIRouter

from esbridge.api.endpoints import documents, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(documents.router, prefix="/products", tags=["products"])
