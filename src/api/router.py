"""
Main API router

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from src.api.endpoints import assessment, metadata

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    assessment.router,
    prefix="/ai",
    tags=["Assessment"]
)

api_router.include_router(
    metadata.router,
    prefix="/metadata",
    tags=["Metadata"]
)

# WebSocket routes live at the application root
ws_router = assessment.ws_router
