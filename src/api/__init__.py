"""
API layer for the readiness assessment

Contains FastAPI routers for:
- Assessment question preview
- Persona and stage metadata
- WebSocket assessment sessions
"""

from src.api.router import api_router, ws_router

__all__ = ["api_router", "ws_router"]
