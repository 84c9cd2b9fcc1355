"""API package - FastAPI routes and dependencies."""
from .routers import (
    discovery_router,
    feedback_router,
    health_router,
    recommendations_router,
    search_router,
)

__all__ = [
    "discovery_router",
    "feedback_router",
    "health_router",
    "recommendations_router",
    "search_router",
]
