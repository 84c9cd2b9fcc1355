"""API routers package."""
from .discovery import router as discovery_router
from .feedback import router as feedback_router
from .health import router as health_router
from .recommendations import router as recommendations_router
from .search import router as search_router

__all__ = [
    "discovery_router",
    "feedback_router",
    "health_router",
    "recommendations_router",
    "search_router",
]
