"""
Health check router for observability.
"""
from fastapi import APIRouter

from tymout.api.dependencies import get_service_registry
from tymout.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health Check")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": get_settings().APP_NAME}


@router.get("/health/ready", summary="Readiness Check")
async def readiness_check() -> dict:
    """
    Readiness check for Kubernetes.
    Reports the configured downstream services and feedback store.
    """
    settings = get_settings()
    registry = get_service_registry()

    return {
        "status": "ready",
        "downstream_services": {name: registry.resolve(name) for name in registry.names},
        "feedback_store": settings.FEEDBACK_STORE,
    }
