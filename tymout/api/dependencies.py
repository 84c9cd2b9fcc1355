"""
Dependency injection container.
Creates and wires all application components.
Uses FastAPI's dependency injection system.
"""
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from tymout.clients.service_client import ServiceClient
from tymout.config import ServiceRegistry, get_settings
from tymout.core.exceptions import AuthenticationError
from tymout.models.interfaces import FeedbackRepository
from tymout.repositories.memory import InMemoryFeedbackRepository
from tymout.repositories.mongo import MongoFeedbackRepository
from tymout.services.discovery import DiscoveryService
from tymout.services.feedback import FeedbackService
from tymout.services.recommendation import RecommendationService
from tymout.services.search import SearchService

BEARER_PREFIX = "Bearer "


# =============================================================================
# Singleton Instances (Application Lifetime)
# =============================================================================


@lru_cache()
def get_service_registry() -> ServiceRegistry:
    """Get singleton registry of downstream service URLs."""
    return ServiceRegistry.from_settings(get_settings())


@lru_cache()
def get_service_client() -> ServiceClient:
    """Get singleton HTTP client for downstream services."""
    settings = get_settings()
    return ServiceClient(
        registry=get_service_registry(),
        timeout_sec=settings.SERVICE_TIMEOUT_SEC,
    )


@lru_cache()
def get_feedback_repository() -> FeedbackRepository:
    """Get singleton feedback repository selected by FEEDBACK_STORE."""
    settings = get_settings()
    if settings.FEEDBACK_STORE == "mongo":
        if not settings.MONGO_URI:
            raise RuntimeError("MONGO_URI must be set when FEEDBACK_STORE=mongo")
        return MongoFeedbackRepository.from_uri(settings.MONGO_URI, settings.MONGO_DB_NAME)
    return InMemoryFeedbackRepository()


# =============================================================================
# Request-Scoped Dependencies (Per-Request Lifetime)
# =============================================================================


def get_discovery_service(
    client: ServiceClient = Depends(get_service_client),
) -> DiscoveryService:
    return DiscoveryService(
        client,
        interest_results_limit=get_settings().INTEREST_RESULTS_LIMIT,
    )


def get_recommendation_service(
    client: ServiceClient = Depends(get_service_client),
) -> RecommendationService:
    return RecommendationService(client)


def get_search_service(
    client: ServiceClient = Depends(get_service_client),
) -> SearchService:
    return SearchService(client)


def get_feedback_service(
    repository: FeedbackRepository = Depends(get_feedback_repository),
) -> FeedbackService:
    return FeedbackService(repository)


# =============================================================================
# Caller Identity (set by the API gateway)
# =============================================================================


def get_optional_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-ID"),
) -> Optional[str]:
    return x_user_id.strip() if x_user_id and x_user_id.strip() else None


def get_current_user_id(
    user_id: Optional[str] = Depends(get_optional_user_id),
) -> str:
    """Authenticated user id; 401 when the gateway did not forward one."""
    if user_id is None:
        raise AuthenticationError("No user identity, authorization denied")
    return user_id


def get_bearer_token(
    authorization: Optional[str] = Header(default=None),
) -> str:
    """Caller's bearer token, forwarded to downstream services."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError("No token, authorization denied")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("No token, authorization denied")
    return token


# =============================================================================
# Cleanup Functions
# =============================================================================


def clear_caches() -> None:
    """Clear all cached singleton instances (for testing)."""
    get_service_registry.cache_clear()
    get_service_client.cache_clear()
    get_feedback_repository.cache_clear()
