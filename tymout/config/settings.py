"""
Centralized configuration using Pydantic BaseSettings.
All environment variables are loaded here - no hardcoded values.
"""
from functools import lru_cache
from typing import Dict, Optional

from pydantic_settings import BaseSettings

DEFAULT_SERVICE_URL = "http://localhost:3000/api"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Tymout Discovery API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Downstream services
    USER_SERVICE_URL: str = DEFAULT_SERVICE_URL
    EVENT_SERVICE_URL: str = DEFAULT_SERVICE_URL
    REQUEST_SERVICE_URL: str = DEFAULT_SERVICE_URL
    NOTIFICATION_SERVICE_URL: str = DEFAULT_SERVICE_URL
    SERVICE_TIMEOUT_SEC: float = 30.0

    # Pagination
    MAX_LIMIT: int = 50
    INTEREST_RESULTS_LIMIT: int = 10

    # Feedback storage
    FEEDBACK_STORE: str = "memory"  # memory | mongo
    MONGO_URI: Optional[str] = None
    MONGO_DB_NAME: str = "tymout-feedback"

    # Telemetry
    ENABLE_OTEL: bool = False  # Default to False to prevent gRPC errors in dev
    OTEL_EXPORTER_ENDPOINT: Optional[str] = None
    ENABLE_PROMETHEUS: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def service_urls(self) -> Dict[str, str]:
        """Logical service name -> base URL."""
        return {
            "user": self.USER_SERVICE_URL,
            "event": self.EVENT_SERVICE_URL,
            "request": self.REQUEST_SERVICE_URL,
            "notification": self.NOTIFICATION_SERVICE_URL,
        }


class ServiceRegistry:
    """
    Immutable map of downstream service names to base URLs.
    Built once at startup and handed to the service client.
    """

    def __init__(self, urls: Dict[str, str]) -> None:
        self._urls = {name: url.rstrip("/") for name, url in urls.items()}

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceRegistry":
        return cls(settings.service_urls)

    def resolve(self, service_name: str) -> Optional[str]:
        """Return the base URL for a service, or None if unknown."""
        return self._urls.get(service_name)

    @property
    def names(self) -> list:
        return sorted(self._urls)


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance - singleton pattern."""
    return Settings()
