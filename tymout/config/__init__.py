"""Configuration package."""
from .settings import ServiceRegistry, Settings, get_settings

__all__ = ["ServiceRegistry", "Settings", "get_settings"]
