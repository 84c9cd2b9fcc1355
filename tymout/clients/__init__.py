"""Clients for downstream Tymout services."""
from .service_client import ServiceClient, encode_params

__all__ = ["ServiceClient", "encode_params"]
