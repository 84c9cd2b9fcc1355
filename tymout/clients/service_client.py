"""
HTTP client for sibling Tymout services (user, event, request, notification).

Downstream failures are classified before being re-raised so callers and the
API layer can tell a timeout from an unreachable or failing service. There is
no retry and no circuit breaking: one failed call fails the whole request.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import httpx

from tymout.config import ServiceRegistry
from tymout.core.exceptions import (
    DownstreamTimeoutError,
    DownstreamUnavailableError,
    UnknownServiceError,
)

logger = logging.getLogger(__name__)


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def encode_params(params: Optional[Dict[str, Any]]) -> List[Tuple[str, str]]:
    """
    Flatten nested params into bracket notation.

    {"price": {"$gte": 0}, "tags": {"$in": ["a"]}}
        -> [("price[$gte]", "0"), ("tags[$in][]", "a")]

    None values are dropped.
    """
    encoded: List[Tuple[str, str]] = []

    def _walk(prefix: str, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, dict):
            for key, inner in value.items():
                _walk(f"{prefix}[{key}]", inner)
        elif isinstance(value, (list, tuple, set)):
            for inner in value:
                if inner is not None:
                    encoded.append((f"{prefix}[]", _scalar(inner)))
        else:
            encoded.append((prefix, _scalar(value)))

    for key, value in (params or {}).items():
        _walk(key, value)
    return encoded


class ServiceClient:
    """
    Thin async wrapper over httpx for calling sibling services.

    Usage:
        client = ServiceClient(ServiceRegistry.from_settings(settings))
        body = await client.fetch("event", "/events/city", params={"city": "Pune"})
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        timeout_sec: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._registry = registry
        self._timeout_sec = timeout_sec
        self._http = http_client or httpx.AsyncClient(timeout=timeout_sec)

    @property
    def registry(self) -> ServiceRegistry:
        return self._registry

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch(
        self,
        service_name: str,
        endpoint: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        auth_token: Optional[str] = None,
    ) -> Any:
        """
        Call `endpoint` on a downstream service and return the decoded body.

        Raises:
            UnknownServiceError: service name not registered (no I/O attempted)
            DownstreamTimeoutError: the call exceeded the timeout
            DownstreamUnavailableError: connection failure or non-2xx status
        """
        base_url = self._registry.resolve(service_name)
        if base_url is None:
            raise UnknownServiceError(service_name)

        request_headers = {"Content-Type": "application/json"}
        if auth_token:
            request_headers["Authorization"] = f"Bearer {auth_token}"
        if headers:
            request_headers.update(headers)

        url = f"{base_url}{endpoint}"
        log_context = {"service": service_name, "endpoint": endpoint}

        try:
            response = await self._http.request(
                method,
                url,
                params=encode_params(params),
                json=data,
                headers=request_headers,
                timeout=self._timeout_sec,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error(
                f"Error calling {service_name} service: timeout ({exc!r})",
                extra=log_context,
            )
            raise DownstreamTimeoutError(service_name, self._timeout_sec) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error(
                f"Error calling {service_name} service: HTTP {status} for {endpoint}",
                extra=log_context,
            )
            raise DownstreamUnavailableError(
                service_name, f"HTTP {status}", upstream_status=status
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                f"Error calling {service_name} service: {exc!r}",
                extra=log_context,
            )
            raise DownstreamUnavailableError(service_name, type(exc).__name__) from exc

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            logger.error(
                f"Error calling {service_name} service: invalid JSON body",
                extra=log_context,
            )
            raise DownstreamUnavailableError(service_name, "invalid JSON body") from exc
