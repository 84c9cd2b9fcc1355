"""
Shared fan-out over the event service's `events` and `circles` collections.
"""
import asyncio
from typing import Any, Dict, Optional

from tymout.clients.service_client import ServiceClient
from tymout.models.schemas import ContentBuckets, ContentType


def unwrap(body: Any, default: Any) -> Any:
    """Unwrap the `{success, data}` envelope of a sibling service."""
    if isinstance(body, dict) and body.get("data") is not None:
        return body["data"]
    return default


async def _skipped() -> Dict[str, Any]:
    return {}


async def fetch_both(
    client: ServiceClient,
    content_type: ContentType,
    endpoint: str,
    params: Optional[Dict[str, Any]] = None,
):
    """
    GET `/events{endpoint}` and `/circles{endpoint}` concurrently and return
    the raw bodies. A kind the request does not cover yields `{}`.
    """
    events_call = (
        client.fetch("event", f"/events{endpoint}", params=params)
        if content_type.includes_events
        else _skipped()
    )
    circles_call = (
        client.fetch("event", f"/circles{endpoint}", params=params)
        if content_type.includes_circles
        else _skipped()
    )
    return await asyncio.gather(events_call, circles_call)


async def fetch_buckets(
    client: ServiceClient,
    content_type: ContentType,
    endpoint: str,
    params: Optional[Dict[str, Any]] = None,
) -> ContentBuckets:
    """Like `fetch_both`, with each body's `data` list unwrapped."""
    events, circles = await fetch_both(client, content_type, endpoint, params)
    return ContentBuckets(events=unwrap(events, []), circles=unwrap(circles, []))
