"""
Recommendation service - personalized, similar, featured and popular content.
"""
import asyncio
import logging
from typing import Any, Dict, List

from tymout.clients.service_client import ServiceClient
from tymout.core.exceptions import ValidationError
from tymout.models.schemas import (
    ContentBuckets,
    ContentType,
    Item,
    ItemKind,
    Timeframe,
)
from tymout.services.content import fetch_buckets, unwrap
from tymout.services.scoring import FeatureScoring, PopularityScoring, rank_items

logger = logging.getLogger(__name__)


def _history_ids(history: List[Dict[str, Any]], key: str) -> List[Any]:
    """Collect `key` from history entries, dropping empty values."""
    return [entry.get(key) for entry in history if entry.get(key)]


class RecommendationService:
    """
    Builds recommendation lists from user and event service data.

    Responsibilities:
    - Resolve the user's city, interests and history
    - Ask the event service for candidates
    - Rank featured and popular candidates locally
    """

    def __init__(self, client: ServiceClient) -> None:
        self._client = client

    async def get_personalized(
        self,
        user_id: str,
        content_type: ContentType,
        limit: int,
    ) -> ContentBuckets:
        """
        Recommend items in the user's city matching their interests,
        excluding anything already in their history.

        Raises:
            ValidationError: the user has no current city set
        """
        profile = await self._client.fetch("user", f"/users/{user_id}")
        user_city = unwrap(profile, {}).get("currentCity")
        if not user_city:
            raise ValidationError(
                "Please set your current city to get personalized recommendations."
            )

        preferences, history = await asyncio.gather(
            self._client.fetch("user", f"/users/{user_id}/preferences"),
            self._client.fetch("user", f"/users/{user_id}/history"),
        )
        preferences = unwrap(preferences, {})
        history = unwrap(history, [])
        interests = preferences.get("interests") or []
        city = preferences.get("location") or user_city

        events_params = {
            "city": city,
            "interests": interests,
            "excludeIds": _history_ids(history, "eventId"),
            "limit": limit,
        }
        circles_params = {**events_params, "excludeIds": _history_ids(history, "circleId")}

        async def _recommended(kind: str, params: Dict[str, Any]) -> List[Item]:
            body = await self._client.fetch("event", f"/{kind}/recommended", params=params)
            return unwrap(body, [])

        async def _none() -> List[Item]:
            return []

        events, circles = await asyncio.gather(
            _recommended("events", events_params) if content_type.includes_events else _none(),
            _recommended("circles", circles_params) if content_type.includes_circles else _none(),
        )

        logger.info(
            f"Personalized recommendations: user={user_id}, "
            f"events={len(events)}, circles={len(circles)}"
        )
        return ContentBuckets(events=events, circles=circles)

    async def get_similar(self, kind: ItemKind, item_id: str, limit: int) -> List[Item]:
        """Items sharing category, tags and city with the given item."""
        body = await self._client.fetch("event", f"/{kind.value}/{item_id}")
        item = unwrap(body, {})
        location = item.get("location")
        location_city = location.get("city") if isinstance(location, dict) else None

        similar = await self._client.fetch(
            "event",
            f"/{kind.value}/similar",
            params={
                "category": item.get("category"),
                "tags": item.get("tags"),
                "city": item.get("city") or location_city,
                "excludeId": item.get("_id") or item.get("id") or item_id,
                "limit": limit,
            },
        )
        return unwrap(similar, [])

    async def get_featured(self, content_type: ContentType, limit: int) -> ContentBuckets:
        """Featured items ranked by feature score."""
        results = await fetch_buckets(
            self._client, content_type, "/featured", {"limit": limit}
        )
        strategy = FeatureScoring()
        return ContentBuckets(
            events=rank_items(results.events, strategy),
            circles=rank_items(results.circles, strategy),
        )

    async def get_popular(
        self,
        content_type: ContentType,
        timeframe: Timeframe,
        limit: int,
    ) -> ContentBuckets:
        """Popular items ranked by popularity score for `timeframe`."""
        results = await fetch_buckets(
            self._client,
            content_type,
            "/popular",
            {"timeframe": timeframe.value, "limit": limit},
        )
        strategy = PopularityScoring(timeframe)
        return ContentBuckets(
            events=rank_items(results.events, strategy),
            circles=rank_items(results.circles, strategy),
        )
