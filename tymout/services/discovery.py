"""
Discovery service - browse events and circles by city, category, trend and
the user's interests.
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from tymout.clients.service_client import ServiceClient
from tymout.models.schemas import (
    CategoryCount,
    ContentBuckets,
    ContentType,
    InterestContent,
    Item,
    Timeframe,
)
from tymout.services.content import fetch_buckets, unwrap
from tymout.services.scoring import InterestScoring, TrendScoring, rank_items

logger = logging.getLogger(__name__)

PRIMARY_INTEREST_COUNT = 3


def aggregate_categories(
    event_categories: List[Dict[str, Any]],
    circle_categories: List[Dict[str, Any]],
) -> List[CategoryCount]:
    """
    Merge per-kind category counts into one list sorted by total.

    Entries without a name are skipped. The first event entry for a name
    wins. A circle entry sets the circle count of an existing name (later
    entries overwrite) and adds to its total.
    """
    categories: Dict[str, CategoryCount] = {}

    for category in event_categories:
        name = category.get("name")
        if name and name not in categories:
            count = category.get("count") or 0
            categories[name] = CategoryCount(
                name=name, event_count=count, total_count=count
            )

    for category in circle_categories:
        name = category.get("name")
        if not name:
            continue
        count = category.get("count") or 0
        existing = categories.get(name)
        if existing is not None:
            existing.circle_count = count
            existing.total_count += count
        else:
            categories[name] = CategoryCount(
                name=name, circle_count=count, total_count=count
            )

    return sorted(categories.values(), key=lambda c: c.total_count, reverse=True)


class DiscoveryService:
    """Aggregates discovery data from the event and user services."""

    def __init__(self, client: ServiceClient, interest_results_limit: int = 10) -> None:
        self._client = client
        self._interest_results_limit = interest_results_limit

    async def get_items_by_city(self, city: str, content_type: ContentType) -> ContentBuckets:
        """Events and/or circles located in `city`."""
        return await fetch_buckets(self._client, content_type, "/city", {"city": city})

    async def get_categories(self) -> List[CategoryCount]:
        """All categories with event and circle counts."""
        event_categories, circle_categories = await asyncio.gather(
            self._client.fetch("event", "/events/categories"),
            self._client.fetch("event", "/circles/categories"),
        )
        return aggregate_categories(
            unwrap(event_categories, []),
            unwrap(circle_categories, []),
        )

    async def get_trending_items(
        self,
        content_type: ContentType,
        timeframe: Timeframe,
        now: Optional[datetime] = None,
    ) -> ContentBuckets:
        """Trending items ranked by trend score within `timeframe`."""
        results = await fetch_buckets(
            self._client, content_type, "/trending", {"timeframe": timeframe.value}
        )
        strategy = TrendScoring(timeframe, now=now)
        return ContentBuckets(
            events=rank_items(results.events, strategy),
            circles=rank_items(results.circles, strategy),
        )

    async def get_interest_based_content(self, auth_token: str) -> InterestContent:
        """
        Content matching the caller's interests, weighted by interest order.
        The caller's token is forwarded to the user service.
        """
        profile = await self._client.fetch(
            "user", "/users/user/preferences", auth_token=auth_token
        )
        interests: List[str] = unwrap(profile, {}).get("interests") or []
        logger.info(f"Building interest-based content for {len(interests)} interests")

        params = {"interests": ",".join(interests)}
        events, circles = await asyncio.gather(
            self._client.fetch("event", "/events/search", params=params),
            self._client.fetch("event", "/circles/search", params=params),
        )

        strategy = InterestScoring(interests)
        limit = self._interest_results_limit
        scored_events: List[Item] = rank_items(unwrap(events, []), strategy)[:limit]
        scored_circles: List[Item] = rank_items(unwrap(circles, []), strategy)[:limit]

        return InterestContent(
            weighted_interests=strategy.weighted_interests,
            primary_interests=interests[:PRIMARY_INTEREST_COUNT],
            secondary_interests=interests[PRIMARY_INTEREST_COUNT:],
            recommendations=ContentBuckets(events=scored_events, circles=scored_circles),
        )
