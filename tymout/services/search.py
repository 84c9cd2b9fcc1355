"""
Search service - filter construction, result ordering and autocomplete.

The filter is built in MongoDB query syntax and forwarded to the event
service, which executes it. Only ordering happens here.
"""
import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from tymout.clients.service_client import ServiceClient
from tymout.core.exceptions import ValidationError
from tymout.models.schemas import (
    ContentType,
    Item,
    Pagination,
    SearchFilters,
    SearchResults,
    SortOption,
    Suggestion,
    SuggestionType,
)
from tymout.services.content import fetch_both, unwrap
from tymout.services.scoring import parse_timestamp

logger = logging.getLogger(__name__)

SortFunction = Callable[[List[Item]], List[Item]]


# =============================================================================
# Filter Construction
# =============================================================================


def build_search_query(filters: SearchFilters) -> Dict[str, Any]:
    """Translate search filters into a MongoDB-style filter document."""
    query: Dict[str, Any] = {"city": filters.city}

    if filters.query:
        query["$text"] = {"$search": filters.query}

    if filters.category:
        query["category"] = filters.category

    if filters.start_date or filters.end_date:
        date_range: Dict[str, Any] = {}
        if filters.start_date:
            date_range["$gte"] = filters.start_date
        if filters.end_date:
            date_range["$lte"] = filters.end_date
        query["date"] = date_range

    # min_price defaults to 0, so the price clause is always present
    price_range: Dict[str, Any] = {"$gte": filters.min_price}
    if filters.max_price is not None:
        price_range["$lte"] = filters.max_price
    query["price"] = price_range

    if filters.tags:
        query["tags"] = {"$in": filters.tags}

    if filters.capacity:
        query["capacity"] = {"$gte": filters.capacity}

    if filters.status:
        query["status"] = filters.status.value

    return query


# =============================================================================
# Ordering
# =============================================================================


def _date_key(item: Item) -> Tuple[bool, float]:
    date = item.get("date")
    start = date.get("start") if isinstance(date, dict) else None
    timestamp = parse_timestamp(start or item.get("createdAt"))
    if timestamp is None:
        return True, 0.0
    return False, -timestamp.timestamp()


def get_sort_function(sort_type: Optional[SortOption]) -> SortFunction:
    """
    Return a function that orders a result list for `sort_type`.

    date: newest `date.start` (or `createdAt`) first, undated items last
    price: cheapest first, missing price counts as 0
    relevance (default, also used for distance): highest `score` first
    """
    if sort_type == SortOption.DATE:
        return lambda items: sorted(items, key=_date_key)
    if sort_type == SortOption.PRICE:
        return lambda items: sorted(items, key=lambda item: item.get("price") or 0)
    return lambda items: sorted(
        items, key=lambda item: item.get("score") or 0, reverse=True
    )


def apply_search_ranking(results: SearchResults, filters: SearchFilters) -> SearchResults:
    """Sort the buckets covered by `filters.type`."""
    sort_fn = get_sort_function(filters.sort)
    if filters.type.includes_events:
        results.events = sort_fn(results.events)
    if filters.type.includes_circles:
        results.circles = sort_fn(results.circles)
    return results


# =============================================================================
# Autocomplete
# =============================================================================


def get_event_suggestions(query: str) -> List[Suggestion]:
    return [
        Suggestion(type=SuggestionType.EVENT, text=f"{query} events"),
        Suggestion(type=SuggestionType.EVENT, text=f"Events with {query}"),
    ]


def get_circle_suggestions(query: str) -> List[Suggestion]:
    return [
        Suggestion(type=SuggestionType.CIRCLE, text=f"{query} circles"),
        Suggestion(type=SuggestionType.CIRCLE, text=f"Circles about {query}"),
    ]


def get_tag_suggestions(query: str) -> List[Suggestion]:
    return [
        Suggestion(type=SuggestionType.TAG, text=f"#{query}"),
        Suggestion(type=SuggestionType.TAG, text=f"#trending{query}"),
    ]


def rank_suggestions(suggestions: List[Suggestion], query: str) -> List[Suggestion]:
    """
    Drop repeated texts (first one wins), then order exact matches first,
    prefix matches second, everything else last. Matching ignores case;
    order within each group is preserved.
    """
    seen = set()
    unique: List[Suggestion] = []
    for suggestion in suggestions:
        if suggestion.text not in seen:
            seen.add(suggestion.text)
            unique.append(suggestion)

    query_lower = query.lower()

    def _rank(suggestion: Suggestion) -> int:
        text = suggestion.text.lower()
        if text == query_lower:
            return 0
        if text.startswith(query_lower):
            return 1
        return 2

    return sorted(unique, key=_rank)


# =============================================================================
# Search Service
# =============================================================================


def _page(body: Any) -> Tuple[List[Item], int]:
    """Extract `(items, total)` from a downstream search response."""
    data = unwrap(body, {})
    if isinstance(data, list):
        return data, len(data)
    return data.get("items") or [], data.get("total") or 0


class SearchService:
    """Runs filtered searches against the event service."""

    def __init__(self, client: ServiceClient) -> None:
        self._client = client

    async def _resolve_city(self, filters: SearchFilters, user_id: Optional[str]) -> str:
        if filters.city:
            return filters.city
        if user_id:
            profile = await self._client.fetch("user", f"/users/{user_id}")
            city = unwrap(profile, {}).get("currentCity")
            if city:
                return city
        raise ValidationError("City is required for search. Please set your current city.")

    async def search(
        self,
        filters: SearchFilters,
        user_id: Optional[str] = None,
    ) -> SearchResults:
        """
        Search events and circles.

        Falls back to the caller's current city when no location is given.

        Raises:
            ValidationError: no city could be determined
        """
        filters = filters.model_copy(update={"city": await self._resolve_city(filters, user_id)})

        params = {
            **build_search_query(filters),
            "page": filters.page,
            "limit": filters.limit,
        }
        events_body, circles_body = await fetch_both(
            self._client, filters.type, "/search", params
        )
        events, events_total = _page(events_body)
        circles, circles_total = _page(circles_body)
        total = events_total + circles_total

        results = SearchResults(events=events, circles=circles, total=total)
        results = apply_search_ranking(results, filters)
        results.pagination = Pagination(
            page=filters.page,
            limit=filters.limit,
            total=total,
            pages=math.ceil(total / filters.limit),
        )

        logger.info(
            f"Search served: city={filters.city}, type={filters.type.value}, "
            f"sort={filters.sort.value}, total={total}"
        )
        return results

    async def get_autocomplete(self, query: str, content_type: ContentType) -> List[Suggestion]:
        """Canned suggestions for a partial query, ranked by match quality."""
        suggestions: List[Suggestion] = []
        if content_type.includes_events:
            suggestions.extend(get_event_suggestions(query))
        if content_type.includes_circles:
            suggestions.extend(get_circle_suggestions(query))
        suggestions.extend(get_tag_suggestions(query))
        return rank_suggestions(suggestions, query)
