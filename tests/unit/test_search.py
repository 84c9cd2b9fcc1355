"""
Unit tests for search filter construction, ordering and autocomplete.
"""
from datetime import datetime, timezone

import pytest

from tymout.core.exceptions import ValidationError
from tymout.models.schemas import (
    ContentType,
    EventStatus,
    SearchFilters,
    SearchResults,
    SortOption,
    Suggestion,
    SuggestionType,
)
from tymout.services.search import (
    SearchService,
    apply_search_ranking,
    build_search_query,
    get_sort_function,
    rank_suggestions,
)


def _suggestions(*texts: str) -> list:
    return [Suggestion(type=SuggestionType.TAG, text=text) for text in texts]


class TestBuildSearchQuery:
    def test_minimal_filters(self):
        query = build_search_query(SearchFilters(city="Pune"))
        assert query == {"city": "Pune", "price": {"$gte": 0}}

    def test_all_filters(self):
        start = datetime(2025, 7, 1, tzinfo=timezone.utc)
        end = datetime(2025, 7, 31, tzinfo=timezone.utc)
        filters = SearchFilters(
            city="Pune",
            query="jazz night",
            category="music",
            start_date=start,
            end_date=end,
            min_price=5,
            max_price=50,
            tags=["jazz", "live"],
            capacity=20,
            status=EventStatus.UPCOMING,
        )

        query = build_search_query(filters)

        assert query == {
            "city": "Pune",
            "$text": {"$search": "jazz night"},
            "category": "music",
            "date": {"$gte": start, "$lte": end},
            "price": {"$gte": 5, "$lte": 50},
            "tags": {"$in": ["jazz", "live"]},
            "capacity": {"$gte": 20},
            "status": "upcoming",
        }

    def test_open_ended_date_range(self):
        end = datetime(2025, 7, 31, tzinfo=timezone.utc)
        query = build_search_query(SearchFilters(city="Pune", end_date=end))
        assert query["date"] == {"$lte": end}


class TestSortFunction:
    def test_price_ascending_missing_is_zero(self):
        items = [{"id": "a", "price": 30}, {"id": "b"}, {"id": "c", "price": 10}]
        ordered = get_sort_function(SortOption.PRICE)(items)
        assert [item["id"] for item in ordered] == ["b", "c", "a"]

    def test_date_descending_with_created_at_fallback(self):
        items = [
            {"id": "old", "date": {"start": "2025-01-01T00:00:00Z"}},
            {"id": "undated"},
            {"id": "new", "date": {"start": "2025-09-01T00:00:00Z"}},
            {"id": "created", "createdAt": "2025-05-01T00:00:00Z"},
        ]
        ordered = get_sort_function(SortOption.DATE)(items)
        assert [item["id"] for item in ordered] == ["new", "created", "old", "undated"]

    @pytest.mark.parametrize("sort", [SortOption.RELEVANCE, SortOption.DISTANCE, None])
    def test_relevance_descending_by_score(self, sort):
        items = [{"id": "a", "score": 1.5}, {"id": "b"}, {"id": "c", "score": 3}]
        ordered = get_sort_function(sort)(items)
        assert [item["id"] for item in ordered] == ["c", "a", "b"]

    def test_apply_search_ranking_only_sorts_requested_kind(self):
        results = SearchResults(
            events=[{"price": 9}, {"price": 1}],
            circles=[{"price": 9}, {"price": 1}],
        )
        filters = SearchFilters(type=ContentType.EVENTS, sort=SortOption.PRICE)

        ranked = apply_search_ranking(results, filters)

        assert [item["price"] for item in ranked.events] == [1, 9]
        assert [item["price"] for item in ranked.circles] == [9, 1]


class TestRankSuggestions:
    def test_exact_then_prefix_then_other(self):
        ranked = rank_suggestions(_suggestions("xabc", "abcdef", "abc"), "abc")
        assert [s.text for s in ranked] == ["abc", "abcdef", "xabc"]

    def test_already_ordered_input(self):
        ranked = rank_suggestions(_suggestions("abc", "abcdef", "xabc"), "abc")
        assert [s.text for s in ranked] == ["abc", "abcdef", "xabc"]

    def test_case_insensitive(self):
        ranked = rank_suggestions(_suggestions("Events with Jazz", "JAZZ events"), "jazz")
        assert [s.text for s in ranked] == ["JAZZ events", "Events with Jazz"]

    def test_deduplicates_keeping_first(self):
        suggestions = [
            Suggestion(type=SuggestionType.EVENT, text="#abc"),
            Suggestion(type=SuggestionType.TAG, text="#abc"),
        ]
        ranked = rank_suggestions(suggestions, "abc")
        assert len(ranked) == 1
        assert ranked[0].type == SuggestionType.EVENT


class TestSearchService:
    @pytest.mark.asyncio
    async def test_autocomplete_circles_only(self, service_client):
        service = SearchService(service_client)

        suggestions = await service.get_autocomplete("yoga", ContentType.CIRCLES)

        assert [s.text for s in suggestions] == [
            "yoga circles",
            "Circles about yoga",
            "#yoga",
            "#trendingyoga",
        ]

    @pytest.mark.asyncio
    async def test_city_falls_back_to_profile(self, service_client, downstream):
        downstream.add("user", "/users/u1", {"data": {"currentCity": "Goa"}})
        downstream.add("event", "/events/search", {"data": {"items": [], "total": 0}})
        downstream.add("event", "/circles/search", {"data": {"items": [], "total": 0}})
        service = SearchService(service_client)

        await service.search(SearchFilters(), user_id="u1")

        request = downstream.calls("event", "/events/search")[0]
        assert request.url.params["city"] == "Goa"

    @pytest.mark.asyncio
    async def test_missing_city_is_validation_error(self, service_client, downstream):
        downstream.add("user", "/users/u1", {"data": {}})
        service = SearchService(service_client)

        with pytest.raises(ValidationError, match="City is required"):
            await service.search(SearchFilters(), user_id="u1")

        assert downstream.calls("event", "/events/search") == []

    @pytest.mark.asyncio
    async def test_totals_and_pagination(self, service_client, downstream):
        downstream.add(
            "event", "/events/search",
            {"data": {"items": [{"id": "e1", "score": 1}, {"id": "e2", "score": 2}], "total": 25}},
        )
        downstream.add(
            "event", "/circles/search",
            {"data": {"items": [{"id": "c1"}], "total": 6}},
        )
        service = SearchService(service_client)

        results = await service.search(SearchFilters(city="Pune", limit=10))

        assert results.total == 31
        assert results.pagination.pages == 4
        assert [item["id"] for item in results.events] == ["e2", "e1"]
