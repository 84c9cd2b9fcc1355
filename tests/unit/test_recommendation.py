"""
Unit tests for the recommendation service.
"""
import pytest

from tymout.core.exceptions import ValidationError
from tymout.models.schemas import ContentType, ItemKind, Timeframe
from tymout.services.recommendation import RecommendationService


@pytest.fixture
def service(service_client):
    return RecommendationService(service_client)


class TestPersonalized:
    @pytest.mark.asyncio
    async def test_requires_current_city(self, service, downstream):
        downstream.add("user", "/users/u1", {"data": {"name": "Asha"}})

        with pytest.raises(ValidationError, match="set your current city"):
            await service.get_personalized("u1", ContentType.ALL, 20)

        assert downstream.calls("user", "/users/u1/preferences") == []

    @pytest.mark.asyncio
    async def test_excludes_history_and_prefers_preference_location(self, service, downstream):
        downstream.add("user", "/users/u1", {"data": {"currentCity": "Pune"}})
        downstream.add("user", "/users/u1/preferences", {"data": {
            "interests": ["music", "food"],
            "location": "Goa",
        }})
        downstream.add("user", "/users/u1/history", {"data": [
            {"eventId": "e1"},
            {"circleId": "c1"},
            {"eventId": "e2"},
        ]})
        downstream.add("event", "/events/recommended", {"data": [{"_id": "e9"}]})
        downstream.add("event", "/circles/recommended", {"data": [{"_id": "c9"}]})

        results = await service.get_personalized("u1", ContentType.ALL, 5)

        assert results.events == [{"_id": "e9"}]
        assert results.circles == [{"_id": "c9"}]

        events_params = downstream.calls("event", "/events/recommended")[0].url.params
        assert events_params["city"] == "Goa"
        assert events_params.get_list("excludeIds[]") == ["e1", "e2"]
        assert events_params.get_list("interests[]") == ["music", "food"]
        assert events_params["limit"] == "5"

        circles_params = downstream.calls("event", "/circles/recommended")[0].url.params
        assert circles_params.get_list("excludeIds[]") == ["c1"]

    @pytest.mark.asyncio
    async def test_circles_only_skips_events(self, service, downstream):
        downstream.add("user", "/users/u1", {"data": {"currentCity": "Pune"}})
        downstream.add("user", "/users/u1/preferences", {"data": {}})
        downstream.add("user", "/users/u1/history", {"data": []})
        downstream.add("event", "/circles/recommended", {"data": []})

        results = await service.get_personalized("u1", ContentType.CIRCLES, 5)

        assert results.events == []
        assert downstream.calls("event", "/events/recommended") == []
        params = downstream.calls("event", "/circles/recommended")[0].url.params
        assert params["city"] == "Pune"


class TestSimilar:
    @pytest.mark.asyncio
    async def test_uses_source_item_attributes(self, service, downstream, sample_event):
        sample_event["location"] = {"city": "Pune"}
        downstream.add("event", "/events/e1", {"data": sample_event})
        downstream.add("event", "/events/similar", {"data": [{"_id": "e5"}]})

        similar = await service.get_similar(ItemKind.EVENTS, "e1", 10)

        assert similar == [{"_id": "e5"}]
        params = downstream.calls("event", "/events/similar")[0].url.params
        assert params["category"] == "music"
        assert params.get_list("tags[]") == ["jazz", "outdoor"]
        assert params["city"] == "Pune"
        assert params["excludeId"] == "e1"

    @pytest.mark.asyncio
    async def test_plain_string_location_is_ignored(self, service, downstream, sample_event):
        sample_event["location"] = "Somewhere near the lake"
        downstream.add("event", "/events/e1", {"data": sample_event})
        downstream.add("event", "/events/similar", {"data": []})

        assert await service.get_similar(ItemKind.EVENTS, "e1", 10) == []

        params = downstream.calls("event", "/events/similar")[0].url.params
        assert "city" not in params
        assert params["category"] == "music"

    @pytest.mark.asyncio
    async def test_circles_go_to_event_service(self, service, downstream, sample_circle):
        downstream.add("event", "/circles/c1", {"data": sample_circle})
        downstream.add("event", "/circles/similar", {"data": []})

        assert await service.get_similar(ItemKind.CIRCLES, "c1", 10) == []
        assert len(downstream.calls("event", "/circles/similar")) == 1


class TestFeaturedAndPopular:
    @pytest.mark.asyncio
    async def test_featured_ranked(self, service, downstream):
        downstream.add("event", "/events/featured", {"data": [
            {"_id": "plain", "stats": {"likes": 10}},
            {"_id": "boosted", "featured": True},
        ]})
        downstream.add("event", "/circles/featured", {"data": []})

        results = await service.get_featured(ContentType.ALL, 10)

        assert [item["_id"] for item in results.events] == ["boosted", "plain"]
        assert results.events[0]["featureScore"] == 100

    @pytest.mark.asyncio
    async def test_popular_uses_timeframe_multiplier(self, service, downstream, sample_circle):
        downstream.add("event", "/circles/popular", {"data": [sample_circle]})

        results = await service.get_popular(ContentType.CIRCLES, Timeframe.DAY, 10)

        # (40 + 4*2 + 12*5) * 24
        assert results.circles[0]["popularityScore"] == 2592
        params = downstream.calls("event", "/circles/popular")[0].url.params
        assert params["timeframe"] == "day"
        assert results.events == []
