"""
Discovery API router.
Browse events and circles by city, category, trend and interests.
"""
from typing import List

from fastapi import APIRouter, Depends, Query

from tymout.api.dependencies import get_bearer_token, get_discovery_service
from tymout.core.exceptions import ValidationError
from tymout.models.schemas import (
    ApiResponse,
    CategoryCount,
    ContentBuckets,
    ContentType,
    InterestContent,
    Timeframe,
)
from tymout.services.discovery import DiscoveryService

router = APIRouter(prefix="/discovery", tags=["discovery"])


@router.get(
    "/city",
    response_model=ApiResponse[ContentBuckets],
    summary="Get events and circles in a city",
)
async def get_items_by_city(
    city: str = Query(..., description="City to browse"),
    type: ContentType = Query(default=ContentType.ALL),
    service: DiscoveryService = Depends(get_discovery_service),
) -> ApiResponse[ContentBuckets]:
    city = city.strip()
    if not city:
        raise ValidationError("City is required")

    results = await service.get_items_by_city(city, type)
    return ApiResponse(data=results)


@router.get(
    "/categories",
    response_model=ApiResponse[List[CategoryCount]],
    summary="Get all categories with counts",
)
async def get_categories(
    service: DiscoveryService = Depends(get_discovery_service),
) -> ApiResponse[List[CategoryCount]]:
    return ApiResponse(data=await service.get_categories())


@router.get(
    "/trending",
    response_model=ApiResponse[ContentBuckets],
    summary="Get trending events and circles",
    description="""
    Items are ranked by trend score: 40% recency within the timeframe,
    60% engagement (views, likes, comments, shares).
    """,
)
async def get_trending(
    type: ContentType = Query(default=ContentType.ALL),
    timeframe: Timeframe = Query(default=Timeframe.WEEK),
    service: DiscoveryService = Depends(get_discovery_service),
) -> ApiResponse[ContentBuckets]:
    return ApiResponse(data=await service.get_trending_items(type, timeframe))


@router.get(
    "/interests",
    response_model=ApiResponse[InterestContent],
    summary="Get content based on the caller's interests",
    responses={401: {"description": "Missing bearer token"}},
)
async def get_interest_based_content(
    auth_token: str = Depends(get_bearer_token),
    service: DiscoveryService = Depends(get_discovery_service),
) -> ApiResponse[InterestContent]:
    return ApiResponse(data=await service.get_interest_based_content(auth_token))
