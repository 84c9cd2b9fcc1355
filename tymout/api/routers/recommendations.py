"""
Recommendations API router.
"""
from typing import List

from fastapi import APIRouter, Depends, Path, Query

from tymout.api.dependencies import get_current_user_id, get_recommendation_service
from tymout.models.schemas import (
    ApiResponse,
    ContentBuckets,
    ContentType,
    Item,
    ItemKind,
    Timeframe,
)
from tymout.services.recommendation import RecommendationService

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get(
    "/personalized",
    response_model=ApiResponse[ContentBuckets],
    summary="Get personalized recommendations",
    description="""
    Recommends items in the caller's current city that match their interests,
    excluding events and circles already in their history.
    """,
    responses={
        400: {"description": "Caller has no current city"},
        401: {"description": "Missing caller identity"},
    },
)
async def get_personalized(
    type: ContentType = Query(default=ContentType.ALL),
    limit: int = Query(default=20, ge=1, le=50),
    user_id: str = Depends(get_current_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
) -> ApiResponse[ContentBuckets]:
    return ApiResponse(data=await service.get_personalized(user_id, type, limit))


@router.get(
    "/similar/{kind}/{item_id}",
    response_model=ApiResponse[List[Item]],
    summary="Get items similar to an event or circle",
)
async def get_similar(
    kind: ItemKind = Path(..., description="events or circles"),
    item_id: str = Path(..., min_length=1),
    limit: int = Query(default=10, ge=1, le=50),
    service: RecommendationService = Depends(get_recommendation_service),
) -> ApiResponse[List[Item]]:
    return ApiResponse(data=await service.get_similar(kind, item_id, limit))


@router.get(
    "/featured",
    response_model=ApiResponse[ContentBuckets],
    summary="Get featured events and circles",
)
async def get_featured(
    type: ContentType = Query(default=ContentType.ALL),
    limit: int = Query(default=10, ge=1, le=50),
    service: RecommendationService = Depends(get_recommendation_service),
) -> ApiResponse[ContentBuckets]:
    return ApiResponse(data=await service.get_featured(type, limit))


@router.get(
    "/popular",
    response_model=ApiResponse[ContentBuckets],
    summary="Get popular events and circles",
)
async def get_popular(
    type: ContentType = Query(default=ContentType.ALL),
    timeframe: Timeframe = Query(default=Timeframe.WEEK),
    limit: int = Query(default=10, ge=1, le=50),
    service: RecommendationService = Depends(get_recommendation_service),
) -> ApiResponse[ContentBuckets]:
    return ApiResponse(data=await service.get_popular(type, timeframe, limit))
