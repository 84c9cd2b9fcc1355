"""
Search API router.
Filtered search across events and circles, plus autocomplete.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from tymout.api.dependencies import get_optional_user_id, get_search_service
from tymout.config import get_settings
from tymout.core.exceptions import ValidationError
from tymout.models.schemas import (
    ApiResponse,
    ContentType,
    EventStatus,
    SearchFilters,
    SearchResults,
    SortOption,
    Suggestion,
)
from tymout.services.search import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get(
    "",
    response_model=ApiResponse[SearchResults],
    summary="Search events and circles",
    description="""
    Builds a MongoDB-style filter from the query parameters and forwards it
    to the event service. Results are ordered locally by `sort`.

    When `location` is omitted the caller's current city is used.
    """,
)
async def search(
    q: Optional[str] = Query(default=None, description="Free-text query"),
    type: ContentType = Query(default=ContentType.ALL),
    category: Optional[str] = Query(default=None),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    location: Optional[str] = Query(default=None, description="City to search in"),
    radius: int = Query(default=10, ge=1, le=100),
    min_price: int = Query(default=0, ge=0, alias="minPrice"),
    max_price: Optional[int] = Query(default=None, ge=0, alias="maxPrice"),
    tags: Optional[str] = Query(default=None, description="Comma-separated tags"),
    capacity: Optional[int] = Query(default=None, ge=1),
    status: Optional[EventStatus] = Query(default=None),
    sort: SortOption = Query(default=SortOption.RELEVANCE),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=50),
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: SearchService = Depends(get_search_service),
) -> ApiResponse[SearchResults]:
    filters = SearchFilters(
        query=q.strip() if q else None,
        type=type,
        category=category,
        start_date=start_date,
        end_date=end_date,
        city=location.strip() if location else None,
        radius=radius,
        min_price=min_price,
        max_price=max_price,
        tags=[tag.strip() for tag in tags.split(",") if tag.strip()] if tags else [],
        capacity=capacity,
        status=status,
        sort=sort,
        page=page,
        limit=min(limit, get_settings().MAX_LIMIT),
    )
    return ApiResponse(data=await service.search(filters, user_id))


@router.get(
    "/autocomplete",
    response_model=ApiResponse[List[Suggestion]],
    summary="Get autocomplete suggestions",
)
async def autocomplete(
    q: str = Query(..., description="Partial query"),
    type: ContentType = Query(default=ContentType.ALL),
    service: SearchService = Depends(get_search_service),
) -> ApiResponse[List[Suggestion]]:
    query = q.strip()
    if not query:
        raise ValidationError("Query is required")
    return ApiResponse(data=await service.get_autocomplete(query, type))
