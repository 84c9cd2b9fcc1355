"""
Domain models using Pydantic.
Events and circles are opaque JSON payloads owned by the event service; they
travel through this layer as plain dicts with computed score fields added.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# An event or circle document as returned by the event service.
Item = Dict[str, Any]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Enumerations
# =============================================================================


class ContentType(str, Enum):
    """Which item kinds a request covers."""

    ALL = "all"
    EVENTS = "events"
    CIRCLES = "circles"

    @property
    def includes_events(self) -> bool:
        return self in (ContentType.ALL, ContentType.EVENTS)

    @property
    def includes_circles(self) -> bool:
        return self in (ContentType.ALL, ContentType.CIRCLES)


class ItemKind(str, Enum):
    """Path segment of a single item kind."""

    EVENTS = "events"
    CIRCLES = "circles"


class Timeframe(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class SortOption(str, Enum):
    RELEVANCE = "relevance"
    DATE = "date"
    DISTANCE = "distance"
    PRICE = "price"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    PAST = "past"


class SuggestionType(str, Enum):
    EVENT = "event"
    CIRCLE = "circle"
    TAG = "tag"


class TargetType(str, Enum):
    EVENT = "event"
    USER = "user"
    CIRCLE = "circle"


class FeedbackStatus(str, Enum):
    ACTIVE = "active"
    REPORTED = "reported"
    REMOVED = "removed"


# =============================================================================
# Discovery / Search / Recommendation Models
# =============================================================================


class ContentBuckets(CamelModel):
    """
    Events and circles returned side by side.
    Both buckets are always present; a kind that was not requested is empty.
    """

    events: List[Item] = Field(default_factory=list)
    circles: List[Item] = Field(default_factory=list)


class CategoryCount(CamelModel):
    """Category with item counts from both events and circles."""

    name: str
    event_count: int = 0
    circle_count: int = 0
    total_count: int = 0


class InterestContent(CamelModel):
    """Content picked for a user's ordered interest list."""

    weighted_interests: Dict[str, float] = Field(default_factory=dict)
    primary_interests: List[str] = Field(default_factory=list)
    secondary_interests: List[str] = Field(default_factory=list)
    recommendations: ContentBuckets = Field(default_factory=ContentBuckets)


class Suggestion(CamelModel):
    """Single autocomplete suggestion."""

    type: SuggestionType
    text: str


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class SearchResults(ContentBuckets):
    """Search results with pagination metadata."""

    total: int = 0
    pagination: Optional[Pagination] = None


class SearchFilters(BaseModel):
    """Parsed search query parameters."""

    query: Optional[str] = None
    type: ContentType = ContentType.ALL
    category: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    city: Optional[str] = None
    radius: int = 10
    min_price: int = 0
    max_price: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    capacity: Optional[int] = None
    status: Optional[EventStatus] = None
    sort: SortOption = SortOption.RELEVANCE
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)


# =============================================================================
# Feedback Models
# =============================================================================


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


class Feedback(CamelModel):
    """Persisted feedback left by a user on an event, circle or user."""

    id: str = Field(..., description="Feedback identifier")
    user_id: str = Field(..., description="Author")
    target_id: str
    target_type: TargetType
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_anonymous: bool = False
    status: FeedbackStatus = FeedbackStatus.ACTIVE
    created_at: datetime
    updated_at: datetime


class FeedbackCreate(CamelModel):
    """POST /api/feedback body."""

    target_id: str = Field(..., min_length=1, description="Target ID is required")
    target_type: TargetType
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_anonymous: bool = False

    @field_validator("target_id", "comment")
    @classmethod
    def _strip_text(cls, value: Optional[str]) -> Optional[str]:
        return _strip(value)

    @field_validator("tags")
    @classmethod
    def _strip_tags(cls, value: List[str]) -> List[str]:
        return [tag.strip() for tag in value]


class FeedbackUpdate(CamelModel):
    """PUT /api/feedback/{id} body. Omitted fields are left unchanged."""

    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = None
    tags: Optional[List[str]] = None
    is_anonymous: Optional[bool] = None

    @field_validator("comment")
    @classmethod
    def _strip_comment(cls, value: Optional[str]) -> Optional[str]:
        return _strip(value)

    @field_validator("tags")
    @classmethod
    def _strip_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return [tag.strip() for tag in value] if value is not None else None


class FeedbackStats(CamelModel):
    """Aggregate rating statistics for one target."""

    average_rating: float = 0.0
    total_reviews: int = 0
    rating_distribution: Dict[str, int] = Field(
        default_factory=lambda: {str(star): 0 for star in range(1, 6)}
    )


# =============================================================================
# API Envelope
# =============================================================================


class ApiResponse(BaseModel, Generic[T]):
    """Standard response envelope."""

    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None


class MessageResponse(BaseModel):
    msg: str
