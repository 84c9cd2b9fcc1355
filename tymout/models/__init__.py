"""Models package - domain entities and interfaces."""
from .interfaces import FeedbackRepository
from .schemas import (
    ApiResponse,
    CategoryCount,
    ContentBuckets,
    ContentType,
    EventStatus,
    Feedback,
    FeedbackCreate,
    FeedbackStats,
    FeedbackStatus,
    FeedbackUpdate,
    InterestContent,
    Item,
    ItemKind,
    MessageResponse,
    Pagination,
    SearchFilters,
    SearchResults,
    SortOption,
    Suggestion,
    SuggestionType,
    TargetType,
    Timeframe,
)

__all__ = [
    # Interfaces
    "FeedbackRepository",
    # Schemas
    "ApiResponse",
    "CategoryCount",
    "ContentBuckets",
    "ContentType",
    "EventStatus",
    "Feedback",
    "FeedbackCreate",
    "FeedbackStats",
    "FeedbackStatus",
    "FeedbackUpdate",
    "InterestContent",
    "Item",
    "ItemKind",
    "MessageResponse",
    "Pagination",
    "SearchFilters",
    "SearchResults",
    "SortOption",
    "Suggestion",
    "SuggestionType",
    "TargetType",
    "Timeframe",
]
