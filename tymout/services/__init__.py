"""Services package - business logic layer."""
from .discovery import DiscoveryService, aggregate_categories
from .feedback import FeedbackService
from .recommendation import RecommendationService
from .scoring import (
    FeatureScoring,
    InterestScoring,
    PopularityScoring,
    ScoringStrategy,
    TrendScoring,
    rank_items,
)
from .search import SearchService

__all__ = [
    "DiscoveryService",
    "FeatureScoring",
    "FeedbackService",
    "InterestScoring",
    "PopularityScoring",
    "RecommendationService",
    "ScoringStrategy",
    "SearchService",
    "TrendScoring",
    "aggregate_categories",
    "rank_items",
]
