"""
Scoring strategies for ranking events and circles.
Every score is a pure function of the item and its context; ranking attaches
the score under a named field and stable-sorts descending.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from tymout.models.schemas import Item, Timeframe

logger = logging.getLogger(__name__)

# Window over which recency decays to 0 in the trend score.
TIMEFRAME_HOURS: Dict[Timeframe, int] = {
    Timeframe.DAY: 24,
    Timeframe.WEEK: 168,
    Timeframe.MONTH: 720,
}

# Popularity multiplier per timeframe. Not derived from TIMEFRAME_HOURS.
TIMEFRAME_MULTIPLIER: Dict[Timeframe, int] = {
    Timeframe.DAY: 24,
    Timeframe.WEEK: 3,
    Timeframe.MONTH: 1,
}

INTEREST_WEIGHT_STEP = 0.1


# =============================================================================
# Helpers
# =============================================================================


def _stat(item: Item, name: str) -> float:
    """Read an engagement counter from `item.stats`, missing counts as 0."""
    stats = item.get("stats") or {}
    return stats.get(name) or 0


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or datetime into an aware UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def engagement_points(item: Item) -> float:
    """views*1 + likes*2 + comments*3 + shares*4"""
    return (
        _stat(item, "views") * 1
        + _stat(item, "likes") * 2
        + _stat(item, "comments") * 3
        + _stat(item, "shares") * 4
    )


# =============================================================================
# Score Functions
# =============================================================================


def calculate_trend_score(item: Item, now: datetime, timeframe_hours: float) -> float:
    """
    Weighted blend of recency (40%) and normalized engagement (60%).

    Recency decays linearly from 1 at creation to 0 after `timeframe_hours`.
    Items without a parseable `createdAt` get no recency credit.
    """
    created_at = parse_timestamp(item.get("createdAt"))
    if created_at is None:
        recency = 0.0
    else:
        hours_since_creation = (now - created_at).total_seconds() / 3600
        recency = max(0.0, 1 - hours_since_creation / timeframe_hours)

    engagement = engagement_points(item) / 100
    return recency * 0.4 + engagement * 0.6


def calculate_popularity_score(item: Item, timeframe_multiplier: float) -> float:
    """Engagement plus membership, scaled by the timeframe multiplier."""
    return (
        engagement_points(item) + _stat(item, "memberCount") * 5
    ) * timeframe_multiplier


def calculate_feature_score(item: Item) -> float:
    """Flat +100 for featured items plus light engagement credit."""
    base_score = 100 if item.get("featured") else 0
    return (
        base_score
        + _stat(item, "views") * 0.1
        + _stat(item, "likes") * 0.5
        + _stat(item, "memberCount") * 1
    )


def weight_interests(interests: Sequence[str]) -> Dict[str, float]:
    """
    Map an ordered interest list to linearly decaying weights.
    Weight is 1 - 0.1 * index with no floor; a repeated interest keeps the
    weight of its last position.
    """
    return {
        interest: 1 - index * INTEREST_WEIGHT_STEP
        for index, interest in enumerate(interests)
    }


def calculate_interest_score(item: Item, weighted_interests: Dict[str, float]) -> float:
    """Sum of the user's weights for every interest the item carries."""
    return sum(
        weighted_interests.get(interest, 0)
        for interest in item.get("interests") or []
    )


# =============================================================================
# Scoring Strategy (Strategy Pattern)
# =============================================================================


class ScoringStrategy(ABC):
    """Abstract base class for scoring strategies."""

    #: Name of the field the score is attached under.
    field: str = "score"

    @abstractmethod
    def score(self, item: Item) -> float:
        """Return the ranking score for one item."""
        pass


class TrendScoring(ScoringStrategy):
    """Recency and engagement within a timeframe."""

    field = "trendScore"

    def __init__(self, timeframe: Timeframe, now: Optional[datetime] = None) -> None:
        self._hours = TIMEFRAME_HOURS[timeframe]
        self._now = now or datetime.now(timezone.utc)

    def score(self, item: Item) -> float:
        return calculate_trend_score(item, self._now, self._hours)


class PopularityScoring(ScoringStrategy):
    field = "popularityScore"

    def __init__(self, timeframe: Timeframe) -> None:
        self._multiplier = TIMEFRAME_MULTIPLIER[timeframe]

    def score(self, item: Item) -> float:
        return calculate_popularity_score(item, self._multiplier)


class FeatureScoring(ScoringStrategy):
    field = "featureScore"

    def score(self, item: Item) -> float:
        return calculate_feature_score(item)


class InterestScoring(ScoringStrategy):
    """Overlap between item interests and the user's weighted interests."""

    field = "interestScore"

    def __init__(self, interests: Sequence[str]) -> None:
        self.weighted_interests = weight_interests(interests)

    def score(self, item: Item) -> float:
        return calculate_interest_score(item, self.weighted_interests)


def rank_items(items: Sequence[Item], strategy: ScoringStrategy) -> List[Item]:
    """
    Attach `strategy.field` to a copy of every item and sort descending.
    The sort is stable: equal scores keep their input order.
    """
    scored = [{**item, strategy.field: strategy.score(item)} for item in items]
    scored.sort(key=lambda item: item[strategy.field], reverse=True)

    logger.debug(f"Ranked {len(scored)} items by {strategy.field}")
    return scored
