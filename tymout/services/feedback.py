"""
Feedback service - ratings and reviews left on events, circles and users.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import List

from tymout.core.exceptions import DuplicateFeedbackError, NotAuthorizedError, NotFoundError
from tymout.models.interfaces import FeedbackRepository
from tymout.models.schemas import (
    Feedback,
    FeedbackCreate,
    FeedbackStats,
    FeedbackStatus,
    FeedbackUpdate,
    TargetType,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def summarize_ratings(feedback: List[Feedback]) -> FeedbackStats:
    """Average (1 decimal), count and 1-5 star distribution."""
    if not feedback:
        return FeedbackStats()

    distribution = {str(star): 0 for star in range(1, 6)}
    for entry in feedback:
        distribution[str(entry.rating)] += 1

    average = sum(entry.rating for entry in feedback) / len(feedback)
    return FeedbackStats(
        average_rating=round(average, 1),
        total_reviews=len(feedback),
        rating_distribution=distribution,
    )


class FeedbackService:
    """CRUD and moderation for feedback documents."""

    def __init__(self, repository: FeedbackRepository) -> None:
        self._repo = repository

    async def list_for_target(self, target_type: TargetType, target_id: str) -> List[Feedback]:
        """Active feedback on a target, newest first."""
        return await self._repo.find(
            target_id=target_id,
            target_type=target_type,
            status=FeedbackStatus.ACTIVE,
        )

    async def stats_for_target(self, target_type: TargetType, target_id: str) -> FeedbackStats:
        return summarize_ratings(await self.list_for_target(target_type, target_id))

    async def list_for_user(self, user_id: str) -> List[Feedback]:
        """Active feedback written by a user, newest first."""
        return await self._repo.find(user_id=user_id, status=FeedbackStatus.ACTIVE)

    async def create(self, user_id: str, payload: FeedbackCreate) -> Feedback:
        """
        Record a user's feedback on a target.

        A user may leave one feedback per target. The lookup and the insert
        are separate operations, so two concurrent requests can both pass the
        check.

        Raises:
            DuplicateFeedbackError: the user already reviewed this target
        """
        existing = await self._repo.find_one(user_id, payload.target_id, payload.target_type)
        if existing is not None:
            raise DuplicateFeedbackError(payload.target_type.value, payload.target_id)

        now = _utcnow()
        feedback = Feedback(
            id=uuid.uuid4().hex,
            user_id=user_id,
            target_id=payload.target_id,
            target_type=payload.target_type,
            rating=payload.rating,
            comment=payload.comment,
            tags=payload.tags,
            is_anonymous=payload.is_anonymous,
            created_at=now,
            updated_at=now,
        )
        await self._repo.insert(feedback)

        logger.info(
            f"Feedback created: id={feedback.id}, target={payload.target_type.value}/"
            f"{payload.target_id}, rating={payload.rating}"
        )
        return feedback

    async def _get_owned(self, user_id: str, feedback_id: str, action: str) -> Feedback:
        feedback = await self._repo.get(feedback_id)
        if feedback is None:
            raise NotFoundError("Feedback", feedback_id)
        if feedback.user_id != user_id:
            raise NotAuthorizedError(f"Not authorized to {action} this feedback")
        return feedback

    async def update(self, user_id: str, feedback_id: str, payload: FeedbackUpdate) -> Feedback:
        """Apply the fields present in `payload` to the caller's feedback."""
        feedback = await self._get_owned(user_id, feedback_id, "update")

        changes = payload.model_dump(exclude_none=True)
        updated = feedback.model_copy(update={**changes, "updated_at": _utcnow()})
        await self._repo.save(updated)
        return updated

    async def delete(self, user_id: str, feedback_id: str) -> None:
        await self._get_owned(user_id, feedback_id, "delete")
        await self._repo.delete(feedback_id)
        logger.info(f"Feedback removed: id={feedback_id}")

    async def report(self, feedback_id: str) -> Feedback:
        """Flag feedback for moderation; it stops appearing in listings."""
        feedback = await self._repo.get(feedback_id)
        if feedback is None:
            raise NotFoundError("Feedback", feedback_id)

        reported = feedback.model_copy(
            update={"status": FeedbackStatus.REPORTED, "updated_at": _utcnow()}
        )
        await self._repo.save(reported)
        logger.warning(f"Feedback reported: id={feedback_id}")
        return reported
