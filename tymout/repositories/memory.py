"""
In-memory repository implementations.
Used for local development and testing.
"""
from typing import Dict, List, Optional

from tymout.models.schemas import Feedback, FeedbackStatus, TargetType


class InMemoryFeedbackRepository:
    """
    In-memory implementation of FeedbackRepository.
    Stores copies so callers cannot mutate persisted state by accident.
    """

    def __init__(self, seed: Optional[List[Feedback]] = None) -> None:
        self._store: Dict[str, Feedback] = {}
        for feedback in seed or []:
            self._store[feedback.id] = feedback.model_copy(deep=True)

    async def get(self, feedback_id: str) -> Optional[Feedback]:
        feedback = self._store.get(feedback_id)
        return feedback.model_copy(deep=True) if feedback else None

    async def find_one(
        self,
        user_id: str,
        target_id: str,
        target_type: TargetType,
    ) -> Optional[Feedback]:
        for feedback in self._store.values():
            if (
                feedback.user_id == user_id
                and feedback.target_id == target_id
                and feedback.target_type == target_type
            ):
                return feedback.model_copy(deep=True)
        return None

    async def find(
        self,
        target_id: Optional[str] = None,
        target_type: Optional[TargetType] = None,
        user_id: Optional[str] = None,
        status: Optional[FeedbackStatus] = None,
    ) -> List[Feedback]:
        matches = [
            feedback.model_copy(deep=True)
            for feedback in self._store.values()
            if (target_id is None or feedback.target_id == target_id)
            and (target_type is None or feedback.target_type == target_type)
            and (user_id is None or feedback.user_id == user_id)
            and (status is None or feedback.status == status)
        ]
        matches.sort(key=lambda f: f.created_at, reverse=True)
        return matches

    async def insert(self, feedback: Feedback) -> Feedback:
        self._store[feedback.id] = feedback.model_copy(deep=True)
        return feedback

    async def save(self, feedback: Feedback) -> Feedback:
        self._store[feedback.id] = feedback.model_copy(deep=True)
        return feedback

    async def delete(self, feedback_id: str) -> bool:
        return self._store.pop(feedback_id, None) is not None

    def size(self) -> int:
        """Return number of stored documents."""
        return len(self._store)
