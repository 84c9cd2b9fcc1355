"""
Repository interfaces (abstractions).
Using Protocol for structural subtyping (duck typing with type hints).
"""
from typing import List, Optional, Protocol, runtime_checkable

from tymout.models.schemas import Feedback, FeedbackStatus, TargetType


@runtime_checkable
class FeedbackRepository(Protocol):
    """
    Interface for feedback persistence.
    Production: MongoDB `feedback` collection.
    Testing: In-memory implementation.
    """

    async def get(self, feedback_id: str) -> Optional[Feedback]:
        """Fetch one feedback document by id."""
        ...

    async def find_one(
        self,
        user_id: str,
        target_id: str,
        target_type: TargetType,
    ) -> Optional[Feedback]:
        """
        Find feedback by author and target, regardless of status.

        Returns:
            Feedback if the user already reviewed the target, else None
        """
        ...

    async def find(
        self,
        target_id: Optional[str] = None,
        target_type: Optional[TargetType] = None,
        user_id: Optional[str] = None,
        status: Optional[FeedbackStatus] = None,
    ) -> List[Feedback]:
        """
        List feedback matching every given filter, newest first.
        """
        ...

    async def insert(self, feedback: Feedback) -> Feedback:
        ...

    async def save(self, feedback: Feedback) -> Feedback:
        """Replace an existing document."""
        ...

    async def delete(self, feedback_id: str) -> bool:
        """Delete by id, returns True if it existed."""
        ...
