"""
MongoDB-backed feedback repository.
Documents use the camelCase field names shared with the other Tymout services.
"""
import logging
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, AsyncMongoClient

from tymout.models.schemas import Feedback, FeedbackStatus, TargetType

logger = logging.getLogger(__name__)

COLLECTION_NAME = "feedback"


def _to_document(feedback: Feedback) -> Dict[str, Any]:
    return {
        "_id": feedback.id,
        "userId": feedback.user_id,
        "targetId": feedback.target_id,
        "targetType": feedback.target_type.value,
        "rating": feedback.rating,
        "comment": feedback.comment,
        "tags": list(feedback.tags),
        "isAnonymous": feedback.is_anonymous,
        "status": feedback.status.value,
        "createdAt": feedback.created_at,
        "updatedAt": feedback.updated_at,
    }


def _from_document(document: Dict[str, Any]) -> Feedback:
    fields = dict(document)
    fields["id"] = str(fields.pop("_id"))
    return Feedback.model_validate(fields)


class MongoFeedbackRepository:
    """FeedbackRepository backed by a MongoDB collection."""

    def __init__(self, client: AsyncMongoClient, db_name: str) -> None:
        self._client = client
        self._collection = client[db_name][COLLECTION_NAME]

    @classmethod
    def from_uri(cls, uri: str, db_name: str) -> "MongoFeedbackRepository":
        client: AsyncMongoClient = AsyncMongoClient(
            uri, serverSelectionTimeoutMS=5000, tz_aware=True
        )
        return cls(client, db_name)

    async def ensure_indexes(self) -> None:
        """Create the lookup indexes used by target, user and rating queries."""
        await self._collection.create_index(
            [("targetId", ASCENDING), ("targetType", ASCENDING)]
        )
        await self._collection.create_index([("userId", ASCENDING)])
        await self._collection.create_index([("rating", ASCENDING)])
        logger.info("Feedback indexes ensured")

    async def close(self) -> None:
        await self._client.close()

    async def get(self, feedback_id: str) -> Optional[Feedback]:
        document = await self._collection.find_one({"_id": feedback_id})
        return _from_document(document) if document else None

    async def find_one(
        self,
        user_id: str,
        target_id: str,
        target_type: TargetType,
    ) -> Optional[Feedback]:
        document = await self._collection.find_one({
            "userId": user_id,
            "targetId": target_id,
            "targetType": target_type.value,
        })
        return _from_document(document) if document else None

    async def find(
        self,
        target_id: Optional[str] = None,
        target_type: Optional[TargetType] = None,
        user_id: Optional[str] = None,
        status: Optional[FeedbackStatus] = None,
    ) -> List[Feedback]:
        query: Dict[str, Any] = {}
        if target_id is not None:
            query["targetId"] = target_id
        if target_type is not None:
            query["targetType"] = target_type.value
        if user_id is not None:
            query["userId"] = user_id
        if status is not None:
            query["status"] = status.value

        cursor = self._collection.find(query).sort("createdAt", DESCENDING)
        return [_from_document(document) async for document in cursor]

    async def insert(self, feedback: Feedback) -> Feedback:
        await self._collection.insert_one(_to_document(feedback))
        return feedback

    async def save(self, feedback: Feedback) -> Feedback:
        await self._collection.replace_one({"_id": feedback.id}, _to_document(feedback))
        return feedback

    async def delete(self, feedback_id: str) -> bool:
        result = await self._collection.delete_one({"_id": feedback_id})
        return result.deleted_count > 0
