"""Repository implementations package."""
from .memory import InMemoryFeedbackRepository
from .mongo import MongoFeedbackRepository

__all__ = [
    "InMemoryFeedbackRepository",
    "MongoFeedbackRepository",
]
