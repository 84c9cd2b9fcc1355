"""Core infrastructure components."""
from .exceptions import (
    AppException,
    AuthenticationError,
    DownstreamTimeoutError,
    DownstreamUnavailableError,
    DuplicateFeedbackError,
    NotAuthorizedError,
    NotFoundError,
    UnknownServiceError,
    ValidationError,
)

__all__ = [
    "AppException",
    "AuthenticationError",
    "DownstreamTimeoutError",
    "DownstreamUnavailableError",
    "DuplicateFeedbackError",
    "NotAuthorizedError",
    "NotFoundError",
    "UnknownServiceError",
    "ValidationError",
]
