"""
Custom exception hierarchy for centralized error handling.
All exceptions map to appropriate HTTP status codes.
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API response format."""
        body: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.error_code,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(AppException):
    """Invalid input data."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class DuplicateFeedbackError(AppException):
    """User already left feedback for this target."""

    def __init__(self, target_type: str, target_id: str) -> None:
        super().__init__(
            message="You have already submitted feedback for this target",
            status_code=400,
            error_code="DUPLICATE_FEEDBACK",
            details={"target_type": target_type, "target_id": target_id},
        )


class AuthenticationError(AppException):
    """Caller identity missing."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            message=message,
            status_code=401,
            error_code="UNAUTHENTICATED",
        )


class NotAuthorizedError(AppException):
    """Caller does not own this resource."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message=message,
            status_code=401,
            error_code="NOT_AUTHORIZED",
        )


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(
            message=f"{resource} not found: {identifier}",
            status_code=404,
            error_code="NOT_FOUND",
            details={"resource": resource, "identifier": identifier},
        )


class UnknownServiceError(AppException):
    """Service name not present in the registry."""

    def __init__(self, service_name: str) -> None:
        super().__init__(
            message=f"Invalid service name: {service_name}",
            status_code=500,
            error_code="UNKNOWN_SERVICE",
            details={"service": service_name},
        )


class DownstreamUnavailableError(AppException):
    """Downstream call failed: connection error or non-2xx status."""

    def __init__(
        self,
        service_name: str,
        reason: str,
        upstream_status: Optional[int] = None,
    ) -> None:
        details: Dict[str, Any] = {"service": service_name, "reason": reason}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(
            message=f"Service unavailable: {service_name} ({reason})",
            status_code=500,
            error_code="DOWNSTREAM_UNAVAILABLE",
            details=details,
        )
        self.upstream_status = upstream_status


class DownstreamTimeoutError(AppException):
    """Downstream call exceeded its timeout."""

    def __init__(self, service_name: str, timeout_sec: float) -> None:
        super().__init__(
            message=f"Service timed out: {service_name} after {timeout_sec:g}s",
            status_code=500,
            error_code="DOWNSTREAM_TIMEOUT",
            details={"service": service_name, "timeout_sec": timeout_sec},
        )
