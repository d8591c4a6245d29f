from enum import Enum
from typing import Any, Dict, Optional

from fastapi import status


class ErrorCode(str, Enum):
    INVALID_LOCATION = "INVALID_LOCATION"
    ISSUE_NOT_FOUND = "ISSUE_NOT_FOUND"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CivicFixError(Exception):
    """Base class for errors reported to API callers."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class LocationValidationError(CivicFixError):
    """Location is missing fields required for matching."""

    def __init__(self, message: str, missing: Optional[list] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_LOCATION,
            details={"missing": missing} if missing else None,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
        )


class IssueNotFound(CivicFixError):
    def __init__(self, issue_id: str):
        super().__init__(
            message=f"Issue not found: {issue_id}",
            error_code=ErrorCode.ISSUE_NOT_FOUND,
            details={"issue_id": issue_id},
            status_code=status.HTTP_404_NOT_FOUND
        )


class UpstreamUnavailable(CivicFixError):
    """The profile directory could not be read."""

    def __init__(self, message: str = "Profile directory unavailable"):
        super().__init__(
            message=message,
            error_code=ErrorCode.UPSTREAM_UNAVAILABLE,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )
