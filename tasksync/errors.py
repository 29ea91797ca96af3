"""
Application Errors

Error taxonomy shared by the services and the HTTP layer:
- ValidationError: malformed or missing input (empty title, bad index, bad date)
- NotFoundError: referenced task/request does not exist or is not the caller's
- UnauthorizedError: missing or invalid identity
- ConsistencyError: a propagation target disappeared or diverged mid fan-out
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base exception carrying a machine-readable code and an HTTP status"""
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    code = "BAD_REQUEST"
    status_code = 400


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"
    status_code = 401


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404


class ConsistencyError(AppError):
    """Raised when a sibling copy cannot receive a replayed mutation"""
    code = "CONSISTENCY_ERROR"
    status_code = 409


def create_error_response(error: AppError) -> Dict[str, Any]:
    """
    Create a standardized error response

    Args:
        error: The AppError to convert

    Returns:
        Standardized error response dictionary
    """
    return {
        "success": False,
        "error": {
            "code": error.code,
            "message": error.message,
            "details": error.details
        }
    }
