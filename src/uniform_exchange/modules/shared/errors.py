"""
Shared service errors.

Service layers raise subclasses of WorkflowError; routers turn them into
HTTPException with ``workflow_error_to_http``.
"""

from typing import Any

from fastapi import HTTPException


class WorkflowError(Exception):
    """Base exception for workflow service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationFailedError(WorkflowError):
    """Raised when a request is well-formed but breaks a business rule."""

    def __init__(self, message: str, error_code: str = "VALIDATION_FAILED"):
        super().__init__(message=message, error_code=error_code, status_code=400)


def workflow_error_to_http(e: WorkflowError) -> HTTPException:
    """Convert a service error to an HTTPException carrying the envelope fields."""
    return HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.message,
            "code": e.error_code,
            **e.details,
        },
    )
