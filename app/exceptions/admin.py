# ruff: noqa: D107
"""Admin-related exceptions."""

from typing import Any

from .base import BadRequestError


class AdminOperationError(BadRequestError):
    """Raised when an admin read or write against storage fails."""

    def __init__(self, message: str = "Admin operation failed", details: dict[str, Any] | None = None):
        super().__init__(message=message, error_code="ADMIN_OPERATION_FAILED", details=details)
