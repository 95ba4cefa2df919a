# ruff: noqa: D107
"""Chat and completion service exceptions."""

from typing import Any

from .base import BaseAppException, NotFoundError


class ChatNotFoundError(NotFoundError):
    """Raised when a chat does not exist or is not owned by the caller."""

    def __init__(self, message: str = "Chat not found", details: dict[str, Any] | None = None):
        BaseAppException.__init__(
            self, message=message, status_code=404, error_code="CHAT_NOT_FOUND", details=details
        )


class CompletionServiceError(BaseAppException):
    """Raised when the upstream completion API call fails."""

    def __init__(
        self,
        message: str = "Completion service error occurred",
        error_code: str = "COMPLETION_SERVICE_ERROR",
        details: dict[str, Any] | None = None,
        status_code: int = 502,
    ):
        super().__init__(
            message=message, status_code=status_code, error_code=error_code, details=details
        )


class CompletionConfigurationError(CompletionServiceError):
    """Raised when the completion client is not properly configured."""

    def __init__(
        self,
        message: str = "Completion service is not properly configured",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message, "COMPLETION_CONFIGURATION_ERROR", details, status_code=500
        )
