from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base for errors that map onto an API error response."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class InvalidInput(AppError):
    status_code = 400
    message = "Invalid input"


class CapacityExceeded(AppError):
    status_code = 403
    message = "Deck limit reached. Please delete some decks to create new ones."


class AIResponseMalformed(AppError):
    status_code = 500
    message = "Failed to parse AI response. Please try again."


class AIResponseInvalid(AppError):
    status_code = 500
    message = "AI returned invalid data format"


class AIProviderError(AppError):
    # transport / timeout / quota failures, not bad output
    status_code = 502
    message = "AI provider is unavailable. Please try again later."


class ValidationError(AppError):
    status_code = 400
    message = "Validation error"


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class AuthError(AppError):
    status_code = 401
    message = "Authentication failed"


class AuthNotConfigured(AppError):
    status_code = 503
    message = "Google login is not configured"


class Unexpected(AppError):
    status_code = 500
    message = "Internal server error"
