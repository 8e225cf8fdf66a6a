"""Domain errors and their HTTP status codes.

Routes and services raise these; the handlers registered in main.py render
them into the ``{"success": false, "error": ...}`` envelope.
"""
from typing import Optional


class ServiceError(Exception):
    """Base error carrying a client-facing message and an HTTP status."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class InvalidInput(ServiceError):
    status_code = 400
    default_message = "Invalid request"


class NotFound(ServiceError):
    status_code = 404
    default_message = "Schema not found"


class Conflict(ServiceError):
    status_code = 409
    default_message = "A schema with this name already exists"


class InternalError(ServiceError):
    """Unanticipated failure collapsed to a generic message."""
    status_code = 500


# ── Generation failures ─────────────────────────────────────────


class GenerationError(ServiceError):
    status_code = 500
    default_message = "Failed to generate schema"


class ProviderAuthError(GenerationError):
    default_message = "Invalid API key configuration"


class ProviderQuotaExceeded(GenerationError):
    default_message = "API quota exceeded"


class ProviderUnavailable(GenerationError):
    """Network failure or timeout talking to the LLM provider."""
    default_message = "AI provider is unavailable"


class MalformedGeneration(GenerationError):
    default_message = "AI generated invalid response format"
