"""
Domain errors raised by the services.

Routers translate them at the boundary: the intake endpoint maps them to HTTP
status codes, admin actions turn them into ``{"success": false, "error": ...}``.
"""


class CurriculaError(Exception):
    """Base error for the curricula services."""


class ValidationError(CurriculaError):
    """Raised when required input is missing or malformed."""


class AuthError(CurriculaError):
    """Raised when credentials are missing, invalid or lack the admin role."""


class NotFoundError(CurriculaError):
    """Raised when a submission, category or other entity does not exist."""


class InvalidStateError(CurriculaError):
    """Raised when a submission is not in a state that allows the transition."""


class ConflictError(CurriculaError):
    """Raised when a write violates a uniqueness or foreign-key constraint."""


class UpstreamError(CurriculaError):
    """Raised when an LLM completion or content fetch fails."""
