"""Domain error hierarchy for clean exception handling."""
from __future__ import annotations


class DomainError(Exception):
    """Base for all domain errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Invalid input or state."""


class UnauthorizedError(DomainError):
    """Caller is not signed in, or does not own the resource."""


class AuthRedirectError(DomainError):
    """Caller must sign in first; carries the login location to redirect to."""

    def __init__(self, location: str) -> None:
        super().__init__(f"Authentication required, redirecting to {location}")
        self.location = location


class InvalidCredentialsError(DomainError):
    """Email/password pair did not match a user."""


class InvalidTokenError(DomainError):
    """Auth token is malformed, expired, or revoked."""
