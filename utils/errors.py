"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``api.middleware`` turns them into JSON responses
using ``status_code`` and ``public_message``.  ``public_message`` is the
only text a client ever sees.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.public_message = message or self.default_message
        super().__init__(self.public_message)


class InvalidInputError(AppError):
    """A required field is missing or empty."""

    status_code = 400
    default_message = "All fields are required"


class ConflictError(AppError):
    """The normalized email is already registered."""

    status_code = 400
    default_message = "User already exists"


class InvalidCredentialsError(AppError):
    """Login failed.  Never says whether the email or the password was wrong."""

    status_code = 400
    default_message = "Invalid credentials"


class NotFoundError(AppError):
    """Record is absent or owned by someone else."""

    status_code = 404
    default_message = "Not found"


class TokenRejectedError(AppError):
    status_code = 401
    default_message = "Token is not valid"


class InternalError(AppError):
    """Store or hashing failure.  Details go to the log, not the client."""

    status_code = 500

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__()
        self.detail = detail

    def __str__(self) -> str:
        return self.detail or self.public_message


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing."""
