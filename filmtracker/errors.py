"""
Error taxonomy for Filmtracker.

Every failure a request handler can surface derives from FilmTrackerError and
carries the HTTP status the router answers with.

Error Taxonomy:
- ValidationError: Bad input shape or password policy violation (400)
- AuthError: Unknown username or wrong password (401)
- ConflictError: Username already taken (409)
- DataAccessError: Relational store failure (500, generic error view)
"""

from typing import Optional
from enum import Enum


class ErrorType(Enum):
    """Classification of application errors."""
    VALIDATION = "validation"
    AUTH = "auth"
    CONFLICT = "conflict"
    DATA_ACCESS = "data_access"
    CONFIG = "config"


class FilmTrackerError(Exception):
    """Base exception for all application errors."""

    status_code = 500

    def __init__(self, message: str, error_type: ErrorType, status_code: Optional[int] = None,
                 original_error: Optional[Exception] = None):
        self.message = message
        self.error_type = error_type
        if status_code is not None:
            self.status_code = status_code
        self.original_error = original_error
        super().__init__(message)


class ValidationError(FilmTrackerError):
    """Input failed validation (mismatched or weak password, bad form field)."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, ErrorType.VALIDATION)


class AuthError(FilmTrackerError):
    """Credentials did not match a user."""

    status_code = 401

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message, ErrorType.AUTH)


class ConflictError(FilmTrackerError):
    """The resource already exists."""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, ErrorType.CONFLICT)


class DataAccessError(FilmTrackerError):
    """A query against the relational store failed."""

    status_code = 500

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, ErrorType.DATA_ACCESS, original_error=original_error)

    @property
    def detail(self) -> str:
        """Diagnostic text echoed on the error page."""
        if self.original_error is not None:
            return f"{self.message}: {self.original_error}"
        return self.message


class ConfigError(FilmTrackerError):
    """Required configuration is missing or malformed."""

    def __init__(self, message: str):
        super().__init__(message, ErrorType.CONFIG)
