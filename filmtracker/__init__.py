"""
Filmtracker - Film Watchlist Tracker

A Flask-based application for keeping track of films a user has watched
or plans to watch, backed by MySQL through SQLAlchemy.
"""

__version__ = "1.0.0"

# Export the error taxonomy for external use
from .errors import (
    FilmTrackerError,
    ValidationError,
    AuthError,
    ConflictError,
    DataAccessError,
    ConfigError,
    ErrorType
)

__all__ = [
    "FilmTrackerError",
    "ValidationError",
    "AuthError",
    "ConflictError",
    "DataAccessError",
    "ConfigError",
    "ErrorType",
]
