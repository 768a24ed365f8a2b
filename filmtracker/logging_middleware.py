"""
Flask middleware for structured logging.

This module provides Flask middleware to:
- Inject request_id into the logging context
- Log each HTTP request with its status code and duration
- Attribute completed requests to the logged-in account, when there is one
- Return the request ID to the client in X-Request-ID
"""

import time
from typing import Optional

from flask import Flask, Response, request, g
from filmtracker.logging_config import get_logger
from filmtracker.logging_context import set_request_id, get_user_id, clear_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = 'X-Request-ID'


def _elapsed_ms() -> Optional[float]:
    """
    Milliseconds since the request started.

    Returns:
        Duration rounded to two decimals, or None if the start was not recorded
    """
    start = g.get('request_start_time')
    if start is None:
        return None
    return round((time.time() - start) * 1000, 2)


def init_logging_middleware(app: Flask):
    """
    Initialize logging middleware for Flask application.

    Registered before the session hooks, so request_started carries only the
    request ID; session and user IDs join the context once the session loads.

    Args:
        app: Flask application instance
    """

    @app.before_request
    def before_request_logging():
        """Start the request's log context and timer."""
        g.request_id = set_request_id()
        g.request_start_time = time.time()

        logger.info(
            "request_started",
            method=request.method,
            path=request.path,
            remote_addr=request.remote_addr,
            user_agent=request.headers.get('User-Agent', 'Unknown'),
        )

    @app.after_request
    def after_request_logging(response: Response) -> Response:
        """
        Log the outcome and tag the response with its request ID.

        Args:
            response: Outgoing response

        Returns:
            The same response, with X-Request-ID set
        """
        logger.info(
            "request_completed",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=_elapsed_ms(),
            user_id=get_user_id(),
        )

        if 'request_id' in g:
            response.headers[REQUEST_ID_HEADER] = g.request_id

        return response

    @app.teardown_request
    def teardown_request_logging(exception=None):
        """
        Log unhandled failures and reset the log context.

        Args:
            exception: The exception that ended the request, if any
        """
        if exception:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.path,
                error=str(exception),
                duration_ms=_elapsed_ms(),
                exc_info=True,
            )

        clear_context()
