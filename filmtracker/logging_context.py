"""
Context management for request, session and user ID propagation.

Identifiers for the request being served, the server-side session behind
its cookie, and (once logged in) the account it belongs to are kept in
contextvars and bound to structlog, so every log line emitted while handling
a request carries them without passing them through each call.
"""

import uuid
from contextvars import ContextVar
from typing import Optional
import structlog

# Context variables for request, session and account tracking
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
session_id_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)
user_id_var: ContextVar[Optional[int]] = ContextVar("user_id", default=None)


def generate_request_id() -> str:
    """
    Generate a unique request ID.

    Returns:
        UUID string, also echoed to the client as X-Request-ID
    """
    return str(uuid.uuid4())


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Set the request ID in context.

    Args:
        request_id: Optional request ID (generates new one if not provided)

    Returns:
        The request ID that was set
    """
    if request_id is None:
        request_id = generate_request_id()

    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def get_request_id() -> Optional[str]:
    """
    Get the current request ID from context.

    Returns:
        Current request ID or None outside a request
    """
    return request_id_var.get()


def set_session_id(session_id: str) -> str:
    """
    Set the server-side session ID in context.

    Called when the cookie's session is loaded and again when logout
    regenerates it, so later log lines carry the new identifier.

    Args:
        session_id: Session ID to set

    Returns:
        The session ID that was set
    """
    session_id_var.set(session_id)
    structlog.contextvars.bind_contextvars(session_id=session_id)
    return session_id


def get_session_id() -> Optional[str]:
    """
    Get the current session ID from context.

    Returns:
        Current session ID or None if not set
    """
    return session_id_var.get()


def set_user_id(user_id: Optional[int]) -> Optional[int]:
    """
    Set the logged-in account in context.

    Args:
        user_id: users.userID of the session, or None for an anonymous one

    Returns:
        The user ID that was set
    """
    user_id_var.set(user_id)
    if user_id is None:
        structlog.contextvars.unbind_contextvars("user_id")
    else:
        structlog.contextvars.bind_contextvars(user_id=user_id)
    return user_id


def get_user_id() -> Optional[int]:
    """
    Get the logged-in account from context.

    Returns:
        Current user ID or None for anonymous requests
    """
    return user_id_var.get()


def clear_context():
    """
    Clear all context variables.

    Run at request teardown so identifiers never leak into the next request
    served by the same worker.
    """
    request_id_var.set(None)
    session_id_var.set(None)
    user_id_var.set(None)
    structlog.contextvars.clear_contextvars()


def bind_context(**kwargs):
    """
    Bind additional key-value pairs to the log context.

    Args:
        **kwargs: Fields to attach to every subsequent log line of the request
    """
    structlog.contextvars.bind_contextvars(**kwargs)
