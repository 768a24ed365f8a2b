"""
Helpers shared by the Filmtracker blueprints.
"""

from functools import wraps
from flask import current_app, g, redirect, url_for


def services():
    """The Services bundle create_app() attached to the running app."""
    return current_app.extensions["filmtracker"]


def user_session():
    """Server-side session data loaded for the current request."""
    return g.user_session


def login_required(view):
    """
    Redirect to the login page unless the session is logged in.

    Usage:
        @bp.route('/dashboard')
        @login_required
        def dashboard():
            ...
    """
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not user_session().loggedin:
            return redirect(url_for("pages.login"))
        return view(*args, **kwargs)
    return wrapper


def plain_text(message, status_code):
    return message, status_code, {"Content-Type": "text/plain; charset=utf-8"}
