from flask import Blueprint, redirect, request, session, url_for

from filmtracker.errors import AuthError, ConflictError, ValidationError
from filmtracker.logging_context import set_session_id, set_user_id
from filmtracker.routes.common import login_required, plain_text, services, user_session

bp = Blueprint("auth", __name__)


@bp.route("/auth/register", methods=["POST"])
def register():
    """
    POST /auth/register
    Form body: username, password, password_confirm.
    Redirects to the dashboard, or answers 400/409 with a plain-text reason.
    """
    try:
        data = services().auth.register(
            session.get("session_id"),
            request.form.get("username", "").strip(),
            request.form.get("password", ""),
            request.form.get("password_confirm", ""),
        )
    except (ValidationError, ConflictError) as e:
        return plain_text(e.message, e.status_code)

    set_user_id(data.user_id)
    return redirect(url_for("pages.dashboard"))


@bp.route("/auth/login", methods=["POST"])
def login():
    """
    POST /auth/login
    Form body: username, password.
    Redirects to the dashboard, or answers 401 with a plain-text reason.
    """
    try:
        data = services().auth.login(
            session.get("session_id"),
            request.form.get("username", "").strip(),
            request.form.get("password", ""),
        )
    except AuthError as e:
        return plain_text(e.message, e.status_code)

    set_user_id(data.user_id)
    return redirect(url_for("pages.dashboard"))


@bp.route("/logout")
def logout():
    """
    GET /logout
    Clears the session and swaps the cookie to a freshly generated session ID.
    Safe to call when not logged in.
    """
    new_session_id = services().auth.logout(session.get("session_id"))
    session["session_id"] = new_session_id
    set_session_id(new_session_id)
    set_user_id(None)
    return redirect(url_for("pages.index"))


@bp.route("/delete", methods=["POST"])
@login_required
def delete():
    """
    POST /delete
    Removes the account and its watchlist, then hands over to /logout.
    """
    services().auth.delete_account(user_session().user_id)
    return redirect(url_for("auth.logout"))
