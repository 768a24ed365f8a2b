from flask import Blueprint, abort, redirect, render_template, request, url_for

from filmtracker.errors import ValidationError
from filmtracker.models import STATUS_PLANNED, STATUS_WATCHED
from filmtracker.routes.common import login_required, plain_text, services, user_session
from filmtracker.schemas import WatchlistForm

bp = Blueprint("pages", __name__)


@bp.route("/")
def index():
    """GET / renders the landing page."""
    return render_template("index.html")


@bp.route("/login")
def login():
    """
    GET /login
    Login form. A session that is already logged in goes to the dashboard.
    """
    if user_session().loggedin:
        return redirect(url_for("pages.dashboard"))
    return render_template("login.html")


@bp.route("/register")
def register():
    """
    GET /register
    Registration form. A session that is already logged in goes to the dashboard.
    """
    if user_session().loggedin:
        return redirect(url_for("pages.dashboard"))
    return render_template("register.html")


@bp.route("/films")
def films():
    """
    GET /films
    Catalog page shell. The grid is filled client-side from /movies.
    """
    return render_template("films.html")


@bp.route("/film")
def film():
    """
    GET /film?film_id=5
    Film detail. Logged-in users also see whether the film is planned/watched.
    A missing, malformed or unknown film_id is a 404.
    """
    film_id = request.args.get("film_id", type=int)
    if film_id is None:
        abort(404)

    data = user_session()
    user_id = data.user_id if data.loggedin else None
    view = services().catalog.get_film(film_id, user_id)
    if view is None:
        abort(404)

    return render_template("film.html", filmID=film_id, film=view.film, tagline=view.tagline,
                           planned=view.planned, watched=view.watched)


@bp.route("/watchlist", methods=["GET"])
@login_required
def watchlist():
    """
    GET /watchlist
    Posters of every film the user has marked as planned.
    """
    items = services().catalog.list_watchlist(user_session().user_id, STATUS_PLANNED)
    return render_template("watchlist.html", watchlist=items)


@bp.route("/watchlist", methods=["POST"])
@login_required
def update_watchlist():
    """
    POST /watchlist
    Form body: filmID, status ('planned' toggles, 'watched' adds).
    Redirects back to the film page; a malformed form is a plain-text 400.
    """
    try:
        form = WatchlistForm.parse(request.form)
    except ValidationError as e:
        return plain_text(e.message, e.status_code)

    services().watchlist.set_status(user_session().user_id, form.filmID, form.status)
    return redirect(url_for("pages.film", film_id=form.filmID))


@bp.route("/dashboard")
@login_required
def dashboard():
    """
    GET /dashboard
    Posters of every film the user has marked as watched, each shown once.
    """
    items = services().catalog.list_watchlist(user_session().user_id, STATUS_WATCHED)
    return render_template("dashboard.html", watchlist=items)


@bp.route("/terms")
def terms():
    return render_template("terms.html")


@bp.route("/search")
def search():
    """
    GET /search?q=matrix
    Case-insensitive substring match on film titles. No q matches everything.
    """
    query = request.args.get("q", "")
    results = services().catalog.search_films(query)
    return render_template("search.html", searchResults=results, queryString=query)


@bp.route("/delete-account")
@login_required
def delete_account():
    """GET /delete-account asks for confirmation before POST /delete."""
    return render_template("delete-account.html")
