# Initialize structured logging early
from filmtracker.logging_config import get_logger, configure_structlog
configure_structlog()

import json
import os
import time
from dataclasses import dataclass
from typing import Optional

import click
from flask import Flask, g, render_template, request, session
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import InternalServerError, NotFound

import filmtracker.secret_helper as secret_helper
from filmtracker.config import Settings
from filmtracker.errors import DataAccessError, FilmTrackerError
from filmtracker.logging_context import set_session_id, set_user_id
from filmtracker.logging_middleware import init_logging_middleware
from filmtracker.metrics import http_requests_total, http_request_duration_seconds
from filmtracker.models import db, Film, NO_TAGLINE
from filmtracker.routes.api import bp as api_bp
from filmtracker.routes.auth import bp as auth_bp
from filmtracker.routes.pages import bp as pages_bp
from filmtracker.services.auth_service import AuthService
from filmtracker.services.catalog_service import CatalogService
from filmtracker.services.watchlist_service import WatchlistService
from filmtracker.session_manager import SessionManager
from filmtracker.store import FilmStore

logger = get_logger(__name__)

# Views and assets ship inside the package
PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
TEMPLATE_DIR = os.path.join(PACKAGE_DIR, 'templates')
STATIC_DIR = os.path.join(PACKAGE_DIR, 'static')

GENERIC_ERROR_MESSAGE = 'Something went wrong :/'


@dataclass
class Services:
    """Per-application handles, reachable as app.extensions['filmtracker']."""
    settings: Settings
    store: FilmStore
    sessions: SessionManager
    auth: AuthService
    watchlist: WatchlistService
    catalog: CatalogService


def create_app(settings: Optional[Settings] = None, testing: bool = False) -> Flask:
    """
    Build the Flask application.

    Args:
        settings: Explicit settings; read from the environment when omitted
        testing: Enable Flask testing mode

    Raises:
        ConfigError: If required configuration is missing
    """
    if settings is None:
        secret_helper.inject_secrets()
        settings = Settings.from_env()

    app = Flask(__name__, template_folder=TEMPLATE_DIR, static_folder=STATIC_DIR)
    app.config['TESTING'] = testing
    app.config['SECRET_KEY'] = settings.session_secret
    app.config['PERMANENT_SESSION_LIFETIME'] = settings.session_timeout_minutes * 60
    app.config['SQLALCHEMY_DATABASE_URI'] = settings.sqlalchemy_database_uri
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = settings.engine_options
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    init_logging_middleware(app)
    db.init_app(app)

    store = FilmStore(db)
    sessions = SessionManager(session_timeout_minutes=settings.session_timeout_minutes)
    app.extensions['filmtracker'] = Services(
        settings=settings,
        store=store,
        sessions=sessions,
        auth=AuthService(store, sessions),
        watchlist=WatchlistService(store),
        catalog=CatalogService(store),
    )

    app.register_blueprint(pages_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(api_bp)

    register_request_hooks(app)
    register_error_handlers(app)
    register_commands(app)

    init_db(app)
    return app


def init_db(app: Flask) -> bool:
    """
    Create missing tables.

    A store that cannot be reached is logged, not raised, so the process keeps
    serving pages that do not need the database.
    """
    try:
        with app.app_context():
            db.create_all()
        logger.info("database_initialized", message="Database tables initialized successfully")
        return True
    except SQLAlchemyError as e:
        logger.error("database_init_failed", message="Could not reach the database", error=str(e))
        return False


def register_request_hooks(app: Flask):

    @app.before_request
    def load_user_session():
        """Attach the server-side session for the cookie's session ID."""
        sessions = app.extensions['filmtracker'].sessions
        session_id, data = sessions.get_or_create_session(session.get('session_id'))
        session['session_id'] = session_id
        g.user_session = data
        set_session_id(session_id)
        set_user_id(data.user_id if data.loggedin else None)

    @app.context_processor
    def inject_current_user():
        return {'currentUser': g.get('user_session')}

    # Middleware to track HTTP request metrics
    @app.before_request
    def before_request_metrics():
        g.metrics_start_time = time.time()

    @app.after_request
    def after_request_metrics(response):
        if 'metrics_start_time' in g:
            duration = time.time() - g.metrics_start_time
            endpoint = request.endpoint or request.path
            http_requests_total.labels(method=request.method, endpoint=endpoint,
                                       status=response.status_code).inc()
            http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(duration)
        return response


def register_error_handlers(app: Flask):

    @app.errorhandler(DataAccessError)
    def handle_data_access_error(e):
        # The diagnostic detail is shown to the client as well as logged.
        return render_template('error.html', message=GENERIC_ERROR_MESSAGE, error=e.detail), e.status_code

    @app.errorhandler(FilmTrackerError)
    def handle_application_error(e):
        return e.message, e.status_code, {'Content-Type': 'text/plain; charset=utf-8'}

    @app.errorhandler(NotFound)
    def handle_not_found(e):
        return render_template('error.html', message='Page not found', error=None), 404

    @app.errorhandler(InternalServerError)
    def handle_internal_error(e):
        original = getattr(e, 'original_exception', None)
        logger.error("unhandled_exception", error=str(original or e))
        return render_template('error.html', message=GENERIC_ERROR_MESSAGE,
                               error=str(original) if original else None), 500


def register_commands(app: Flask):

    @app.cli.command('init-db')
    def init_db_command():
        """Create the users, films and users_watchlist tables."""
        if init_db(app):
            click.echo('Database initialized.')
        else:
            raise click.ClickException('Could not initialize the database.')

    @app.cli.command('import-films')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    def import_films_command(path):
        """Load catalog films from a JSON file, skipping known filmIDs."""
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
        records = payload.get('movies', []) if isinstance(payload, dict) else payload

        store = app.extensions['filmtracker'].store
        known = {film.film_id for film in store.list_films()}
        films = []
        for record in records:
            film_id = record.get('filmID')
            if film_id is None or film_id in known:
                continue
            known.add(film_id)
            films.append(Film(
                film_id=film_id,
                title=record['title'],
                director=record.get('director'),
                year=record.get('year'),
                tagline=record.get('tagline') or NO_TAGLINE,
                description=record.get('description'),
                poster=record.get('poster'),
            ))

        added = store.add_films(films)
        logger.info("films_imported", path=path, added=added, skipped=len(records) - added)
        click.echo(f'Imported {added} film(s).')
