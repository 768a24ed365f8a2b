from flask import Blueprint, jsonify, Response
from filmtracker.metrics import get_metrics, update_active_sessions
from filmtracker.routes.common import services

bp = Blueprint("api", __name__)


@bp.route("/movies", methods=["GET"])
def movies():
    """
    GET /movies
    Every film in the catalog, for the client-side film grid and detail page.
    """
    films = services().catalog.list_all_films()
    return jsonify({"movies": [film.to_dict() for film in films]})


@bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint for deployment monitoring."""
    return jsonify({"status": "healthy", "service": "filmtracker"}), 200


@bp.route("/metrics", methods=["GET"])
def metrics():
    """
    GET /metrics
    Expose Prometheus metrics for monitoring.

    Only aggregated counters are returned; no usernames or session data.
    """
    sessions = services().sessions
    sessions.cleanup_expired_sessions()
    update_active_sessions(sessions.get_active_session_count())

    metrics_text, content_type = get_metrics()
    return Response(metrics_text, mimetype=content_type)
