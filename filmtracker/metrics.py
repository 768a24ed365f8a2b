"""
Prometheus metrics for Filmtracker.

Tracks HTTP traffic, authentication outcomes, watchlist changes, store
failures and live sessions.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST


# HTTP Request Metrics
http_requests_total = Counter(
    'filmtracker_http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'filmtracker_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Authentication Metrics
auth_events_total = Counter(
    'filmtracker_auth_events_total',
    'Total number of authentication events',
    ['event', 'outcome']  # register/login/logout/delete_account, success/failure
)

# Watchlist Metrics
watchlist_changes_total = Counter(
    'filmtracker_watchlist_changes_total',
    'Total number of watchlist entry changes',
    ['status', 'action']  # planned/watched, added/removed
)

# Data Access Metrics
data_access_errors_total = Counter(
    'filmtracker_data_access_errors_total',
    'Total number of failed store operations',
    ['operation']
)

# Session Metrics
active_sessions = Gauge(
    'filmtracker_active_sessions',
    'Number of active user sessions'
)


def track_auth_event(event, success=True):
    """
    Record an authentication event.

    Args:
        event: One of 'register', 'login', 'logout', 'delete_account'
        success: Whether the operation succeeded
    """
    outcome = 'success' if success else 'failure'
    auth_events_total.labels(event=event, outcome=outcome).inc()


def track_watchlist_change(status, action):
    """
    Record a watchlist change.

    Args:
        status: 'planned' or 'watched'
        action: 'added' or 'removed'
    """
    watchlist_changes_total.labels(status=status, action=action).inc()


def track_data_access_error(operation):
    """Record a failed store operation."""
    data_access_errors_total.labels(operation=operation).inc()


def update_active_sessions(count):
    """Update the active sessions count."""
    active_sessions.set(count)


def get_metrics():
    """
    Generate Prometheus metrics in text format.

    Returns:
        Tuple of (metrics_text, content_type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
