import pytest
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from filmtracker.app import create_app
from filmtracker.config import Settings
from filmtracker.models import db, Film

STRONG_PASSWORD = "Secret123!"


def make_test_app():
    """Create an app backed by a fresh in-memory SQLite database."""
    settings = Settings(database_url="sqlite:///:memory:", session_secret="test-secret-key")
    return create_app(settings, testing=True)


def seed_films(app):
    """Insert a small catalog and return the film IDs."""
    with app.app_context():
        db.session.add_all([
            Film(film_id=1, title="Inception", director="Christopher Nolan", year=2010,
                 tagline="Your mind is the scene of the crime.",
                 description="A thief steals secrets through dreams.",
                 poster="https://example.com/inception.jpg"),
            Film(film_id=2, title="Interstellar", director="Christopher Nolan", year=2014,
                 tagline="-", description="Explorers travel through a wormhole.",
                 poster="https://example.com/interstellar.jpg"),
            Film(film_id=5, title="The Matrix", director="Lana Wachowski, Lilly Wachowski", year=1999,
                 tagline="Welcome to the Real World.",
                 description="A hacker learns the truth about reality.",
                 poster="https://example.com/matrix.jpg"),
        ])
        db.session.commit()
    return [1, 2, 5]


def register(client, username, password=STRONG_PASSWORD, password_confirm=None):
    return client.post('/auth/register', data={
        'username': username,
        'password': password,
        'password_confirm': password if password_confirm is None else password_confirm,
    })


def login(client, username, password=STRONG_PASSWORD):
    return client.post('/auth/login', data={'username': username, 'password': password})


def server_session(app, client):
    """The server-side SessionData the client's cookie points at."""
    with client.session_transaction() as sess:
        session_id = sess.get('session_id')
    return app.extensions['filmtracker'].sessions.get_session(session_id)


@pytest.fixture(scope='function')
def test_app():
    """Create a fresh Flask app for each test."""
    app = make_test_app()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(test_app):
    return test_app.test_client()


@pytest.fixture
def films(test_app):
    return seed_films(test_app)


@pytest.fixture
def services(test_app):
    return test_app.extensions['filmtracker']
