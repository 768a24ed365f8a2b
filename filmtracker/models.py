"""
Database models for Filmtracker.

This module defines SQLAlchemy models for the relational store:
- User: registered account with a bcrypt password hash
- Film: catalog entry, populated out of band
- WatchlistEntry: a user's planned/watched mark on a film

Column names follow the existing schema (userID, filmID, ID); attribute
names are snake_case.
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

STATUS_PLANNED = 'planned'
STATUS_WATCHED = 'watched'
WATCHLIST_STATUSES = (STATUS_PLANNED, STATUS_WATCHED)

# Stored tagline for films without one
NO_TAGLINE = '-'


class User(db.Model):
    """A registered account. Never updated after creation."""
    __tablename__ = 'users'

    user_id = db.Column('userID', db.Integer, primary_key=True, autoincrement=True)
    username = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)

    def __repr__(self):
        return f'<User {self.user_id} {self.username!r}>'


class Film(db.Model):
    """A catalog entry. Read-only from the application's point of view."""
    __tablename__ = 'films'

    film_id = db.Column('filmID', db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False, index=True)
    director = db.Column(db.String(255), nullable=True)
    year = db.Column(db.Integer, nullable=True)
    tagline = db.Column(db.String(512), nullable=True, default=NO_TAGLINE)
    description = db.Column(db.Text, nullable=True)
    poster = db.Column(db.String(512), nullable=True)

    @property
    def has_tagline(self):
        return bool(self.tagline) and self.tagline != NO_TAGLINE

    def __repr__(self):
        return f'<Film {self.film_id} {self.title!r}>'


class WatchlistEntry(db.Model):
    """
    A user's mark on a film.

    There is no uniqueness constraint on (userID, filmID, status); the
    single-planned-entry rule is kept by the watchlist service.
    """
    __tablename__ = 'users_watchlist'

    id = db.Column('ID', db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column('userID', db.Integer, nullable=False, index=True)
    film_id = db.Column('filmID', db.Integer, nullable=False)
    status = db.Column(db.String(16), nullable=False)

    def __repr__(self):
        return f'<WatchlistEntry {self.id} user={self.user_id} film={self.film_id} {self.status}>'
