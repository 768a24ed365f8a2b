"""
Data access layer for Filmtracker.

FilmStore is the single handle request handlers use to reach the relational
store. It is created once per application by create_app() and exposes one
parameterized query per method. Any SQLAlchemy failure is rolled back and
re-raised as DataAccessError; nothing is retried.
"""

from contextlib import contextmanager
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from filmtracker.errors import DataAccessError
from filmtracker.logging_config import get_logger
from filmtracker.metrics import track_data_access_error
from filmtracker.models import Film, User, WatchlistEntry

logger = get_logger(__name__)


class FilmStore:
    """Query handle over the users, films and users_watchlist tables."""

    def __init__(self, db):
        self.db = db

    @property
    def session(self):
        return self.db.session

    @contextmanager
    def _operation(self, name: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.session.rollback()
            track_data_access_error(name)
            logger.error("data_access_failed", operation=name, error=str(e))
            raise DataAccessError(f"Database operation '{name}' failed", original_error=e) from e

    # --- Users ---

    def find_user(self, username: str) -> Optional[User]:
        with self._operation("find_user"):
            return User.query.filter_by(username=username).first()

    def username_exists(self, username: str) -> bool:
        return self.find_user(username) is not None

    def get_user_id(self, username: str) -> Optional[int]:
        with self._operation("get_user_id"):
            row = self.session.query(User.user_id).filter_by(username=username).first()
            return row.user_id if row else None

    def insert_user(self, username: str, password_hash: str) -> None:
        with self._operation("insert_user"):
            self.session.add(User(username=username, password=password_hash))
            self.session.commit()

    def delete_user(self, user_id: int) -> int:
        """
        Delete a user's watchlist rows and the user row in one transaction.

        Returns:
            Number of watchlist rows removed
        """
        with self._operation("delete_user"):
            removed = WatchlistEntry.query.filter_by(user_id=user_id).delete(synchronize_session=False)
            User.query.filter_by(user_id=user_id).delete(synchronize_session=False)
            self.session.commit()
            return removed

    # --- Films ---

    def get_film(self, film_id: int) -> Optional[Film]:
        with self._operation("get_film"):
            return self.session.get(Film, film_id)

    def list_films(self) -> List[Film]:
        with self._operation("list_films"):
            return Film.query.order_by(Film.film_id).all()

    def search_films(self, query: str) -> List[Film]:
        """Case-insensitive substring match on title."""
        pattern = f"%{query}%"
        with self._operation("search_films"):
            return Film.query.filter(
                func.lower(Film.title).like(func.lower(pattern))
            ).order_by(Film.film_id).all()

    def list_films_by_ids(self, film_ids: Iterable[int]) -> List[Film]:
        film_ids = list(set(film_ids))
        if not film_ids:
            return []
        with self._operation("list_films_by_ids"):
            return Film.query.filter(Film.film_id.in_(film_ids)).order_by(Film.film_id).all()

    def add_films(self, films: Iterable[Film]) -> int:
        """Insert catalog rows. Used by the out-of-band import command."""
        films = list(films)
        with self._operation("add_films"):
            self.session.add_all(films)
            self.session.commit()
        return len(films)

    # --- Watchlist ---

    def find_entries(self, user_id: int, film_id: Optional[int] = None,
                     status: Optional[str] = None) -> List[WatchlistEntry]:
        filters = {"user_id": user_id}
        if film_id is not None:
            filters["film_id"] = film_id
        if status is not None:
            filters["status"] = status
        with self._operation("find_entries"):
            return WatchlistEntry.query.filter_by(**filters).order_by(WatchlistEntry.id).all()

    def insert_entry(self, user_id: int, film_id: int, status: str) -> WatchlistEntry:
        entry = WatchlistEntry(user_id=user_id, film_id=film_id, status=status)
        with self._operation("insert_entry"):
            self.session.add(entry)
            self.session.commit()
        return entry

    def delete_entries(self, entry_ids: Iterable[int]) -> int:
        entry_ids = list(entry_ids)
        if not entry_ids:
            return 0
        with self._operation("delete_entries"):
            removed = WatchlistEntry.query.filter(
                WatchlistEntry.id.in_(entry_ids)
            ).delete(synchronize_session=False)
            self.session.commit()
            return removed
