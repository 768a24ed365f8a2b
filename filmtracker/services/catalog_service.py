import structlog
from typing import List, Optional

from filmtracker.models import STATUS_PLANNED, STATUS_WATCHED
from filmtracker.schemas import FilmSchema, FilmView, WatchlistItem

logger = structlog.get_logger()


class CatalogService:
    """Read-only queries over the film catalog and users' watchlists."""

    def __init__(self, store):
        self.store = store

    def get_film(self, film_id: int, user_id: Optional[int] = None) -> Optional[FilmView]:
        """
        Film metadata plus the user's planned/watched flags.

        Returns None when the film does not exist.
        """
        film = self.store.get_film(film_id)
        if film is None:
            return None

        if user_id is None:
            return FilmView.build(film)

        entries = self.store.find_entries(user_id, film_id=film_id)
        planned = any(entry.status == STATUS_PLANNED for entry in entries)
        watched = any(entry.status == STATUS_WATCHED for entry in entries)
        return FilmView.build(film, planned=planned, watched=watched)

    def list_watchlist(self, user_id: int, status: str) -> List[WatchlistItem]:
        """Poster tiles for the user's films with the given status."""
        entries = self.store.find_entries(user_id, status=status)
        if not entries:
            return []
        films = self.store.list_films_by_ids(entry.film_id for entry in entries)
        return [WatchlistItem.model_validate(film) for film in films]

    def search_films(self, query: Optional[str]) -> List[FilmSchema]:
        """Films whose title contains query, ignoring case. Empty matches all."""
        films = self.store.search_films(query or "")
        logger.debug("films_searched", query=query, result_count=len(films))
        return [FilmSchema.model_validate(film) for film in films]

    def list_all_films(self) -> List[FilmSchema]:
        return [FilmSchema.model_validate(film) for film in self.store.list_films()]
