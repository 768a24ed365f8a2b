import structlog

from filmtracker.errors import ValidationError
from filmtracker.metrics import track_watchlist_change
from filmtracker.models import STATUS_PLANNED, STATUS_WATCHED

logger = structlog.get_logger()


class WatchlistService:
    """
    Status changes on a user's watchlist.

    'planned' toggles: a second request removes what the first added.
    'watched' only ever inserts, so repeated requests leave repeated rows.
    Neither path is isolated from concurrent requests on the same film.
    """

    def __init__(self, store):
        self.store = store

    def set_status(self, user_id: int, film_id: int, status: str) -> str:
        """
        Apply a status change.

        Returns:
            'added' or 'removed'

        Raises:
            ValidationError: Unknown status
            DataAccessError: Store failure
        """
        if status == STATUS_PLANNED:
            existing = self.store.find_entries(user_id, film_id=film_id, status=STATUS_PLANNED)
            if existing:
                self.store.delete_entries(entry.id for entry in existing)
                action = "removed"
            else:
                self.store.insert_entry(user_id, film_id, STATUS_PLANNED)
                action = "added"
        elif status == STATUS_WATCHED:
            self.store.insert_entry(user_id, film_id, STATUS_WATCHED)
            action = "added"
        else:
            raise ValidationError(f"Unknown watchlist status: {status}")

        track_watchlist_change(status, action)
        logger.info("watchlist_updated", user_id=user_id, film_id=film_id, status=status, action=action)
        return action
