"""
Tests for the watchlist status toggle and the pages that list entries.
"""

import pytest
from unittest.mock import patch

from filmtracker.errors import ValidationError
from filmtracker.models import WatchlistEntry

from conftest import register, server_session

USER_ID = 1
FILM_ID = 5


def entries(app, user_id=USER_ID, film_id=FILM_ID, status=None):
    with app.app_context():
        query = WatchlistEntry.query.filter_by(user_id=user_id, film_id=film_id)
        if status:
            query = query.filter_by(status=status)
        return query.count()


class TestSetStatus:

    def test_planned_once_inserts_one_entry(self, test_app, services):
        with test_app.app_context():
            assert services.watchlist.set_status(USER_ID, FILM_ID, "planned") == "added"
        assert entries(test_app, status="planned") == 1

    def test_planned_twice_toggles_off(self, test_app, services):
        with test_app.app_context():
            services.watchlist.set_status(USER_ID, FILM_ID, "planned")
            assert services.watchlist.set_status(USER_ID, FILM_ID, "planned") == "removed"
        assert entries(test_app) == 0

    def test_planned_three_times_is_back_on(self, test_app, services):
        with test_app.app_context():
            for _ in range(3):
                services.watchlist.set_status(USER_ID, FILM_ID, "planned")
        assert entries(test_app, status="planned") == 1

    def test_watched_twice_inserts_two_entries(self, test_app, services):
        # watched is not deduplicated, unlike planned
        with test_app.app_context():
            services.watchlist.set_status(USER_ID, FILM_ID, "watched")
            services.watchlist.set_status(USER_ID, FILM_ID, "watched")
        assert entries(test_app, status="watched") == 2

    def test_planned_toggle_leaves_watched_alone(self, test_app, services):
        with test_app.app_context():
            services.watchlist.set_status(USER_ID, FILM_ID, "watched")
            services.watchlist.set_status(USER_ID, FILM_ID, "planned")
            services.watchlist.set_status(USER_ID, FILM_ID, "planned")
        assert entries(test_app, status="watched") == 1
        assert entries(test_app, status="planned") == 0

    def test_toggle_off_removes_all_planned_duplicates(self, test_app, services):
        # Duplicates can exist after racing requests; one toggle clears them all
        with test_app.app_context():
            services.store.insert_entry(USER_ID, FILM_ID, "planned")
            services.store.insert_entry(USER_ID, FILM_ID, "planned")
            assert services.watchlist.set_status(USER_ID, FILM_ID, "planned") == "removed"
        assert entries(test_app) == 0

    def test_entries_are_per_user(self, test_app, services):
        with test_app.app_context():
            services.watchlist.set_status(1, FILM_ID, "planned")
            services.watchlist.set_status(2, FILM_ID, "planned")
        assert entries(test_app, user_id=1) == 1
        assert entries(test_app, user_id=2) == 1

    def test_unknown_status_rejected(self, test_app, services):
        with test_app.app_context():
            with pytest.raises(ValidationError):
                services.watchlist.set_status(USER_ID, FILM_ID, "dropped")
        assert entries(test_app) == 0

    def test_change_is_logged(self, test_app, services):
        with patch("filmtracker.services.watchlist_service.logger") as mock_logger:
            with test_app.app_context():
                services.watchlist.set_status(USER_ID, FILM_ID, "watched")

        mock_logger.info.assert_called_once_with(
            "watchlist_updated", user_id=USER_ID, film_id=FILM_ID, status="watched", action="added"
        )


class TestWatchlistRoutes:

    def test_post_redirects_to_film(self, test_app, client, films):
        register(client, "alice")
        response = client.post("/watchlist", data={"filmID": "5", "status": "planned"})

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/film?film_id=5")
        user_id = server_session(test_app, client).user_id
        assert entries(test_app, user_id=user_id, status="planned") == 1

    def test_watchlist_page_lists_planned_posters(self, client, films):
        register(client, "alice")
        client.post("/watchlist", data={"filmID": "5", "status": "planned"})
        client.post("/watchlist", data={"filmID": "1", "status": "watched"})

        page = client.get("/watchlist").get_data(as_text=True)
        assert "https://example.com/matrix.jpg" in page
        assert "https://example.com/inception.jpg" not in page

    def test_dashboard_lists_watched_posters(self, client, films):
        register(client, "alice")
        client.post("/watchlist", data={"filmID": "1", "status": "watched"})
        client.post("/watchlist", data={"filmID": "1", "status": "watched"})

        page = client.get("/dashboard").get_data(as_text=True)
        assert page.count("https://example.com/inception.jpg") == 1
        assert "https://example.com/matrix.jpg" not in page

    def test_empty_lists_render(self, client, films):
        register(client, "alice")
        assert "Your watchlist is empty." in client.get("/watchlist").get_data(as_text=True)
        assert "not marked any films" in client.get("/dashboard").get_data(as_text=True)

    @pytest.mark.parametrize("form", [
        {"filmID": "5", "status": "dropped"},
        {"filmID": "abc", "status": "planned"},
        {"status": "planned"},
        {"filmID": "5"},
    ])
    def test_bad_form_is_400(self, test_app, client, films, form):
        register(client, "alice")
        response = client.post("/watchlist", data=form)
        assert response.status_code == 400
        with test_app.app_context():
            assert WatchlistEntry.query.count() == 0
