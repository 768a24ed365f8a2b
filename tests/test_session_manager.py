"""
Tests for session manager functionality.
"""

import os
import sys
from datetime import datetime, timedelta

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from filmtracker.session_manager import SessionManager, SessionData


def test_create_session():
    """Test creating a new session."""
    manager = SessionManager()
    session_id = manager.create_session()

    assert session_id is not None
    assert len(session_id) > 0

    session = manager.get_session(session_id)
    assert session is not None
    assert session.session_id == session_id
    assert session.loggedin is False


def test_session_data_establish_and_clear():
    session = SessionData("test-session-123")

    session.establish("alice", 7)
    assert session.to_dict() == {"loggedin": True, "username": "alice", "userID": 7}

    session.clear()
    assert session.to_dict() == {"loggedin": False, "username": None, "userID": None}


def test_get_or_create_session():
    manager = SessionManager()

    new_id, data = manager.get_or_create_session(None)
    assert data.session_id == new_id

    same_id, same_data = manager.get_or_create_session(new_id)
    assert same_id == new_id
    assert same_data is data

    unknown_id, _ = manager.get_or_create_session("does-not-exist")
    assert unknown_id != "does-not-exist"


def test_sessions_are_isolated():
    manager = SessionManager()
    session1_id = manager.create_session()
    session2_id = manager.create_session()
    assert session1_id != session2_id

    manager.get_session(session1_id).establish("alice", 1)
    assert manager.get_session(session2_id).loggedin is False


def test_save_session():
    manager = SessionManager()
    session_id = manager.create_session()
    data = manager.get_session(session_id)
    data.establish("alice", 1)
    data.last_accessed = datetime.now() - timedelta(minutes=30)

    manager.save_session(session_id, data)
    assert datetime.now() - manager._sessions[session_id].last_accessed < timedelta(minutes=1)
    assert manager.get_session(session_id).username == "alice"


def test_regenerate_session():
    manager = SessionManager()
    old_id = manager.create_session()
    manager.get_session(old_id).establish("alice", 1)

    new_id = manager.regenerate_session(old_id)

    assert new_id != old_id
    assert manager.get_session(old_id) is None
    assert manager.get_session(new_id).loggedin is False
    assert manager.get_active_session_count() == 1


def test_session_expiry():
    manager = SessionManager(session_timeout_minutes=60)
    session_id = manager.create_session()
    manager._sessions[session_id].last_accessed = datetime.now() - timedelta(minutes=61)

    assert manager.get_session(session_id) is None
    assert manager.get_active_session_count() == 0


def test_cleanup_expired_sessions():
    manager = SessionManager(session_timeout_minutes=60)
    stale = manager.create_session()
    fresh = manager.create_session()
    manager._sessions[stale].last_accessed = datetime.now() - timedelta(hours=2)

    assert manager.cleanup_expired_sessions() == 1
    assert manager.get_active_session_count() == 1
    assert manager.get_session(fresh) is not None


def test_delete_session():
    manager = SessionManager()
    session_id = manager.create_session()
    assert manager.delete_session(session_id) is True
    assert manager.delete_session(session_id) is False


def test_create_session_sweeps_expired_sessions():
    manager = SessionManager(session_timeout_minutes=60, cleanup_interval_minutes=15)
    stale = manager.create_session()
    manager._sessions[stale].last_accessed = datetime.now() - timedelta(hours=2)
    manager._last_cleanup = datetime.now() - timedelta(minutes=16)

    fresh = manager.create_session()

    assert stale not in manager._sessions
    assert fresh in manager._sessions
    assert manager.get_active_session_count() == 1


def test_sweep_runs_at_most_once_per_interval():
    manager = SessionManager(session_timeout_minutes=60, cleanup_interval_minutes=15)
    stale = manager.create_session()
    manager._sessions[stale].last_accessed = datetime.now() - timedelta(hours=2)

    # Last sweep was just now (at construction), so nothing is dropped yet
    manager.create_session()
    assert stale in manager._sessions
