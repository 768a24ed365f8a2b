"""
Server-side session store for Filmtracker.

Only an opaque session identifier travels in the signed Flask cookie; the
login state it refers to lives here, in process memory.
"""
import uuid
from datetime import datetime, timedelta
from typing import Dict, Optional
import threading


class SessionData:
    """Login state held for one session identifier."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.loggedin = False
        self.username: Optional[str] = None
        self.user_id: Optional[int] = None
        self.created_at = datetime.now()
        self.last_accessed = datetime.now()

    def establish(self, username: str, user_id: int):
        """Mark the session as logged in for a user."""
        self.loggedin = True
        self.username = username
        self.user_id = user_id
        self.last_accessed = datetime.now()

    def clear(self):
        """Drop the user from the session."""
        self.loggedin = False
        self.username = None
        self.user_id = None
        self.last_accessed = datetime.now()

    def to_dict(self):
        return {
            "loggedin": self.loggedin,
            "username": self.username,
            "userID": self.user_id,
        }


class SessionManager:
    """
    Manages server-side sessions keyed by session identifier.

    Every visitor gets a session, so anonymous sessions accumulate between
    lookups. Creating a session also sweeps expired ones, at most once per
    cleanup interval.
    """

    def __init__(self, session_timeout_minutes: int = 60, cleanup_interval_minutes: int = 15):
        self._sessions: Dict[str, SessionData] = {}
        self._lock = threading.Lock()
        self.session_timeout = timedelta(minutes=session_timeout_minutes)
        self.cleanup_interval = timedelta(minutes=cleanup_interval_minutes)
        self._last_cleanup = datetime.now()

    def create_session(self) -> str:
        """Create a new session and return the session ID."""
        session_id = str(uuid.uuid4())
        with self._lock:
            now = datetime.now()
            if now - self._last_cleanup >= self.cleanup_interval:
                self._remove_expired(now)
            self._sessions[session_id] = SessionData(session_id)
        return session_id

    def get_session(self, session_id: str) -> Optional[SessionData]:
        """Get session data by session ID, dropping it if it has expired."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session:
                if datetime.now() - session.last_accessed > self.session_timeout:
                    del self._sessions[session_id]
                    return None
                session.last_accessed = datetime.now()
            return session

    def get_or_create_session(self, session_id: Optional[str] = None) -> tuple[str, SessionData]:
        """Get existing session or create a new one."""
        if session_id:
            session = self.get_session(session_id)
            if session:
                return session_id, session

        new_session_id = self.create_session()
        with self._lock:
            return new_session_id, self._sessions[new_session_id]

    def save_session(self, session_id: str, data: SessionData):
        """Persist session data under session_id."""
        data.last_accessed = datetime.now()
        with self._lock:
            self._sessions[session_id] = data

    def regenerate_session(self, session_id: Optional[str]) -> str:
        """Discard session_id and return a fresh, logged-out session ID."""
        if session_id:
            self.delete_session(session_id)
        return self.create_session()

    def delete_session(self, session_id: str) -> bool:
        with self._lock:
            if session_id in self._sessions:
                del self._sessions[session_id]
                return True
            return False

    def cleanup_expired_sessions(self) -> int:
        """Remove expired sessions and return how many were dropped."""
        with self._lock:
            return self._remove_expired(datetime.now())

    def _remove_expired(self, now: datetime) -> int:
        # Caller holds self._lock
        expired = [
            sid for sid, session in self._sessions.items()
            if now - session.last_accessed > self.session_timeout
        ]
        for sid in expired:
            del self._sessions[sid]
        self._last_cleanup = now
        return len(expired)

    def get_active_session_count(self) -> int:
        with self._lock:
            return len(self._sessions)
