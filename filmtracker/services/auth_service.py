import re
import structlog
from typing import Optional

from filmtracker.errors import AuthError, ConflictError, ValidationError
from filmtracker.metrics import track_auth_event
from filmtracker.security import check_password, hash_password
from filmtracker.session_manager import SessionData, SessionManager

logger = structlog.get_logger()

# At least 8 characters with a lowercase letter, an uppercase letter, a digit
# and one of !@#$%^&*
PASSWORD_POLICY = re.compile(r'^(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[!@#$%^&*]).{8,}$')

PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"
PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters long and contain at least one uppercase letter, "
    "one lowercase letter, one number, and one special character."
)
USERNAME_TAKEN_MESSAGE = "Username already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


def validate_password(password: str) -> bool:
    return bool(PASSWORD_POLICY.match(password or ""))


class AuthService:
    """Registration, login, logout and account deletion."""

    def __init__(self, store, sessions: SessionManager):
        self.store = store
        self.sessions = sessions

    def register(self, session_id: Optional[str], username: str, password: str,
                 password_confirm: str) -> SessionData:
        """
        Create an account and log the session in.

        The existence check and the insert are separate statements, so two
        concurrent registrations of one username can both pass the check.

        Raises:
            ValidationError: Missing username, mismatched or weak password
            ConflictError: Username already taken
            DataAccessError: Store failure
        """
        if password != password_confirm:
            track_auth_event("register", success=False)
            raise ValidationError(PASSWORD_MISMATCH_MESSAGE)

        if not validate_password(password):
            track_auth_event("register", success=False)
            raise ValidationError(PASSWORD_POLICY_MESSAGE)

        if not username:
            track_auth_event("register", success=False)
            raise ValidationError("Username is required")

        password_hash = hash_password(password)

        if self.store.username_exists(username):
            track_auth_event("register", success=False)
            logger.info("registration_rejected", reason="username_taken", username=username)
            raise ConflictError(USERNAME_TAKEN_MESSAGE)

        self.store.insert_user(username, password_hash)
        user_id = self.store.get_user_id(username)
        logger.info("user_registered", username=username, user_id=user_id)
        track_auth_event("register")

        return self._establish(session_id, username, user_id)

    def login(self, session_id: Optional[str], username: str, password: str) -> SessionData:
        """
        Verify credentials and log the session in.

        Unknown usernames and wrong passwords raise the same AuthError.
        """
        user = self.store.find_user(username) if username else None
        if user is None:
            track_auth_event("login", success=False)
            logger.info("login_failed", reason="unknown_user")
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        if not check_password(password or "", user.password):
            track_auth_event("login", success=False)
            logger.info("login_failed", reason="wrong_password", user_id=user.user_id)
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        track_auth_event("login")
        logger.info("login_succeeded", username=username, user_id=user.user_id)
        return self._establish(session_id, user.username, user.user_id)

    def logout(self, session_id: Optional[str]) -> str:
        """
        Clear the session, persist it, then regenerate its identifier.

        Returns:
            The new session ID
        """
        _, data = self.sessions.get_or_create_session(session_id)
        was_logged_in = data.loggedin
        data.clear()
        self.sessions.save_session(data.session_id, data)
        new_session_id = self.sessions.regenerate_session(data.session_id)
        if was_logged_in:
            track_auth_event("logout")
        logger.info("session_regenerated", previous_session_id=data.session_id,
                    new_session_id=new_session_id)
        return new_session_id

    def delete_account(self, user_id: int) -> None:
        """Remove the user row and all of the user's watchlist entries."""
        removed = self.store.delete_user(user_id)
        track_auth_event("delete_account")
        logger.info("account_deleted", user_id=user_id, watchlist_rows_removed=removed)

    def _establish(self, session_id: Optional[str], username: str, user_id: int) -> SessionData:
        session_id, data = self.sessions.get_or_create_session(session_id)
        data.establish(username, user_id)
        self.sessions.save_session(session_id, data)
        return data
