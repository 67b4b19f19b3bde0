"""Account registration, login and session lookup."""

from __future__ import annotations

import logging
from typing import Optional

import bcrypt

from ..errors import AuthFailure, DuplicateKeyError, ValidationFailure
from .schemas import LoginForm, RegistrationForm, UserProfile
from .sessions import SessionStore
from .storage import UserStore

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt with a fresh salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash, or a password bcrypt refuses (> 72 bytes).
        return False


# Checked against for unknown emails so both login failures cost one bcrypt round.
_DUMMY_PASSWORD_HASH = hash_password("no-such-account")


class AccountService:
    """Ties the credential store and the session store together.

    Store errors (``PersistenceFailure``) are left to propagate; the web
    layer turns them into a "try again" message.
    """

    def __init__(self, users: UserStore, sessions: SessionStore):
        self.users = users
        self.sessions = sessions

    def register(self, form: RegistrationForm) -> UserProfile:
        """
        Create a new account.

        Raises:
            ValidationFailure: if the email is already registered
        """
        if self.users.find_user_by_email(form.email) is not None:
            raise ValidationFailure("Email already registered.")

        user = UserProfile(
            name=form.name,
            email=form.email,
            password_hash=hash_password(form.password),
            grade=form.grade,
            interests=list(form.interests),
            goals=form.goals,
        )
        try:
            # The store re-checks uniqueness atomically for concurrent sign-ups.
            self.users.create_user(user)
        except DuplicateKeyError:
            raise ValidationFailure("Email already registered.") from None

        logger.info(f"Registered new user {user.id}")
        return user

    def authenticate(self, form: LoginForm) -> UserProfile:
        """
        Check an email/password pair.

        Raises:
            AuthFailure: with the same generic message whichever part was wrong
        """
        user = self.users.find_user_by_email(form.email)
        if user is None:
            verify_password(form.password, _DUMMY_PASSWORD_HASH)
            logger.warning("Authentication failed: unknown email")
            raise AuthFailure()
        if not verify_password(form.password, user.password_hash):
            logger.warning(f"Authentication failed: invalid password for user {user.id}")
            raise AuthFailure()
        logger.info(f"User {user.id} authenticated")
        return user

    def login(self, form: LoginForm) -> str:
        """Authenticate and open a session; returns the session token."""
        user = self.authenticate(form)
        return self.sessions.create_session(user.id)

    def start_session(self, user: UserProfile) -> str:
        return self.sessions.create_session(user.id)

    def current_user(self, token: Optional[str]) -> Optional[UserProfile]:
        """Resolve a session token to a freshly loaded profile.

        A session pointing at a user that no longer exists is destroyed.
        """
        if not token:
            return None
        user_id = self.sessions.resolve_session(token)
        if user_id is None:
            return None
        user = self.users.find_user_by_id(user_id)
        if user is None:
            logger.warning(f"Session references missing user {user_id}; destroying it")
            self.sessions.destroy_session(token)
        return user

    def logout(self, token: Optional[str]) -> None:
        if token:
            self.sessions.destroy_session(token)
