"""Server-side session storage: opaque token -> user id, with a TTL."""

from __future__ import annotations

import logging
import os
import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Protocol

from .storage import JsonFileStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _drop_expired(sessions: Dict[str, Dict[str, str]], now: datetime) -> int:
    """Remove every session whose expiry is at or before ``now``; returns how many."""
    expired = [t for t, s in sessions.items() if datetime.fromisoformat(s["expires_at"]) <= now]
    for token in expired:
        del sessions[token]
    return len(expired)


class SessionStore(Protocol):
    def create_session(self, user_id: str) -> str:  # pragma: no cover - interface only
        ...

    def resolve_session(self, token: str) -> Optional[str]:  # pragma: no cover - interface only
        ...

    def destroy_session(self, token: str) -> None:  # pragma: no cover - interface only
        ...


class InMemorySessionStore:
    def __init__(self, ttl_hours: float = 24, clock: Clock = _utc_now) -> None:
        self.ttl = timedelta(hours=ttl_hours)
        self._clock = clock
        self._sessions: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()

    def create_session(self, user_id: str) -> str:
        token = secrets.token_urlsafe(32)
        expires_at = self._clock() + self.ttl
        with self._lock:
            _drop_expired(self._sessions, self._clock())
            self._sessions[token] = {"user_id": user_id, "expires_at": expires_at.isoformat()}
        logger.info(f"Created session for user {user_id}")
        return token

    def resolve_session(self, token: str) -> Optional[str]:
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if datetime.fromisoformat(session["expires_at"]) <= self._clock():
                del self._sessions[token]
                logger.info(f"Session for user {session['user_id']} expired")
                return None
            return session["user_id"]

    def destroy_session(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def __len__(self) -> int:
        return len(self._sessions)


class JsonFileSessionStore(JsonFileStore):
    """Sessions keyed by token in ``sessions.json``."""

    def __init__(
        self,
        path: str | os.PathLike = "data/sessions.json",
        ttl_hours: float = 24,
        clock: Clock = _utc_now,
    ) -> None:
        super().__init__(path)
        self.ttl = timedelta(hours=ttl_hours)
        self._clock = clock

    def create_session(self, user_id: str) -> str:
        token = secrets.token_urlsafe(32)
        expires_at = self._clock() + self.ttl
        with self._lock:
            data = self._load_all()
            _drop_expired(data, self._clock())
            data[token] = {"user_id": user_id, "expires_at": expires_at.isoformat()}
            self._save_all(data)
        logger.info(f"Created session for user {user_id}")
        return token

    def resolve_session(self, token: str) -> Optional[str]:
        with self._lock:
            data = self._load_all()
            session = data.get(token)
            if session is None:
                return None
            if datetime.fromisoformat(session["expires_at"]) <= self._clock():
                del data[token]
                self._save_all(data)
                logger.info(f"Session for user {session['user_id']} expired")
                return None
            return session["user_id"]

    def destroy_session(self, token: str) -> None:
        with self._lock:
            data = self._load_all()
            if data.pop(token, None) is not None:
                self._save_all(data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._load_all())
