"""Student accounts: profile records, credential and session stores."""

from __future__ import annotations

from typing import Tuple

from .service import AccountService
from .sessions import InMemorySessionStore, JsonFileSessionStore, SessionStore
from .storage import InMemoryUserStore, JsonFileUserStore, UserStore, data_dir_from_url


def open_stores(data_store_url: str, session_ttl_hours: float = 24) -> Tuple[UserStore, SessionStore]:
    """Build the user and session stores named by ``data_store_url``.

    ``memory://`` gives volatile stores; anything else is a directory
    (optionally ``file://``-prefixed) holding ``users.json`` and
    ``sessions.json``.
    """
    data_dir = data_dir_from_url(data_store_url)
    if data_dir is None:
        return InMemoryUserStore(), InMemorySessionStore(ttl_hours=session_ttl_hours)
    return (
        JsonFileUserStore(data_dir / "users.json"),
        JsonFileSessionStore(data_dir / "sessions.json", ttl_hours=session_ttl_hours),
    )


__all__ = [
    "AccountService",
    "InMemorySessionStore",
    "InMemoryUserStore",
    "JsonFileSessionStore",
    "JsonFileUserStore",
    "SessionStore",
    "UserStore",
    "open_stores",
]
