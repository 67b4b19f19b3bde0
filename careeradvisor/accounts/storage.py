"""User record storage backends.

We support in-memory and JSON-file-backed storage. The interface is
deliberately minimal so that a MongoDB-backed implementation can be
added later without changing the account service.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from ..errors import DuplicateKeyError, PersistenceFailure
from .schemas import UserProfile

logger = logging.getLogger(__name__)

MEMORY_URL = "memory://"


class UserStore(Protocol):
    """Minimal interface expected by the account service."""

    def create_user(self, profile: UserProfile) -> UserProfile:  # pragma: no cover - interface only
        ...

    def find_user_by_email(self, email: str) -> Optional[UserProfile]:  # pragma: no cover - interface only
        ...

    def find_user_by_id(self, user_id: str) -> Optional[UserProfile]:  # pragma: no cover - interface only
        ...

    def count(self) -> int:  # pragma: no cover - interface only
        ...


class InMemoryUserStore:
    """Volatile store, useful for tests or ephemeral deployments."""

    def __init__(self) -> None:
        self._users: Dict[str, UserProfile] = {}
        self._lock = threading.Lock()

    def create_user(self, profile: UserProfile) -> UserProfile:
        with self._lock:
            if any(u.email == profile.email for u in self._users.values()):
                raise DuplicateKeyError("email", profile.email)
            self._users[profile.id] = profile.model_copy(deep=True)
        return profile

    def find_user_by_email(self, email: str) -> Optional[UserProfile]:
        for user in self._users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    def find_user_by_id(self, user_id: str) -> Optional[UserProfile]:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    def count(self) -> int:
        return len(self._users)


class JsonFileStore:
    """Shared plumbing for the JSON-file-backed stores.

    The on-disk format is a single JSON object mapping a record id to its
    dict. Reads and writes go through one lock per store so that
    read-modify-write cycles cannot interleave within a process.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceFailure(f"Could not read {self.path}: {e}") from e

    def _save_all(self, data: Dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceFailure(f"Could not write {self.path}: {e}") from e


class JsonFileUserStore(JsonFileStore):
    """Users keyed by id in ``users.json``; email uniqueness checked under the lock."""

    def __init__(self, path: str | os.PathLike = "data/users.json") -> None:
        super().__init__(path)

    def create_user(self, profile: UserProfile) -> UserProfile:
        with self._lock:
            data = self._load_all()
            if any(record.get("email") == profile.email for record in data.values()):
                raise DuplicateKeyError("email", profile.email)
            data[profile.id] = profile.model_dump()
            self._save_all(data)
        return profile

    def find_user_by_email(self, email: str) -> Optional[UserProfile]:
        with self._lock:
            data = self._load_all()
        for record in data.values():
            if record.get("email") == email:
                return UserProfile.model_validate(record)
        return None

    def find_user_by_id(self, user_id: str) -> Optional[UserProfile]:
        with self._lock:
            record = self._load_all().get(user_id)
        return UserProfile.model_validate(record) if record else None

    def count(self) -> int:
        with self._lock:
            return len(self._load_all())


def data_dir_from_url(data_store_url: str) -> Optional[Path]:
    """Return the directory for a file store URL, or None for ``memory://``."""
    if data_store_url == MEMORY_URL:
        return None
    if data_store_url.startswith("file://"):
        data_store_url = data_store_url[len("file://"):]
    return Path(data_store_url)
