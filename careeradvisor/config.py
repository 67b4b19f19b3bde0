"""Application configuration.

Environment variables are loaded from a ``.env`` file if present, using
``python-dotenv``, and read exactly once into an :class:`AppConfig`.
The resulting object is passed explicitly to the web app and the
advisor; nothing else reads the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .client import DEFAULT_MODEL, DEFAULT_TIMEOUT_S
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SESSION_SECRET = "change-me-in-production"
DEFAULT_DATA_STORE_URL = "data"


def _read_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class AppConfig:
    """Everything the server needs to start."""

    host: str = "127.0.0.1"
    port: int = 3000
    data_store_url: str = DEFAULT_DATA_STORE_URL
    session_secret: str = DEFAULT_SESSION_SECRET
    openai_api_key: Optional[str] = None
    advisor_model: str = DEFAULT_MODEL
    request_timeout_s: float = DEFAULT_TIMEOUT_S
    session_ttl_hours: float = 24
    log_level: str = "INFO"
    app_env: str = "development"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, load_dotenv_file: bool = True) -> "AppConfig":
        """Build a config from ``env`` (defaults to ``os.environ``).

        The data store URL is mandatory when ``APP_ENV=production``; every
        other setting has a development default.
        """

        if env is None:
            if load_dotenv_file:
                load_dotenv()
            env = os.environ

        app_env = (env.get("APP_ENV") or "development").strip().lower()
        data_store_url = (env.get("DATA_STORE_URL") or "").strip()
        if not data_store_url:
            if app_env == "production":
                raise ConfigurationError("DATA_STORE_URL must be set when APP_ENV=production")
            data_store_url = DEFAULT_DATA_STORE_URL

        session_secret = env.get("SESSION_SECRET") or DEFAULT_SESSION_SECRET
        if session_secret == DEFAULT_SESSION_SECRET:
            logger.warning("SESSION_SECRET is not set; using the insecure development default")

        port = _read_number(env, "PORT", 3000, int)
        if not 1 <= port <= 65535:
            raise ConfigurationError(f"PORT out of range: {port}")

        return cls(
            host=(env.get("HOST") or "127.0.0.1").strip(),
            port=port,
            data_store_url=data_store_url,
            session_secret=session_secret,
            openai_api_key=(env.get("OPENAI_API_KEY") or "").strip() or None,
            advisor_model=(env.get("CAREERADVISOR_MODEL") or DEFAULT_MODEL).strip(),
            request_timeout_s=_read_number(env, "CAREERADVISOR_TIMEOUT_S", DEFAULT_TIMEOUT_S, float),
            session_ttl_hours=_read_number(env, "SESSION_TTL_HOURS", 24, float),
            log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
            app_env=app_env,
        )
