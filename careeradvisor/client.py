"""OpenAI client factory and model configuration.

This keeps the dependency on the OpenAI SDK in one place, which makes
it easier to swap or mock in tests.

Unlike the SDK default, the client is never built from the ambient
``OPENAI_API_KEY``: callers pass the key they were configured with, so
that an unset key reliably means "no live advice".
"""

from __future__ import annotations

import httpx
from openai import OpenAI


DEFAULT_MODEL = "gpt-4o-mini"

# Default request timeout (seconds) so a stalled endpoint falls back quickly.
DEFAULT_TIMEOUT_S = 30.0


def get_openai_client(api_key: str, timeout_s: float = DEFAULT_TIMEOUT_S) -> OpenAI:
    """Return an OpenAI client for ``api_key`` with a bounded request timeout."""

    http_client = httpx.Client(timeout=httpx.Timeout(timeout_s))
    # Retries would multiply the worst-case wait before the template fallback.
    return OpenAI(api_key=api_key, http_client=http_client, max_retries=0)
