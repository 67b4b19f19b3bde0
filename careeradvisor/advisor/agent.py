"""Advisor Resolver: one advice string per (profile, prompt), never an error.

:class:`AdvisorAgent` holds no per-request state. With an API key it
asks the OpenAI chat-completion endpoint; without one, or when that
call fails in any way, it answers from the local template.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from openai import OpenAI

from ..client import DEFAULT_MODEL, DEFAULT_TIMEOUT_S, get_openai_client
from ..graph import build_advisor_graph
from .prompts import ADVISOR_TEMPERATURE, build_messages
from .schemas import AdviceRequest, LiveAdviceResult, StudentSnapshot
from .templates import local_template_advice

if TYPE_CHECKING:
    from ..config import AppConfig

logger = logging.getLogger(__name__)


def _extract_first_message_content(completion: Any) -> Optional[str]:
    """Pull ``choices[0].message.content`` whether the SDK gave objects or dicts."""

    choices = completion.get("choices") if isinstance(completion, dict) else getattr(completion, "choices", None)
    if not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else getattr(first, "message", None)
    if message is None:
        return None
    content = message.get("content") if isinstance(message, dict) else getattr(message, "content", None)
    if isinstance(content, str) and content.strip():
        return content
    return None


class AdvisorAgent:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client: Optional[OpenAI] = None,
    ):
        self.api_key = api_key or None
        self.model = model
        self.timeout_s = timeout_s
        # Built lazily so a missing key never constructs a client.
        self.client = client
        self._graph = build_advisor_graph(self)

    @classmethod
    def from_config(cls, config: "AppConfig") -> "AdvisorAgent":
        return cls(
            api_key=config.openai_api_key,
            model=config.advisor_model,
            timeout_s=config.request_timeout_s,
        )

    def _get_client(self) -> OpenAI:
        if self.client is None:
            self.client = get_openai_client(self.api_key, timeout_s=self.timeout_s)
        return self.client

    def close(self) -> None:
        """Release the client's HTTP connection pool, if one was ever built."""
        if self.client is not None:
            self.client.close()
            self.client = None

    def request_live_advice(self, request: AdviceRequest) -> LiveAdviceResult:
        """Call the chat-completion API once and wrap the outcome."""
        try:
            completion = self._get_client().chat.completions.create(
                model=self.model,
                messages=build_messages(request),
                temperature=ADVISOR_TEMPERATURE,
            )
            content = _extract_first_message_content(completion)
        except Exception as e:
            logger.warning(f"AI request failed: {type(e).__name__}: {e}")
            return LiveAdviceResult.failure(f"{type(e).__name__}: {e}")

        if content is None:
            logger.warning("AI response had no message content")
            return LiveAdviceResult.failure("empty completion")
        return LiveAdviceResult.success(content)

    def fallback_advice(self, profile: Any, prompt: Optional[str] = None) -> str:
        """The template answer for the same inputs ``resolve_advice`` would use."""
        return local_template_advice(self._build_request(profile, prompt))

    def resolve_advice(self, profile: Any, prompt: Optional[str] = None) -> str:
        """
        1. Validate the profile snapshot and default the prompt.
        2. Run the advisor graph (live call if configured, template otherwise).
        3. Return the advice text.
        """
        request = self._build_request(profile, prompt)
        final_state = self._graph.invoke({"request": request})
        advice = final_state.get("advice")
        if not advice:
            # Unreachable through the graph edges; keeps the contract total.
            return local_template_advice(request)
        return advice

    @staticmethod
    def _build_request(profile: Any, prompt: Optional[str]) -> AdviceRequest:
        return AdviceRequest(profile=StudentSnapshot.from_profile(profile), prompt=prompt)
