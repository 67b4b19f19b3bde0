"""LangGraph wiring for advice resolution.

entry -> live_api        (API key configured)
entry -> local_template  (no key)
live_api -> END          (model returned content)
live_api -> local_template -> END

The live node never raises: the agent hands back a LiveAdviceResult and
the edge after it decides whether the template has to fill in.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, TypedDict

from langgraph.graph import END, StateGraph

from .advisor.schemas import AdviceRequest, LiveAdviceResult
from .advisor.templates import local_template_advice

logger = logging.getLogger(__name__)


class LiveAdvisor(Protocol):
    api_key: Optional[str]

    def request_live_advice(self, request: AdviceRequest) -> LiveAdviceResult:  # pragma: no cover - interface only
        ...


class AdvisorState(TypedDict, total=False):
    request: AdviceRequest
    live_result: Optional[LiveAdviceResult]
    advice: Optional[str]


def route_entry(agent: LiveAdvisor) -> str:
    return "live_api" if agent.api_key else "local_template"


def route_after_live(state: AdvisorState) -> str:
    result = state.get("live_result")
    if result is not None and result.ok:
        return "done"
    logger.info(f"Falling back to template advice: {result.error if result else 'no result'}")
    return "local_template"


def build_advisor_graph(agent: LiveAdvisor):
    def entry_node(state: AdvisorState) -> AdvisorState:
        return {"live_result": None, "advice": None}

    def live_api_node(state: AdvisorState) -> AdvisorState:
        result = agent.request_live_advice(state["request"])
        return {"live_result": result, "advice": result.content if result.ok else None}

    def local_template_node(state: AdvisorState) -> AdvisorState:
        return {"advice": local_template_advice(state["request"])}

    builder = StateGraph(AdvisorState)
    builder.add_node("entry", entry_node)
    builder.add_node("live_api", live_api_node)
    builder.add_node("local_template", local_template_node)

    builder.set_entry_point("entry")
    builder.add_conditional_edges(
        "entry",
        lambda state: route_entry(agent),
        {"live_api": "live_api", "local_template": "local_template"},
    )
    builder.add_conditional_edges(
        "live_api",
        route_after_live,
        {"done": END, "local_template": "local_template"},
    )
    builder.add_edge("local_template", END)

    return builder.compile()
