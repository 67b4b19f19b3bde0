"""Prompt construction for the live advisor call.

Kept in a separate module so the same wording is shared by the web
route, the CLI demo and the tests.
"""

from __future__ import annotations

from typing import Dict, List

from .schemas import AdviceRequest, StudentSnapshot

ADVISOR_SYSTEM_INSTRUCTIONS = (
    "You are an AI Career Advisor for students. Give practical, realistic, "
    "and encouraging advice with actionable next steps."
)

ADVISOR_TEMPERATURE = 0.7


def build_profile_summary(profile: StudentSnapshot) -> str:
    return (
        f"Name: {profile.name}\n"
        f"Grade: {profile.grade or 'N/A'}\n"
        f"Interests: {', '.join(profile.interests) or 'N/A'}\n"
        f"Goals: {profile.goals or 'N/A'}"
    )


def build_messages(request: AdviceRequest) -> List[Dict[str, str]]:
    """System persona plus one user message: profile block, then the question."""
    return [
        {"role": "system", "content": ADVISOR_SYSTEM_INSTRUCTIONS},
        {
            "role": "user",
            "content": f"Student profile:\n{build_profile_summary(request.profile)}\n\nQuestion: {request.prompt}",
        },
    ]
