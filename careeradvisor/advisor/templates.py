"""Deterministic advice used when no live model is configured or it fails.

Everything here is pure: same snapshot and prompt, byte-identical text.
"""

from __future__ import annotations

from .schemas import AdviceRequest

NO_INTERESTS = "general studies"
NO_GOAL = "exploring career options"
NO_GRADE = "not specified"

CLOSING_ACTION = (
    "Suggested next action this week: schedule 3 focused learning sessions "
    "and publish a short progress summary."
)

ADVICE_TEMPLATE = (
    'Hi {name}, based on your interests in {interests} and your goal "{goal}", here is a plan:\n'
    "\n"
    "1) Explore 2-3 roles connected to these interests "
    "(for example: software developer, data analyst, product designer).\n"
    "2) Build one portfolio project this month tied to your current grade level ({grade}).\n"
    "3) Improve communication and problem-solving skills through group projects.\n"
    "4) Take one certification or online course and add it to your resume.\n"
    "\n"
    'Your question: "{prompt}"\n'
    "\n"
    "{closing}"
)


def local_template_advice(request: AdviceRequest) -> str:
    profile = request.profile
    return ADVICE_TEMPLATE.format(
        name=profile.name,
        interests=", ".join(profile.interests) if profile.interests else NO_INTERESTS,
        goal=profile.goals or NO_GOAL,
        grade=profile.grade or NO_GRADE,
        prompt=request.prompt,
        closing=CLOSING_ACTION,
    )
