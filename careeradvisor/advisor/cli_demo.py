"""CLI demo for the advisor.

Usage:
    python -m careeradvisor.advisor.cli_demo ana@example.com "What should I study?"

Looks the student up in the configured data store, so register through
the web app first. Without OPENAI_API_KEY the template answer is printed.
"""

from __future__ import annotations

import sys
from typing import Optional

from ..accounts import open_stores
from ..config import AppConfig
from .agent import AdvisorAgent


def run_advisor_demo(email: str, prompt: Optional[str] = None) -> int:
    config = AppConfig.from_env()
    users, _ = open_stores(config.data_store_url, config.session_ttl_hours)

    user = users.find_user_by_email(email.strip().lower())
    if user is None:
        print(f"❌ No account found for '{email}'. Register through the web app first.")
        return 1

    mode = "live model" if config.openai_api_key else "local template"
    print(f"--- Advice for {user.name} ({mode}) ---\n")

    agent = AdvisorAgent.from_config(config)
    print(agent.resolve_advice(user, prompt))
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python -m careeradvisor.advisor.cli_demo EMAIL [PROMPT]")
        sys.exit(2)
    sys.exit(run_advisor_demo(sys.argv[1], " ".join(sys.argv[2:]) or None))
