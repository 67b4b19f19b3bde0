"""Core package for the student career advisor.

The web app lives in :mod:`careeradvisor.web`; the advisor can also be
used on its own as a node in a larger pipeline.
"""

from .advisor.agent import AdvisorAgent  # re-export for convenience
from .config import AppConfig

__all__ = ["AdvisorAgent", "AppConfig"]
