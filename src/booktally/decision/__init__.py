"""Consensus resolution: one final call per vote across three views."""

from booktally.decision.models import Outcome, ReasonCode, Resolution
from booktally.decision.resolver import resolve_votes

__all__ = [
    "Outcome",
    "ReasonCode",
    "Resolution",
    "resolve_votes",
]
