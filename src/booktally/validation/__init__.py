"""Checks of harmonized results against curated answers."""

from booktally.validation.known_matches import (
    KnownMatch,
    KnownMatchCheck,
    MatchStatus,
    check_known_matches,
    load_known_matches,
    summarize_checks,
)

__all__ = [
    "KnownMatch",
    "KnownMatchCheck",
    "MatchStatus",
    "check_known_matches",
    "load_known_matches",
    "summarize_checks",
]
