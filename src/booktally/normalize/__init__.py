"""Text normalization: matching keys for clustering and display casing."""

from booktally.normalize._helpers import normalize_text_for_matching, strip_accents
from booktally.normalize.case import (
    FORCED_CAPITAL_WORDS,
    SMALL_WORDS,
    author_case,
    title_case,
)

__all__ = [
    "FORCED_CAPITAL_WORDS",
    "SMALL_WORDS",
    "author_case",
    "normalize_text_for_matching",
    "strip_accents",
    "title_case",
]
