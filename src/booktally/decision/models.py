"""Data models for final per-vote resolutions.

Every reason code maps to exactly one outcome and one fixed message, so a
resolution's message can never disagree with whether it carries a title.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Outcome(StrEnum):
    """Verdict class of a resolution.

    Attributes
    ----------
    SUCCESS : str
        A final title and author were assigned.
    FAILURE : str
        The vote could not be resolved confidently; title and author are None.
    """

    SUCCESS = "success"
    FAILURE = "failure"


class ReasonCode(StrEnum):
    """Decision branch that produced a resolution.

    Attributes
    ----------
    FORMAT_HARMONIZED : str
        Recognized format, a single author cluster among combined-label peers.
    FORMAT_CONFLICT : str
        Recognized format, conflicting author clusters among combined-label peers.
    COMBINED_GUESS : str
        Unrecognized format, clustered with recognized votes sharing one author.
    COMBINED_CONFLICT : str
        Unrecognized format, clustered with recognized votes of several authors.
    TITLE_GUESS : str
        Unrecognized format, title cluster holds a single author.
    TITLE_AMBIGUOUS : str
        Unrecognized format, title cluster holds several authors.
    UNRESOLVED : str
        Unrecognized format and no clustering overlap with recognized votes.
    MANUAL_OVERRIDE : str
        Values assigned by a postprocessing override.
    MANUAL_OVERRIDE_CLEARED : str
        Values cleared by a postprocessing override.
    """

    FORMAT_HARMONIZED = "format_harmonized"
    FORMAT_CONFLICT = "format_conflict"
    COMBINED_GUESS = "combined_guess"
    COMBINED_CONFLICT = "combined_conflict"
    TITLE_GUESS = "title_guess"
    TITLE_AMBIGUOUS = "title_ambiguous"
    UNRESOLVED = "unresolved"
    MANUAL_OVERRIDE = "manual_override"
    MANUAL_OVERRIDE_CLEARED = "manual_override_cleared"

    @property
    def outcome(self) -> Outcome:
        """Verdict class implied by this reason."""
        return _REASON_OUTCOMES[self]

    @property
    def message(self) -> str:
        """Human-readable verdict for reviewers."""
        return _REASON_MESSAGES[self]


_REASON_OUTCOMES: dict[ReasonCode, Outcome] = {
    ReasonCode.FORMAT_HARMONIZED: Outcome.SUCCESS,
    ReasonCode.FORMAT_CONFLICT: Outcome.FAILURE,
    ReasonCode.COMBINED_GUESS: Outcome.SUCCESS,
    ReasonCode.COMBINED_CONFLICT: Outcome.FAILURE,
    ReasonCode.TITLE_GUESS: Outcome.SUCCESS,
    ReasonCode.TITLE_AMBIGUOUS: Outcome.FAILURE,
    ReasonCode.UNRESOLVED: Outcome.FAILURE,
    ReasonCode.MANUAL_OVERRIDE: Outcome.SUCCESS,
    ReasonCode.MANUAL_OVERRIDE_CLEARED: Outcome.FAILURE,
}

_REASON_MESSAGES: dict[ReasonCode, str] = {
    ReasonCode.FORMAT_HARMONIZED: (
        "Success: submission format was recognized, "
        "harmonization with other votes was successful"
    ),
    ReasonCode.FORMAT_CONFLICT: (
        "Failure: submission format was recognized but clustering found too many "
        "similar votes that still seemed different, so this can't be standardized "
        "confidently"
    ),
    ReasonCode.COMBINED_GUESS: (
        "Success: submission did not match standard formatting, but clustering "
        "came up with an unambiguous guess"
    ),
    ReasonCode.COMBINED_CONFLICT: (
        "Failure: submission did not match standard formatting and while a guess "
        "was made, there are conflicting author calls suggesting more than one "
        "book with the same or similar name"
    ),
    ReasonCode.TITLE_GUESS: (
        "Success: submission did not match standard formatting, but title "
        "clustering found only a single title/author pair"
    ),
    ReasonCode.TITLE_AMBIGUOUS: (
        "Failure: submission did not match standard formatting; title clustering "
        "found something, but the author was ambiguous so this is being left blank"
    ),
    ReasonCode.UNRESOLVED: (
        "Failure: submission did not match standard formatting and clustering "
        "did not resolve the issue"
    ),
    ReasonCode.MANUAL_OVERRIDE: (
        "Success: values assigned by user-specified postprocessing override"
    ),
    ReasonCode.MANUAL_OVERRIDE_CLEARED: (
        "Failure: values cleared by user-specified postprocessing override"
    ),
}


@dataclass(frozen=True)
class Resolution:
    """Final call for one vote.

    Attributes
    ----------
    vote_id : str
        Vote identifier.
    final_title : str | None
        Harmonized title; None on failure.
    final_author : str | None
        Harmonized author; None on failure.
    reason : ReasonCode
        Decision branch that produced this resolution.
    """

    vote_id: str
    final_title: str | None
    final_author: str | None
    reason: ReasonCode

    def __post_init__(self) -> None:
        """Check that finals are both set on success and both None on failure."""
        if self.reason.outcome is Outcome.SUCCESS:
            if self.final_title is None or self.final_author is None:
                raise ValueError(f"{self.reason} requires both final title and author")
        elif self.final_title is not None or self.final_author is not None:
            raise ValueError(f"{self.reason} cannot carry a final title or author")

    @property
    def outcome(self) -> Outcome:
        """Verdict class."""
        return self.reason.outcome

    @property
    def final_message(self) -> str:
        """Human-readable verdict."""
        return self.reason.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "vote_id": self.vote_id,
            "final_title": self.final_title,
            "final_author": self.final_author,
            "outcome": self.outcome.value,
            "reason": self.reason.value,
            "final_message": self.final_message,
        }
