"""Data models for entry splitting."""

from dataclasses import dataclass
from enum import StrEnum


class SplitKind(StrEnum):
    """How a vote string was recognized.

    Attributes
    ----------
    UNMATCHED : str
        Neither delimiter pattern matched.
    MATCHED_BY_KEYWORD : str
        Matched "TITLE by AUTHOR".
    MATCHED_BY_DELIMITER : str
        Matched "TITLE - AUTHOR" or "TITLE / AUTHOR".
    """

    UNMATCHED = "unmatched"
    MATCHED_BY_KEYWORD = "matched_by_keyword"
    MATCHED_BY_DELIMITER = "matched_by_delimiter"

    @property
    def is_matched(self) -> bool:
        """True for both recognized title/author formats."""
        return self is not SplitKind.UNMATCHED


@dataclass(frozen=True)
class SplitEntry:
    """Result of splitting one vote string.

    Attributes
    ----------
    vote_id : str
        Identifier of the split vote ("" when split outside a pipeline).
    kind : SplitKind
        Recognized format.
    text : str
        Input with the submitter comment removed, whitespace-trimmed.
    submitter_comment : str | None
        Leading or trailing parenthetical, parentheses included.
    predicted_title : str | None
        Title candidate; None iff ``kind`` is UNMATCHED.
    predicted_author : str | None
        Author candidate; None iff ``kind`` is UNMATCHED.
    """

    vote_id: str
    kind: SplitKind
    text: str
    submitter_comment: str | None
    predicted_title: str | None
    predicted_author: str | None

    def __post_init__(self) -> None:
        """Enforce that title and author exist exactly for matched kinds."""
        has_pair = self.predicted_title is not None and self.predicted_author is not None
        has_none = self.predicted_title is None and self.predicted_author is None
        if self.kind.is_matched and not has_pair:
            raise ValueError(f"{self.kind} split requires both title and author")
        if not self.kind.is_matched and not has_none:
            raise ValueError("unmatched split cannot carry a title or author")
