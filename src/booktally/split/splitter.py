"""Entry splitter: classify a vote string and split it into title and author.

Recognized formats, checked on the comment-free remainder of the entry:

- ``TITLE by AUTHOR`` (keyword, "by" in any case)
- ``TITLE - AUTHOR`` / ``TITLE / AUTHOR`` (single delimiter character)

Both sides must end in a letter. When both formats match the same string the
keyword split is used; this tie-break is empirical (it suits titles such as
"Slaughterhouse-Five by Kurt Vonnegut") rather than a guarantee.
"""

from collections.abc import Iterable

from booktally.models import Vote
from booktally.split.models import SplitEntry, SplitKind
from booktally.split.patterns import (
    LEADING_COMMENT_RE,
    TITLE_BY_AUTHOR_RE,
    TITLE_DASH_AUTHOR_RE,
    TRAILING_COMMENT_RE,
)


def extract_comment(text: str) -> tuple[str, str | None]:
    """Separate a leading or trailing parenthetical from an entry.

    Parameters
    ----------
    text : str
        Vote string.

    Returns
    -------
    tuple[str, str | None]
        (remainder, comment). The comment keeps its parentheses; it is None
        when the entry carries no leading or trailing parenthetical.

    Examples
    --------
        >>> extract_comment("Dune by Frank Herbert (reread)")
        ('Dune by Frank Herbert', '(reread)')
    """
    match = TRAILING_COMMENT_RE.match(text) or LEADING_COMMENT_RE.match(text)
    if match is None:
        return text.strip(), None
    return match.group("text").strip(), match.group("comment")


def split_entry(text: str, vote_id: str = "") -> SplitEntry:
    """Split one vote string into title and author candidates.

    Parameters
    ----------
    text : str
        Vote string (after preprocessing overrides).
    vote_id : str, optional
        Identifier to attach to the result.

    Returns
    -------
    SplitEntry
        Classified split. Unmatched entries carry no title or author.
    """
    remainder, comment = extract_comment(text)

    match = TITLE_BY_AUTHOR_RE.match(remainder)
    kind = SplitKind.MATCHED_BY_KEYWORD
    if match is None:
        match = TITLE_DASH_AUTHOR_RE.match(remainder)
        kind = SplitKind.MATCHED_BY_DELIMITER

    if match is None:
        return SplitEntry(
            vote_id=vote_id,
            kind=SplitKind.UNMATCHED,
            text=remainder,
            submitter_comment=comment,
            predicted_title=None,
            predicted_author=None,
        )

    return SplitEntry(
        vote_id=vote_id,
        kind=kind,
        text=remainder,
        submitter_comment=comment,
        predicted_title=match.group("title").strip(),
        predicted_author=match.group("author").strip(),
    )


def split_votes(votes: Iterable[Vote]) -> list[SplitEntry]:
    """Split every vote, preserving input order."""
    return [split_entry(vote.original_string, vote_id=vote.vote_id) for vote in votes]
