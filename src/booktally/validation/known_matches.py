"""Comparison of final calls against curated entry -> (title, author) pairs.

The check is read-only: it reports agreement and never changes a result.
"""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from booktally.exceptions import OverrideFileError
from booktally.models import HarmonizedVote
from booktally.overrides.loader import read_tsv_rows

KNOWN_MATCH_COLUMNS = 3


class MatchStatus(StrEnum):
    """Result of comparing one vote with its known match."""

    AGREE = "agree"
    DISAGREE = "disagree"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class KnownMatch:
    """A curated answer for one raw entry."""

    entry: str
    title: str
    author: str


@dataclass(frozen=True)
class KnownMatchCheck:
    """Comparison of one vote with the curated answer for its raw entry."""

    vote_id: str
    entry: str
    expected_title: str
    expected_author: str
    final_title: str | None
    final_author: str | None
    status: MatchStatus


def load_known_matches(path: Path) -> dict[str, KnownMatch]:
    """Load an ``entry<TAB>title<TAB>author`` table.

    Repeated entries are allowed only when they agree.

    Parameters
    ----------
    path : Path
        Curated table, no header.

    Returns
    -------
    dict[str, KnownMatch]
        Known matches keyed by raw entry.

    Raises
    ------
    OverrideFileError
        On a malformed row or conflicting repeated entries.
    """
    known: dict[str, KnownMatch] = {}
    for line_number, cells in read_tsv_rows(path, KNOWN_MATCH_COLUMNS):
        entry, title, author = (cell.strip() for cell in cells)
        if not entry or not title or not author:
            raise OverrideFileError(
                "Known match rows need an entry, a title and an author",
                file=str(path),
                line=line_number,
            )
        candidate = KnownMatch(entry=entry, title=title, author=author)
        existing = known.get(entry)
        if existing is not None and existing != candidate:
            raise OverrideFileError(
                f"Conflicting known matches for entry {entry!r}",
                file=str(path),
                line=line_number,
            )
        known[entry] = candidate
    return known


def check_known_matches(
    rows: Sequence[HarmonizedVote],
    known: dict[str, KnownMatch],
) -> list[KnownMatchCheck]:
    """Compare every vote whose raw entry has a known match."""
    checks: list[KnownMatchCheck] = []
    for row in rows:
        expected = known.get(row.raw_string)
        if expected is None:
            continue

        if row.final_title is None or row.final_author is None:
            status = MatchStatus.UNRESOLVED
        elif (row.final_title, row.final_author) == (expected.title, expected.author):
            status = MatchStatus.AGREE
        else:
            status = MatchStatus.DISAGREE

        checks.append(
            KnownMatchCheck(
                vote_id=row.vote_id,
                entry=row.raw_string,
                expected_title=expected.title,
                expected_author=expected.author,
                final_title=row.final_title,
                final_author=row.final_author,
                status=status,
            )
        )
    return checks


def summarize_checks(checks: Sequence[KnownMatchCheck]) -> dict[str, int]:
    """Count checks per status; every status is present."""
    counts = Counter(check.status for check in checks)
    return {status.value: counts.get(status, 0) for status in MatchStatus}
