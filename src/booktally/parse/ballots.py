"""Ballot table reading and vote extraction.

A ballot table has one header row. Column 0 holds the voter identity; the
remaining columns come in triples, one triple per category, each cell holding
one free-text "title by author" vote.
"""

import csv
import io
import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import NamedTuple

from booktally.exceptions import InputFormatError
from booktally.models import Vote, calculate_vote_id
from booktally.parse.base import delimiter_for, read_text_file
from booktally.parse.workbook import WORKBOOK_EXTENSIONS, read_first_sheet

VOTES_PER_CATEGORY = 3

_SUFFIX_RE = re.compile(r"^(.*?)\s+-\s+.*$")
_SPACE_RE = re.compile(r"\s+")


class BallotRow(NamedTuple):
    """One data row with its 0-based position in the file (header excluded)."""

    index: int
    cells: tuple[str, ...]


@dataclass(frozen=True)
class BallotTable:
    """A parsed ballot table.

    Attributes
    ----------
    header : tuple[str, ...]
        Column names.
    rows : tuple[BallotRow, ...]
        Data rows, each padded to the header width.
    source_name : str
        File name the table was read from.
    source_digest : str
        SHA-256 of the file bytes; seeds every vote_id.
    delimiter : str | None
        Field delimiter used; None for workbooks.
    encoding : str | None
        Detected text encoding; None for workbooks.
    size : int
        File size in bytes.
    """

    header: tuple[str, ...]
    rows: tuple[BallotRow, ...]
    source_name: str
    source_digest: str
    delimiter: str | None = ","
    encoding: str | None = "utf-8"
    size: int = 0

    def __post_init__(self) -> None:
        vote_columns = len(self.header) - 1
        if vote_columns <= 0 or vote_columns % VOTES_PER_CATEGORY != 0:
            raise InputFormatError(
                f"Ballot table {self.source_name} has {len(self.header)} columns; "
                f"expected a voter column followed by groups of {VOTES_PER_CATEGORY} vote columns"
            )

    @property
    def categories(self) -> list[str]:
        """Category names, one per column triple, in column order."""
        return [
            category_name(self.header[col])
            for col in range(1, len(self.header), VOTES_PER_CATEGORY)
        ]


def category_name(header: str) -> str:
    """Derive a category name from the header of its first vote column.

    A trailing `` - <suffix>`` is removed. Headers exported with dots for
    spaces (``Best.Fantasy.-.Vote.1``) are converted first.

    Examples
    --------
    >>> category_name("Best Fantasy - Vote 1")
    'Best Fantasy'
    >>> category_name("Best.Fantasy.-.Vote.1")
    'Best Fantasy'
    """
    name = header.strip()
    if "." in name and not _SPACE_RE.search(name):
        name = name.replace(".", " ")
    match = _SUFFIX_RE.match(name)
    if match:
        name = match.group(1)
    return _SPACE_RE.sub(" ", name).strip()


def parse_ballot_text(
    text: str,
    source_name: str,
    source_digest: str,
    delimiter: str = ",",
) -> BallotTable:
    """Parse decoded ballot text into a table.

    Parameters
    ----------
    text : str
        File content with ``\\n`` line endings.
    source_name : str
        Name used in error messages and reports.
    source_digest : str
        Digest seeding vote identifiers.
    delimiter : str, optional
        Field delimiter.

    Returns
    -------
    BallotTable
        Parsed table. Blank lines are skipped; short rows are padded.

    Raises
    ------
    InputFormatError
        If the table is empty, a row is wider than the header, or the column
        layout is not voter + triples.
    """
    try:
        parsed = list(csv.reader(io.StringIO(text), delimiter=delimiter, strict=True))
    except csv.Error as e:
        raise InputFormatError(f"Malformed ballot table {source_name}: {e}") from e

    return ballot_from_rows(parsed, source_name, source_digest, delimiter=delimiter)


def ballot_from_rows(
    parsed: Sequence[Sequence[str]],
    source_name: str,
    source_digest: str,
    delimiter: str | None = None,
) -> BallotTable:
    """Build a table from rows of cell text, the first row being the header.

    Raises
    ------
    InputFormatError
        As for :func:`parse_ballot_text`.
    """
    lines = [line for line in parsed if any(cell.strip() for cell in line)]
    if not lines:
        raise InputFormatError(f"Ballot table {source_name} is empty")

    header = tuple(cell.strip() for cell in lines[0])
    width = len(header)
    rows: list[BallotRow] = []
    for index, line in enumerate(lines[1:]):
        if len(line) > width:
            raise InputFormatError(
                f"Ballot table {source_name}: data row {index + 1} has {len(line)} cells, "
                f"header has {width}"
            )
        cells = tuple(line) + ("",) * (width - len(line))
        rows.append(BallotRow(index=index, cells=cells))

    return BallotTable(
        header=header,
        rows=tuple(rows),
        source_name=source_name,
        source_digest=source_digest,
        delimiter=delimiter,
    )


def read_ballot_table(path: Path) -> BallotTable:
    """Read a ``.csv``, ``.tsv``, ``.txt`` or ``.xlsx`` ballot table from disk.

    Workbooks are read from their first worksheet.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    InputFormatError
        If the file type or layout is not supported.
    """
    if path.suffix.lower() in WORKBOOK_EXTENSIONS:
        sheet = read_first_sheet(path)
        table = ballot_from_rows(sheet.rows, source_name=path.name, source_digest=sheet.sha256)
        return replace(table, encoding=None, size=sheet.size)

    delimiter = delimiter_for(path)
    decoded = read_text_file(path)
    table = parse_ballot_text(
        decoded.text,
        source_name=path.name,
        source_digest=decoded.sha256,
        delimiter=delimiter,
    )
    return replace(table, encoding=decoded.encoding, size=decoded.size)


def remove_duplicate_rows(table: BallotTable) -> tuple[BallotTable, list[BallotRow]]:
    """Drop rows identical to an earlier row across every column.

    Returns
    -------
    tuple[BallotTable, list[BallotRow]]
        The table without repeats, and the removed rows in file order. Kept
        rows retain their original indices, so vote ids do not shift.
    """
    seen: set[tuple[str, ...]] = set()
    kept: list[BallotRow] = []
    removed: list[BallotRow] = []
    for row in table.rows:
        key = tuple(cell.strip() for cell in row.cells)
        if key in seen:
            removed.append(row)
        else:
            seen.add(key)
            kept.append(row)
    return replace(table, rows=tuple(kept)), removed


def extract_votes(table: BallotTable) -> list[Vote]:
    """Create one vote per non-empty vote cell, column by column.

    All rows of column 1 come first, then all rows of column 2, and so on.
    ``original_string`` starts equal to ``raw_string``.
    """
    categories = table.categories
    votes: list[Vote] = []
    for column_index in range(1, len(table.header)):
        category = categories[(column_index - 1) // VOTES_PER_CATEGORY]
        for row in table.rows:
            value = row.cells[column_index].strip()
            if not value:
                continue
            votes.append(
                Vote(
                    vote_id=calculate_vote_id(table.source_digest, row.index, column_index),
                    voter=row.cells[0].strip(),
                    category=category,
                    row_index=row.index,
                    column_index=column_index,
                    raw_string=value,
                    original_string=value,
                )
            )
    return votes


def format_duplicate_report(header: Sequence[str], removed: Sequence[BallotRow]) -> list[list[str]]:
    """Rows for ``reports/duplicate_rows.tsv``: a ``row`` column plus the header."""
    report = [["row", *header]]
    report.extend([str(row.index + 1), *row.cells] for row in removed)
    return report
