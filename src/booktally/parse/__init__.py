"""Ballot table reading."""

from booktally.parse.ballots import (
    VOTES_PER_CATEGORY,
    BallotRow,
    BallotTable,
    ballot_from_rows,
    category_name,
    extract_votes,
    format_duplicate_report,
    parse_ballot_text,
    read_ballot_table,
    remove_duplicate_rows,
)
from booktally.parse.base import (
    SUPPORTED_EXTENSIONS,
    DecodedFile,
    delimiter_for,
    detect_encoding,
    normalize_line_endings,
    read_text_file,
)
from booktally.parse.workbook import WORKBOOK_EXTENSIONS, WorkbookSheet, cell_text, read_first_sheet

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "VOTES_PER_CATEGORY",
    "WORKBOOK_EXTENSIONS",
    "BallotRow",
    "BallotTable",
    "DecodedFile",
    "WorkbookSheet",
    "ballot_from_rows",
    "category_name",
    "cell_text",
    "delimiter_for",
    "detect_encoding",
    "extract_votes",
    "format_duplicate_report",
    "normalize_line_endings",
    "parse_ballot_text",
    "read_ballot_table",
    "read_first_sheet",
    "read_text_file",
    "remove_duplicate_rows",
]
