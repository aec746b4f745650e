"""Loading and validation of override tables.

Override files are TAB-separated, have no header, no quoting and no comment
character. A whole file is validated before any of its rows is used, so a
bad row never leaves votes half-processed.
"""

import re
from pathlib import Path

from booktally.exceptions import OverrideFileError
from booktally.overrides.models import PostOverride, PostOverrideKey, PreOverride
from booktally.parse.base import read_text_file

PRE_OVERRIDE_COLUMNS = 2
POST_OVERRIDE_COLUMNS = 5


def read_tsv_rows(path: Path, columns: int) -> list[tuple[int, list[str]]]:
    """Read a headerless TSV file with a fixed column count.

    Parameters
    ----------
    path : Path
        File to read.
    columns : int
        Required number of cells per row.

    Returns
    -------
    list[tuple[int, list[str]]]
        ``(line_number, cells)`` for every non-blank line.

    Raises
    ------
    OverrideFileError
        If the file is missing or a row has the wrong number of cells.
    """
    if not path.is_file():
        raise OverrideFileError("File not found", file=str(path))

    rows: list[tuple[int, list[str]]] = []
    for line_number, line in enumerate(read_text_file(path).text.split("\n"), start=1):
        if not line.strip():
            continue
        cells = line.split("\t")
        if len(cells) != columns:
            raise OverrideFileError(
                f"Expected {columns} TAB-separated columns, found {len(cells)}",
                file=str(path),
                line=line_number,
            )
        rows.append((line_number, cells))
    return rows


def load_pre_overrides(path: Path) -> list[PreOverride]:
    """Load ``pattern<TAB>replacement`` rows and compile every pattern.

    Raises
    ------
    OverrideFileError
        On a wrong column count, an empty pattern, an invalid regex or a
        replacement referring to a group the pattern does not define.
    """
    overrides: list[PreOverride] = []
    for line_number, (pattern, replacement) in read_tsv_rows(path, PRE_OVERRIDE_COLUMNS):
        if not pattern:
            raise OverrideFileError("Empty pattern", file=str(path), line=line_number)
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise OverrideFileError(
                f"Invalid regular expression {pattern!r}: {e}",
                file=str(path),
                line=line_number,
            ) from e
        try:
            # Templates are parsed before searching, so an empty subject
            # still rejects bad escapes and unknown group references.
            compiled.sub(replacement, "")
        except re.error as e:
            raise OverrideFileError(
                f"Invalid replacement {replacement!r} for pattern {pattern!r}: {e}",
                file=str(path),
                line=line_number,
            ) from e
        overrides.append(PreOverride(pattern=compiled, replacement=replacement, line=line_number))
    return overrides


def _parse_post_row(cells: list[str], path: Path, line_number: int) -> PostOverride:
    raw_entry, title, author, new_title, new_author = (cell.strip() for cell in cells)
    keys = [
        (key, value)
        for key, value in (
            (PostOverrideKey.RAW_ENTRY, raw_entry),
            (PostOverrideKey.TITLE, title),
            (PostOverrideKey.AUTHOR, author),
        )
        if value
    ]
    if len(keys) != 1:
        raise OverrideFileError(
            f"Exactly one of raw entry, title or author must be given, found {len(keys)}",
            file=str(path),
            line=line_number,
        )
    key, value = keys[0]

    match key:
        case PostOverrideKey.RAW_ENTRY:
            if bool(new_title) != bool(new_author):
                raise OverrideFileError(
                    "A raw-entry override needs both replacement title and author, or neither",
                    file=str(path),
                    line=line_number,
                )
        case PostOverrideKey.TITLE:
            if not new_title:
                raise OverrideFileError(
                    "A title override needs a replacement title", file=str(path), line=line_number
                )
        case PostOverrideKey.AUTHOR:
            if not new_author:
                raise OverrideFileError(
                    "An author override needs a replacement author", file=str(path), line=line_number
                )

    return PostOverride(
        key=key,
        match=value,
        replacement_title=new_title or None,
        replacement_author=new_author or None,
        line=line_number,
    )


def load_post_overrides(path: Path) -> list[PostOverride]:
    """Load 5-column postprocessing override rows.

    Columns are ``raw_entry``, ``title``, ``author``, ``replacement_title``
    and ``replacement_author``; exactly one of the first three is filled in.

    Parameters
    ----------
    path : Path
        Override table.

    Returns
    -------
    list[PostOverride]
        Rules in file order.

    Raises
    ------
    OverrideFileError
        If any row is malformed.
    """
    return [
        _parse_post_row(cells, path, line_number)
        for line_number, cells in read_tsv_rows(path, POST_OVERRIDE_COLUMNS)
    ]
