"""Excel workbook reading for ballot tables exported as ``.xlsx``."""

import io
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Any, NamedTuple

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from booktally.exceptions import InputFormatError
from booktally.utils import calculate_bytes_sha256

WORKBOOK_EXTENSIONS = frozenset({".xlsx"})


class WorkbookSheet(NamedTuple):
    """Cell text of a workbook's first sheet.

    Attributes
    ----------
    path : Path
        Source file.
    sheet : str
        Title of the sheet that was read.
    rows : list[list[str]]
        Cell text per row, trailing empty cells removed.
    sha256 : str
        Digest of the raw bytes.
    size : int
        Size of the raw bytes.
    """

    path: Path
    sheet: str
    rows: list[list[str]]
    sha256: str
    size: int


def cell_text(value: Any) -> str:
    """Render a cell value the way it reads in the spreadsheet.

    Examples
    --------
    >>> cell_text(None)
    ''
    >>> cell_text(1984.0)
    '1984'
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime | date):
        return value.isoformat()
    return str(value)


def _trim_trailing(cells: list[str]) -> list[str]:
    end = len(cells)
    while end and not cells[end - 1].strip():
        end -= 1
    return cells[:end]


def read_first_sheet(path: Path) -> WorkbookSheet:
    """Read every row of the first worksheet as text.

    Parameters
    ----------
    path : Path
        ``.xlsx`` file.

    Returns
    -------
    WorkbookSheet
        Rows of cell text with source metadata.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    InputFormatError
        If the file is not a readable workbook.
    """
    file_bytes = path.read_bytes()
    try:
        workbook = load_workbook(io.BytesIO(file_bytes), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise InputFormatError(f"Unreadable workbook {path.name}: {e}") from e

    try:
        if not workbook.worksheets:
            raise InputFormatError(f"Workbook {path.name} has no worksheets")
        sheet = workbook.worksheets[0]
        rows = [
            _trim_trailing([cell_text(value) for value in row])
            for row in sheet.iter_rows(values_only=True)
        ]
        title = sheet.title
    finally:
        workbook.close()

    return WorkbookSheet(
        path=path,
        sheet=title,
        rows=rows,
        sha256=calculate_bytes_sha256(file_bytes),
        size=len(file_bytes),
    )
