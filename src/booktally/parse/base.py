"""Text decoding helpers shared by the ballot reader and the override loaders."""

from pathlib import Path
from typing import NamedTuple

from booktally.exceptions import InputFormatError
from booktally.parse.workbook import WORKBOOK_EXTENSIONS
from booktally.utils import calculate_bytes_sha256

SUPPORTED_EXTENSIONS: dict[str, str] = {
    ".csv": ",",
    ".tsv": "\t",
    ".txt": "\t",
}


class DecodedFile(NamedTuple):
    """A text file read into memory.

    Attributes
    ----------
    path : Path
        Source file.
    text : str
        Decoded content with ``\\n`` line endings.
    encoding : str
        Encoding the content was decoded with.
    sha256 : str
        Digest of the raw bytes.
    size : int
        Size of the raw bytes.
    """

    path: Path
    text: str
    encoding: str
    sha256: str
    size: int


def detect_encoding(file_bytes: bytes) -> str:
    """Pick an encoding: UTF-8 with BOM, else UTF-8, else latin-1.

    Parameters
    ----------
    file_bytes : bytes
        Complete file content.

    Returns
    -------
    str
        ``utf-8-sig``, ``utf-8`` or ``latin-1``.
    """
    if file_bytes.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"

    try:
        file_bytes.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    return "latin-1"


def normalize_line_endings(content: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    content = content.replace("\r\n", "\n")
    return content.replace("\r", "\n")


def read_text_file(path: Path) -> DecodedFile:
    """Read and decode a whole file.

    Parameters
    ----------
    path : Path
        File to read.

    Returns
    -------
    DecodedFile
        Decoded content and source metadata.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    file_bytes = path.read_bytes()
    encoding = detect_encoding(file_bytes)
    return DecodedFile(
        path=path,
        text=normalize_line_endings(file_bytes.decode(encoding)),
        encoding=encoding,
        sha256=calculate_bytes_sha256(file_bytes),
        size=len(file_bytes),
    )


def delimiter_for(path: Path) -> str:
    """Field delimiter implied by a ballot file's extension.

    Raises
    ------
    InputFormatError
        If the extension is not supported.
    """
    delimiter = SUPPORTED_EXTENSIONS.get(path.suffix.lower())
    if delimiter is None:
        supported = ", ".join(sorted({*SUPPORTED_EXTENSIONS, *WORKBOOK_EXTENSIONS}))
        raise InputFormatError(
            f"Unsupported ballot file type '{path.suffix}' for {path.name} (expected one of: {supported})"
        )
    return delimiter
