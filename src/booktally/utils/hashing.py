"""Hashing utilities for booktally.

Digests identify ballot sources and output artifacts in the run manifest.
"""

import hashlib
from pathlib import Path

__all__ = [
    "format_sha256",
    "calculate_bytes_sha256",
    "calculate_file_sha256",
]

_CHUNK_SIZE = 8192


def format_sha256(hex_digest: str) -> str:
    """Prefix a hexadecimal digest with ``sha256:``."""
    return f"sha256:{hex_digest}"


def calculate_bytes_sha256(data: bytes) -> str:
    """Calculate the SHA-256 digest of bytes already in memory.

    Parameters
    ----------
    data : bytes
        Content to hash (e.g. a ballot file read for ingestion).

    Returns
    -------
    str
        Digest in format ``sha256:<hex>``.
    """
    return format_sha256(hashlib.sha256(data).hexdigest())


def calculate_file_sha256(path: Path) -> str:
    """Calculate the SHA-256 digest of a file, reading it in chunks.

    Parameters
    ----------
    path : Path
        File to hash.

    Returns
    -------
    str
        Digest in format ``sha256:<hex>``.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    digest = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)

    return format_sha256(digest.hexdigest())
