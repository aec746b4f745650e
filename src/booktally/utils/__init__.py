"""Common utility functions for booktally.

Hashing and timestamp helpers used by ingestion, output writing and the
audit trail.
"""

from booktally.utils.hashing import (
    calculate_bytes_sha256,
    calculate_file_sha256,
    format_sha256,
)
from booktally.utils.timestamps import elapsed_seconds, get_iso_timestamp

__all__ = [
    "get_iso_timestamp",
    "elapsed_seconds",
    "calculate_bytes_sha256",
    "calculate_file_sha256",
    "format_sha256",
]
