"""Stable identifiers for votes.

Every vote receives an identifier when it is created from a ballot cell. The
identifier is carried through splitting, all three clustering views and the
resolver, so no stage depends on the position of a vote inside a filtered
collection.
"""

import re
import uuid

# Project-fixed namespace UUID for deterministic UUIDv5 generation.
# Changing it changes every vote_id ever produced.
BOOKTALLY_NAMESPACE = uuid.UUID("0f4b6c1e-5a0d-5b7e-9c53-6d1f2a8e4b90")

_VOTE_ID_RE = re.compile(r"^v:[0-9a-f]{8}-[0-9a-f]{4}-5[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def calculate_vote_id(source_digest: str, row_index: int, column_index: int) -> str:
    """Calculate a deterministic vote identifier.

    Parameters
    ----------
    source_digest : str
        SHA-256 digest of the ballot file (``sha256:<hex>``).
    row_index : int
        0-based data row of the cell (header excluded).
    column_index : int
        0-based column of the cell.

    Returns
    -------
    str
        Identifier in format ``v:<uuid5>``.

    Notes
    -----
    The same ballot file always yields the same identifiers, so identifiers
    can be used to join artifacts from different runs over the same input.
    """
    name = f"{source_digest}|{row_index}|{column_index}"
    return f"v:{uuid.uuid5(BOOKTALLY_NAMESPACE, name)}"


def validate_vote_id_format(vote_id: str) -> bool:
    """Check that ``vote_id`` has the ``v:<uuid5>`` shape."""
    return bool(_VOTE_ID_RE.match(vote_id))
