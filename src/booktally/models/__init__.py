"""Shared data types for booktally.

Domain-specific types live closer to their consumers:
- Split types → booktally.split.models
- Clustering types → booktally.clustering.models
- Resolution types → booktally.decision.models
- Audit types → booktally.audit.models
"""

from booktally.models.identifiers import (
    BOOKTALLY_NAMESPACE,
    calculate_vote_id,
    validate_vote_id_format,
)
from booktally.models.records import (
    HARMONIZED_FIELDS,
    SCHEMA_VERSION,
    HarmonizedVote,
    Vote,
)

__all__ = [
    "SCHEMA_VERSION",
    "HARMONIZED_FIELDS",
    "Vote",
    "HarmonizedVote",
    "BOOKTALLY_NAMESPACE",
    "calculate_vote_id",
    "validate_vote_id_format",
]
