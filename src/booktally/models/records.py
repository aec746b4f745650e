"""Vote records flowing into and out of the harmonization pipeline.

A ``Vote`` is created once per non-empty ballot cell and never mutated.
Later stages derive their own immutable records keyed by ``vote_id``; the
final ``HarmonizedVote`` joins all of them into one audit row.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any

SCHEMA_VERSION = "1.0.0"


@dataclass(frozen=True)
class Vote:
    """One submitted fragment from one ballot cell.

    Attributes
    ----------
    vote_id : str
        Stable identifier (``v:<uuid5>``).
    voter : str
        Content of the first ballot column for the row (voter identity).
    category : str
        Ballot section the cell belongs to.
    row_index : int
        0-based data row of the cell.
    column_index : int
        0-based column of the cell.
    raw_string : str
        Entry exactly as submitted (whitespace-trimmed).
    original_string : str
        Entry after preprocessing overrides.
    """

    vote_id: str
    voter: str
    category: str
    row_index: int
    column_index: int
    raw_string: str
    original_string: str


@dataclass(frozen=True)
class HarmonizedVote:
    """Final audit row for one vote.

    Joins the vote, its split, its three clustering view assignments and its
    resolution. Fields absent for a vote (e.g. the author view of an
    unmatched vote) are None.

    Attributes
    ----------
    vote_id : str
        Stable identifier.
    voter : str
        Voter identity.
    category : str
        Ballot section.
    raw_string : str
        Entry as submitted.
    original_string : str
        Entry after preprocessing overrides.
    submitter_comment : str | None
        Parenthetical comment removed before splitting.
    split_kind : str
        ``unmatched``, ``matched_by_keyword`` or ``matched_by_delimiter``.
    predicted_title : str | None
        Title candidate from the splitter.
    predicted_author : str | None
        Author candidate from the splitter.
    combined_search_input : str
        Query fed to the combined view.
    combined_consensus_label : str
        Consensus label in the combined view.
    title_search_input : str
        Query fed to the title view.
    title_consensus_label : str
        Consensus label in the title view.
    author_search_input : str | None
        Query fed to the author view (None for unmatched votes).
    author_consensus_label : str | None
        Consensus label in the author view (None for unmatched votes).
    final_title : str | None
        Harmonized title, None when unresolved.
    final_author : str | None
        Harmonized author, None when unresolved.
    outcome : str
        ``success`` or ``failure``.
    reason : str
        Reason code of the verdict.
    final_message : str
        Human-readable verdict.
    override_applied : bool
        Whether a postprocessing override changed this row.
    """

    vote_id: str
    voter: str
    category: str
    raw_string: str
    original_string: str
    submitter_comment: str | None
    split_kind: str
    predicted_title: str | None
    predicted_author: str | None
    combined_search_input: str
    combined_consensus_label: str
    title_search_input: str
    title_consensus_label: str
    author_search_input: str | None
    author_consensus_label: str | None
    final_title: str | None
    final_author: str | None
    outcome: str
    reason: str
    final_message: str
    override_applied: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return asdict(self)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "HarmonizedVote":
        """Rebuild a row from ``to_dict`` output (e.g. a JSONL line)."""
        return HarmonizedVote(**{f.name: data.get(f.name) for f in fields(HarmonizedVote)})


HARMONIZED_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(HarmonizedVote))
