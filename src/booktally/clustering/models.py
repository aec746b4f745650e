"""Data models for fuzzy clustering views."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from booktally.exceptions import ConfigurationError

# Joins title and author in combined-view queries. U+241F SYMBOL FOR UNIT
# SEPARATOR does not occur in typed free text.
COMBINED_SEPARATOR = "␟"


class ClusterView(StrEnum):
    """Independent clustering passes.

    Attributes
    ----------
    COMBINED : str
        Title and author together (raw text for unmatched votes).
    TITLE : str
        Titles only (raw text for unmatched votes).
    AUTHOR : str
        Authors only; unmatched votes are excluded.
    """

    COMBINED = "combined"
    TITLE = "title"
    AUTHOR = "author"


@dataclass(frozen=True)
class ClusteringConfig:
    """Thresholds and execution settings for the three views.

    Attributes
    ----------
    h_combined : float
        Cut height for the combined view, by default 5.
    h_title : float
        Cut height for the title view, by default 3.
    h_author : float
        Cut height for the author view, by default 3.
    workers : int
        Threads used for the distance matrix (-1 for all cores), by default 1.
        Results do not depend on this value.
    enabled : bool
        When False every query is its own consensus label, by default True.
    """

    h_combined: float = 5.0
    h_title: float = 3.0
    h_author: float = 3.0
    workers: int = 1
    enabled: bool = True

    def __post_init__(self) -> None:
        """Validate thresholds and worker count."""
        for name in ("h_combined", "h_title", "h_author"):
            value = getattr(self, name)
            if not isinstance(value, int | float) or isinstance(value, bool) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive number, got {value!r}")
        if self.workers == 0 or self.workers < -1:
            raise ConfigurationError(f"workers must be >= 1 or -1, got {self.workers}")

    def threshold(self, view: ClusterView) -> float:
        """Cut height configured for ``view``."""
        return {
            ClusterView.COMBINED: self.h_combined,
            ClusterView.TITLE: self.h_title,
            ClusterView.AUTHOR: self.h_author,
        }[view]


@dataclass(frozen=True)
class ConsensusMap:
    """Consensus labels produced by one clustering pass.

    Attributes
    ----------
    labels : dict[str, str]
        Query string -> consensus label. Singletons map to themselves.
    clusters : dict[str, int]
        Query string -> cluster number, numbered by first occurrence.
    threshold : float | None
        Cut height used; None for identity labeling.
    """

    labels: dict[str, str]
    clusters: dict[str, int]
    threshold: float | None = None

    @property
    def cluster_count(self) -> int:
        """Number of flat clusters."""
        return len(set(self.clusters.values()))

    def label_for(self, query: str | None) -> str | None:
        """Consensus label of ``query``; None for the no-query bucket."""
        if query is None:
            return None
        return self.labels[query]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "labels": dict(self.labels),
            "clusters": dict(self.clusters),
            "threshold": self.threshold,
        }


@dataclass(frozen=True)
class ViewAssignment:
    """Placement of one vote in one view.

    Attributes
    ----------
    vote_id : str
        Vote identifier.
    view : ClusterView
        View the assignment belongs to.
    search_input : str
        Query fed to clustering.
    consensus_label : str
        Representative string of the vote's cluster.
    """

    vote_id: str
    view: ClusterView
    search_input: str
    consensus_label: str


@dataclass(frozen=True)
class ViewSet:
    """All view assignments of a run, keyed by view then vote_id.

    Attributes
    ----------
    assignments : Mapping[ClusterView, Mapping[str, ViewAssignment]]
        Per-view assignments. The author view has no entry for unmatched
        votes.
    combined_parts : Mapping[str, tuple[str, str]]
        Combined queries built from matched votes -> (title, author).
    cluster_counts : Mapping[ClusterView, int]
        Flat cluster count per view.
    """

    assignments: Mapping[ClusterView, Mapping[str, ViewAssignment]]
    combined_parts: Mapping[str, tuple[str, str]] = field(default_factory=dict)
    cluster_counts: Mapping[ClusterView, int] = field(default_factory=dict)

    def get(self, view: ClusterView, vote_id: str) -> ViewAssignment | None:
        """Assignment of ``vote_id`` in ``view``, if any."""
        return self.assignments.get(view, {}).get(vote_id)

    def label(self, view: ClusterView, vote_id: str) -> str | None:
        """Consensus label of ``vote_id`` in ``view``, if any."""
        assignment = self.get(view, vote_id)
        return assignment.consensus_label if assignment is not None else None
