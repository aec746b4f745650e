"""Build the three clustering views over split votes."""

from collections.abc import Mapping, Sequence

from booktally.audit.logger import AuditLogger
from booktally.clustering.fuzzy import cluster_queries, identity_consensus
from booktally.clustering.models import (
    COMBINED_SEPARATOR,
    ClusterView,
    ClusteringConfig,
    ConsensusMap,
    ViewAssignment,
    ViewSet,
)
from booktally.models import Vote
from booktally.split import SplitEntry


def combined_query(title: str, author: str) -> str:
    """Join a title and author into one combined-view query."""
    return f"{title}{COMBINED_SEPARATOR}{author}"


def build_queries(
    splits: Sequence[SplitEntry],
    votes: Mapping[str, Vote],
) -> dict[ClusterView, list[str | None]]:
    """Build the per-view query lists, aligned with ``splits``.

    Matched votes query with their predicted fields. Unmatched votes query
    with their full original string in the combined and title views and
    contribute None to the author view.
    """
    queries: dict[ClusterView, list[str | None]] = {view: [] for view in ClusterView}

    for split in splits:
        original = votes[split.vote_id].original_string
        if split.predicted_title is not None and split.predicted_author is not None:
            queries[ClusterView.COMBINED].append(
                combined_query(split.predicted_title, split.predicted_author)
            )
            queries[ClusterView.TITLE].append(split.predicted_title)
            queries[ClusterView.AUTHOR].append(split.predicted_author)
        else:
            queries[ClusterView.COMBINED].append(original)
            queries[ClusterView.TITLE].append(original)
            queries[ClusterView.AUTHOR].append(None)

    return queries


def build_views(
    splits: Sequence[SplitEntry],
    votes: Mapping[str, Vote],
    config: ClusteringConfig,
    logger: AuditLogger | None = None,
) -> ViewSet:
    """Run the combined, title and author clustering passes.

    Parameters
    ----------
    splits : Sequence[SplitEntry]
        Split votes, in vote order.
    votes : Mapping[str, Vote]
        Votes keyed by vote_id.
    config : ClusteringConfig
        Per-view thresholds.
    logger : AuditLogger | None, optional
        Audit logger for per-view events.

    Returns
    -------
    ViewSet
        Assignments for every vote in the combined and title views and for
        matched votes in the author view.
    """
    queries = build_queries(splits, votes)

    combined_parts = {
        combined_query(s.predicted_title, s.predicted_author): (
            s.predicted_title,
            s.predicted_author,
        )
        for s in splits
        if s.predicted_title is not None and s.predicted_author is not None
    }

    assignments: dict[ClusterView, dict[str, ViewAssignment]] = {}
    cluster_counts: dict[ClusterView, int] = {}

    for view in ClusterView:
        view_queries = queries[view]
        consensus: ConsensusMap
        if config.enabled:
            consensus = cluster_queries(
                view_queries, config.threshold(view), workers=config.workers
            )
        else:
            consensus = identity_consensus(view_queries)

        view_assignments: dict[str, ViewAssignment] = {}
        for split, query in zip(splits, view_queries, strict=True):
            if query is None:
                continue
            view_assignments[split.vote_id] = ViewAssignment(
                vote_id=split.vote_id,
                view=view,
                search_input=query,
                consensus_label=consensus.labels[query],
            )

        assignments[view] = view_assignments
        cluster_counts[view] = consensus.cluster_count

        if logger:
            logger.event(
                "view_clustered",
                data={
                    "view": view.value,
                    "queries": len(view_assignments),
                    "distinct_queries": len(consensus.labels),
                    "clusters": consensus.cluster_count,
                    "threshold": consensus.threshold,
                },
            )

    return ViewSet(
        assignments=assignments,
        combined_parts=combined_parts,
        cluster_counts=cluster_counts,
    )
