"""Fuzzy cluster engine: group near-duplicate strings under one label.

Distinct queries are clustered by complete-linkage hierarchical agglomerative
clustering over their OSA distance matrix and the tree is cut at height
``h``. Each flat cluster is labeled with its most frequent query (ties go to
the query seen first), and every member query maps to that label.
"""

import math
from collections import Counter
from collections.abc import Sequence

import numpy as np
from sklearn.cluster import AgglomerativeClustering

from booktally.clustering.distance import distance_matrix, matching_keys
from booktally.clustering.models import ConsensusMap
from booktally.exceptions import ConfigurationError


def _cut_height(h: float) -> float:
    """Translate an inclusive cut height into scikit-learn's exclusive threshold.

    scikit-learn keeps merges strictly below ``distance_threshold``. OSA
    distances and their complete-linkage maxima are integers, so keeping
    heights ``<= h`` is the same as keeping heights ``< floor(h) + 0.5``.
    """
    return math.floor(h) + 0.5


def _flat_clusters(queries: list[str], h: float, workers: int) -> list[int]:
    """Cluster distinct queries and number clusters by first occurrence.

    A query whose matching key is empty (punctuation only, e.g. ``"???"``)
    is only ``len(other)`` edits from any other key and would absorb every
    short query. Such queries stay out of the distance matrix and each
    forms its own cluster.
    """
    keyed = [q for q, key in zip(queries, matching_keys(queries), strict=True) if key]

    fuzzy_ids: dict[str, int] = {}
    if len(keyed) == 1:
        fuzzy_ids[keyed[0]] = 0
    elif keyed:
        model = AgglomerativeClustering(
            n_clusters=None,
            metric="precomputed",
            linkage="complete",
            distance_threshold=_cut_height(h),
        )
        raw_labels: np.ndarray = model.fit_predict(distance_matrix(keyed, workers=workers))
        fuzzy_ids = dict(zip(keyed, raw_labels.tolist(), strict=True))

    renumbered: dict[tuple[str, object], int] = {}
    cluster_ids: list[int] = []
    for query in queries:
        group = ("fuzzy", fuzzy_ids[query]) if query in fuzzy_ids else ("alone", query)
        cluster_ids.append(renumbered.setdefault(group, len(renumbered)))
    return cluster_ids


def cluster_queries(
    queries: Sequence[str | None],
    h: float,
    *,
    workers: int = 1,
) -> ConsensusMap:
    """Cluster query strings and assign consensus labels.

    Parameters
    ----------
    queries : Sequence[str | None]
        One query per vote, in vote order. None entries form a "no query"
        bucket that is neither clustered nor labeled.
    h : float
        Cut height. Larger values merge more aggressively; 0 < h.
    workers : int, optional
        Threads for the distance matrix, by default 1.

    Returns
    -------
    ConsensusMap
        Label and cluster number for every distinct non-null query.

    Raises
    ------
    ConfigurationError
        If ``h`` is not positive.

    Examples
    --------
        >>> result = cluster_queries(["Dune", "dune", "Dnue", "Emma"], h=2)
        >>> result.label_for("Dnue")
        'Dune'
        >>> result.label_for("Emma")
        'Emma'
    """
    if h <= 0:
        raise ConfigurationError(f"Cluster height must be positive, got {h}")

    counts = Counter(q for q in queries if q is not None)
    distinct = list(counts)
    if not distinct:
        return ConsensusMap(labels={}, clusters={}, threshold=h)

    cluster_ids = _flat_clusters(distinct, h, workers)

    representatives: dict[int, str] = {}
    for query, cluster_id in zip(distinct, cluster_ids, strict=True):
        best = representatives.get(cluster_id)
        if best is None or counts[query] > counts[best]:
            representatives[cluster_id] = query

    return ConsensusMap(
        labels={q: representatives[c] for q, c in zip(distinct, cluster_ids, strict=True)},
        clusters=dict(zip(distinct, cluster_ids, strict=True)),
        threshold=h,
    )


def identity_consensus(queries: Sequence[str | None]) -> ConsensusMap:
    """Label every distinct query with itself (clustering disabled)."""
    distinct = list(dict.fromkeys(q for q in queries if q is not None))
    return ConsensusMap(
        labels={q: q for q in distinct},
        clusters={q: i for i, q in enumerate(distinct)},
        threshold=None,
    )
