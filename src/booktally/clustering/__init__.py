"""Fuzzy clustering of vote strings into consensus labels.

Three independent views (combined, title-only, author-only) are clustered by
complete-linkage agglomerative clustering over OSA edit distances.
"""

from booktally.clustering.fuzzy import cluster_queries, identity_consensus
from booktally.clustering.models import (
    COMBINED_SEPARATOR,
    ClusteringConfig,
    ClusterView,
    ConsensusMap,
    ViewAssignment,
    ViewSet,
)
from booktally.clustering.views import build_queries, build_views, combined_query

__all__ = [
    "COMBINED_SEPARATOR",
    "ClusterView",
    "ClusteringConfig",
    "ConsensusMap",
    "ViewAssignment",
    "ViewSet",
    "build_queries",
    "build_views",
    "cluster_queries",
    "combined_query",
    "identity_consensus",
]
