"""Pairwise string dissimilarity for fuzzy clustering.

Queries are compared with the optimal string alignment (OSA) edit distance:
insertions, deletions, substitutions and adjacent transpositions each cost 1.
Before comparison every query is reduced to a matching key (casefolded,
accent- and punctuation-free, whitespace collapsed), so casing and
punctuation variants are at distance 0 and only real typos count.
"""

from collections.abc import Sequence

import numpy as np
from rapidfuzz.distance import OSA
from rapidfuzz.process import cdist

from booktally.normalize import normalize_text_for_matching


def matching_keys(queries: Sequence[str]) -> list[str]:
    """Reduce queries to the keys actually compared."""
    return [normalize_text_for_matching(q) for q in queries]


def distance_matrix(queries: Sequence[str], workers: int = 1) -> np.ndarray:
    """Compute the symmetric OSA distance matrix of ``queries``.

    Parameters
    ----------
    queries : Sequence[str]
        Distinct query strings.
    workers : int, optional
        Threads used by rapidfuzz (-1 for all cores), by default 1. Every
        cell is computed independently, so the matrix does not depend on
        this value.

    Returns
    -------
    np.ndarray
        ``(n, n)`` float matrix of integer-valued distances, zero diagonal.
    """
    keys = matching_keys(queries)
    matrix = cdist(keys, keys, scorer=OSA.distance, dtype=np.int32, workers=workers)
    return matrix.astype(np.float64)
