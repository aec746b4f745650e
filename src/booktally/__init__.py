"""Harmonization of crowd-submitted book title/author votes.

This package provides:
- Data models (booktally.models): votes and harmonized output rows
- Parsing (booktally.parse): ballot table ingestion
- Overrides (booktally.overrides): user rewrite and replacement tables
- Split (booktally.split): "title by author" format recognition
- Normalization (booktally.normalize): matching keys and display casing
- Clustering (booktally.clustering): fuzzy consensus labels in three views
- Decision (booktally.decision): one final call per vote
- Validation (booktally.validation): checks against known matches
- Output (booktally.output): review tables
- Engine (booktally.engine): pipeline orchestration
- Audit (booktally.audit): logging and traceability
- CLI (booktally.cli): command-line interface
- Public API (booktally.api): high-level convenience functions
"""

__version__ = "0.4.0"
__author__ = "Ennio Politi Lopes <enniolopes@gmail.com>"
__license__ = "MIT"

from booktally.api import HarmonizeError, harmonize, read_votes
from booktally.clustering import cluster_queries
from booktally.exceptions import (
    BooktallyError,
    ConfigurationError,
    InputFormatError,
    OverrideFileError,
)
from booktally.models import HarmonizedVote, Vote
from booktally.normalize import author_case, title_case
from booktally.split import split_entry

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "BooktallyError",
    "ConfigurationError",
    "HarmonizeError",
    "HarmonizedVote",
    "InputFormatError",
    "OverrideFileError",
    "Vote",
    "author_case",
    "cluster_queries",
    "harmonize",
    "read_votes",
    "split_entry",
    "title_case",
]
