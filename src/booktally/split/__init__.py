"""Entry splitting: recognize "title by author" style formats."""

from booktally.split.models import SplitEntry, SplitKind
from booktally.split.splitter import extract_comment, split_entry, split_votes

__all__ = [
    "SplitEntry",
    "SplitKind",
    "extract_comment",
    "split_entry",
    "split_votes",
]
