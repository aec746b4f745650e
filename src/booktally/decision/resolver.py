"""Consensus resolver: reconcile the three clustering views into one call per vote.

Rules, evaluated independently for every vote:

1. Recognized format (title and author predicted):
   - collect the author labels of all votes sharing the vote's combined label;
   - exactly one author: keep the vote's own title and author labels;
   - otherwise: conflicting votes, leave blank.
2. Unrecognized format:
   - combined label came from a recognized vote: if the votes sharing it agree
     on one author, take title and author from that label, else leave blank;
   - otherwise, if a recognized vote shares the title label: if all votes in
     that title cluster agree on one author, take the title label and that
     author, else leave blank;
   - otherwise leave blank.

Ambiguity is an ordinary outcome, never an exception.
"""

from collections import defaultdict
from collections.abc import Sequence

from booktally.audit.logger import AuditLogger
from booktally.clustering.models import ClusterView, ViewSet
from booktally.decision.models import Outcome, ReasonCode, Resolution
from booktally.split import SplitEntry, SplitKind


class _LabelIndex:
    """Author labels grouped by combined and title labels."""

    def __init__(self, splits: Sequence[SplitEntry], views: ViewSet) -> None:
        self.authors_by_combined: dict[str, set[str]] = defaultdict(set)
        self.authors_by_title: dict[str, set[str]] = defaultdict(set)
        self.matched_titles: set[str] = set()

        for split in splits:
            combined = views.label(ClusterView.COMBINED, split.vote_id)
            title = views.label(ClusterView.TITLE, split.vote_id)
            author = views.label(ClusterView.AUTHOR, split.vote_id)

            if split.kind.is_matched and title is not None:
                self.matched_titles.add(title)
            if author is None:
                continue
            if combined is not None:
                self.authors_by_combined[combined].add(author)
            if title is not None:
                self.authors_by_title[title].add(author)

    def combined_authors(self, label: str) -> set[str]:
        return self.authors_by_combined.get(label, set())

    def title_authors(self, label: str) -> set[str]:
        return self.authors_by_title.get(label, set())


def _failure(vote_id: str, reason: ReasonCode) -> Resolution:
    return Resolution(vote_id=vote_id, final_title=None, final_author=None, reason=reason)


def _resolve_matched(split: SplitEntry, views: ViewSet, index: _LabelIndex) -> Resolution:
    combined = views.label(ClusterView.COMBINED, split.vote_id)
    title = views.label(ClusterView.TITLE, split.vote_id)
    author = views.label(ClusterView.AUTHOR, split.vote_id)

    if combined is None or title is None or author is None:
        raise ValueError(f"Matched vote {split.vote_id} is missing a view assignment")

    if len(index.combined_authors(combined)) == 1:
        return Resolution(
            vote_id=split.vote_id,
            final_title=title,
            final_author=author,
            reason=ReasonCode.FORMAT_HARMONIZED,
        )
    return _failure(split.vote_id, ReasonCode.FORMAT_CONFLICT)


def _resolve_unmatched(split: SplitEntry, views: ViewSet, index: _LabelIndex) -> Resolution:
    combined = views.label(ClusterView.COMBINED, split.vote_id)
    title = views.label(ClusterView.TITLE, split.vote_id)

    if combined is None or title is None:
        raise ValueError(f"Vote {split.vote_id} is missing a view assignment")

    parts = views.combined_parts.get(combined)
    if parts is not None:
        if len(index.combined_authors(combined)) == 1:
            guessed_title, guessed_author = parts
            return Resolution(
                vote_id=split.vote_id,
                final_title=guessed_title,
                final_author=guessed_author,
                reason=ReasonCode.COMBINED_GUESS,
            )
        return _failure(split.vote_id, ReasonCode.COMBINED_CONFLICT)

    if title in index.matched_titles:
        authors = index.title_authors(title)
        if len(authors) == 1:
            (sole_author,) = authors
            return Resolution(
                vote_id=split.vote_id,
                final_title=title,
                final_author=sole_author,
                reason=ReasonCode.TITLE_GUESS,
            )
        return _failure(split.vote_id, ReasonCode.TITLE_AMBIGUOUS)

    return _failure(split.vote_id, ReasonCode.UNRESOLVED)


def resolve_vote(split: SplitEntry, views: ViewSet, index: _LabelIndex) -> Resolution:
    """Resolve a single vote against precomputed label groups."""
    match split.kind:
        case SplitKind.MATCHED_BY_KEYWORD | SplitKind.MATCHED_BY_DELIMITER:
            return _resolve_matched(split, views, index)
        case SplitKind.UNMATCHED:
            return _resolve_unmatched(split, views, index)


def resolve_votes(
    splits: Sequence[SplitEntry],
    views: ViewSet,
    logger: AuditLogger | None = None,
) -> list[Resolution]:
    """Assign a final title/author or an explicit failure to every vote.

    Parameters
    ----------
    splits : Sequence[SplitEntry]
        Split votes, in vote order.
    views : ViewSet
        Clustering assignments for the same votes.
    logger : AuditLogger | None, optional
        Audit logger; receives one ``record_flagged`` event per failure.

    Returns
    -------
    list[Resolution]
        Exactly one resolution per split, in the same order.
    """
    index = _LabelIndex(splits, views)
    resolutions = [resolve_vote(split, views, index) for split in splits]

    if logger:
        for resolution in resolutions:
            if resolution.outcome is Outcome.FAILURE:
                logger.record_flagged(
                    vote_id=resolution.vote_id,
                    flag_name="unresolved",
                    reason_code=resolution.reason.value,
                )

    return resolutions
