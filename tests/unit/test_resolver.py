"""Tests for view building and consensus resolution."""

from collections.abc import Callable

import pytest

from booktally.clustering import (
    COMBINED_SEPARATOR,
    ClusteringConfig,
    ClusterView,
    ViewSet,
    build_queries,
    build_views,
)
from booktally.decision import Outcome, ReasonCode, Resolution, resolve_votes
from booktally.models import Vote
from booktally.split import split_votes

# Thresholds low enough that "Frank Herbert" and "Brian Herbert" (OSA 3)
# stay apart in every view.
_STRICT = ClusteringConfig(h_combined=2, h_title=2, h_author=2)


def _resolve(
    votes: list[Vote],
    config: ClusteringConfig | None = None,
) -> tuple[ViewSet, dict[str, Resolution]]:
    splits = split_votes(votes)
    views = build_views(splits, {v.vote_id: v for v in votes}, config or ClusteringConfig())
    resolutions = resolve_votes(splits, views)
    return views, {r.vote_id: r for r in resolutions}


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_build_queries_per_view(make_votes: Callable[..., list[Vote]]) -> None:
    """Test matched votes query with their parts and unmatched with the raw text."""
    votes = make_votes(["Emma by Jane Austen", "Ask the Dust"])

    queries = build_queries(split_votes(votes), {v.vote_id: v for v in votes})

    assert queries[ClusterView.COMBINED] == [f"Emma{COMBINED_SEPARATOR}Jane Austen", "Ask the Dust"]
    assert queries[ClusterView.TITLE] == ["Emma", "Ask the Dust"]
    assert queries[ClusterView.AUTHOR] == ["Jane Austen", None]


@pytest.mark.unit
def test_build_views_excludes_unmatched_from_author_view(
    make_votes: Callable[..., list[Vote]],
) -> None:
    """Test unmatched votes have no author-view assignment."""
    votes = make_votes(["Emma by Jane Austen", "Ask the Dust"])
    splits = split_votes(votes)

    views = build_views(splits, {v.vote_id: v for v in votes}, ClusteringConfig())

    assert views.get(ClusterView.AUTHOR, votes[0].vote_id) is not None
    assert views.get(ClusterView.AUTHOR, votes[1].vote_id) is None
    assert views.get(ClusterView.COMBINED, votes[1].vote_id).search_input == "Ask the Dust"
    assert views.combined_parts == {f"Emma{COMBINED_SEPARATOR}Jane Austen": ("Emma", "Jane Austen")}


@pytest.mark.unit
def test_build_views_with_clustering_disabled(make_votes: Callable[..., list[Vote]]) -> None:
    """Test disabled clustering keeps every query as its own label."""
    votes = make_votes(["Dune by Frank Herbert", "Dnue by Frank Herbert"])
    splits = split_votes(votes)

    views = build_views(splits, {v.vote_id: v for v in votes}, ClusteringConfig(enabled=False))

    assert views.label(ClusterView.TITLE, votes[1].vote_id) == "Dnue"


# ---------------------------------------------------------------------------
# Recognized format
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_matched_votes_harmonize_to_consensus(make_votes: Callable[..., list[Vote]]) -> None:
    """Test recognized votes take their title and author consensus labels."""
    votes = make_votes(["the great gatsby - fitzgerald"] * 5)

    _, resolutions = _resolve(votes)

    for vote in votes:
        resolution = resolutions[vote.vote_id]
        assert resolution.reason is ReasonCode.FORMAT_HARMONIZED
        assert resolution.final_title == "the great gatsby"
        assert resolution.final_author == "fitzgerald"


@pytest.mark.unit
def test_matched_typo_takes_majority_label(make_votes: Callable[..., list[Vote]]) -> None:
    """Test a misspelled recognized vote is harmonized to the majority spelling."""
    votes = make_votes(["The Hobbit by Tolkien", "The Hobbit by Tolkien", "The Hobit by Tolkein"])

    _, resolutions = _resolve(votes)

    typo = resolutions[votes[2].vote_id]
    assert typo.outcome is Outcome.SUCCESS
    assert (typo.final_title, typo.final_author) == ("The Hobbit", "Tolkien")


@pytest.mark.unit
def test_matched_votes_with_conflicting_authors_fail(
    make_votes: Callable[..., list[Vote]],
) -> None:
    """Test recognized votes fail when combined peers disagree on the author."""
    # Combined view merges the pair (OSA 3 <= 5); author view keeps them apart.
    votes = make_votes(["Dune by Frank Herbert", "Dune by Brian Herbert"])

    _, resolutions = _resolve(votes, ClusteringConfig(h_combined=5, h_title=3, h_author=2))

    for vote in votes:
        resolution = resolutions[vote.vote_id]
        assert resolution.reason is ReasonCode.FORMAT_CONFLICT
        assert resolution.final_title is None
        assert resolution.final_author is None


# ---------------------------------------------------------------------------
# Unrecognized format
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_unmatched_vote_guessed_from_combined_cluster(
    make_votes: Callable[..., list[Vote]],
) -> None:
    """Test an unmatched vote close to a recognized combined query takes its parts."""
    votes = make_votes(["Emma by Jane Austen", "Emma by Jane Austen", "Emma Jane Austen"])

    views, resolutions = _resolve(votes)

    guessed = resolutions[votes[2].vote_id]
    assert views.label(ClusterView.COMBINED, votes[2].vote_id) == (
        f"Emma{COMBINED_SEPARATOR}Jane Austen"
    )
    assert guessed.reason is ReasonCode.COMBINED_GUESS
    assert (guessed.final_title, guessed.final_author) == ("Emma", "Jane Austen")


@pytest.mark.unit
def test_unmatched_vote_guessed_from_title_cluster(make_votes: Callable[..., list[Vote]]) -> None:
    """Test an unmatched title takes the single author seen for its title cluster."""
    votes = make_votes(["Piranesi by Susanna Clarke", "Piranesi"])

    _, resolutions = _resolve(votes)

    guessed = resolutions[votes[1].vote_id]
    assert guessed.reason is ReasonCode.TITLE_GUESS
    assert (guessed.final_title, guessed.final_author) == ("Piranesi", "Susanna Clarke")


@pytest.mark.unit
def test_dune_with_two_authors_is_ambiguous(make_votes: Callable[..., list[Vote]]) -> None:
    """Test a title shared by two authors is left blank rather than guessed."""
    votes = make_votes(
        ["Dune by Frank Herbert"] * 2 + ["Dune by Brian Herbert"] * 3 + ["Dune"]
    )

    views, resolutions = _resolve(votes, _STRICT)

    assert views.cluster_counts[ClusterView.AUTHOR] == 2
    for vote in votes[:5]:
        assert resolutions[vote.vote_id].reason is ReasonCode.FORMAT_HARMONIZED

    ambiguous = resolutions[votes[5].vote_id]
    assert views.label(ClusterView.TITLE, votes[5].vote_id) == "Dune"
    assert ambiguous.reason is ReasonCode.TITLE_AMBIGUOUS
    assert ambiguous.outcome is Outcome.FAILURE
    assert ambiguous.final_title is None
    assert ambiguous.final_author is None


@pytest.mark.unit
def test_unmatched_vote_close_to_conflicting_combined_cluster_fails(
    make_votes: Callable[..., list[Vote]],
) -> None:
    """Test a combined guess is refused when its cluster holds two authors."""
    votes = make_votes(["Dune by Frank Herbert", "Dune by Brian Herbert", "Dune Frank Herbert"])

    _, resolutions = _resolve(votes, ClusteringConfig(h_combined=5, h_title=3, h_author=2))

    assert resolutions[votes[2].vote_id].reason is ReasonCode.COMBINED_CONFLICT


@pytest.mark.unit
def test_unmatched_vote_without_overlap_is_unresolved(
    make_votes: Callable[..., list[Vote]],
) -> None:
    """Test an unmatched vote with no recognized neighbor stays unresolved."""
    votes = make_votes(["Dune by Frank Herbert", "ASK THE DUST"])

    _, resolutions = _resolve(votes)

    unresolved = resolutions[votes[1].vote_id]
    assert unresolved.reason is ReasonCode.UNRESOLVED
    assert unresolved.final_message.startswith("Failure:")
    assert "clustering did not resolve the issue" in unresolved.final_message
    assert (unresolved.final_title, unresolved.final_author) == (None, None)


@pytest.mark.unit
def test_only_unmatched_votes_are_all_unresolved(make_votes: Callable[..., list[Vote]]) -> None:
    """Test a ballot with no recognized votes resolves nothing."""
    votes = make_votes(["Dune", "Dune", "Emma"])

    _, resolutions = _resolve(votes)

    assert {r.reason for r in resolutions.values()} == {ReasonCode.UNRESOLVED}


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_every_vote_gets_exactly_one_consistent_resolution(
    make_votes: Callable[..., list[Vote]],
) -> None:
    """Test resolutions cover every vote and message class matches nullity."""
    votes = make_votes(
        [
            "Dune by Frank Herbert",
            "Dune by Brian Herbert",
            "Dune",
            "Emma - Jane Austen",
            "Emma Jane Austen",
            "ASK THE DUST",
            "Piranesi by Susanna Clarke",
            "Piranesi",
            "(reread) Piranesi",
        ]
    )

    _, resolutions = _resolve(votes, _STRICT)

    assert set(resolutions) == {v.vote_id for v in votes}
    for resolution in resolutions.values():
        both_set = resolution.final_title is not None and resolution.final_author is not None
        both_none = resolution.final_title is None and resolution.final_author is None
        assert both_set or both_none
        assert resolution.final_message.startswith("Success:" if both_set else "Failure:")


@pytest.mark.unit
def test_resolution_rejects_inconsistent_values() -> None:
    """Test a resolution cannot contradict its reason code."""
    with pytest.raises(ValueError):
        Resolution(vote_id="v", final_title="Dune", final_author=None, reason=ReasonCode.TITLE_GUESS)
    with pytest.raises(ValueError):
        Resolution(vote_id="v", final_title="Dune", final_author="X", reason=ReasonCode.UNRESOLVED)


@pytest.mark.unit
@pytest.mark.parametrize("reason", list(ReasonCode))
def test_reason_message_matches_outcome(reason: ReasonCode) -> None:
    """Test each reason's message is prefixed with its outcome."""
    prefix = "Success:" if reason.outcome is Outcome.SUCCESS else "Failure:"

    assert reason.message.startswith(prefix)


@pytest.mark.unit
def test_resolve_logs_unresolved_votes(tmp_path, make_votes: Callable[..., list[Vote]]) -> None:
    """Test each failure is logged as a flagged vote."""
    import json

    from booktally.audit import AuditLogger

    votes = make_votes(["Dune by Frank Herbert", "ASK THE DUST"])
    splits = split_votes(votes)
    with AuditLogger(run_id="test_run", log_path=tmp_path / "events.jsonl") as logger:
        views = build_views(splits, {v.vote_id: v for v in votes}, ClusteringConfig(), logger)
        resolve_votes(splits, views, logger)

    events = [json.loads(line) for line in (tmp_path / "events.jsonl").read_text().splitlines()]
    flagged = [e for e in events if e["event"] == "record_flagged"]
    assert [e["vote_id"] for e in flagged] == [votes[1].vote_id]
    assert flagged[0]["data"]["reason_code"] == "unresolved"
    assert sum(1 for e in events if e["event"] == "view_clustered") == 3
