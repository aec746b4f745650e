"""End-to-end harmonization pipeline runner.

Stages, in order:
    load_rules      Override and known-match tables (validated up front)
    read_ballot     Ballot table, duplicate rows, votes
    pre_overrides   Regex rewrites of vote strings
    split           Title/author candidates per vote
    cluster         Combined, title and author views
    resolve         One final call per vote
    case            Title and author casing
    post_overrides  Manual replacements of final values
    known_matches   Comparison with curated answers (optional)
    write_outputs   Review tables and reports

Nothing under ``artifacts/`` or ``reports/`` is written until every earlier
stage has finished.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from booktally.audit import BallotInfo, RunContext
from booktally.clustering import ClusterView, ViewSet, build_views
from booktally.decision import Outcome, Resolution, resolve_votes
from booktally.engine.config import HarmonizeConfig, HarmonizeResult
from booktally.models import HarmonizedVote, Vote
from booktally.normalize import author_case, title_case
from booktally.output import write_outputs, write_tsv_atomic
from booktally.overrides import (
    PostOverride,
    PreOverride,
    apply_post_overrides,
    apply_pre_overrides,
    load_post_overrides,
    load_pre_overrides,
)
from booktally.parse import (
    BallotRow,
    extract_votes,
    format_duplicate_report,
    read_ballot_table,
    remove_duplicate_rows,
)
from booktally.split import SplitEntry, split_votes
from booktally.validation import (
    KnownMatch,
    KnownMatchCheck,
    check_known_matches,
    load_known_matches,
    summarize_checks,
)

DUPLICATE_REPORT = "duplicate_rows.tsv"
KNOWN_MATCHES_REPORT = "known_matches.tsv"


@dataclass
class _Rules:
    pre: list[PreOverride] = field(default_factory=list)
    post: list[PostOverride] = field(default_factory=list)
    known: dict[str, KnownMatch] | None = None


def normalize_case(resolutions: Sequence[Resolution]) -> list[Resolution]:
    """Title-case final titles and re-case all-caps final authors."""
    return [
        replace(
            resolution,
            final_title=title_case(resolution.final_title),
            final_author=author_case(resolution.final_author),
        )
        if resolution.outcome is Outcome.SUCCESS
        else resolution
        for resolution in resolutions
    ]


def assemble_rows(
    votes: Sequence[Vote],
    splits: Sequence[SplitEntry],
    views: ViewSet,
    resolutions: Sequence[Resolution],
    overridden: set[str],
) -> list[HarmonizedVote]:
    """Join every per-stage record of a vote into one output row.

    Records are joined by vote_id; the sequences need not share an order.
    """
    splits_by_id = {split.vote_id: split for split in splits}
    resolutions_by_id = {resolution.vote_id: resolution for resolution in resolutions}

    rows: list[HarmonizedVote] = []
    for vote in votes:
        split = splits_by_id[vote.vote_id]
        resolution = resolutions_by_id[vote.vote_id]
        combined = views.get(ClusterView.COMBINED, vote.vote_id)
        title = views.get(ClusterView.TITLE, vote.vote_id)
        author = views.get(ClusterView.AUTHOR, vote.vote_id)
        if combined is None or title is None:
            raise ValueError(f"Vote {vote.vote_id} is missing a view assignment")

        rows.append(
            HarmonizedVote(
                vote_id=vote.vote_id,
                voter=vote.voter,
                category=vote.category,
                raw_string=vote.raw_string,
                original_string=vote.original_string,
                submitter_comment=split.submitter_comment,
                split_kind=split.kind.value,
                predicted_title=split.predicted_title,
                predicted_author=split.predicted_author,
                combined_search_input=combined.search_input,
                combined_consensus_label=combined.consensus_label,
                title_search_input=title.search_input,
                title_consensus_label=title.consensus_label,
                author_search_input=author.search_input if author else None,
                author_consensus_label=author.consensus_label if author else None,
                final_title=resolution.final_title,
                final_author=resolution.final_author,
                outcome=resolution.outcome.value,
                reason=resolution.reason.value,
                final_message=resolution.final_message,
                override_applied=vote.vote_id in overridden,
            )
        )
    return rows


def _load_rules(config: HarmonizeConfig) -> _Rules:
    rules = _Rules()
    if config.pre_overrides is not None:
        rules.pre = load_pre_overrides(config.pre_overrides)
    if config.post_overrides is not None:
        rules.post = load_post_overrides(config.post_overrides)
    if config.known_matches is not None:
        rules.known = load_known_matches(config.known_matches)
    return rules


def _known_matches_report(checks: Sequence[KnownMatchCheck]) -> list[list[str | None]]:
    report: list[list[str | None]] = [
        [
            "vote_id",
            "entry",
            "expected_title",
            "expected_author",
            "final_title",
            "final_author",
            "status",
        ]
    ]
    report.extend(
        [
            check.vote_id,
            check.entry,
            check.expected_title,
            check.expected_author,
            check.final_title,
            check.final_author,
            check.status.value,
        ]
        for check in checks
    )
    return report


def _run_stages(
    input_path: Path,
    config: HarmonizeConfig,
    run: RunContext,
    result: HarmonizeResult,
) -> HarmonizeResult:
    """Execute the stages in order, filling ``result`` as counts become known."""
    logger = run.audit_logger

    run.start_stage("load_rules")
    rules = _load_rules(config)
    run.finish_stage(
        "load_rules",
        counters={
            "pre_overrides": len(rules.pre),
            "post_overrides": len(rules.post),
            "known_matches": len(rules.known or {}),
        },
    )

    run.start_stage("read_ballot")
    table = read_ballot_table(input_path)
    result.total_rows = len(table.rows)
    removed: list[BallotRow] = []
    if config.remove_duplicates:
        table, removed = remove_duplicate_rows(table)
    result.duplicate_rows = len(removed)
    votes = extract_votes(table)
    result.total_votes = len(votes)
    run.set_ballot(
        BallotInfo(
            name=input_path.name,
            delimiter=table.delimiter,
            encoding=table.encoding,
            bytes=table.size,
            sha256=table.source_digest,
            rows=result.total_rows,
            duplicate_rows=result.duplicate_rows,
            votes=result.total_votes,
            categories=table.categories,
        )
    )
    run.finish_stage(
        "read_ballot",
        counters={
            "rows": result.total_rows,
            "duplicate_rows": result.duplicate_rows,
            "categories": len(table.categories),
            "votes": result.total_votes,
        },
    )

    run.start_stage("pre_overrides", expected_votes=len(votes))
    rewritten = apply_pre_overrides(votes, rules.pre)
    changed = sum(1 for before, after in zip(votes, rewritten, strict=True) if before is not after)
    votes = rewritten
    run.finish_stage("pre_overrides", counters={"votes_changed": changed})

    run.start_stage("split", expected_votes=len(votes))
    splits = split_votes(votes)
    matched = sum(1 for split in splits if split.kind.is_matched)
    run.finish_stage(
        "split",
        counters={"votes": len(splits), "matched": matched, "unmatched": len(splits) - matched},
    )

    run.start_stage("cluster", expected_votes=len(votes))
    views = build_views(splits, {vote.vote_id: vote for vote in votes}, config.clustering, logger)
    run.finish_stage(
        "cluster",
        counters={f"{view.value}_clusters": views.cluster_counts[view] for view in ClusterView},
    )

    run.start_stage("resolve", expected_votes=len(votes))
    resolutions = resolve_votes(splits, views, logger)
    resolved = sum(1 for r in resolutions if r.outcome is Outcome.SUCCESS)
    run.finish_stage(
        "resolve",
        counters={"success": resolved, "failure": len(resolutions) - resolved},
    )

    run.start_stage("case", expected_votes=len(votes))
    resolutions = normalize_case(resolutions)
    run.finish_stage("case")

    run.start_stage("post_overrides", expected_votes=len(votes))
    resolutions, overridden = apply_post_overrides(votes, resolutions, rules.post, logger)
    result.overrides_applied = len(overridden)
    run.finish_stage("post_overrides", counters={"votes_changed": len(overridden)})

    rows = assemble_rows(votes, splits, views, resolutions, overridden)
    result.resolved_votes = sum(1 for row in rows if row.outcome == Outcome.SUCCESS)
    result.unresolved_votes = len(rows) - result.resolved_votes

    checks: list[KnownMatchCheck] | None = None
    if rules.known is not None:
        run.start_stage("known_matches", expected_votes=len(rows))
        checks = check_known_matches(rows, rules.known)
        result.known_matches = summarize_checks(checks)
        run.finish_stage("known_matches", counters=dict(result.known_matches))

    run.start_stage("write_outputs")
    artifacts_dir = run.output_dir / "artifacts"
    reports_dir = run.output_dir / "reports"
    for name, (path, count) in write_outputs(rows, artifacts_dir, summary=config.summary).items():
        run.register_artifact(path, record_count=count)
        result.output_files[name] = str(path)

    if removed:
        path = reports_dir / DUPLICATE_REPORT
        write_tsv_atomic(path, format_duplicate_report(table.header, removed))
        run.register_artifact(path, record_count=len(removed))
        result.output_files[DUPLICATE_REPORT] = str(path)

    if checks is not None:
        path = reports_dir / KNOWN_MATCHES_REPORT
        write_tsv_atomic(path, _known_matches_report(checks))
        run.register_artifact(path, record_count=len(checks))
        result.output_files[KNOWN_MATCHES_REPORT] = str(path)

    run.finish_stage("write_outputs", counters={"files": len(result.output_files)})

    result.success = True
    return result


def run_pipeline(
    input_path: Path | str,
    config: HarmonizeConfig | None = None,
    command_argv: list[str] | None = None,
) -> HarmonizeResult:
    """Run the complete harmonization pipeline.

    Failures never raise: they are recorded in the audit trail and returned
    as ``HarmonizeResult(success=False, error_message=...)``.

    Parameters
    ----------
    input_path : Path | str
        Ballot table (``.csv``, ``.tsv``, ``.txt`` or ``.xlsx``).
    config : HarmonizeConfig | None, optional
        Run configuration. If None, uses defaults.
    command_argv : list[str] | None, optional
        Invocation recorded in the manifest; defaults to ``sys.argv``.

    Returns
    -------
    HarmonizeResult
        Counts, output paths and the run id.

    Examples
    --------
        >>> from booktally.engine import HarmonizeConfig, run_pipeline
        >>> result = run_pipeline("ballots.csv", HarmonizeConfig(output_dir=Path("out")))
        >>> if result.success:
        ...     print(f"{result.resolved_votes} of {result.total_votes} votes resolved")
    """
    input_path = Path(input_path)

    if config is None:
        config = HarmonizeConfig()

    if not input_path.is_file():
        return HarmonizeResult(
            success=False,
            error_message=f"Input file does not exist: {input_path}",
        )

    run = RunContext.start(
        output_dir=config.output_dir,
        parameters=config.to_dict(),
        command_argv=command_argv,
    )
    result = HarmonizeResult(success=False, run_id=run.run_id)

    try:
        _run_stages(input_path, config, run, result)
    except Exception as e:
        run.record_error(e, include_traceback=True)
        run.finish(status="failed", votes_processed=result.total_votes)
        result.success = False
        result.error_message = f"{type(e).__name__}: {e}"
        return result

    run.finish(status="success", votes_processed=result.total_votes)
    return result
