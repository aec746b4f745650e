"""Command-line interface for booktally.

Provides CLI commands for the harmonization pipeline.
"""

import importlib.metadata
import sys
from pathlib import Path

import click

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("booktally")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.4.0"


@click.group()
@click.version_option(version=__version__, prog_name="booktally")
def cli() -> None:
    """Harmonize crowd-submitted book title/author votes.

    Use 'booktally COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default="out",
    help="Output directory for results (default: out)",
)
@click.option(
    "--pre-overrides",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="TSV of regex/replacement pairs applied before splitting",
)
@click.option(
    "--post-overrides",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="5-column TSV of manual replacements applied to final values",
)
@click.option(
    "--known-matches",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="TSV of entry/title/author answers to check results against",
)
@click.option(
    "--keep-duplicates",
    is_flag=True,
    help="Keep ballot rows identical to an earlier row",
)
@click.option(
    "--disable-clustering",
    is_flag=True,
    help="Report votes as split, without fuzzy harmonization",
)
@click.option("--h-combined", type=float, default=5.0, help="Combined view cut height (default: 5)")
@click.option("--h-title", type=float, default=3.0, help="Title view cut height (default: 3)")
@click.option("--h-author", type=float, default=3.0, help="Author view cut height (default: 3)")
@click.option(
    "--workers",
    type=int,
    default=1,
    help="Threads for distance computation, -1 for all cores (default: 1)",
)
@click.option("--summary", is_flag=True, help="Also write a per-category tally")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def harmonize(
    input_path: str,
    output_dir: str,
    pre_overrides: str | None,
    post_overrides: str | None,
    known_matches: str | None,
    keep_duplicates: bool,
    disable_clustering: bool,
    h_combined: float,
    h_title: float,
    h_author: float,
    workers: int,
    summary: bool,
    verbose: bool,
) -> None:
    """Harmonize the votes of the ballot table INPUT_PATH.

    INPUT_PATH is a .csv, .tsv, .txt or .xlsx table whose first column identifies
    the voter and whose remaining columns hold three votes per category.

    Outputs are written to OUTPUT_DIR with a full audit trail
    (events.jsonl, run.json).

    Examples
    --------
        booktally harmonize ballots.csv
        booktally harmonize ballots.tsv -o results --summary
        booktally harmonize ballots.csv --post-overrides fixes.tsv --h-title 2
    """
    from booktally.engine import HarmonizeConfig, run_pipeline
    from booktally.exceptions import ConfigurationError

    if verbose:
        click.echo("Starting harmonization...", err=True)
        click.echo(f"  Input: {input_path}", err=True)
        click.echo(f"  Output: {output_dir}", err=True)
        click.echo(f"  h (combined/title/author): {h_combined}/{h_title}/{h_author}", err=True)
        if disable_clustering:
            click.echo("  Clustering: disabled", err=True)

    try:
        config = HarmonizeConfig(
            h_combined=h_combined,
            h_title=h_title,
            h_author=h_author,
            pre_overrides=Path(pre_overrides) if pre_overrides else None,
            post_overrides=Path(post_overrides) if post_overrides else None,
            known_matches=Path(known_matches) if known_matches else None,
            remove_duplicates=not keep_duplicates,
            disable_clustering=disable_clustering,
            summary=summary,
            workers=workers,
            output_dir=Path(output_dir),
        )
    except ConfigurationError as e:
        click.secho(f"✗ Invalid configuration: {e}", fg="red", err=True)
        sys.exit(1)

    result = run_pipeline(input_path=Path(input_path), config=config)

    if not result.success:
        click.secho(f"✗ Harmonization failed: {result.error_message}", fg="red", err=True)
        sys.exit(1)

    if verbose:
        click.echo("\n✓ Harmonization completed successfully!", err=True)
        click.echo("\nResults:", err=True)
        click.echo(f"  Ballot rows: {result.total_rows}", err=True)
        click.echo(f"  Duplicate rows removed: {result.duplicate_rows}", err=True)
        click.echo(f"  Votes: {result.total_votes}", err=True)
        click.echo(f"  Resolved: {result.resolved_votes}", err=True)
        click.echo(f"  Unresolved: {result.unresolved_votes}", err=True)
        click.echo(f"  Overridden: {result.overrides_applied}", err=True)
        if result.known_matches is not None:
            totals = ", ".join(f"{status} {count}" for status, count in result.known_matches.items())
            click.echo(f"  Known matches: {totals}", err=True)
        click.echo("\nOutputs:", err=True)
        for name, path in result.output_files.items():
            click.echo(f"  {name}: {path}", err=True)

    click.secho(
        f"✓ Harmonized {result.total_votes} votes "
        f"({result.resolved_votes} resolved, {result.unresolved_votes} for review)",
        fg="green",
    )


@cli.command()
@click.argument("entries", nargs=-1, required=True)
def split(entries: tuple[str, ...]) -> None:
    """Show how each of ENTRIES is split into title and author.

    Examples
    --------
        booktally split "Dune by Frank Herbert" "Piranesi - Susanna Clarke"
    """
    from booktally.split import split_entry

    for entry in entries:
        result = split_entry(entry)
        click.echo(f"{entry}")
        click.echo(f"  kind:    {result.kind.value}")
        if result.predicted_title is not None:
            click.echo(f"  title:   {result.predicted_title}")
            click.echo(f"  author:  {result.predicted_author}")
        if result.submitter_comment is not None:
            click.echo(f"  comment: {result.submitter_comment}")


if __name__ == "__main__":
    cli()
