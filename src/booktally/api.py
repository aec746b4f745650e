"""Public API for harmonizing ballot votes.

This module provides the main public API for booktally, enabling:
- Reading a ballot table into votes
- Running the full harmonization pipeline
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from booktally.models import Vote
from booktally.parse import extract_votes, read_ballot_table, remove_duplicate_rows

if TYPE_CHECKING:
    from booktally.engine.config import HarmonizeResult

__all__ = [
    "HarmonizeError",
    "harmonize",
    "read_votes",
]


class HarmonizeError(Exception):
    """Raised when a harmonization run fails."""

    def __init__(
        self,
        message: str,
        run_id: str | None = None,
    ) -> None:
        """Initialize harmonize error.

        Parameters
        ----------
        message : str
            Error message.
        run_id : str | None, optional
            Run whose audit trail records the failure.
        """
        super().__init__(message)
        self.run_id = run_id


def read_votes(
    path: str | Path,
    *,
    remove_duplicates: bool = True,
) -> list[Vote]:
    """Read a ballot table into votes without harmonizing them.

    Parameters
    ----------
    path : str | Path
        Ballot table (``.csv``, ``.tsv``, ``.txt`` or ``.xlsx``).
    remove_duplicates : bool, optional
        Drop rows identical to an earlier row, by default True.

    Returns
    -------
    list[Vote]
        One vote per non-empty vote cell, column by column.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    InputFormatError
        If the table layout is not a voter column plus triples.

    Examples
    --------
        >>> from booktally import read_votes
        >>> votes = read_votes("ballots.csv")
        >>> print(votes[0].category, votes[0].raw_string)
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    table = read_ballot_table(file_path)
    if remove_duplicates:
        table, _ = remove_duplicate_rows(table)
    return extract_votes(table)


def harmonize(
    input_path: str | Path,
    *,
    output_dir: str | Path = "out",
    h_combined: float = 5.0,
    h_title: float = 3.0,
    h_author: float = 3.0,
    pre_overrides: str | Path | None = None,
    post_overrides: str | Path | None = None,
    known_matches: str | Path | None = None,
    remove_duplicates: bool = True,
    disable_clustering: bool = False,
    summary: bool = False,
    workers: int = 1,
) -> HarmonizeResult:
    """Harmonize the votes of a ballot table.

    Splits every vote into title and author, clusters near-identical
    entries, assigns a final title and author (or an explicit failure) to
    each vote and writes review tables to ``output_dir``.

    Parameters
    ----------
    input_path : str | Path
        Ballot table.
    output_dir : str | Path, optional
        Directory for outputs and the audit trail, by default "out".
    h_combined : float, optional
        Cut height for combined title/author clustering, by default 5.
    h_title : float, optional
        Cut height for title clustering, by default 3.
    h_author : float, optional
        Cut height for author clustering, by default 3.
    pre_overrides : str | Path | None, optional
        Regex rewrite table applied before splitting.
    post_overrides : str | Path | None, optional
        Replacement table applied to final values.
    known_matches : str | Path | None, optional
        Curated answers to check results against.
    remove_duplicates : bool, optional
        Drop identical ballot rows, by default True.
    disable_clustering : bool, optional
        Report votes as split, without fuzzy harmonization, by default False.
    summary : bool, optional
        Also write a per-category tally, by default False.
    workers : int, optional
        Threads for distance computation (-1 for all cores), by default 1.

    Returns
    -------
    HarmonizeResult
        Counts and output file paths.

    Raises
    ------
    FileNotFoundError
        If the input file does not exist.
    ConfigurationError
        If a parameter is invalid or an auxiliary file is missing.
    HarmonizeError
        If the run fails.

    Examples
    --------
        >>> from booktally import harmonize
        >>> result = harmonize("ballots.csv", output_dir="results", summary=True)
        >>> print(result.resolved_votes, result.unresolved_votes)
    """
    from booktally.engine import HarmonizeConfig, run_pipeline

    input_path_obj = Path(input_path)

    if not input_path_obj.exists():
        raise FileNotFoundError(f"Input path not found: {input_path}")

    config = HarmonizeConfig(
        h_combined=h_combined,
        h_title=h_title,
        h_author=h_author,
        pre_overrides=Path(pre_overrides) if pre_overrides is not None else None,
        post_overrides=Path(post_overrides) if post_overrides is not None else None,
        known_matches=Path(known_matches) if known_matches is not None else None,
        remove_duplicates=remove_duplicates,
        disable_clustering=disable_clustering,
        summary=summary,
        workers=workers,
        output_dir=Path(output_dir),
    )

    result = run_pipeline(input_path=input_path_obj, config=config)

    if not result.success:
        raise HarmonizeError(f"Harmonization failed: {result.error_message}", run_id=result.run_id)

    return result
