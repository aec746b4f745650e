"""Writers for the review tables produced by a harmonization run.

Every file is written to a temporary sibling and renamed into place, so a
reader never sees a half-written table.
"""

import csv
import json
import os
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from booktally.decision import Outcome
from booktally.models import HARMONIZED_FIELDS, HarmonizedVote

HARMONIZED_TSV = "harmonized_votes.tsv"
HARMONIZED_JSONL = "harmonized_votes.jsonl"
UNRESOLVED_TSV = "unresolved_votes.tsv"
TALLY_TSV = "tally.tsv"

TALLY_FIELDS = ("category", "title", "author", "votes")


@dataclass(frozen=True)
class TallyRow:
    """Vote count for one resolved book in one category."""

    category: str
    title: str
    author: str
    votes: int


def _atomic_path(path: Path) -> Path:
    return path.with_name(path.name + ".tmp")


def write_tsv_atomic(path: Path, rows: Iterable[Sequence[Any]]) -> int:
    """Write rows as TAB-separated text; None becomes an empty cell.

    Returns
    -------
    int
        Number of rows written, header included.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = _atomic_path(path)
    count = 0
    with temp_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter="\t", lineterminator="\n")
        for row in rows:
            writer.writerow(["" if cell is None else cell for cell in row])
            count += 1
        f.flush()
        os.fsync(f.fileno())
    temp_path.replace(path)
    return count


def write_jsonl_atomic(path: Path, records: Iterable[dict[str, Any]]) -> int:
    """Write one JSON object per line with sorted keys.

    Returns
    -------
    int
        Number of records written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = _atomic_path(path)
    count = 0
    with temp_path.open("w", encoding="utf-8") as f:
        for record in records:
            json.dump(record, f, sort_keys=True, ensure_ascii=False)
            f.write("\n")
            count += 1
        f.flush()
        os.fsync(f.fileno())
    temp_path.replace(path)
    return count


def harmonized_table(rows: Sequence[HarmonizedVote]) -> list[list[Any]]:
    """Header plus one row per vote, columns in field order."""
    table: list[list[Any]] = [list(HARMONIZED_FIELDS)]
    for row in rows:
        values = row.to_dict()
        table.append([_tsv_value(values[name]) for name in HARMONIZED_FIELDS])
    return table


def _tsv_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def build_tally(rows: Sequence[HarmonizedVote]) -> list[TallyRow]:
    """Count resolved votes per category and (title, author).

    Sorted by category, then by descending count, then by title and author.
    Unresolved votes are not counted.
    """
    counts = Counter(
        (row.category, row.final_title, row.final_author)
        for row in rows
        if row.outcome == Outcome.SUCCESS
    )
    tally = [
        TallyRow(category=category, title=title, author=author, votes=votes)
        for (category, title, author), votes in counts.items()
    ]
    tally.sort(key=lambda t: (t.category, -t.votes, t.title, t.author))
    return tally


def write_outputs(
    rows: Sequence[HarmonizedVote],
    artifacts_dir: Path,
    summary: bool = False,
) -> dict[str, tuple[Path, int]]:
    """Write every review table for a finished run.

    Parameters
    ----------
    rows : Sequence[HarmonizedVote]
        One row per vote, in vote order.
    artifacts_dir : Path
        Destination directory.
    summary : bool, optional
        Also write the per-category tally.

    Returns
    -------
    dict[str, tuple[Path, int]]
        File name to (path, data rows written).
    """
    written: dict[str, tuple[Path, int]] = {}

    path = artifacts_dir / HARMONIZED_TSV
    write_tsv_atomic(path, harmonized_table(rows))
    written[HARMONIZED_TSV] = (path, len(rows))

    path = artifacts_dir / HARMONIZED_JSONL
    written[HARMONIZED_JSONL] = (path, write_jsonl_atomic(path, (row.to_dict() for row in rows)))

    unresolved = [row for row in rows if row.outcome == Outcome.FAILURE]
    path = artifacts_dir / UNRESOLVED_TSV
    write_tsv_atomic(path, harmonized_table(unresolved))
    written[UNRESOLVED_TSV] = (path, len(unresolved))

    if summary:
        tally = build_tally(rows)
        path = artifacts_dir / TALLY_TSV
        write_tsv_atomic(
            path,
            [TALLY_FIELDS, *((t.category, t.title, t.author, t.votes) for t in tally)],
        )
        written[TALLY_TSV] = (path, len(tally))

    return written
