"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from openpyxl import Workbook

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from booktally.models import Vote, calculate_vote_id  # noqa: E402

_TEST_DIGEST = "sha256:" + "0" * 64


@pytest.fixture
def make_votes() -> Callable[..., list[Vote]]:
    """Factory turning plain strings into votes with real vote ids.

    Each string becomes one vote in a single column, one row per string,
    as the ballot reader would produce them.
    """

    def _factory(
        entries: Sequence[str],
        *,
        category: str = "Best Novel",
        column_index: int = 1,
    ) -> list[Vote]:
        return [
            Vote(
                vote_id=calculate_vote_id(_TEST_DIGEST, row, column_index),
                voter=f"voter{row + 1}",
                category=category,
                row_index=row,
                column_index=column_index,
                raw_string=entry,
                original_string=entry,
            )
            for row, entry in enumerate(entries)
        ]

    return _factory


@pytest.fixture
def write_ballot(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a ballot table to ``tmp_path``.

    ``categories`` maps a category name to one list of up to three votes per
    voter. Empty strings leave the cell empty. A ``name`` ending in ``.xlsx``
    writes a workbook; ``.csv`` writes comma-separated text; anything else
    writes TAB-separated text.
    """

    def _factory(
        categories: dict[str, list[list[str]]],
        *,
        name: str = "ballots.tsv",
        voters: Sequence[str] | None = None,
    ) -> Path:
        n_rows = max(len(rows) for rows in categories.values())
        voters = list(voters) if voters is not None else [f"voter{i + 1}" for i in range(n_rows)]

        header = ["Voter"]
        for category in categories:
            header.extend(f"{category} - Vote {i}" for i in (1, 2, 3))

        table = [header]
        for row in range(n_rows):
            cells = [voters[row]]
            for rows in categories.values():
                picks = rows[row] if row < len(rows) else []
                cells.extend((list(picks) + ["", "", ""])[:3])
            table.append(cells)

        path = tmp_path / name
        if name.endswith(".xlsx"):
            workbook = Workbook()
            sheet = workbook.active
            for cells in table:
                sheet.append([cell or None for cell in cells])
            workbook.save(path)
            return path

        delimiter = "," if name.endswith(".csv") else "\t"
        path.write_text("\n".join(delimiter.join(cells) for cells in table) + "\n", encoding="utf-8")
        return path

    return _factory


@pytest.fixture
def write_tsv(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a headerless TSV (override or known-match table)."""

    def _factory(rows: Sequence[Sequence[str]], name: str = "table.tsv") -> Path:
        path = tmp_path / name
        path.write_text("".join("\t".join(row) + "\n" for row in rows), encoding="utf-8")
        return path

    return _factory
