"""Tests for CLI module."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from booktally.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Provide Click test CLI runner."""
    return CliRunner()


@pytest.fixture
def ballot(write_ballot: Callable[..., Path]) -> Path:
    """Ballot with one resolvable title and one unresolvable entry."""
    return write_ballot(
        {
            "Best Novel": [
                ["the great gatsby - fitzgerald", "ASK THE DUST"],
                ["the great gatsby - fitzgerald"],
                ["The Great Gatsby by fitzgerald"],
            ]
        }
    )


# ---------------------------------------------------------------------------
# Top-level CLI
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_cli_version_flag(runner: CliRunner) -> None:
    """Test --version flag outputs version string."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "booktally" in result.output


@pytest.mark.unit
def test_cli_help(runner: CliRunner) -> None:
    """Test --help output lists commands."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "harmonize" in result.output
    assert "split" in result.output


@pytest.mark.unit
def test_cli_invalid_command(runner: CliRunner) -> None:
    """Test invalid command returns non-zero exit code."""
    result = runner.invoke(cli, ["invalid-command"])

    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# harmonize command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_harmonize_help(runner: CliRunner) -> None:
    """Test harmonize command help lists the thresholds."""
    result = runner.invoke(cli, ["harmonize", "--help"])

    assert result.exit_code == 0
    assert "--h-combined" in result.output
    assert "--post-overrides" in result.output


@pytest.mark.integration
def test_harmonize_writes_outputs(runner: CliRunner, ballot: Path, tmp_path: Path) -> None:
    """Test harmonize writes review tables and reports counts."""
    output_dir = tmp_path / "out"

    result = runner.invoke(cli, ["harmonize", str(ballot), "-o", str(output_dir), "--summary"])

    assert result.exit_code == 0, result.output
    assert "Harmonized 4 votes (3 resolved, 1 for review)" in result.output
    assert (output_dir / "artifacts" / "harmonized_votes.tsv").exists()
    assert (output_dir / "artifacts" / "unresolved_votes.tsv").exists()
    assert (output_dir / "artifacts" / "tally.tsv").exists()
    assert json.loads((output_dir / "run.json").read_text())["status"] == "success"


@pytest.mark.integration
def test_harmonize_verbose(runner: CliRunner, ballot: Path, tmp_path: Path) -> None:
    """Test verbose mode reports counts and output paths."""
    result = runner.invoke(cli, ["harmonize", str(ballot), "-o", str(tmp_path / "out"), "-v"])

    assert result.exit_code == 0
    assert "Unresolved: 1" in result.output
    assert "harmonized_votes.jsonl" in result.output


@pytest.mark.unit
def test_harmonize_missing_input(runner: CliRunner, tmp_path: Path) -> None:
    """Test a missing input is rejected by argument validation."""
    result = runner.invoke(cli, ["harmonize", str(tmp_path / "missing.csv")])

    assert result.exit_code != 0


@pytest.mark.unit
def test_harmonize_invalid_threshold(runner: CliRunner, ballot: Path, tmp_path: Path) -> None:
    """Test a non-positive threshold is reported as invalid configuration."""
    result = runner.invoke(
        cli, ["harmonize", str(ballot), "-o", str(tmp_path / "out"), "--h-title", "0"]
    )

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


@pytest.mark.unit
def test_harmonize_bad_override_file(
    runner: CliRunner, ballot: Path, write_tsv: Callable[..., Path], tmp_path: Path
) -> None:
    """Test a malformed override table fails the run with its line number."""
    overrides = write_tsv([["", "", "", "Dune", "Frank Herbert"]], name="post.tsv")

    result = runner.invoke(
        cli,
        ["harmonize", str(ballot), "-o", str(tmp_path / "out"), "--post-overrides", str(overrides)],
    )

    assert result.exit_code == 1
    assert "Harmonization failed" in result.output
    assert "line 1" in result.output


@pytest.mark.integration
def test_harmonize_post_override(
    runner: CliRunner, ballot: Path, write_tsv: Callable[..., Path], tmp_path: Path
) -> None:
    """Test a post override resolves the leftover vote."""
    overrides = write_tsv([["ASK THE DUST", "", "", "Ask the Dust", "John Fante"]], name="post.tsv")

    result = runner.invoke(
        cli,
        ["harmonize", str(ballot), "-o", str(tmp_path / "out"), "--post-overrides", str(overrides)],
    )

    assert result.exit_code == 0, result.output
    assert "(4 resolved, 0 for review)" in result.output


# ---------------------------------------------------------------------------
# split command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_split_command(runner: CliRunner) -> None:
    """Test split prints the kind and parts of each entry."""
    result = runner.invoke(cli, ["split", "Dune by Frank Herbert (reread)", "ASK THE DUST"])

    assert result.exit_code == 0
    assert "matched_by_keyword" in result.output
    assert "title:   Dune" in result.output
    assert "author:  Frank Herbert" in result.output
    assert "comment: (reread)" in result.output
    assert "unmatched" in result.output


@pytest.mark.unit
def test_split_requires_entries(runner: CliRunner) -> None:
    """Test split without arguments is a usage error."""
    result = runner.invoke(cli, ["split"])

    assert result.exit_code != 0
