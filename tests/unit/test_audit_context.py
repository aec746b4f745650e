"""Tests for run context, manifest writer and environment helpers."""

import json
import re
from pathlib import Path

import pytest

from booktally.audit import BallotInfo, ManifestWriter, RunContext, generate_run_id
from booktally.audit.helpers import get_dependency_versions
from booktally.audit.models import CommandInfo, EnvironmentInfo


def _read_manifest(output_dir: Path) -> dict:
    """Read and parse run.json."""
    with (output_dir / "run.json").open() as f:
        return json.load(f)


def _read_events(output_dir: Path) -> list[dict]:
    """Read and parse events.jsonl."""
    with (output_dir / "events.jsonl").open() as f:
        return [json.loads(line) for line in f if line.strip()]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_generate_run_id_format() -> None:
    """Test run ids are timestamp plus random suffix and unique."""
    run_id = generate_run_id()

    assert re.fullmatch(r"\d{8}T\d{6}\.\d{6}Z__[0-9a-f]{8}", run_id)
    assert generate_run_id() != run_id


@pytest.mark.unit
def test_dependency_versions_unknown_package() -> None:
    """Test missing distributions are reported as unknown."""
    versions = get_dependency_versions(["definitely-not-installed-booktally-dep"])

    assert versions == {"definitely-not-installed-booktally-dep": "unknown"}


# ---------------------------------------------------------------------------
# Manifest writer
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_manifest_writer_stage_not_found(tmp_path: Path) -> None:
    """Test finishing an unknown stage raises ValueError."""
    writer = ManifestWriter(
        run_id="r",
        output_dir=tmp_path,
        command=CommandInfo(argv=["booktally"]),
        environment=EnvironmentInfo(
            python_version="3.12.0", platform="Linux", package_version="0.4.0", dependencies={}
        ),
        parameters={},
    )

    with pytest.raises(ValueError, match="Stage not found"):
        writer.finish_stage("ghost", 0.1)


@pytest.mark.unit
def test_manifest_writer_writes_atomically(tmp_path: Path) -> None:
    """Test finish() writes run.json and leaves no temp file."""
    writer = ManifestWriter(
        run_id="r",
        output_dir=tmp_path,
        command=CommandInfo(argv=["booktally"]),
        environment=EnvironmentInfo(
            python_version="3.12.0", platform="Linux", package_version="0.4.0", dependencies={}
        ),
        parameters={"h_title": 3.0},
    )

    assert writer.to_dict()["status"] == "partial"
    writer.finish(status="success", duration_seconds=0.2)

    data = _read_manifest(tmp_path)
    assert data["status"] == "success"
    assert data["parameters"] == {"h_title": 3.0}
    assert data["ballot"] is None
    assert not (tmp_path / "run.tmp").exists()


# ---------------------------------------------------------------------------
# Run context
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_context_start_creates_structure(tmp_path: Path) -> None:
    """Test start() creates dirs, events file, and sets run_id."""
    output_dir = tmp_path / "output"
    run = RunContext.start(output_dir=output_dir, parameters={"k": 1})

    assert "__" in run.run_id
    assert (output_dir / "artifacts").is_dir()
    assert (output_dir / "reports").is_dir()
    assert (output_dir / "events.jsonl").exists()

    run.finish(status="success")


@pytest.mark.unit
def test_context_stage_lifecycle(tmp_path: Path) -> None:
    """Test start_stage then finish_stage records timing and counters."""
    run = RunContext.start(output_dir=tmp_path / "output", parameters={})

    run.start_stage("split", expected_votes=50)
    run.finish_stage("split", counters={"matched": 48, "unmatched": 2})

    stage = run.manifest_writer.manifest.stages[0]
    assert stage.name == "split"
    assert stage.finished_at is not None
    assert stage.duration_seconds is not None
    assert stage.duration_seconds >= 0
    assert stage.counters["unmatched"] == 2

    run.finish(status="success")


@pytest.mark.unit
def test_context_finish_stage_not_started_raises(tmp_path: Path) -> None:
    """Test finishing a stage that was never started raises ValueError."""
    run = RunContext.start(output_dir=tmp_path / "output", parameters={})

    with pytest.raises(ValueError, match="Stage not started"):
        run.finish_stage("ghost")

    run.finish(status="failed")


@pytest.mark.unit
def test_context_register_artifact(tmp_path: Path) -> None:
    """Test artifacts are hashed with paths relative to the run directory."""
    output_dir = tmp_path / "output"
    run = RunContext.start(output_dir=output_dir, parameters={})
    path = output_dir / "artifacts" / "tally.tsv"
    path.write_text("category\ttitle\tauthor\tvotes\n", encoding="utf-8")

    artifact = run.register_artifact(path, record_count=0)
    run.finish(status="success")

    assert artifact.path == "artifacts/tally.tsv"
    assert artifact.sha256.startswith("sha256:")
    assert artifact.bytes == path.stat().st_size
    outputs = {a["path"]: a for a in _read_manifest(output_dir)["outputs"]}
    assert outputs["artifacts/tally.tsv"]["record_count"] == 0


@pytest.mark.unit
def test_context_set_ballot(tmp_path: Path) -> None:
    """Test the ballot is recorded in the manifest and the log."""
    output_dir = tmp_path / "output"
    run = RunContext.start(output_dir=output_dir, parameters={})

    run.set_ballot(
        BallotInfo(
            name="ballots.csv",
            delimiter=",",
            encoding="utf-8",
            bytes=120,
            sha256="sha256:" + "0" * 64,
            rows=4,
            duplicate_rows=1,
            votes=9,
            categories=["Best Novel"],
        )
    )
    run.finish(status="success")

    assert _read_manifest(output_dir)["ballot"]["votes"] == 9
    ballot_events = [e for e in _read_events(output_dir) if e["event"] == "ballot_read"]
    assert ballot_events[0]["data"]["duplicate_rows"] == 1


@pytest.mark.unit
def test_context_error_recording(tmp_path: Path) -> None:
    """Test record_error adds error to manifest and events."""
    run = RunContext.start(output_dir=tmp_path / "output", parameters={})

    run.record_error(ValueError("bad input"), stage="read_ballot", include_traceback=True)

    error = run.manifest_writer.manifest.errors[0]
    assert error.exception_class == "ValueError"
    assert error.message == "bad input"
    assert error.stage == "read_ballot"
    assert error.traceback is not None

    run.finish(status="failed")


@pytest.mark.unit
def test_context_finish_is_idempotent(tmp_path: Path) -> None:
    """Test a second finish() does not rewrite the manifest or log."""
    output_dir = tmp_path / "output"
    run = RunContext.start(output_dir=output_dir, parameters={})

    run.finish(status="failed")
    run.finish(status="success")

    assert _read_manifest(output_dir)["status"] == "failed"
    assert [e["event"] for e in _read_events(output_dir)].count("run_finished") == 1


@pytest.mark.unit
def test_context_manager_success(tmp_path: Path) -> None:
    """Test context manager writes success manifest on clean exit."""
    output_dir = tmp_path / "output"

    with RunContext.start(output_dir=output_dir, parameters={}) as run:
        run.start_stage("split")
        run.finish_stage("split", counters={"votes": 10})

    data = _read_manifest(output_dir)
    assert data["status"] == "success"
    assert data["duration_seconds"] >= 0


@pytest.mark.unit
def test_context_manager_exception(tmp_path: Path) -> None:
    """Test context manager writes failed manifest on exception."""
    output_dir = tmp_path / "output"

    with pytest.raises(RuntimeError):
        with RunContext.start(output_dir=output_dir, parameters={}):
            raise RuntimeError("boom")

    data = _read_manifest(output_dir)
    assert data["status"] == "failed"
    assert len(data["errors"]) == 1
    assert data["errors"][0]["exception_class"] == "RuntimeError"


@pytest.mark.unit
def test_context_full_workflow(tmp_path: Path) -> None:
    """Test events.jsonl has all lifecycle events and run.json is complete."""
    output_dir = tmp_path / "output"

    run = RunContext.start(
        output_dir=output_dir,
        parameters={"h_combined": 5.0},
        command_argv=["booktally", "harmonize"],
    )
    run.start_stage("resolve", expected_votes=100)
    run.finish_stage("resolve", counters={"success": 90, "failure": 10})
    run.finish(status="success", votes_processed=100)

    events = _read_events(output_dir)
    assert [e["event"] for e in events] == [
        "run_started",
        "stage_started",
        "stage_finished",
        "run_finished",
    ]
    assert all(e["run_id"] == run.run_id for e in events)
    assert events[-1]["data"]["votes_processed"] == 100

    data = _read_manifest(output_dir)
    assert data["manifest_version"] == "1.0.0"
    assert data["parameters"]["h_combined"] == 5.0
    assert data["command"]["argv"] == ["booktally", "harmonize"]
    assert set(data["environment"]["dependencies"]) == {"rapidfuzz", "scikit-learn", "numpy", "click"}
    assert data["stages"][0]["counters"]["failure"] == 10
    assert "events.jsonl" in [a["path"] for a in data["outputs"]]
