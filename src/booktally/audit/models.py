"""Dataclasses for the event log and the run manifest."""

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "ArtifactInfo",
    "BallotInfo",
    "CommandInfo",
    "EnvironmentInfo",
    "ErrorInfo",
    "LogEvent",
    "ManifestData",
    "StageInfo",
]


@dataclass
class CommandInfo:
    """How the run was invoked.

    Attributes
    ----------
    argv : list[str]
        Command-line arguments.
    cwd : str | None
        Basename of the working directory.
    """

    argv: list[str]
    cwd: str | None = None


@dataclass
class EnvironmentInfo:
    """Interpreter, platform and library versions of the run.

    Attributes
    ----------
    python_version : str
        Python version, e.g. "3.12.3".
    platform : str
        System, release and machine joined by dashes.
    package_version : str
        Installed booktally version.
    dependencies : dict[str, str]
        Versions of the libraries that affect results.
    """

    python_version: str
    platform: str
    package_version: str
    dependencies: dict[str, str] = field(default_factory=dict)


@dataclass
class BallotInfo:
    """The ballot table a run read.

    Attributes
    ----------
    name : str
        File name.
    delimiter : str | None
        Field delimiter used, "," or "\\t"; None for workbooks.
    encoding : str | None
        Detected text encoding; None for workbooks.
    bytes : int
        File size.
    sha256 : str
        Digest with "sha256:" prefix; also seeds vote ids.
    rows : int
        Data rows read, before duplicate removal.
    duplicate_rows : int
        Rows dropped as exact duplicates.
    votes : int
        Non-empty vote cells.
    categories : list[str]
        Category names in column order.
    """

    name: str
    delimiter: str | None
    encoding: str | None
    bytes: int
    sha256: str
    rows: int = 0
    duplicate_rows: int = 0
    votes: int = 0
    categories: list[str] = field(default_factory=list)


@dataclass
class ArtifactInfo:
    """A file written by the run.

    Attributes
    ----------
    path : str
        Path relative to the output directory.
    sha256 : str
        Digest with "sha256:" prefix.
    bytes : int | None
        File size.
    record_count : int | None
        Rows written, when the file is tabular.
    """

    path: str
    sha256: str
    bytes: int | None = None
    record_count: int | None = None


@dataclass
class StageInfo:
    """Timing and counters of one pipeline stage."""

    name: str
    started_at: str
    counters: dict[str, int] = field(default_factory=dict)
    finished_at: str | None = None
    duration_seconds: float | None = None


@dataclass
class ErrorInfo:
    """An error that stopped the run."""

    timestamp: str
    exception_class: str
    message: str
    stage: str | None = None
    traceback: str | None = None


@dataclass
class ManifestData:
    """Content of ``run.json``.

    ``status`` starts as "partial" and becomes "success" or "failed" when
    the run finishes.
    """

    manifest_version: str
    run_id: str
    created_at: str
    status: str
    package_version: str
    command: CommandInfo
    environment: EnvironmentInfo
    parameters: dict[str, Any]
    ballot: BallotInfo | None = None
    stages: list[StageInfo] = field(default_factory=list)
    outputs: list[ArtifactInfo] = field(default_factory=list)
    finished_at: str | None = None
    duration_seconds: float | None = None
    errors: list[ErrorInfo] = field(default_factory=list)


@dataclass
class LogEvent:
    """One line of ``events.jsonl``.

    Attributes
    ----------
    ts : str
        UTC timestamp with microseconds.
    run_id : str
        Run identifier.
    level : str
        "DEBUG", "INFO", "WARN" or "ERROR".
    event : str
        Event type, e.g. "stage_started".
    data : dict[str, Any]
        Event payload.
    stage : str | None
        Stage active when the event was written.
    vote_id : str | None
        Vote the event concerns, if any.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any]
    stage: str | None = None
    vote_id: str | None = None
