"""Append-only JSONL event log for harmonization runs."""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from booktally.audit.models import LogEvent
from booktally.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """Writes one JSON object per line to ``events.jsonl``.

    The file handle stays open for the lifetime of the logger and every
    event is flushed as soon as it is written.

    Attributes
    ----------
    run_id : str
        Run identifier stamped on every event.
    log_path : Path
        Destination file.
    current_stage : str | None
        Stage stamped on events that do not name one.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        self.run_id = run_id
        self.log_path = log_path
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        """Whether the log file handle is closed."""
        return self._file.closed

    def close(self) -> None:
        """Flush and close the log file."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        vote_id: str | None = None,
    ) -> None:
        """Write one event.

        Parameters
        ----------
        event_type : str
            Event type, e.g. "view_clustered".
        data : dict[str, Any] | None, optional
            Payload; must be JSON-serializable.
        level : str, optional
            "DEBUG", "INFO", "WARN" or "ERROR".
        stage : str | None, optional
            Stage name; defaults to ``current_stage``.
        vote_id : str | None, optional
            Vote the event concerns.
        """
        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data or {},
            stage=stage or self.current_stage,
            vote_id=vote_id,
        )
        json.dump(asdict(log_event), self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Log the start of a run with its configuration snapshot."""
        self.event("run_started", data={"command": command, "parameters": parameters})

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        votes_processed: int | None = None,
    ) -> None:
        """Log the end of a run.

        Parameters
        ----------
        status : str
            "success" or "failed".
        duration_seconds : float
            Wall time of the run.
        votes_processed : int | None, optional
            Votes that reached the output stage.
        """
        data: dict[str, Any] = {"status": status, "duration_seconds": duration_seconds}
        if votes_processed is not None:
            data["votes_processed"] = votes_processed
        self.event("run_finished", data=data)

    def stage_started(self, stage: str, expected_votes: int | None = None) -> None:
        """Log the start of a stage and make it the current stage."""
        self.current_stage = stage
        data: dict[str, Any] = {}
        if expected_votes is not None:
            data["expected_votes"] = expected_votes
        self.event("stage_started", data=data, stage=stage)

    def stage_finished(
        self,
        stage: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Log the end of a stage with its counters."""
        data: dict[str, Any] = {"duration_seconds": duration_seconds}
        if counters:
            data["counters"] = counters
        self.event("stage_finished", data=data, stage=stage)
        self.current_stage = None

    def record_flagged(
        self,
        vote_id: str,
        flag_name: str,
        reason_code: str,
        stage: str | None = None,
    ) -> None:
        """Log that a vote was flagged, e.g. left unresolved or overridden.

        Parameters
        ----------
        vote_id : str
            Flagged vote.
        flag_name : str
            Flag name, e.g. "unresolved" or "override".
        reason_code : str
            Machine-readable reason.
        stage : str | None, optional
            Stage name; defaults to the current stage.
        """
        self.event(
            "record_flagged",
            data={"flag_name": flag_name, "reason_code": reason_code},
            stage=stage,
            vote_id=vote_id,
        )

    def artifact_written(
        self,
        path: str,
        sha256: str,
        bytes_written: int | None = None,
        record_count: int | None = None,
    ) -> None:
        """Log that an output file was written."""
        data: dict[str, Any] = {"path": path, "sha256": sha256}
        if bytes_written is not None:
            data["bytes"] = bytes_written
        if record_count is not None:
            data["record_count"] = record_count
        self.event("artifact_written", data=data)

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        traceback: str | None = None,
    ) -> None:
        """Log an error that stopped the run."""
        data: dict[str, Any] = {"exception_class": exception_class, "message": message}
        if traceback is not None:
            data["traceback"] = traceback
        self.event("error", data=data, stage=stage, level="ERROR")
