"""Run lifecycle: one event log and one manifest per harmonization run."""

import sys
import traceback
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from booktally.audit.helpers import (
    RESULT_DEPENDENCIES,
    generate_run_id,
    get_dependency_versions,
    get_package_version,
    get_platform_info,
    get_python_version,
)
from booktally.audit.logger import AuditLogger
from booktally.audit.manifest import ManifestWriter
from booktally.audit.models import (
    ArtifactInfo,
    BallotInfo,
    CommandInfo,
    EnvironmentInfo,
    ErrorInfo,
    StageInfo,
)
from booktally.utils import calculate_file_sha256, elapsed_seconds, get_iso_timestamp

__all__ = ["RunContext"]


class RunContext:
    """Ties the event log and the manifest to the stages of one run.

    Use :meth:`start` to create the output directory, open the log and
    record ``run_started``; call :meth:`finish` (or leave the ``with``
    block) to close the log and write ``run.json``.

    Attributes
    ----------
    run_id : str
        Run identifier.
    output_dir : Path
        Directory holding ``events.jsonl``, ``run.json``, ``artifacts/``
        and ``reports/``.
    audit_logger : AuditLogger
        Event log.
    manifest_writer : ManifestWriter
        Manifest builder.
    """

    def __init__(
        self,
        run_id: str,
        output_dir: Path,
        audit_logger: AuditLogger,
        manifest_writer: ManifestWriter,
    ) -> None:
        self.run_id = run_id
        self.output_dir = output_dir
        self.audit_logger = audit_logger
        self.manifest_writer = manifest_writer
        self.start_time = datetime.now(UTC)
        self._stage_starts: dict[str, datetime] = {}
        self._finished = False

    @classmethod
    def start(
        cls,
        output_dir: Path,
        parameters: dict[str, Any],
        command_argv: list[str] | None = None,
    ) -> "RunContext":
        """Open a new run under ``output_dir``.

        Parameters
        ----------
        output_dir : Path
            Run output directory; created if missing.
        parameters : dict[str, Any]
            JSON-safe configuration snapshot.
        command_argv : list[str] | None, optional
            Invocation arguments; defaults to ``sys.argv``.

        Returns
        -------
        RunContext
            Started run.
        """
        run_id = generate_run_id()

        output_dir.mkdir(parents=True, exist_ok=True)
        (output_dir / "artifacts").mkdir(exist_ok=True)
        (output_dir / "reports").mkdir(exist_ok=True)

        command = CommandInfo(argv=list(command_argv or sys.argv), cwd=Path.cwd().name or None)
        environment = EnvironmentInfo(
            python_version=get_python_version(),
            platform=get_platform_info(),
            package_version=get_package_version(),
            dependencies=get_dependency_versions(RESULT_DEPENDENCIES),
        )

        audit_logger = AuditLogger(run_id=run_id, log_path=output_dir / "events.jsonl")
        manifest_writer = ManifestWriter(
            run_id=run_id,
            output_dir=output_dir,
            command=command,
            environment=environment,
            parameters=parameters,
        )
        audit_logger.run_started(command=command.argv, parameters=parameters)

        return cls(
            run_id=run_id,
            output_dir=output_dir,
            audit_logger=audit_logger,
            manifest_writer=manifest_writer,
        )

    def set_ballot(self, ballot: BallotInfo) -> None:
        """Record the ballot table that was read."""
        self.manifest_writer.set_ballot(ballot)
        self.audit_logger.event(
            "ballot_read",
            data={
                "name": ballot.name,
                "sha256": ballot.sha256,
                "rows": ballot.rows,
                "duplicate_rows": ballot.duplicate_rows,
                "votes": ballot.votes,
            },
        )

    def start_stage(self, stage_name: str, expected_votes: int | None = None) -> None:
        """Open a stage in both the log and the manifest."""
        self._stage_starts[stage_name] = datetime.now(UTC)
        self.manifest_writer.add_stage(StageInfo(name=stage_name, started_at=get_iso_timestamp()))
        self.audit_logger.stage_started(stage=stage_name, expected_votes=expected_votes)

    def finish_stage(self, stage_name: str, counters: dict[str, int] | None = None) -> None:
        """Close a stage with its counters.

        Raises
        ------
        ValueError
            If the stage was not started.
        """
        started = self._stage_starts.pop(stage_name, None)
        if started is None:
            raise ValueError(f"Stage not started: {stage_name}")

        duration = elapsed_seconds(started)
        self.manifest_writer.finish_stage(stage_name, duration, counters)
        self.audit_logger.stage_finished(stage=stage_name, duration_seconds=duration, counters=counters)

    def register_artifact(self, path: Path, record_count: int | None = None) -> ArtifactInfo:
        """Hash a written file and list it among the run outputs.

        Parameters
        ----------
        path : Path
            File inside ``output_dir``.
        record_count : int | None, optional
            Rows written.

        Returns
        -------
        ArtifactInfo
            Registered artifact.
        """
        artifact = ArtifactInfo(
            path=path.relative_to(self.output_dir).as_posix(),
            sha256=calculate_file_sha256(path),
            bytes=path.stat().st_size,
            record_count=record_count,
        )
        self.manifest_writer.add_output(artifact)
        self.audit_logger.artifact_written(
            path=artifact.path,
            sha256=artifact.sha256,
            bytes_written=artifact.bytes,
            record_count=record_count,
        )
        return artifact

    def record_error(
        self,
        exception: BaseException,
        stage: str | None = None,
        include_traceback: bool = False,
    ) -> None:
        """Record an error in the log and the manifest."""
        tb = None
        if include_traceback:
            tb = "".join(
                traceback.format_exception(type(exception), exception, exception.__traceback__)
            )

        stage = stage or self.audit_logger.current_stage
        self.manifest_writer.add_error(
            ErrorInfo(
                timestamp=get_iso_timestamp(),
                exception_class=type(exception).__name__,
                message=str(exception),
                stage=stage,
                traceback=tb,
            )
        )
        self.audit_logger.error(
            exception_class=type(exception).__name__,
            message=str(exception),
            stage=stage,
            traceback=tb,
        )

    def finish(self, status: str = "success", votes_processed: int | None = None) -> None:
        """Close the log and write ``run.json``.

        The log is closed before it is hashed so its digest in the manifest
        covers every event. Calling this twice is a no-op.
        """
        if self._finished:
            return
        self._finished = True

        duration = elapsed_seconds(self.start_time)
        self.audit_logger.run_finished(
            status=status,
            duration_seconds=duration,
            votes_processed=votes_processed,
        )
        self.audit_logger.close()

        events_path = self.audit_logger.log_path
        self.manifest_writer.add_output(
            ArtifactInfo(
                path=events_path.relative_to(self.output_dir).as_posix(),
                sha256=calculate_file_sha256(events_path),
                bytes=events_path.stat().st_size,
            )
        )
        self.manifest_writer.finish(status=status, duration_seconds=duration)

    def __enter__(self) -> "RunContext":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None:
            self.record_error(exc_val, include_traceback=True)
            self.finish(status="failed")
        else:
            self.finish(status="success")
