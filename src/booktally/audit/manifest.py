"""Builder for the ``run.json`` manifest."""

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any

from booktally.audit.models import (
    ArtifactInfo,
    BallotInfo,
    CommandInfo,
    EnvironmentInfo,
    ErrorInfo,
    ManifestData,
    StageInfo,
)
from booktally.utils import get_iso_timestamp

__all__ = ["MANIFEST_VERSION", "ManifestWriter"]

MANIFEST_VERSION = "1.0.0"


class ManifestWriter:
    """Accumulates run metadata and writes it to ``run.json`` atomically.

    Attributes
    ----------
    manifest : ManifestData
        Manifest being built.
    manifest_path : Path
        Destination file.
    """

    def __init__(
        self,
        run_id: str,
        output_dir: Path,
        command: CommandInfo,
        environment: EnvironmentInfo,
        parameters: dict[str, Any],
    ) -> None:
        self.manifest_path = output_dir / "run.json"
        self.manifest = ManifestData(
            manifest_version=MANIFEST_VERSION,
            run_id=run_id,
            created_at=get_iso_timestamp(),
            status="partial",
            package_version=environment.package_version,
            command=command,
            environment=environment,
            parameters=parameters,
        )
        self._stages: dict[str, StageInfo] = {}

    def set_ballot(self, ballot: BallotInfo) -> None:
        self.manifest.ballot = ballot

    def add_stage(self, stage: StageInfo) -> None:
        self.manifest.stages.append(stage)
        self._stages[stage.name] = stage

    def finish_stage(
        self,
        stage_name: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Stamp a stage's end time, duration and counters.

        Raises
        ------
        ValueError
            If the stage was never added.
        """
        stage = self._stages.get(stage_name)
        if stage is None:
            raise ValueError(f"Stage not found: {stage_name}")
        stage.finished_at = get_iso_timestamp()
        stage.duration_seconds = duration_seconds
        if counters:
            stage.counters.update(counters)

    def add_output(self, artifact: ArtifactInfo) -> None:
        self.manifest.outputs.append(artifact)

    def add_error(self, error: ErrorInfo) -> None:
        self.manifest.errors.append(error)

    def finish(self, status: str, duration_seconds: float) -> None:
        """Set the final status and write the manifest.

        Parameters
        ----------
        status : str
            "success" or "failed".
        duration_seconds : float
            Wall time of the run.
        """
        self.manifest.status = status
        self.manifest.finished_at = get_iso_timestamp()
        self.manifest.duration_seconds = duration_seconds
        self._write_atomic()

    def _write_atomic(self) -> None:
        temp_path = self.manifest_path.with_suffix(".tmp")
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        temp_path.replace(self.manifest_path)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self.manifest)
