"""Harmonization run configuration and result dataclasses."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from booktally.clustering import ClusteringConfig
from booktally.exceptions import ConfigurationError


@dataclass
class HarmonizeConfig:
    """Configuration for one harmonization run.

    Attributes
    ----------
    h_combined : float
        Cut height for the combined title/author view (default: 5).
    h_title : float
        Cut height for the title-only view (default: 3).
    h_author : float
        Cut height for the author-only view (default: 3).
    pre_overrides : Path | None
        ``pattern<TAB>replacement`` table applied before splitting.
    post_overrides : Path | None
        5-column table applied to final values.
    known_matches : Path | None
        ``entry<TAB>title<TAB>author`` table to check results against.
    remove_duplicates : bool
        Drop ballot rows identical to an earlier row.
    disable_clustering : bool
        Use every query as its own consensus label.
    summary : bool
        Also write the per-category tally.
    workers : int
        Threads for distance computation; -1 uses all cores.
    output_dir : Path
        Directory for the run's outputs.
    """

    h_combined: float = 5.0
    h_title: float = 3.0
    h_author: float = 3.0
    pre_overrides: Path | None = None
    post_overrides: Path | None = None
    known_matches: Path | None = None
    remove_duplicates: bool = True
    disable_clustering: bool = False
    summary: bool = False
    workers: int = 1
    output_dir: Path = field(default_factory=lambda: Path("out"))

    def __post_init__(self) -> None:
        """Coerce paths and validate."""
        # Thresholds and workers are checked by ClusteringConfig.
        _ = self.clustering

        for name in ("pre_overrides", "post_overrides", "known_matches"):
            value = getattr(self, name)
            if value is None:
                continue
            path = Path(value)
            if not path.is_file():
                raise ConfigurationError(f"{name} file not found: {path}")
            setattr(self, name, path)

        self.output_dir = Path(self.output_dir)

    @property
    def clustering(self) -> ClusteringConfig:
        """Clustering parameters for the three views."""
        return ClusteringConfig(
            h_combined=self.h_combined,
            h_title=self.h_title,
            h_author=self.h_author,
            workers=self.workers,
            enabled=not self.disable_clustering,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dictionary."""
        data = asdict(self)
        for name in ("pre_overrides", "post_overrides", "known_matches", "output_dir"):
            value = data[name]
            data[name] = str(value) if value is not None else None
        return data


@dataclass
class HarmonizeResult:
    """Summary of a harmonization run.

    Attributes
    ----------
    success : bool
        Whether every stage completed.
    total_rows : int
        Ballot rows read.
    duplicate_rows : int
        Rows dropped as exact duplicates.
    total_votes : int
        Votes processed.
    resolved_votes : int
        Votes with a final title and author.
    unresolved_votes : int
        Votes left for manual review.
    overrides_applied : int
        Votes changed by postprocessing overrides.
    known_matches : dict[str, int] | None
        Known-match check counts by status (agree, disagree, unresolved),
        or None when no known-match table was given.
    output_files : dict[str, str]
        Artifact name to path.
    run_id : str | None
        Identifier of the run in the audit trail.
    error_message : str | None
        Error message if the run failed.
    """

    success: bool
    total_rows: int = 0
    duplicate_rows: int = 0
    total_votes: int = 0
    resolved_votes: int = 0
    unresolved_votes: int = 0
    overrides_applied: int = 0
    known_matches: dict[str, int] | None = None
    output_files: dict[str, str] = field(default_factory=dict)
    run_id: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
