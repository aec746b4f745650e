"""Harmonization pipeline orchestration."""

from booktally.engine.config import HarmonizeConfig, HarmonizeResult
from booktally.engine.runner import assemble_rows, normalize_case, run_pipeline

__all__ = [
    "HarmonizeConfig",
    "HarmonizeResult",
    "assemble_rows",
    "normalize_case",
    "run_pipeline",
]
