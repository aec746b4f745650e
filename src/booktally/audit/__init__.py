"""Audit trail for harmonization runs.

Main Components
---------------
- RunContext: run lifecycle, stages and outputs
- AuditLogger: JSONL event log (``events.jsonl``)
- ManifestWriter: run manifest (``run.json``)
"""

from booktally.audit.context import RunContext
from booktally.audit.helpers import generate_run_id
from booktally.audit.logger import AuditLogger
from booktally.audit.manifest import ManifestWriter
from booktally.audit.models import ArtifactInfo, BallotInfo

__all__ = [
    "ArtifactInfo",
    "AuditLogger",
    "BallotInfo",
    "ManifestWriter",
    "RunContext",
    "generate_run_id",
]
