"""Review tables written at the end of a run."""

from booktally.output.writer import (
    HARMONIZED_JSONL,
    HARMONIZED_TSV,
    TALLY_TSV,
    UNRESOLVED_TSV,
    TallyRow,
    build_tally,
    harmonized_table,
    write_jsonl_atomic,
    write_outputs,
    write_tsv_atomic,
)

__all__ = [
    "HARMONIZED_JSONL",
    "HARMONIZED_TSV",
    "TALLY_TSV",
    "UNRESOLVED_TSV",
    "TallyRow",
    "build_tally",
    "harmonized_table",
    "write_jsonl_atomic",
    "write_outputs",
    "write_tsv_atomic",
]
