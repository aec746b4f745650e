"""User overrides applied before splitting and after resolution."""

from booktally.overrides.applier import apply_post_overrides, apply_pre_overrides
from booktally.overrides.loader import load_post_overrides, load_pre_overrides, read_tsv_rows
from booktally.overrides.models import PostOverride, PostOverrideKey, PreOverride

__all__ = [
    "PostOverride",
    "PostOverrideKey",
    "PreOverride",
    "apply_post_overrides",
    "apply_pre_overrides",
    "load_post_overrides",
    "load_pre_overrides",
    "read_tsv_rows",
]
