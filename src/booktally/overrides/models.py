"""Override rules loaded from user-maintained TSV files."""

import re
from dataclasses import dataclass
from enum import StrEnum


class PostOverrideKey(StrEnum):
    """Which value a postprocessing override matches on.

    Attributes
    ----------
    RAW_ENTRY : str
        The vote exactly as submitted; replaces title and author.
    TITLE : str
        The current final title; replaces the title only.
    AUTHOR : str
        The current final author; replaces the author only.
    """

    RAW_ENTRY = "raw_entry"
    TITLE = "title"
    AUTHOR = "author"


@dataclass(frozen=True)
class PreOverride:
    """Regex substitution applied to every vote string before splitting.

    Attributes
    ----------
    pattern : re.Pattern[str]
        Compiled pattern.
    replacement : str
        Replacement; may use ``\\1`` style backreferences.
    line : int
        1-based line in the source file.
    """

    pattern: re.Pattern[str]
    replacement: str
    line: int

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


@dataclass(frozen=True)
class PostOverride:
    """Replacement of final values after resolution and casing.

    Attributes
    ----------
    key : PostOverrideKey
        Which value ``match`` is compared with.
    match : str
        Exact value to match.
    replacement_title : str | None
        New final title; None clears it (raw-entry rows only).
    replacement_author : str | None
        New final author; None clears it (raw-entry rows only).
    line : int
        1-based line in the source file.
    """

    key: PostOverrideKey
    match: str
    replacement_title: str | None
    replacement_author: str | None
    line: int
