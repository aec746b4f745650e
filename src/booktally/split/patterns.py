"""Compiled patterns recognizing title/author entry formats."""

import re

# Any Unicode letter.
_LETTER = r"[^\W\d_]"

# "(comment)" at the end or the start of an entry.
TRAILING_COMMENT_RE = re.compile(r"^(?P<text>.*?)\s*(?P<comment>\([^()]*\))\s*$", re.DOTALL)
LEADING_COMMENT_RE = re.compile(r"^\s*(?P<comment>\([^()]*\))\s*(?P<text>.*?)$", re.DOTALL)

# "TITLE by AUTHOR". Greedy title: the last " by " splits.
TITLE_BY_AUTHOR_RE = re.compile(
    rf"^\s*(?P<title>.+{_LETTER})\s+(?i:by)\s+(?P<author>.+{_LETTER})\s*$",
    re.DOTALL,
)

# "TITLE - AUTHOR" or "TITLE / AUTHOR". Greedy title: the last separator splits.
TITLE_DASH_AUTHOR_RE = re.compile(
    rf"^\s*(?P<title>.+{_LETTER})\s*[-/]\s*(?P<author>.+{_LETTER})\s*$",
    re.DOTALL,
)
