"""Text helpers and compiled regex patterns for normalization."""

import re
import unicodedata

PUNCT_RE = re.compile(r"[^\w\s]+")
WORD_RE = re.compile(r"\S+")
ALL_CAPS_RE = re.compile(r"^[A-Z ]*$")
FIRST_LETTER_RE = re.compile(r"[^\W\d_]")


def strip_accents(text: str) -> str:
    """Remove diacritical marks for cross-locale matching.

    Parameters
    ----------
    text : str
        Input text with potential diacritics.

    Returns
    -------
    str
        Text with diacritical marks removed.
    """
    nfd = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in nfd if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def normalize_text_for_matching(text: str) -> str:
    """Full text normalization before edit-distance comparison.

    Applies NFKC, casefold, accent stripping, punctuation removal and
    whitespace collapsing, so that casing and punctuation variants of the
    same entry compare as equal.

    Parameters
    ----------
    text : str
        Raw query string.

    Returns
    -------
    str
        Normalized text ready for matching.
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    text = text.casefold()
    text = strip_accents(text)
    text = PUNCT_RE.sub(" ", text)
    return " ".join(text.split())


def capitalize_word(word: str) -> str:
    """Uppercase the first letter of ``word``, skipping leading punctuation."""
    match = FIRST_LETTER_RE.search(word)
    if match is None:
        return word
    i = match.start()
    return word[:i] + word[i].upper() + word[i + 1 :]


def bare_word(word: str) -> str:
    """Strip surrounding punctuation from a token, e.g. ``"(the,"`` -> ``"the"``."""
    return word.strip("\"'()[]{}.,:;!?")
