"""Cosmetic casing of harmonized labels.

Titles are always re-cased. Authors are only re-cased when they were typed
entirely in capitals: mixed-case author strings such as "AB Jones" carry
initials that title-casing would destroy, so they are left alone. The guard
cannot tell "AB JONES" from a shouted name and renders it "Ab Jones"; that
is an accepted limitation.
"""

import re

from booktally.normalize._helpers import (
    ALL_CAPS_RE,
    WORD_RE,
    bare_word,
    capitalize_word,
)

# Lowercase in titles unless first.
SMALL_WORDS: frozenset[str] = frozenset(
    {
        "a",
        "an",
        "and",
        "are",
        "as",
        "at",
        "be",
        "but",
        "by",
        "en",
        "for",
        "from",
        "if",
        "in",
        "into",
        "is",
        "nor",
        "not",
        "of",
        "on",
        "or",
        "per",
        "so",
        "the",
        "to",
        "v",
        "via",
        "vs",
        "with",
    }
)

# Capitalized wherever they stand alone.
FORCED_CAPITAL_WORDS: frozenset[str] = frozenset({"i", "you", "will", "that", "after", "than"})


def title_case(text: str | None) -> str | None:
    """Aggressive title casing for harmonized titles.

    The text is lowercased, then every word is capitalized except the small
    words in ``SMALL_WORDS`` (which stay lowercase unless they open the
    title). Words in ``FORCED_CAPITAL_WORDS`` are always capitalized.

    Parameters
    ----------
    text : str | None
        Title to re-case.

    Returns
    -------
    str | None
        Re-cased title, or None for None.

    Examples
    --------
        >>> title_case("the CALL of the wild")
        'The Call of the Wild'
        >>> title_case("all that you can't leave behind")
        "All That You Can't Leave Behind"
    """
    if text is None:
        return None

    position = 0

    def _recase(match: re.Match[str]) -> str:
        nonlocal position
        word = match.group(0)
        core = bare_word(word)
        first = position == 0
        position += 1
        if core in FORCED_CAPITAL_WORDS or first or core not in SMALL_WORDS:
            return capitalize_word(word)
        return word

    return WORD_RE.sub(_recase, text.lower())


def author_case(text: str | None) -> str | None:
    """Re-case an author only when it is entirely uppercase letters and spaces.

    Parameters
    ----------
    text : str | None
        Author to re-case.

    Returns
    -------
    str | None
        ``"URSULA K LE GUIN"`` becomes ``"Ursula K Le Guin"``; any value
        containing lowercase letters, digits or punctuation is returned
        unchanged.
    """
    if text is None or not ALL_CAPS_RE.match(text):
        return text
    return WORD_RE.sub(lambda m: capitalize_word(m.group(0)), text.lower())
