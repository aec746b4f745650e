"""Exception hierarchy for booktally.

Ambiguous or unresolvable votes are never exceptions; they are ordinary
``Failure`` resolutions. Exceptions are reserved for bad configuration and
unreadable input, and are raised before any vote is processed.
"""

__all__ = [
    "BooktallyError",
    "ConfigurationError",
    "OverrideFileError",
    "InputFormatError",
]


class BooktallyError(Exception):
    """Base class for all booktally errors."""


class ConfigurationError(BooktallyError, ValueError):
    """Raised for invalid parameters or unusable auxiliary files."""


class OverrideFileError(ConfigurationError):
    """Raised when an override or known-matches table is malformed.

    Parameters
    ----------
    message : str
        Error message.
    file : str | None, optional
        Offending file.
    line : int | None, optional
        1-based line number of the offending row.
    """

    def __init__(
        self,
        message: str,
        file: str | None = None,
        line: int | None = None,
    ) -> None:
        location = ""
        if file is not None:
            location = f" ({file}" + (f", line {line})" if line is not None else ")")
        super().__init__(message + location)
        self.file = file
        self.line = line


class InputFormatError(BooktallyError):
    """Raised when the ballot table cannot be interpreted."""
