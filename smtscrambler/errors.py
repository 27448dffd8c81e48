"""
Exception hierarchy.

Library code raises these; only the command-line entry point turns them
into a diagnostic on stderr and a non-zero exit status.
"""

from __future__ import annotations

from typing import Optional


class ScramblerError(Exception):
    """Base class for every error the scrambler reports to the user."""


class FatalConfigError(ScramblerError):
    """A configuration problem that ends the run immediately."""


class LogicAlreadySetError(FatalConfigError):
    def __init__(self, current: str, attempted: str) -> None:
        super().__init__(f"logic is already set to {current} (attempted {attempted})")
        self.current = current
        self.attempted = attempted


class LogicNotSetError(FatalConfigError):
    def __init__(self) -> None:
        super().__init__("logic has not been set")


class CoreFileFormatError(FatalConfigError):
    """The unsat-core keep file does not look like ``unsat (n1 n2 ...)``."""


class RankFileError(FatalConfigError):
    """The rank file cannot be read or holds a non-numeric token."""


class SplitRunError(FatalConfigError):
    """Assertions or declarations occur in more than one contiguous chunk."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind} in multiple chunks")
        self.kind = kind


class ParseError(ScramblerError):
    def __init__(self, message: str, line: Optional[int] = None) -> None:
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class InputError(ScramblerError):
    """The benchmark cannot be read or is not valid UTF-8."""
