"""Typed errors raised while parsing and validating SPN layouts and traces."""
from __future__ import annotations

from typing import List


class SPNLayoutError(ValueError):
    """Base class for recoverable layout field errors."""


class InvalidNumberToken(SPNLayoutError):
    pass


class EmptyToken(SPNLayoutError):
    pass


class SizeMismatch(SPNLayoutError):
    pass


class OutOfRange(SPNLayoutError):
    pass


class DuplicatePosition(SPNLayoutError):
    pass


class NotBijective(SPNLayoutError):
    pass


class IndivisibleBlock(SPNLayoutError):
    pass


class MalformedRoundLayout(SPNLayoutError):
    pass


class MissingOrDuplicateBits(SPNLayoutError):
    pass


class RoundLayoutErrors(SPNLayoutError):
    """Every problem found across all lines of a round-layout text."""

    def __init__(self, errors: List[SPNLayoutError]):
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))


class TraceParseError(ValueError):
    """Base class for errors that abort a whole trace ingestion."""


class UnevenLineLengths(TraceParseError):
    pass


class InvalidCharacter(TraceParseError):
    pass


class NoColumns(TraceParseError):
    pass
