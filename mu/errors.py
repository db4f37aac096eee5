"""
mu.errors
---------

This module defines the errors raised while parsing a deck.

Classes:
    ParsingErrorKind: Enum of the ways a deck can fail to parse.
    ParsingError: A parsing failure with its kind and line number.
"""

from __future__ import annotations
from enum import Enum


class ParsingErrorKind(Enum):
    """
    Enum representing what went wrong while parsing a deck.
    """

    ParseInt = "failed to parse integer"
    ParseFloat = "failed to parse float"
    UnknownSection = "unknown section"
    UnknownKey = "unknown key"
    MalformedPair = "not a proper key-value pair"
    WrongArity = "wrong number of items in the list (expected the number of scores)"
    UnknownUnit = "unknown unit"
    UnknownInheritTarget = "cannot inherit nonexistent settings"
    DuplicateSection = "configuring a tag multiple times"
    DuplicateCard = "the same card ID appears multiple times"
    EmptyDeck = "empty deck"
    InvalidPriority = "invalid priority value; must be 1-5"
    KeyOutsideSection = "key-value pair outside of any section"


class ParsingError(ValueError):
    """
    Raised when a deck could not be parsed.

    Attributes:
        kind: What went wrong.
        line: The 0-based number of the line the error was detected at, or None if
            the error has not been attributed to a line yet.
        message: A human-readable description.
    """

    kind: ParsingErrorKind
    line: int | None
    message: str

    def __init__(
        self,
        kind: ParsingErrorKind,
        message: str | None = None,
        line: int | None = None,
    ) -> None:
        self.kind = kind
        self.message = message if message is not None else kind.value
        self.line = line
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message}; at line {self.line}"


__all__ = ["ParsingError", "ParsingErrorKind"]
