"""Exceptions raised by the transcript and roster parsers."""
from __future__ import annotations


class ParseError(ValueError):
    """Base class for documents that cannot be parsed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class MinutesParseError(ParseError):
    """Raised when a transcript document is structurally malformed."""


class MemberListParseError(ParseError):
    """Raised when a roster document cannot be read."""


__all__ = ["MemberListParseError", "MinutesParseError", "ParseError"]
