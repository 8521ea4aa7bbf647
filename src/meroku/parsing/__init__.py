"""Parsers for transcript and roster pages."""
from __future__ import annotations

from .errors import MemberListParseError, MinutesParseError, ParseError
from .memberlist import load_member_list, parse_member_list
from .minutes import load_minutes, parse_minutes
from .scanned import load_scanned_minutes, parse_scanned_minutes
from .segmenter import SegmenterState, SpeechSegmenter

__all__ = [
    "MemberListParseError",
    "MinutesParseError",
    "ParseError",
    "SegmenterState",
    "SpeechSegmenter",
    "load_member_list",
    "load_minutes",
    "load_scanned_minutes",
    "parse_member_list",
    "parse_minutes",
    "parse_scanned_minutes",
]
