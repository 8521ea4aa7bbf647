"""Helpers shared by the HTML parsers."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Type, Union
import re

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup
from bs4.element import NavigableString, PreformattedString

from .errors import ParseError

Markup = Union[str, bytes]

DEFAULT_PARSER = "html.parser"

_LINE_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)
_WORKING_GROUP_FILE = re.compile(r"no([0-9]{2})wg([0-9]{3})")
_DATE_LINE = re.compile(r"^(?:[0-9０-９]+\s*[．.、]\s*)?日時(?:[\s　:：]+(?P<value>.*))?$")
_VENUE_LINE = re.compile(r"^(?:[0-9０-９]+\s*[．.、]\s*)?場所(?:[\s　:：]+(?P<value>.*))?$")


def make_soup(
    markup: Markup,
    source: str,
    *,
    parser: str = DEFAULT_PARSER,
    error: Type[ParseError] = ParseError,
) -> BeautifulSoup:
    """Parse ``markup``; byte input is decoded with BeautifulSoup's encoding detection."""

    try:
        return BeautifulSoup(markup, features=parser)
    except ParserRejectedMarkup as exc:
        raise error(source, f"markup rejected by {parser}: {exc}") from exc


def read_document(path: Path, *, error: Type[ParseError] = ParseError) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise error(path.name, f"cannot read file ({exc.strerror or exc})") from exc


def split_line_breaks(paragraph: Tag) -> List[str]:
    """Split the inner markup of ``paragraph`` on ``<br>`` markers."""

    return _LINE_BREAK.split(paragraph.decode_contents())


def working_group_info(source: str) -> Tuple[str, str]:
    """Return ``(order, id)`` encoded as ``no<2 digits>wg<3 digits>`` in a file name.

    Both values are empty strings when the name does not follow the pattern.
    """

    match = _WORKING_GROUP_FILE.search(Path(source).stem)
    if not match:
        return "", ""
    return match.group(1), match.group(2)


def strings_before(container: Tag, stop: Tag) -> Iterator[str]:
    """Yield the text nodes of ``container`` that precede ``stop`` in document order."""

    for node in container.descendants:
        if node is stop:
            return
        if isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            yield str(node)


def meeting_details(strings: Iterable[str]) -> Tuple[str, str]:
    """Best-effort lookup of the ``日時`` and ``場所`` entries of a meeting page.

    The label must be followed by whitespace or a colon. The value is either
    on the same line as the label or, when the label stands alone, on the next
    non-empty line. Callers pass only the text preceding the transcript.
    """

    found = {"date": "", "venue": ""}
    patterns = (("date", _DATE_LINE), ("venue", _VENUE_LINE))
    waiting_for: str | None = None
    for raw in strings:
        text = raw.strip()
        if not text:
            continue
        if waiting_for:
            found[waiting_for] = text
            waiting_for = None
            continue
        for key, pattern in patterns:
            if found[key]:
                continue
            match = pattern.match(text)
            if match:
                value = (match.group("value") or "").strip()
                if value:
                    found[key] = value
                else:
                    waiting_for = key
                break
        if found["date"] and found["venue"]:
            break
    return found["date"], found["venue"]


__all__ = [
    "DEFAULT_PARSER",
    "Markup",
    "make_soup",
    "meeting_details",
    "read_document",
    "split_line_breaks",
    "strings_before",
    "working_group_info",
]
