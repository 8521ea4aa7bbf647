"""Parser for transcripts converted from PDF to HTML.

Converted documents have no usable heading structure, carry inline
formatting residue (underlines, spans) and split sentences at page breaks.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator
import html
import logging
import re

from bs4 import Tag

from ..core.types import Minutes
from .errors import MinutesParseError
from .markup import (
    DEFAULT_PARSER,
    Markup,
    make_soup,
    meeting_details,
    read_document,
    split_line_breaks,
    working_group_info,
)
from .segmenter import SPEAKER_TAG, SpeechSegmenter

LOGGER = logging.getLogger(__name__)

TITLE_CANDIDATE_SELECTOR = "p:nth-child(-n+3)"
_MEETING_TITLE = re.compile(r".+ワーキンググループ.+[ 0-9　０-９]+回.+")
_RESIDUAL_MARKUP = re.compile(r"""<("[^"]*"|'[^']*'|[^'">])*>""")


def strip_markup(text: str) -> str:
    """Remove tags left over by the conversion and unescape entities."""

    return html.unescape(_RESIDUAL_MARKUP.sub("", text)).strip()


def _preamble_lines(paragraphs: Iterable[Tag]) -> Iterator[str]:
    """Yield paragraph lines up to the first speaker tag."""

    for paragraph in paragraphs:
        for line in paragraph.get_text("\n").splitlines():
            if SPEAKER_TAG.match(line.strip()):
                return
            yield line


def parse_scanned_minutes(markup: Markup, source: str, *, parser: str = DEFAULT_PARSER) -> Minutes:
    """Split a PDF-converted transcript into speeches, stitching page breaks.

    The title is the first paragraph matching the meeting-title pattern among
    the first three children of each parent element, in document order, so a
    later container can supply it when the leading paragraphs do not match.
    Date and venue are read from the text before the first speaker tag.
    """

    soup = make_soup(markup, source, parser=parser, error=MinutesParseError)
    paragraphs = soup.find_all("p")
    if not paragraphs:
        raise MinutesParseError(source, "document contains no paragraphs")

    title = ""
    for candidate in soup.select(TITLE_CANDIDATE_SELECTOR):
        text = candidate.get_text().strip()
        if _MEETING_TITLE.search(text):
            title = text
            break
    if not title:
        LOGGER.debug("No meeting title found in %s", source)

    order, group_id = working_group_info(source)
    date, venue = meeting_details(_preamble_lines(paragraphs))

    segmenter = SpeechSegmenter(keep_preamble=False, stitch_page_breaks=True, cleaner=strip_markup)
    for paragraph in paragraphs:
        for fragment in split_line_breaks(paragraph):
            segmenter.feed(fragment)
    speeches, speakers = segmenter.finish()

    return Minutes(
        source=source,
        title=title,
        working_group=title.split("（")[0],
        working_group_order=order,
        working_group_id=group_id,
        date=date,
        venue=venue,
        speakers=speakers,
        speeches=speeches,
    )


def load_scanned_minutes(path: Path, *, parser: str = DEFAULT_PARSER) -> Minutes:
    path = Path(path)
    return parse_scanned_minutes(read_document(path, error=MinutesParseError), path.name, parser=parser)


__all__ = ["load_scanned_minutes", "parse_scanned_minutes", "strip_markup"]
