"""Parser for transcripts published as regular HTML pages."""
from __future__ import annotations

from pathlib import Path
import logging

from ..core.types import Minutes
from .errors import MinutesParseError
from .markup import (
    DEFAULT_PARSER,
    Markup,
    make_soup,
    meeting_details,
    read_document,
    split_line_breaks,
    strings_before,
    working_group_info,
)
from .segmenter import SpeechSegmenter

LOGGER = logging.getLogger(__name__)

CONTENT_SELECTOR = "div#contentsMain"
HEADING_SELECTOR = "h2:-soup-contains('議事録', 'Minutes', 'minutes')"
PARAGRAPH_SELECTOR = f"{HEADING_SELECTOR} ~ p"


def parse_minutes(markup: Markup, source: str, *, parser: str = DEFAULT_PARSER) -> Minutes:
    """Split an HTML transcript into speeches.

    ``source`` is the file name of the document; it carries the working group
    order and id (``no03wg074-...htm``) and is used in error messages.
    """

    soup = make_soup(markup, source, parser=parser, error=MinutesParseError)
    region = soup.select_one(CONTENT_SELECTOR)
    if region is None:
        raise MinutesParseError(source, f"no {CONTENT_SELECTOR} content region")
    heading = region.select_one(HEADING_SELECTOR)
    if heading is None:
        raise MinutesParseError(source, "no transcript heading in content region")

    title = "".join(h1.get_text() for h1 in soup.find_all("h1")).strip()
    order, group_id = working_group_info(source)
    date, venue = meeting_details(strings_before(region, heading))

    segmenter = SpeechSegmenter(keep_preamble=True)
    for paragraph in region.select(PARAGRAPH_SELECTOR):
        for fragment in split_line_breaks(paragraph):
            segmenter.feed(fragment)
    speeches, speakers = segmenter.finish()

    minutes = Minutes(
        source=source,
        title=title,
        working_group=title.split("　")[0],
        working_group_order=order,
        working_group_id=group_id,
        date=date,
        venue=venue,
        speakers=speakers,
        speeches=speeches,
    )
    LOGGER.debug("Parsed %s speeches from %s", minutes.speech_count, source)
    return minutes


def load_minutes(path: Path, *, parser: str = DEFAULT_PARSER) -> Minutes:
    """Read and parse the transcript stored at ``path``."""

    path = Path(path)
    return parse_minutes(read_document(path, error=MinutesParseError), path.name, parser=parser)


__all__ = ["load_minutes", "parse_minutes"]
