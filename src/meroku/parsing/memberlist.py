"""Parser for working group roster pages (委員名簿)."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import logging

from ..core.labels import normalize_label
from ..core.types import MemberList, Person, WorkingGroup
from .errors import MemberListParseError
from .markup import DEFAULT_PARSER, Markup, make_soup, read_document

LOGGER = logging.getLogger(__name__)

DEFAULT_ROLE = "委員"
ROW_SELECTOR = "#contentsMain table tr"


def parse_member_list(
    markup: Markup,
    *,
    source: str = "<memberlist>",
    working_group: Optional[WorkingGroup] = None,
    parser: str = DEFAULT_PARSER,
) -> MemberList:
    """Build a :class:`MemberList` from the roster table of ``markup``.

    Every table row with at least one data cell becomes one :class:`Person`.
    The header cell holds the role (``委員`` when empty), the first data cell
    the name and the second data cell the affiliation.
    """

    soup = make_soup(markup, source, parser=parser, error=MemberListParseError)
    members: List[Person] = []
    for row in soup.select(ROW_SELECTOR):
        cells = row.find_all("td")
        if not cells:
            continue
        header = row.find("th")
        role = header.get_text().strip() if header is not None else ""
        members.append(
            Person.create(
                name=normalize_label(cells[0].get_text()),
                role=role or DEFAULT_ROLE,
                affiliation=cells[1].get_text() if len(cells) > 1 else "",
            )
        )
    if not members:
        LOGGER.warning("No members found in %s", source)
    return MemberList(members=members, working_group=working_group)


def load_member_list(
    path: Path,
    *,
    working_group: Optional[WorkingGroup] = None,
    parser: str = DEFAULT_PARSER,
) -> MemberList:
    path = Path(path)
    return parse_member_list(
        read_document(path, error=MemberListParseError),
        source=path.name,
        working_group=working_group,
        parser=parser,
    )


__all__ = ["DEFAULT_ROLE", "load_member_list", "parse_member_list"]
