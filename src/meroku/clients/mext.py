"""HTTP client for the council pages on the MEXT website."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urljoin
import logging
import re

import httpx
from bs4 import BeautifulSoup

from ..core.types import MemberList, WorkingGroup
from ..parsing.memberlist import parse_member_list

LOGGER = logging.getLogger(__name__)

WORKING_GROUP_LINKS = ".shingi_block ul li a"
MINUTES_LIST_LINK_TEXT = "これまでの議事要旨・議事録・配付資料の一覧はこちら"
MINUTES_LINK_TEXT = "議事録"
MEMBER_LIST_LINK_TEXT = "委員名簿"

_WORKING_GROUP_ID = re.compile(r"chukyo3/(\d{3})/index\.htm")


class MextClientError(RuntimeError):
    """Raised when a page cannot be fetched or lacks the expected links."""


def working_group_id_from_url(url: str) -> str:
    """Extract the three digit working group id from its index page URL."""

    match = _WORKING_GROUP_ID.search(url)
    return match.group(1) if match else ""


class MextClient:
    """Scraper for working groups, their minutes and their rosters."""

    def __init__(
        self,
        base_url: str,
        index_path: str,
        *,
        timeout: float = 30.0,
        max_retries: int = 3,
        parser: str = "html.parser",
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._index_url = urljoin(self._base_url + "/", index_path.lstrip("/"))
        self._max_retries = max(1, max_retries)
        self._parser = parser
        self._client = httpx.Client(timeout=timeout, follow_redirects=True, transport=transport)

    @property
    def index_url(self) -> str:
        return self._index_url

    # --- public API -----------------------------------------------------
    def list_working_groups(self) -> Dict[str, WorkingGroup]:
        """Return every working group on the council index keyed by order (``no00``).

        Minutes and roster URLs are collected for each group; groups whose
        pages lack those links are kept with empty lists.
        """

        soup = self._get_soup(self._index_url)
        working_groups: Dict[str, WorkingGroup] = {}
        for position, link in enumerate(soup.select(WORKING_GROUP_LINKS)):
            href = link.get("href")
            working_group = WorkingGroup(
                order=f"no{position:02d}",
                name=link.get_text().strip(),
                url=urljoin(self._index_url, href) if href else "",
            )
            working_group.id = working_group_id_from_url(working_group.url)
            try:
                self.minutes_urls(working_group)
            except MextClientError as exc:
                LOGGER.warning("Could not list minutes of %s (%s): %s", working_group.name, working_group.id, exc)
            try:
                self.member_list_urls(working_group)
            except MextClientError as exc:
                LOGGER.warning("Could not list rosters of %s (%s): %s", working_group.name, working_group.id, exc)
            working_groups[working_group.order] = working_group
        return working_groups

    def minutes_list_url(self, working_group: WorkingGroup) -> str:
        """Find the link to the page listing all minutes of ``working_group``."""

        soup = self._get_soup(working_group.url)
        link = soup.select_one(f"a:-soup-contains('{MINUTES_LIST_LINK_TEXT}')")
        if link is None or not link.get("href"):
            raise MextClientError(f"No minutes list link on {working_group.url}")
        working_group.minutes_list_url = urljoin(working_group.url, link["href"])
        return working_group.minutes_list_url

    def minutes_urls(self, working_group: WorkingGroup) -> List[str]:
        list_url = self.minutes_list_url(working_group)
        soup = self._get_soup(list_url)
        urls = [
            urljoin(list_url, link["href"])
            for link in soup.select(f"a:-soup-contains('{MINUTES_LINK_TEXT}')")
            if link.get_text() == MINUTES_LINK_TEXT and link.get("href")
        ]
        working_group.minutes_urls = urls
        return urls

    def member_list_urls(self, working_group: WorkingGroup) -> List[str]:
        soup = self._get_soup(working_group.url)
        links = [
            link
            for link in soup.select(f"a:-soup-contains('{MEMBER_LIST_LINK_TEXT}')")
            if link.get("href")
        ]
        if not links:
            raise MextClientError(f"No roster link on {working_group.url}")
        working_group.member_list_urls = [urljoin(working_group.url, link["href"]) for link in links]
        return working_group.member_list_urls

    def fetch_member_list(self, url: str, *, working_group: Optional[WorkingGroup] = None) -> MemberList:
        response = self._get(url)
        return parse_member_list(response.content, source=url, working_group=working_group, parser=self._parser)

    def download(self, url: str, path: Path) -> bool:
        """Save the page at ``url`` to ``path``; failures are logged and reported as ``False``."""

        try:
            response = self._get(url)
        except MextClientError as exc:
            LOGGER.warning("Download failed: %s", exc)
            return False
        path.write_bytes(response.content)
        return True

    def close(self) -> None:
        """Close the underlying HTTP client."""

        self._client.close()

    def __enter__(self) -> "MextClient":  # pragma: no cover - trivial
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - trivial
        self.close()

    # --- helpers --------------------------------------------------------
    def _get_soup(self, url: str) -> BeautifulSoup:
        return BeautifulSoup(self._get(url).content, features=self._parser)

    def _get(self, url: str) -> httpx.Response:
        if not url:
            raise MextClientError("Empty URL")
        last_exc: Optional[Exception] = None
        for attempt in range(1, self._max_retries + 1):
            try:
                response = self._client.get(url)
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as exc:
                last_exc = exc
                status = exc.response.status_code
                LOGGER.warning("MEXT returned status %s for %s (attempt %s/%s)", status, url, attempt, self._max_retries)
                if status < 500:
                    raise MextClientError(f"{url}: {status} {exc.response.reason_phrase}") from exc
            except httpx.HTTPError as exc:
                last_exc = exc
                LOGGER.warning("HTTP error while requesting %s: %s", url, exc)
        raise MextClientError(f"Failed to request {url}") from last_exc


__all__ = ["MextClient", "MextClientError", "working_group_id_from_url"]
