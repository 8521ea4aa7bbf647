"""Download of working group minutes and rosters from the MEXT website."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional
import logging
import re

from ..clients import MextClient
from ..core.types import DownloadReport, WorkingGroup
from ..export import WORKING_GROUPS_FILE, save_download_report, write_working_groups
from .events import PipelineEvent, ProgressCallback, notify

LOGGER = logging.getLogger(__name__)

_WORKING_GROUP_ID = re.compile(r"^[0-9]{3}$")


def download_file_name(working_group: WorkingGroup, url: str) -> str:
    """Name a downloaded page ``<order>wg<id>-<basename>`` (e.g. ``no03wg074-1234.htm``)."""

    basename = url.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
    return f"{working_group.order}wg{working_group.id}-{basename}"


class DownloadPipeline:
    """Fetch the working group index and save the selected groups' pages."""

    def __init__(self, *, client: MextClient) -> None:
        self._client = client

    def run(
        self,
        download_dir: Path,
        *,
        working_group_id: Optional[str] = None,
        download_all: bool = False,
        with_member_lists: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[DownloadReport]:
        """Download minutes (and optionally rosters) and return one report per batch.

        ``working_group_id`` selects a single group by its three digit id;
        ``download_all`` selects every group. Without either only the working
        group list is saved.
        """

        if working_group_id is not None and not _WORKING_GROUP_ID.match(working_group_id):
            raise ValueError(f"{working_group_id} is not a working group id")

        download_dir.mkdir(parents=True, exist_ok=True)
        notify(progress_callback, PipelineEvent(kind="start", processed=0, message="Download run started"))

        working_groups = self._client.list_working_groups()
        write_working_groups(working_groups, download_dir / WORKING_GROUPS_FILE)

        if download_all:
            targets = list(working_groups.values())
        elif working_group_id is not None:
            targets = [group for group in working_groups.values() if group.id == working_group_id]
            if not targets:
                raise ValueError(f"No working group with id {working_group_id}")
        else:
            targets = []

        reports: List[DownloadReport] = []
        for processed, working_group in enumerate(targets, start=1):
            if with_member_lists:
                reports.append(
                    self._download_batch(
                        working_group,
                        working_group.member_list_urls,
                        download_dir / "html" / "memberlist",
                        download_dir,
                    )
                )
            report = self._download_batch(working_group, working_group.minutes_urls, download_dir / "html", download_dir)
            reports.append(report)
            notify(
                progress_callback,
                PipelineEvent(
                    kind="downloaded",
                    processed=processed,
                    source=working_group.id,
                    message=f"Downloaded {len(report.downloaded)} minutes of {working_group.name}",
                ),
            )

        notify(progress_callback, PipelineEvent(kind="finished", processed=len(targets), message="Download run finished"))
        return reports

    def _download_batch(
        self,
        working_group: WorkingGroup,
        urls: Iterable[str],
        target_dir: Path,
        report_dir: Path,
    ) -> DownloadReport:
        target_dir.mkdir(parents=True, exist_ok=True)
        report = DownloadReport()
        for url in urls:
            path = target_dir / download_file_name(working_group, url)
            if self._client.download(url, path):
                report.downloaded.append(url)
            else:
                report.failed.append(url)
        if report.failed:
            LOGGER.warning(
                "%s pages of %s (%s) could not be downloaded", len(report.failed), working_group.name, working_group.id
            )
        save_download_report(report, report_dir)
        return report


__all__ = ["DownloadPipeline", "download_file_name"]
