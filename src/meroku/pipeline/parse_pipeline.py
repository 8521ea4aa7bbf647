"""Batch parsing of downloaded transcripts and rosters."""
from __future__ import annotations

from pathlib import Path
from threading import Event
from typing import Callable, Dict, List, Optional, Tuple
import logging
import re

from ..core.types import MemberList, Minutes, WorkingGroup
from ..database import Storage
from ..export import (
    WORKING_GROUPS_FILE,
    ExportError,
    load_working_groups,
    write_all_minutes_json,
    write_khcoder,
    write_member_list_json,
    write_minutes_json,
    write_speakers_csv,
)
from ..parsing import (
    MemberListParseError,
    MinutesParseError,
    load_member_list,
    load_minutes,
    load_scanned_minutes,
)
from ..resolution import resolve_speakers
from .events import PipelineEvent, ProgressCallback, notify

LOGGER = logging.getLogger(__name__)

HTML_DIR = "html"
SCANNED_DIR = "html_from_pdf"
MEMBER_LIST_DIR = "memberlist"
DOCUMENT_GLOB = "*.htm*"

_MEMBER_LIST_ORDER = re.compile(r"no([0-9]{2})")

MinutesLoader = Callable[..., Minutes]


class ParsePipeline:
    """Parse every transcript below a download directory and export the results.

    ``<root>/html`` holds regular HTML transcripts, ``<root>/html_from_pdf``
    transcripts converted from PDF and ``<root>/html/memberlist`` the rosters.
    """

    def __init__(
        self,
        *,
        parser: str = "html.parser",
        csv_encoding: str = "cp932",
        write_per_file_json: bool = True,
        storage: Optional[Storage] = None,
    ) -> None:
        self._parser = parser
        self._csv_encoding = csv_encoding
        self._write_per_file_json = write_per_file_json
        self._storage = storage

    def run(
        self,
        root_dir: Path,
        output_dir: Path,
        *,
        with_member_lists: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[Event] = None,
    ) -> List[Minutes]:
        """Run the parse workflow and return the parsed minutes in processing order."""

        output_dir.mkdir(parents=True, exist_ok=True)
        working_groups = self._load_working_groups(root_dir)
        minutes_list: List[Minutes] = []
        notify(progress_callback, PipelineEvent(kind="start", processed=0, message="Parse run started"))

        for path, loader in self._collect_sources(root_dir):
            if cancel_event and cancel_event.is_set():
                notify(
                    progress_callback,
                    PipelineEvent(kind="cancelled", processed=len(minutes_list), message="Parse run cancelled"),
                )
                return minutes_list
            minutes = self._parse_one(path, loader, output_dir, len(minutes_list), progress_callback)
            if minutes is not None:
                minutes_list.append(minutes)

        if with_member_lists:
            member_lists = self._load_member_lists(root_dir / HTML_DIR / MEMBER_LIST_DIR, output_dir, working_groups)
            self._resolve(minutes_list, member_lists, progress_callback)

        if self._storage is not None:
            for minutes in minutes_list:
                stored = self._storage.save_minutes(minutes)
                notify(
                    progress_callback,
                    PipelineEvent(
                        kind="stored",
                        processed=len(minutes_list),
                        source=minutes.source,
                        message=f"Persisted {stored} speeches",
                        speech_count=stored,
                    ),
                )

        self._export(minutes_list, working_groups, output_dir, progress_callback)
        notify(
            progress_callback,
            PipelineEvent(kind="finished", processed=len(minutes_list), message="Parse run finished"),
        )
        return minutes_list

    # --- steps ----------------------------------------------------------
    def _collect_sources(self, root_dir: Path) -> List[Tuple[Path, MinutesLoader]]:
        sources: List[Tuple[Path, MinutesLoader]] = []
        for directory, loader in ((root_dir / HTML_DIR, load_minutes), (root_dir / SCANNED_DIR, load_scanned_minutes)):
            if not directory.is_dir():
                continue
            sources.extend((path, loader) for path in sorted(directory.glob(DOCUMENT_GLOB)) if path.is_file())
        return sources

    def _parse_one(
        self,
        path: Path,
        loader: MinutesLoader,
        output_dir: Path,
        processed: int,
        progress_callback: Optional[ProgressCallback],
    ) -> Optional[Minutes]:
        LOGGER.info("Processing %s", path.name)
        try:
            minutes = loader(path, parser=self._parser)
        except MinutesParseError as exc:
            LOGGER.warning("Skipping transcript: %s", exc)
            notify(
                progress_callback,
                PipelineEvent(kind="error", processed=processed, source=path.name, message=str(exc)),
            )
            return None
        if self._write_per_file_json:
            write_minutes_json(minutes, output_dir / f"{path.name}.json")
        notify(
            progress_callback,
            PipelineEvent(
                kind="parsed",
                processed=processed + 1,
                source=minutes.source,
                message=f"Parsed {minutes.speech_count} speeches",
                speech_count=minutes.speech_count,
            ),
        )
        return minutes

    def _load_member_lists(
        self,
        directory: Path,
        output_dir: Path,
        working_groups: Dict[str, WorkingGroup],
    ) -> Dict[str, MemberList]:
        """Load the rosters keyed by working group order.

        Rosters sharing an order (e.g. successive terms) are merged in file
        name order.
        """

        member_lists: Dict[str, MemberList] = {}
        if not directory.is_dir():
            LOGGER.warning("No roster directory at %s", directory)
            return member_lists
        for path in sorted(directory.glob(DOCUMENT_GLOB)):
            match = _MEMBER_LIST_ORDER.search(path.name)
            if not match:
                LOGGER.warning("Roster %s has no working group order in its name", path.name)
                continue
            order = match.group(1)
            try:
                member_list = load_member_list(
                    path, working_group=working_groups.get("no" + order), parser=self._parser
                )
            except MemberListParseError as exc:
                LOGGER.warning("Skipping roster: %s", exc)
                continue
            write_member_list_json(member_list, output_dir / MEMBER_LIST_DIR / f"{path.stem}.json")
            existing = member_lists.get(order)
            if existing is not None:
                member_list = MemberList(
                    members=existing.members + member_list.members,
                    working_group=existing.working_group,
                )
            member_lists[order] = member_list
        return member_lists

    def _resolve(
        self,
        minutes_list: List[Minutes],
        member_lists: Dict[str, MemberList],
        progress_callback: Optional[ProgressCallback],
    ) -> None:
        for minutes in minutes_list:
            member_list = member_lists.get(minutes.working_group_order)
            if member_list is None:
                LOGGER.info("No roster for %s, speakers stay unresolved", minutes.source)
                continue
            failures = resolve_speakers(minutes, member_list)
            resolved = len(minutes.speakers) - len(failures)
            notify(
                progress_callback,
                PipelineEvent(
                    kind="resolved",
                    processed=len(minutes_list),
                    source=minutes.source,
                    message=f"Resolved {resolved} of {len(minutes.speakers)} speakers",
                ),
            )

    def _export(
        self,
        minutes_list: List[Minutes],
        working_groups: Dict[str, WorkingGroup],
        output_dir: Path,
        progress_callback: Optional[ProgressCallback],
    ) -> None:
        written = [
            write_all_minutes_json(minutes_list, output_dir),
            write_speakers_csv(minutes_list, output_dir, encoding=self._csv_encoding),
        ]
        if working_groups:
            try:
                written.append(write_khcoder(minutes_list, working_groups, output_dir))
            except ExportError as exc:
                LOGGER.warning("KH Coder export skipped: %s", exc)
                notify(
                    progress_callback,
                    PipelineEvent(kind="error", processed=len(minutes_list), message=str(exc)),
                )
        else:
            LOGGER.warning("No %s found, KH Coder export skipped", WORKING_GROUPS_FILE)
        for path in written:
            LOGGER.info("Wrote %s", path)
            notify(
                progress_callback,
                PipelineEvent(kind="exported", processed=len(minutes_list), source=path.name),
            )

    @staticmethod
    def _load_working_groups(root_dir: Path) -> Dict[str, WorkingGroup]:
        path = root_dir / WORKING_GROUPS_FILE
        if not path.exists():
            return {}
        try:
            return load_working_groups(path)
        except (OSError, ValueError, TypeError) as exc:
            LOGGER.warning("Cannot read %s: %s", path, exc)
            return {}


__all__ = ["ParsePipeline"]
