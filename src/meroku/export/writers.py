"""Serialisation of parsed minutes, rosters and download reports."""
from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
import csv
import json
import logging

from ..core.types import DownloadReport, MemberList, Minutes, Person, Speaker, Speech, WorkingGroup

LOGGER = logging.getLogger(__name__)

ALL_MINUTES_FILE = "all.json"
SPEAKER_CSV_FILE = "all_speaker.csv"
KH_CODER_FILE = "all_khcoder.txt"
WORKING_GROUPS_FILE = "working-groups.json"

SPEAKER_CSV_COLUMNS = (
    "WorkingGroupOrder",
    "WorkingGroupID",
    "Title",
    "Speaker.Label",
    "Speaker.ResolutionScore",
    "Person.ID",
    "Person.Label",
    "Person.Name",
    "Person.Role",
    "Person.Affiliation",
)


class ExportError(RuntimeError):
    """Raised when the data cannot be written in the requested format."""


# --- structured (JSON) form ---------------------------------------------
def person_to_dict(person: Person) -> Dict[str, str]:
    return asdict(person)


def minutes_to_dict(minutes: Minutes) -> Dict[str, Any]:
    """Serialise ``minutes``; speeches refer to their speaker by label."""

    return {
        "source": minutes.source,
        "title": minutes.title,
        "working_group": minutes.working_group,
        "working_group_order": minutes.working_group_order,
        "working_group_id": minutes.working_group_id,
        "date": minutes.date,
        "venue": minutes.venue,
        "speech_count": minutes.speech_count,
        "speakers": {
            label: {
                "label": speaker.label,
                "resolution_score": speaker.resolution_score,
                "person": person_to_dict(speaker.person) if speaker.person else None,
            }
            for label, speaker in minutes.speakers.items()
        },
        "speeches": [
            {
                "speaker": speech.speaker.label if speech.speaker else None,
                "utterances": list(speech.utterances),
            }
            for speech in minutes.speeches
        ],
    }


def minutes_from_dict(data: Mapping[str, Any]) -> Minutes:
    """Rebuild :class:`Minutes` from :func:`minutes_to_dict` output.

    Speeches share the speaker objects of the rebuilt speaker map, and
    speakers resolved to the same person id share one :class:`Person`.
    """

    persons: Dict[str, Person] = {}
    speakers: Dict[str, Speaker] = {}
    for label, entry in (data.get("speakers") or {}).items():
        person = None
        if entry.get("person"):
            person_data = entry["person"]
            person = persons.setdefault(person_data["id"], Person(**person_data))
        speakers[label] = Speaker(
            label=entry.get("label", label),
            resolution_score=float(entry.get("resolution_score", 0.0)),
            person=person,
        )
    speeches: List[Speech] = []
    for entry in data.get("speeches") or []:
        label = entry.get("speaker")
        if label is not None and label not in speakers:
            raise ValueError(f"Speech refers to unknown speaker {label!r}")
        speeches.append(
            Speech(
                speaker=speakers[label] if label is not None else None,
                utterances=list(entry.get("utterances") or []),
            )
        )
    return Minutes(
        source=data.get("source", ""),
        title=data.get("title", ""),
        working_group=data.get("working_group", ""),
        working_group_order=data.get("working_group_order", ""),
        working_group_id=data.get("working_group_id", ""),
        date=data.get("date", ""),
        venue=data.get("venue", ""),
        speakers=speakers,
        speeches=speeches,
    )


def member_list_to_dict(member_list: MemberList) -> Dict[str, Any]:
    working_group = member_list.working_group
    return {
        "working_group": asdict(working_group) if working_group else None,
        "members": [person_to_dict(member) for member in member_list.members],
    }


def write_json(data: Any, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf8") as fh:
        json.dump(data, fh, ensure_ascii=False, indent=4)
        fh.write("\n")
    return path


def write_minutes_json(minutes: Minutes, path: Path) -> Path:
    return write_json(minutes_to_dict(minutes), path)


def write_all_minutes_json(minutes_list: Sequence[Minutes], output_dir: Path) -> Path:
    return write_json([minutes_to_dict(minutes) for minutes in minutes_list], output_dir / ALL_MINUTES_FILE)


def load_minutes_json(path: Path) -> List[Minutes]:
    """Load minutes written by :func:`write_all_minutes_json` or :func:`write_minutes_json`."""

    with path.open("r", encoding="utf8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = [data]
    return [minutes_from_dict(entry) for entry in data]


def write_member_list_json(member_list: MemberList, path: Path) -> Path:
    return write_json(member_list_to_dict(member_list), path)


# --- working groups -----------------------------------------------------
def write_working_groups(working_groups: Mapping[str, WorkingGroup], path: Path) -> Path:
    return write_json({order: asdict(group) for order, group in working_groups.items()}, path)


def load_working_groups(path: Path) -> Dict[str, WorkingGroup]:
    with path.open("r", encoding="utf8") as fh:
        data = json.load(fh)
    return {order: WorkingGroup(**entry) for order, entry in data.items()}


# --- tabular and text forms ---------------------------------------------
def _format_score(score: float) -> str:
    return f"{score:.6g}"


def speaker_rows(minutes_list: Iterable[Minutes]) -> Iterable[List[str]]:
    """One row per distinct speaker per transcript, in first-appearance order."""

    for minutes in minutes_list:
        for speaker in minutes.speakers.values():
            person = speaker.person
            yield [
                minutes.working_group_order,
                minutes.working_group_id,
                minutes.title,
                speaker.label,
                _format_score(speaker.resolution_score),
                person.id if person else "",
                person.label if person else "",
                person.name if person else "",
                person.role if person else "",
                person.affiliation if person else "",
            ]


def write_speakers_csv(
    minutes_list: Sequence[Minutes],
    output_dir: Path,
    *,
    encoding: str = "cp932",
) -> Path:
    """Write the speaker table; characters outside ``encoding`` become ``?``."""

    path = output_dir / SPEAKER_CSV_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=encoding, errors="replace", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(SPEAKER_CSV_COLUMNS)
        writer.writerows(speaker_rows(minutes_list))
    return path


def khcoder_lines(minutes_list: Sequence[Minutes], working_groups: Mapping[str, WorkingGroup]) -> List[str]:
    """Build KH Coder input: working group, meeting and speaker headings.

    Raises :class:`ExportError` when a transcript's working group order is
    missing from ``working_groups``.
    """

    lines: List[str] = []
    current_order: Optional[str] = None
    for minutes in minutes_list:
        if minutes.working_group_order != current_order:
            working_group = working_groups.get("no" + minutes.working_group_order)
            if working_group is None:
                raise ExportError(f"No working group with order {minutes.working_group_order!r} ({minutes.source})")
            lines.append(f"<h1>{working_group.name}</h1>")
        current_order = minutes.working_group_order

        if minutes.title:
            lines.append(f"<h2>{minutes.title}</h2>")

        for speech in minutes.speeches:
            lines.append(f"<h3>{speech.speaker.label if speech.speaker else ''}</h3>")
            lines.extend(speech.utterances)
    return lines


def write_khcoder(
    minutes_list: Sequence[Minutes],
    working_groups: Mapping[str, WorkingGroup],
    output_dir: Path,
) -> Path:
    lines = khcoder_lines(minutes_list, working_groups)
    path = output_dir / KH_CODER_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf8") as fh:
        for line in lines:
            fh.write(line + "\n")
    return path


def save_download_report(report: DownloadReport, directory: Path, *, now: Optional[datetime] = None) -> Path:
    timestamp = (now or datetime.now()).strftime("%Y-%m-%dT%H%M%S.%f")
    return write_json(asdict(report), directory / f"report_{timestamp}.json")


__all__ = [
    "ALL_MINUTES_FILE",
    "ExportError",
    "KH_CODER_FILE",
    "SPEAKER_CSV_COLUMNS",
    "SPEAKER_CSV_FILE",
    "WORKING_GROUPS_FILE",
    "khcoder_lines",
    "load_minutes_json",
    "load_working_groups",
    "member_list_to_dict",
    "minutes_from_dict",
    "minutes_to_dict",
    "save_download_report",
    "speaker_rows",
    "write_all_minutes_json",
    "write_json",
    "write_khcoder",
    "write_member_list_json",
    "write_minutes_json",
    "write_speakers_csv",
    "write_working_groups",
]
