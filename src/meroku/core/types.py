"""Typed domain objects shared by the parsers, the resolver and the exports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import uuid

from .labels import normalize_label


@dataclass(frozen=True, slots=True)
class Person:
    """A committee member as listed on a roster page."""

    id: str
    label: str
    name: str
    role: str
    affiliation: str

    @classmethod
    def create(cls, *, name: str, role: str, affiliation: str) -> "Person":
        """Create a person with a fresh identifier and a normalised label."""

        return cls(
            id=str(uuid.uuid4()),
            label=normalize_label(name + role),
            name=name,
            role=role,
            affiliation=affiliation,
        )

    def normalized_label(self) -> str:
        return normalize_label(self.name + self.role)


@dataclass(slots=True)
class WorkingGroup:
    """A working group of the Central Council for Education."""

    order: str = ""
    id: str = ""
    name: str = ""
    url: str = ""
    minutes_list_url: str = ""
    minutes_urls: List[str] = field(default_factory=list)
    member_list_urls: List[str] = field(default_factory=list)


@dataclass(slots=True)
class MemberList:
    """The roster of one working group."""

    members: List[Person] = field(default_factory=list)
    working_group: Optional[WorkingGroup] = None

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self):
        return iter(self.members)


@dataclass(slots=True)
class Speaker:
    """A speaker label found in a transcript and its resolved roster entry."""

    label: str
    resolution_score: float = 0.0
    person: Optional[Person] = None


@dataclass(slots=True)
class Speech:
    """Consecutive utterances attributed to one speaker."""

    speaker: Optional[Speaker] = None
    utterances: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Minutes:
    """A parsed transcript of one working group meeting."""

    source: str
    title: str = ""
    working_group: str = ""
    working_group_order: str = ""
    working_group_id: str = ""
    date: str = ""
    venue: str = ""
    speakers: Dict[str, Speaker] = field(default_factory=dict)
    speeches: List[Speech] = field(default_factory=list)

    @property
    def speech_count(self) -> int:
        return len(self.speeches)


@dataclass(frozen=True, slots=True)
class Similarity:
    """Score of one roster candidate against a speaker label."""

    target: Person
    score: float


@dataclass(slots=True)
class DownloadReport:
    """URLs fetched (or not) during one download run."""

    downloaded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


__all__ = [
    "DownloadReport",
    "MemberList",
    "Minutes",
    "Person",
    "Similarity",
    "Speaker",
    "Speech",
    "WorkingGroup",
]
