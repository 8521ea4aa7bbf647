"""Core domain entities used across the pipeline."""
from __future__ import annotations

from .labels import normalize_label
from .types import (
    DownloadReport,
    MemberList,
    Minutes,
    Person,
    Similarity,
    Speaker,
    Speech,
    WorkingGroup,
)

__all__ = [
    "DownloadReport",
    "MemberList",
    "Minutes",
    "Person",
    "Similarity",
    "Speaker",
    "Speech",
    "WorkingGroup",
    "normalize_label",
]
