"""Progress notifications emitted by the pipelines."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional

PipelineEventKind = Literal[
    "start",
    "parsed",
    "resolved",
    "stored",
    "downloaded",
    "exported",
    "finished",
    "cancelled",
    "error",
]


@dataclass(slots=True)
class PipelineEvent:
    """Fine grained progress notification."""

    kind: PipelineEventKind
    processed: int
    source: str | None = None
    message: str | None = None
    speech_count: int | None = None


ProgressCallback = Callable[[PipelineEvent], None]


def notify(callback: Optional[ProgressCallback], event: PipelineEvent) -> None:
    if callback:
        callback(event)


__all__ = ["PipelineEvent", "PipelineEventKind", "ProgressCallback", "notify"]
