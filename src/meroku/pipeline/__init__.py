"""Pipeline orchestration components."""
from __future__ import annotations

from .download_pipeline import DownloadPipeline, download_file_name
from .events import PipelineEvent
from .parse_pipeline import ParsePipeline

__all__ = ["DownloadPipeline", "ParsePipeline", "PipelineEvent", "download_file_name"]
