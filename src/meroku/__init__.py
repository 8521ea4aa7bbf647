"""Transcript segmentation and speaker resolution for MEXT council minutes."""
from __future__ import annotations

from .clients import MextClient, MextClientError
from .config import AppConfig, ExportConfig, MextConfig, ParserConfig, StorageConfig, load_config
from .core import (
    DownloadReport,
    MemberList,
    Minutes,
    Person,
    Similarity,
    Speaker,
    Speech,
    WorkingGroup,
    normalize_label,
)
from .database import MinutesOverview, Storage, create_storage
from .export import ExportError
from .parsing import (
    MemberListParseError,
    MinutesParseError,
    load_member_list,
    load_minutes,
    load_scanned_minutes,
    parse_member_list,
    parse_minutes,
    parse_scanned_minutes,
)
from .pipeline import DownloadPipeline, ParsePipeline, PipelineEvent
from .resolution import Resolution, ResolutionError, resolve, resolve_speakers
from .runtime import PipelineResources, create_download_pipeline, create_parse_pipeline

__all__ = [
    "AppConfig",
    "DownloadPipeline",
    "DownloadReport",
    "ExportConfig",
    "ExportError",
    "MemberList",
    "MemberListParseError",
    "MextClient",
    "MextClientError",
    "MextConfig",
    "Minutes",
    "MinutesOverview",
    "MinutesParseError",
    "ParsePipeline",
    "ParserConfig",
    "Person",
    "PipelineEvent",
    "PipelineResources",
    "Resolution",
    "ResolutionError",
    "Similarity",
    "Speaker",
    "Speech",
    "Storage",
    "StorageConfig",
    "WorkingGroup",
    "create_download_pipeline",
    "create_parse_pipeline",
    "create_storage",
    "load_config",
    "load_member_list",
    "load_minutes",
    "load_scanned_minutes",
    "normalize_label",
    "parse_member_list",
    "parse_minutes",
    "parse_scanned_minutes",
    "resolve",
    "resolve_speakers",
]
