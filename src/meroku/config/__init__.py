"""Configuration helpers for meroku."""
from __future__ import annotations

from .settings import (
    AppConfig,
    ExportConfig,
    MextConfig,
    ParserConfig,
    StorageConfig,
    load_config,
    resolve_config_path,
    save_config,
)

__all__ = [
    "AppConfig",
    "ExportConfig",
    "MextConfig",
    "ParserConfig",
    "StorageConfig",
    "load_config",
    "resolve_config_path",
    "save_config",
]
