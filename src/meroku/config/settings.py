"""Application configuration helpers for meroku."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
import types
from typing import Any, Dict, Optional, Type, TypeVar, Union, get_args, get_origin, get_type_hints


_DEFAULT_CONFIG_LOCATIONS = (
    Path("meroku.json"),
    Path.home() / ".config" / "meroku" / "config.json",
)

ENV_PREFIX = "MEROKU_"


@dataclass(slots=True)
class MextConfig:
    """Where and how to fetch council pages from the MEXT website."""

    base_url: str = "https://www.mext.go.jp"
    index_path: str = "/b_menu/shingi/chukyo/chukyo3/index.htm"
    timeout: float = 30.0
    max_retries: int = 3

    @property
    def index_url(self) -> str:
        return self.base_url.rstrip("/") + self.index_path


@dataclass(slots=True)
class ParserConfig:
    """HTML parsing options."""

    html_parser: str = "html.parser"


@dataclass(slots=True)
class ExportConfig:
    """Options for the files written by the parse command."""

    csv_encoding: str = "cp932"
    write_per_file_json: bool = True


@dataclass(slots=True)
class StorageConfig:
    """Optional SQLite (or any SQLAlchemy URL) store for parsed minutes."""

    database_url: Optional[str] = None
    echo_sql: bool = False


@dataclass(slots=True)
class AppConfig:
    """High level application configuration."""

    mext: MextConfig
    parser: ParserConfig
    export: ExportConfig
    storage: StorageConfig


_SECTIONS: Dict[str, type] = {
    "mext": MextConfig,
    "parser": ParserConfig,
    "export": ExportConfig,
    "storage": StorageConfig,
}


def _load_from_env(prefix: str) -> Dict[str, Any]:
    """Load configuration entries for ``prefix`` from the environment."""

    data: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if key.startswith(prefix):
            data[key.removeprefix(prefix).lower()] = value
    return data


def _merge_dict(target: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    merged = target.copy()
    merged.update({k: v for k, v in updates.items() if v is not None})
    return merged


def _load_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf8") as fh:
        return json.load(fh)


T = TypeVar("T")


def _coerce_value(value: Any, annotation: Any) -> Any:
    """Best-effort conversion of ``value`` to match ``annotation``."""

    if value is None:
        return None

    origin = get_origin(annotation)
    if origin in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]  # noqa: E721 - allow Optional
        if isinstance(value, str) and not value.strip() and len(args) < len(get_args(annotation)):
            return None
        last_error: Exception | None = None
        for candidate in args:
            try:
                return _coerce_value(value, candidate)
            except (TypeError, ValueError) as exc:
                last_error = exc
        raise ValueError(f"Cannot convert {value!r} to {annotation}") from last_error

    if annotation is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {"true", "1", "yes", "y", "on"}:
                return True
            if normalized in {"false", "0", "no", "n", "off"}:
                return False
        if isinstance(value, (int, float)):
            return bool(value)
        raise ValueError(f"Cannot convert {value!r} to bool")

    if annotation is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, (float, str)):
            return int(float(value))
        raise ValueError(f"Cannot convert {value!r} to int")

    if annotation is float:
        if isinstance(value, (int, float, str)) and not isinstance(value, bool):
            return float(value)
        raise ValueError(f"Cannot convert {value!r} to float")

    if annotation is str:
        return value if isinstance(value, str) else str(value)

    return value


def _dataclass_from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
    """Create dataclass ``cls`` while coercing ``data`` to the proper types."""

    kwargs: Dict[str, Any] = {}
    type_hints = get_type_hints(cls)
    for field in fields(cls):
        if field.name not in data:
            continue
        try:
            kwargs[field.name] = _coerce_value(data[field.name], type_hints.get(field.name, field.type))
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Invalid value for {cls.__name__}.{field.name}: {data[field.name]!r}"
            ) from exc
    return cls(**kwargs)


def resolve_config_path(explicit_path: Optional[Path] = None) -> Path:
    """Return the effective configuration file path.

    An explicit path wins. Otherwise the first existing default location is
    used, falling back to ``~/.config/meroku/config.json``.
    """

    if explicit_path:
        return explicit_path

    for candidate in _DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    return _DEFAULT_CONFIG_LOCATIONS[-1]


def load_config(explicit_path: Optional[Path] = None) -> AppConfig:
    """Create the application configuration.

    Defaults, an optional JSON configuration file and ``MEROKU_SECTION_FIELD``
    environment variables (e.g. ``MEROKU_EXPORT_CSV_ENCODING``) are merged in
    that order of precedence.
    """

    file_data: Dict[str, Any] = {}
    if explicit_path:
        file_data = _load_config_file(explicit_path)
    else:
        for candidate in _DEFAULT_CONFIG_LOCATIONS:
            file_data = _load_config_file(candidate)
            if file_data:
                break

    sections: Dict[str, Any] = {}
    for name, cls in _SECTIONS.items():
        section_data = _merge_dict(asdict(cls()), file_data.get(name) or {})
        section_data = _merge_dict(section_data, _load_from_env(f"{ENV_PREFIX}{name.upper()}_"))
        sections[name] = _dataclass_from_dict(cls, section_data)
    return AppConfig(**sections)


def save_config(config: AppConfig, path: Optional[Path] = None) -> Path:
    """Persist ``config`` as JSON and return the target path."""

    target = resolve_config_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    data = {name: asdict(getattr(config, name)) for name in _SECTIONS}
    with target.open("w", encoding="utf8") as fh:
        json.dump(data, fh, ensure_ascii=False, indent=2, sort_keys=True)
        fh.write("\n")
    return target


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
