import json

import pytest

import meroku.config.settings as config_settings
from meroku.config import (
    AppConfig,
    ExportConfig,
    MextConfig,
    ParserConfig,
    StorageConfig,
    load_config,
    resolve_config_path,
    save_config,
)


@pytest.fixture(autouse=True)
def isolated_locations(tmp_path, monkeypatch):
    locations = (tmp_path / "meroku.json", tmp_path / "xdg" / "config.json")
    monkeypatch.setattr(config_settings, "_DEFAULT_CONFIG_LOCATIONS", locations)
    return locations


def test_defaults_without_file_or_environment():
    config = load_config()

    assert config.mext.index_url == "https://www.mext.go.jp/b_menu/shingi/chukyo/chukyo3/index.htm"
    assert config.parser.html_parser == "html.parser"
    assert config.export.csv_encoding == "cp932"
    assert config.storage.database_url is None


def test_environment_values_are_coerced(monkeypatch):
    monkeypatch.setenv("MEROKU_MEXT_TIMEOUT", "15.5")
    monkeypatch.setenv("MEROKU_MEXT_MAX_RETRIES", "4")
    monkeypatch.setenv("MEROKU_EXPORT_WRITE_PER_FILE_JSON", "false")
    monkeypatch.setenv("MEROKU_STORAGE_ECHO_SQL", "true")
    monkeypatch.setenv("MEROKU_STORAGE_DATABASE_URL", "sqlite:///minutes.db")

    config = load_config()

    assert config.mext.timeout == pytest.approx(15.5)
    assert config.mext.max_retries == 4 and isinstance(config.mext.max_retries, int)
    assert config.export.write_per_file_json is False
    assert config.storage.echo_sql is True
    assert config.storage.database_url == "sqlite:///minutes.db"


def test_empty_optional_environment_value_means_unset(monkeypatch):
    monkeypatch.setenv("MEROKU_STORAGE_DATABASE_URL", "")

    assert load_config().storage.database_url is None


def test_invalid_boolean_environment_value_raises(monkeypatch):
    monkeypatch.setenv("MEROKU_STORAGE_ECHO_SQL", "definitely")

    with pytest.raises(ValueError):
        load_config()


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "explicit.json"
    path.write_text(
        json.dumps({"export": {"csv_encoding": "utf-8"}, "mext": {"max_retries": 5}}),
        encoding="utf8",
    )
    monkeypatch.setenv("MEROKU_MEXT_MAX_RETRIES", "2")

    config = load_config(path)

    assert config.export.csv_encoding == "utf-8"
    assert config.mext.max_retries == 2


def test_resolve_config_path_prefers_existing_file(isolated_locations):
    first, second = isolated_locations

    assert resolve_config_path(None) == second

    first.write_text("{}", encoding="utf8")
    assert resolve_config_path(None) == first
    assert resolve_config_path(second) == second


def test_save_config_writes_json(tmp_path):
    target = tmp_path / "settings" / "meroku.json"
    config = AppConfig(
        mext=MextConfig(base_url="https://example.invalid", max_retries=1),
        parser=ParserConfig(html_parser="lxml"),
        export=ExportConfig(csv_encoding="utf-8"),
        storage=StorageConfig(database_url="sqlite:///demo.db", echo_sql=True),
    )

    saved_path = save_config(config, target)

    assert saved_path == target
    data = json.loads(target.read_text(encoding="utf8"))
    assert data["mext"]["base_url"] == "https://example.invalid"
    assert data["parser"]["html_parser"] == "lxml"
    assert data["storage"]["database_url"] == "sqlite:///demo.db"
    assert load_config(target) == config
