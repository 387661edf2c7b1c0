"""Tests for config loading."""

from conferente.config import (
    DEFAULT_DB_PATH,
    CameraConfig,
    ConferenteConfig,
    ExportConfig,
    PrinterConfig,
    load_config,
)


def test_load_config_defaults(monkeypatch):
    """Loading with no path returns all defaults."""
    monkeypatch.delenv("CONFERENTE_DB_PATH", raising=False)
    config = load_config()
    assert isinstance(config, ConferenteConfig)
    assert config.storage.db_path == DEFAULT_DB_PATH
    assert config.camera == CameraConfig()
    assert config.export == ExportConfig()
    assert config.printer == PrinterConfig()
    assert config.export.sheet_name == "Relatório Conferente"


def test_load_config_nonexistent_file(monkeypatch):
    monkeypatch.delenv("CONFERENTE_DB_PATH", raising=False)
    config = load_config("/nonexistent/path.toml")
    assert config.storage.db_path == DEFAULT_DB_PATH
    assert config.camera.index == 0


def test_load_config_from_toml(tmp_path, monkeypatch):
    monkeypatch.delenv("CONFERENTE_DB_PATH", raising=False)
    path = tmp_path / "config.toml"
    path.write_bytes("""\
[storage]
db_path = "/var/lib/conferente.db"

[camera]
index = 1
max_width = 800
jpeg_quality = 60
timestamp_overlay = false

[export]
output_dir = "/srv/relatorios"
sheet_name = "Doca 2"

[printer]
enabled = true
printer_name = "Termica_80"
""".encode("utf-8"))

    config = load_config(path)

    assert config.storage.db_path == "/var/lib/conferente.db"
    assert config.camera.index == 1
    assert config.camera.max_width == 800
    assert config.camera.jpeg_quality == 60
    assert config.camera.timestamp_overlay is False
    assert config.export.output_dir == "/srv/relatorios"
    assert config.export.sheet_name == "Doca 2"
    assert config.printer.enabled is True
    assert config.printer.printer_name == "Termica_80"


def test_load_config_partial_toml(tmp_path, monkeypatch):
    monkeypatch.delenv("CONFERENTE_DB_PATH", raising=False)
    path = tmp_path / "config.toml"
    path.write_text("[camera]\nindex = 3\n")

    config = load_config(path)

    assert config.camera.index == 3
    assert config.camera.max_width == 1024
    assert config.storage.db_path == DEFAULT_DB_PATH


def test_env_overrides_db_path(monkeypatch):
    monkeypatch.setenv("CONFERENTE_DB_PATH", "/tmp/env.db")
    assert load_config().storage.db_path == "/tmp/env.db"


def test_file_db_path_wins_over_env(tmp_path, monkeypatch):
    monkeypatch.setenv("CONFERENTE_DB_PATH", "/tmp/env.db")
    path = tmp_path / "config.toml"
    path.write_text('[storage]\ndb_path = "/tmp/file.db"\n')

    assert load_config(path).storage.db_path == "/tmp/file.db"
