from __future__ import annotations

from pathlib import Path

import pytest

from contract_tracker.config.loader import (
    CONFIG_ENV_VAR,
    ConfigError,
    load_config,
    resolve_config_path,
)
from contract_tracker.models.config_models import DEFAULT_CONFIG, TrackerConfig


def test_load_config_none_returns_defaults():
    cfg = load_config(None)
    assert cfg is DEFAULT_CONFIG
    assert cfg.columns.start_date == "Startdatum"
    assert cfg.columns.duration == "Laufzeit in M"
    assert cfg.default_name == "Unbenannt"
    assert cfg.default_status == "online"
    assert cfg.due_soon_days == 30
    assert cfg.raw_view_start_column == 3


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert isinstance(cfg, TrackerConfig)
    assert cfg.columns.name == "Vertrag"
    assert cfg.columns.start_date == "Beginn"
    # not given -> defaults
    assert cfg.columns.status == "Status"
    assert cfg.default_name == "Unnamed"
    assert cfg.default_status == "online"
    assert cfg.due_soon_days == 14
    assert cfg.raw_view_start_column == 2


def test_load_config_empty_file(temp_workdir: Path):
    p = temp_workdir / "config" / "tracker.yml"
    p.write_text("", encoding="utf-8")
    assert load_config(p) == DEFAULT_CONFIG


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError) as e:
        load_config(temp_workdir / "config" / "not_exists.yml")
    assert "config file not found" in str(e.value)


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("columns: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_wrong_type(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("due_soon_days: 14", "due_soon_days: soon")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_negative_threshold(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("due_soon_days: 14", "due_soon_days: -1")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_load_config_top_level_list(temp_workdir: Path):
    p = temp_workdir / "config" / "tracker.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)


def test_resolve_config_path_priority(temp_workdir: Path, monkeypatch):
    # nothing configured -> built-in defaults
    assert resolve_config_path(None) is None

    default_file = temp_workdir / "config" / "tracker.yml"
    default_file.write_text("due_soon_days: 7\n", encoding="utf-8")
    assert resolve_config_path(None) == Path("config/tracker.yml")

    monkeypatch.setenv(CONFIG_ENV_VAR, "elsewhere.yml")
    assert resolve_config_path(None) == Path("elsewhere.yml")

    assert resolve_config_path("explicit.yml") == Path("explicit.yml")


def test_resolve_config_path_reads_dotenv(temp_workdir: Path, monkeypatch):
    # register the variable with monkeypatch so the value loaded from .env is undone
    monkeypatch.setenv(CONFIG_ENV_VAR, "placeholder")
    monkeypatch.delenv(CONFIG_ENV_VAR)
    (temp_workdir / ".env").write_text(f"{CONFIG_ENV_VAR}=from_dotenv.yml\n", encoding="utf-8")
    assert resolve_config_path(None) == Path("from_dotenv.yml")
