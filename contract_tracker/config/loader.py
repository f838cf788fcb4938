from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from dotenv import load_dotenv
from jsonschema.exceptions import ValidationError

from ..models.config_models import DEFAULT_CONFIG, ColumnNames, TrackerConfig

"""Config loader.

Responsibilities:
- Load YAML (config/tracker.yml by default)
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults for every key that is missing
- Resolve which file to load (CLI > env var > default path > built-ins)
"""

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "load_config",
    "resolve_config_path",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/tracker.yml")
CONFIG_ENV_VAR = "CONTRACT_TRACKER_CONFIG"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: The schema file is missing or invalid, or the data
            fails validation (unknown keys, wrong types, ...).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path | None) -> TrackerConfig:
    """Load and validate a config file; ``None`` returns the built-in defaults."""
    if path is None:
        return DEFAULT_CONFIG
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    base = DEFAULT_CONFIG
    cols_raw = data.get("columns", {})
    defaults_raw = data.get("defaults", {})
    columns = ColumnNames(
        name=cols_raw.get("name", base.columns.name),
        status=cols_raw.get("status", base.columns.status),
        start_date=cols_raw.get("start_date", base.columns.start_date),
        duration=cols_raw.get("duration", base.columns.duration),
    )
    return TrackerConfig(
        columns=columns,
        default_name=defaults_raw.get("name", base.default_name),
        default_status=defaults_raw.get("status", base.default_status),
        online_status=data.get("online_status", base.online_status),
        due_soon_days=data.get("due_soon_days", base.due_soon_days),
        raw_view_start_column=data.get("raw_view_start_column", base.raw_view_start_column),
        date_display_format=data.get("date_display_format", base.date_display_format),
        logs_directory=data.get("logs_directory", base.logs_directory),
    )


def resolve_config_path(cli_value: str | None = None, env_file: Path = Path(".env")) -> Path | None:
    """Pick the config file to load.

    Priority: explicit CLI value, then ``CONTRACT_TRACKER_CONFIG`` (``.env`` is
    loaded first without overriding the process environment), then
    ``config/tracker.yml`` when it exists. ``None`` means built-in defaults.
    """
    if cli_value:
        return Path(cli_value)
    if env_file.exists():
        load_dotenv(dotenv_path=env_file, override=False)
    env_value = os.getenv(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None
