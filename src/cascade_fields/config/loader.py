from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load an optional YAML config file
- Validate it against the bundled JSON schema (unknown keys rejected)
- Apply defaults for every missing key
"""

__all__ = [
    "SCHEMA_PATH",
    "CONFIG_ENV_VAR",
    "ConfigError",
    "ImportConfig",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

# Environment variable naming a default config file (may be set via .env)
CONFIG_ENV_VAR = "CASCADE_FIELDS_CONFIG"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ImportConfig:
    sheet: str = "Cascade Fields"  # Sheet read when none is requested
    output_format: str = "json"
    summary_warning_limit: int = 5  # Warnings listed by --summary
    skip_empty_rows: bool = True  # Drop fully blank data rows


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (wrong types, unknown keys, ...).
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


def load_config(path: Path | None = None) -> ImportConfig:
    """Load configuration from ``path``; defaults only when path is None."""
    if path is None:
        return ImportConfig()
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: expected a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    defaults = ImportConfig()
    return ImportConfig(
        sheet=data.get("sheet", defaults.sheet),
        output_format=data.get("output_format", defaults.output_format),
        summary_warning_limit=data.get("summary_warning_limit", defaults.summary_warning_limit),
        skip_empty_rows=data.get("skip_empty_rows", defaults.skip_empty_rows),
    )
