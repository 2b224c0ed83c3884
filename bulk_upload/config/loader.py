from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader for the bulk item upload.

Responsibilities:
- Load YAML config (default config/bulk_upload.yml)
- Validate against the packaged JSON schema (config_schema.json)
- Apply defaults
- Apply environment overrides: CATALOG_API_BASE_URL, CATALOG_API_TOKEN

The API token is only ever read from the environment (.env is loaded by the CLI
before this runs).
"""

__all__ = [
    "ConfigError",
    "CatalogConfig",
    "UploadConfig",
    "SCHEMA_PATH",
    "DEFAULT_CONFIG_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/bulk_upload.yml")

DEFAULT_CREATE_PATH = "/api/items/basic-product"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_LOGS_DIRECTORY = "./logs"

ENV_BASE_URL = "CATALOG_API_BASE_URL"
ENV_TOKEN = "CATALOG_API_TOKEN"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class CatalogConfig:
    base_url: str
    create_path: str = DEFAULT_CREATE_PATH
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    token: str | None = None


@dataclass(frozen=True)
class UploadConfig:
    catalog: CatalogConfig
    logs_directory: str = DEFAULT_LOGS_DIRECTORY


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the packaged JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or data violates the schema
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


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> UploadConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    catalog_raw = data["catalog"]
    # 環境変数が設定ファイルより優先
    base_url = os.getenv(ENV_BASE_URL) or catalog_raw["base_url"]
    catalog = CatalogConfig(
        base_url=base_url,
        create_path=catalog_raw.get("create_path", DEFAULT_CREATE_PATH),
        timeout_seconds=float(catalog_raw.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        token=os.getenv(ENV_TOKEN) or None,
    )
    return UploadConfig(
        catalog=catalog,
        logs_directory=data.get("logs_directory", DEFAULT_LOGS_DIRECTORY),
    )
