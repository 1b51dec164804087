"""Runtime settings from environment variables and an optional YAML file."""

import os
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from opportunity_import.errors import ConfigError

ENV_PREFIX = "OPPORTUNITY_IMPORT_"

# env var suffix -> settings field
_ENV_FIELDS = {
    "API_URL": "api_base_url",
    "API_TOKEN": "api_token",
    "TIMEOUT": "timeout_seconds",
    "DB_PATH": "db_path",
    "STAGING_BACKEND": "staging_backend",
    "ENRICH": "enrich",
    "MAX_TEXT_LENGTH": "max_text_length",
}


class ImportSettings(BaseModel):
    """Settings for the import pipeline and its HTTP collaborators."""

    api_base_url: str = "http://localhost:8000"
    api_token: Optional[str] = None
    timeout_seconds: float = Field(default=60.0, gt=0)
    db_path: Path = Path("opportunity_import.db")
    staging_backend: Literal["http", "sqlite"] = "sqlite"
    enrich: bool = True
    max_text_length: int = Field(default=255, gt=0)

    @staticmethod
    def _env_values() -> dict[str, Any]:
        values: dict[str, Any] = {}
        for suffix, field in _ENV_FIELDS.items():
            raw = os.environ.get(ENV_PREFIX + suffix)
            if raw is not None and raw.strip():
                values[field] = raw.strip()
        return values

    @classmethod
    def _build(cls, data: dict[str, Any]) -> "ImportSettings":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e

    @classmethod
    def from_env(cls) -> "ImportSettings":
        """Defaults overridden by OPPORTUNITY_IMPORT_* variables."""
        return cls._build(cls._env_values())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ImportSettings":
        """
        Load from YAML. Supports nested (api/staging) or flat structure.
        Environment variables take precedence over file values.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")
        api = data.get("api") or {}
        staging = data.get("staging") or {}

        def _get(key: str, nested: dict, alias: Optional[str] = None):
            if key in nested:
                return nested[key]
            if alias and alias in nested:
                return nested[alias]
            return data.get(key)

        flat = {
            "api_base_url": _get("api_base_url", api, "base_url"),
            "api_token": _get("api_token", api, "token"),
            "timeout_seconds": _get("timeout_seconds", api, "timeout"),
            "db_path": _get("db_path", staging),
            "staging_backend": _get("staging_backend", staging, "backend"),
            "enrich": data.get("enrich"),
            "max_text_length": data.get("max_text_length"),
        }
        flat = {k: v for k, v in flat.items() if v is not None}
        flat.update(cls._env_values())
        return cls._build(flat)
