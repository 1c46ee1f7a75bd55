"""Application configuration helpers."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASTYPATH_"
ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


class Settings(BaseModel):
    """Global settings loaded from ``TASTYPATH_*`` environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/tastypath.db"),
        description="SQLite database holding the global shopping list.",
    )
    heuristics_path: Optional[Path] = Field(
        default=None,
        description="Optional JSON file overriding purchase/pricing thresholds.",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Token required for mutating endpoints when set.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(default="plain", description="Logging format (plain/json).")
    log_requests: bool = Field(default=True, description="Emit request access logs when true.")
    server_host: str = Field(default="127.0.0.1", description="Interface the API server binds to.")
    server_port: int = Field(default=8000, description="Port the API server listens on.")

    model_config = ConfigDict(frozen=True)


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


# env suffix -> (settings field, converter); converters raising ValueError are ignored
_ENV_FIELDS: dict[str, tuple[str, Callable[[str], object]]] = {
    "DATABASE_PATH": ("database_path", Path),
    "HEURISTICS_PATH": ("heuristics_path", Path),
    "API_TOKEN": ("api_token", str),
    "LOG_LEVEL": ("log_level", str),
    "LOG_FORMAT": ("log_format", str),
    "LOG_REQUESTS": ("log_requests", _coerce_bool),
    "SERVER_HOST": ("server_host", str),
    "SERVER_PORT": ("server_port", int),
}


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip().strip("\"'")
    except FileNotFoundError:
        return {}
    return payload


def _load_from_env() -> dict[str, object]:
    """Collect overrides from the process environment, then .env/.env.local."""

    file_values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        file_values.update(_parse_env_file(candidate))

    payload: dict[str, object] = {}
    for suffix, (field_name, convert) in _ENV_FIELDS.items():
        key = ENV_PREFIX + suffix
        raw = os.environ.get(key) or file_values.get(key)
        if not raw:
            continue
        try:
            payload[field_name] = convert(raw)
        except ValueError:
            logger.warning("Ignoring invalid value for %s", key)
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())


__all__ = ["Settings", "get_settings", "ENV_PREFIX"]
