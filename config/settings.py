"""Settings management utilities for Prompt Library configuration.

Updates:
  v0.2.0 - 2026-10-14 - Add snapshot indent and default sort mode settings.
  v0.1.1 - 2026-10-13 - Read .env values through python-dotenv without mutating os.environ.
  v0.1.0 - 2026-10-12 - Settings model with JSON config and environment sources.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, cast

from dotenv import dotenv_values
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

_DOTENV_FALLBACK_PATH = ".env"
_ENV_PREFIX = "PROMPT_LIBRARY_"

DEFAULT_DB_PATH = Path("data") / "prompt-library.db"
DEFAULT_BUSY_TIMEOUT_MS = 5000
DEFAULT_SORT_MODE = "updated"
DEFAULT_SNAPSHOT_INDENT = 2
MAX_SNAPSHOT_INDENT = 8

SortSetting = Literal["updated", "score", "created"]

# Keys accepted from the JSON config file and the environment.
_SETTING_KEYS: tuple[str, ...] = (
    "db_path",
    "busy_timeout_ms",
    "default_sort",
    "snapshot_indent",
)
_ENV_ALIASES: dict[str, list[str]] = {
    "db_path": ["DB_PATH", "DATABASE_PATH"],
    "busy_timeout_ms": ["BUSY_TIMEOUT_MS"],
    "default_sort": ["DEFAULT_SORT"],
    "snapshot_indent": ["SNAPSHOT_INDENT"],
}

logger = logging.getLogger("prompt_library.settings")


def _read_dotenv_values() -> dict[str, str]:
    """Load ``.env`` entries into a mapping without mutating ``os.environ``."""
    env_file_override = os.getenv(f"{_ENV_PREFIX}ENV_FILE")
    if env_file_override is not None:
        candidate = env_file_override.strip()
        if not candidate:
            return {}
        path = Path(candidate).expanduser()
    else:
        path = Path(_DOTENV_FALLBACK_PATH).expanduser()
    if not path.is_file():
        return {}
    raw_values = dotenv_values(str(path))
    return {str(key): str(value) for key, value in raw_values.items() if value is not None}


class SettingsError(Exception):
    """Raised when Prompt Library configuration cannot be loaded or validated."""


class PromptLibrarySettings(BaseSettings):
    """Application configuration sourced from environment variables or JSON files."""

    db_path: Path = Field(
        default=DEFAULT_DB_PATH,
        description="SQLite database file holding prompts, versions, and usage logs.",
    )
    busy_timeout_ms: int = Field(
        default=DEFAULT_BUSY_TIMEOUT_MS,
        description="Milliseconds a connection waits on a locked database before failing.",
    )
    default_sort: SortSetting = Field(
        default=DEFAULT_SORT_MODE,
        description="Listing order used when the caller does not pick one.",
    )
    snapshot_indent: int = Field(
        default=DEFAULT_SNAPSHOT_INDENT,
        description="Indentation of exported JSON snapshots (0 writes compact JSON).",
    )

    model_config = cast(
        "SettingsConfigDict",
        {
            "env_prefix": _ENV_PREFIX,
            "case_sensitive": False,
            "populate_by_name": True,
        },
    )

    @field_validator("db_path", mode="before")
    def _normalise_path(cls, value: Any) -> Path:
        """Expand user-relative paths and coerce values to Path instances."""
        if value is None or not str(value).strip():
            raise ValueError("a filesystem path is required")
        return Path(str(value).strip()).expanduser()

    @field_validator("busy_timeout_ms")
    def _validate_busy_timeout(cls, value: int) -> int:
        """Ensure the busy timeout is not negative."""
        if value < 0:
            raise ValueError("busy_timeout_ms must be zero or greater")
        return value

    @field_validator("default_sort", mode="before")
    def _normalise_sort(cls, value: Any) -> Any:
        """Accept sort names regardless of case or padding."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("snapshot_indent")
    def _validate_indent(cls, value: int) -> int:
        """Keep snapshot indentation within a readable range."""
        if not 0 <= value <= MAX_SNAPSHOT_INDENT:
            raise ValueError(f"snapshot_indent must be between 0 and {MAX_SNAPSHOT_INDENT}")
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        """Define configuration source precedence.

        Order (highest → lowest):
            1. Explicit keyword arguments (e.g. load_settings(db_path="...")).
            2. JSON configuration file.
            3. Environment variables, then ``.env`` entries.
        """

        def env_with_aliases(_: BaseSettings | None = None) -> dict[str, Any]:
            data: dict[str, Any] = {}
            dotenv_mapping = _read_dotenv_values()

            def _lookup(candidate: str) -> str | None:
                value = os.getenv(candidate)
                if value is None:
                    value = dotenv_mapping.get(candidate)
                if value is None:
                    return None
                stripped_value = str(value).strip()
                return stripped_value or None

            for field, aliases in _ENV_ALIASES.items():
                for alias in aliases:
                    value = _lookup(f"{_ENV_PREFIX}{alias}")
                    if value is not None:
                        data[field] = value
                        break
            return data

        return (
            init_settings,
            cls._json_config_settings_source(settings_cls),
            cast("PydanticBaseSettingsSource", env_with_aliases),
        )

    @classmethod
    def _json_config_settings_source(
        cls,
        _: type[BaseSettings],
    ) -> PydanticBaseSettingsSource:
        """Return settings extracted from an optional JSON config file."""

        def _loader(_: BaseSettings | None = None) -> dict[str, Any]:
            explicit_path = os.getenv(f"{_ENV_PREFIX}CONFIG_JSON")
            candidates: list[Path] = []
            if explicit_path:
                candidates.append(Path(explicit_path).expanduser())
            candidates.append((Path("config") / "config.json").expanduser())

            for index, path in enumerate(candidates):
                if not path.exists():
                    if explicit_path and index == 0:
                        raise SettingsError(f"Configuration file not found: {path}")
                    continue
                try:
                    raw_contents = path.read_text(encoding="utf-8")
                except OSError as exc:  # pragma: no cover - filesystem failure is env-specific
                    raise SettingsError(f"Unable to read configuration file: {path}") from exc
                try:
                    data = json.loads(raw_contents)
                except json.JSONDecodeError as exc:
                    raise SettingsError(f"Invalid JSON in configuration file: {path}") from exc
                if not isinstance(data, dict):
                    message = f"Configuration file {path} must contain a JSON object"
                    raise SettingsError(message)
                mapping_data = cast("Mapping[object, Any]", data)
                data_dict: dict[str, Any] = {str(key): value for key, value in mapping_data.items()}
                mapped: dict[str, Any] = {
                    key: data_dict[key] for key in _SETTING_KEYS if key in data_dict
                }
                if "database_path" in data_dict and "db_path" not in mapped:
                    mapped["db_path"] = data_dict["database_path"]
                unknown = sorted(set(data_dict) - set(_SETTING_KEYS) - {"database_path"})
                if unknown:
                    logger.warning(
                        "Ignoring unknown key(s) %s in configuration file %s",
                        ", ".join(unknown),
                        path,
                    )
                return mapped
            return {}

        return cast("PydanticBaseSettingsSource", _loader)


def load_settings(**overrides: Any) -> PromptLibrarySettings:
    """Return validated settings, raising SettingsError on failure."""
    try:
        return PromptLibrarySettings(**overrides)
    except SettingsError:
        raise
    except ValidationError as exc:
        raise SettingsError("Invalid Prompt Library configuration") from exc


__all__ = [
    "DEFAULT_BUSY_TIMEOUT_MS",
    "DEFAULT_DB_PATH",
    "DEFAULT_SNAPSHOT_INDENT",
    "DEFAULT_SORT_MODE",
    "PromptLibrarySettings",
    "SettingsError",
    "load_settings",
]
