"""Application configuration models and loader utilities."""

from __future__ import annotations

import codecs
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import BaseModel, Field, field_validator


class CaptureSettings(BaseModel):
    """Settings consumed by the ingestion pipeline."""

    storage_charset: str | None = Field(
        default="utf-8", description="Encoding used to decode inbound messages"
    )
    relay_domains: list[str] | None = Field(
        default=None,
        description="Recipient domain suffixes to accept; unset accepts everything",
    )

    @field_validator("storage_charset")
    @classmethod
    def _known_charset(cls, value: str | None) -> str | None:
        if value is None:
            return None
        charset = value.strip()
        if not charset:
            raise ValueError("storage_charset must not be blank")
        try:
            codecs.lookup(charset)
        except LookupError as exc:
            raise ValueError(f"Unknown storage charset '{charset}'") from exc
        return charset

    @field_validator("relay_domains", mode="before")
    @classmethod
    def _split_domains(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            value = value.split(",")
        return [domain.strip() for domain in value if domain and domain.strip()]


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    capture: CaptureSettings = Field(default_factory=CaptureSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


ENV_PREFIX = "MAIL_CAPTURE_"


def _normalize_key(raw_key: str) -> list[str]:
    """Convert an environment variable key into a nested attribute path."""
    trimmed = raw_key.removeprefix(ENV_PREFIX)
    return [segment.lower() for segment in trimmed.split("__") if segment]


def _merge_into_tree(tree: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a value to a nested dictionary given a path."""
    cursor = tree
    for segment in path[:-1]:
        next_node = cursor.setdefault(segment, {})
        cursor = cast(dict[str, Any], next_node)
    cursor[path[-1]] = value


def _collect_env_values(
    env_file: Path | str | None, *, include_environment: bool = True
) -> dict[str, Any]:
    """Load configuration values from environment variables and optional file."""
    collected: dict[str, Any] = {}

    file_values = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if key and key.startswith(ENV_PREFIX)
            }

    env_values = {}
    if include_environment:
        env_values = {
            key: value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    combined: dict[str, Any] = {**file_values, **env_values}

    for key, value in combined.items():
        path = _normalize_key(key)
        if not path:
            continue
        normalized_value: Any = value
        if isinstance(value, str) and value == "":
            normalized_value = None
        elif isinstance(value, str):
            lowercase_value = value.lower()
            if lowercase_value == "true":
                normalized_value = True
            elif lowercase_value == "false":
                normalized_value = False
        _merge_into_tree(collected, path, normalized_value)

    return collected


def _merge_overrides(tree: dict[str, Any], overrides: dict[str, Any]) -> None:
    """Merge ``overrides`` into ``tree``, descending into nested sections."""
    for key, value in overrides.items():
        current = tree.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_overrides(cast(dict[str, Any], current), value)
        else:
            tree[key] = value


@lru_cache(maxsize=1)
def _load_cached_settings(
    env_file: Path | str | None, include_environment: bool
) -> AppSettings:
    collected = _collect_env_values(env_file, include_environment=include_environment)
    return AppSettings.model_validate(collected)


def load_app_settings(
    env_file: Path | str | None = None,
    *,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load application settings, applying env files and overrides.

    Settings without overrides are cached; overrides may hold nested,
    unhashable values such as ``capture={"relay_domains": [...]}``.
    """
    if not overrides:
        return _load_cached_settings(env_file, include_environment)
    collected = _collect_env_values(env_file, include_environment=include_environment)
    _merge_overrides(collected, overrides)
    return AppSettings.model_validate(collected)


def clear_settings_cache() -> None:
    """Forget previously loaded settings."""
    _load_cached_settings.cache_clear()


__all__ = [
    "AppSettings",
    "CaptureSettings",
    "ENV_PREFIX",
    "LoggingSettings",
    "clear_settings_cache",
    "load_app_settings",
]
