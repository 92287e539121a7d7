from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_completed: int = Field(default=50, ge=0)
    max_completed_millis: int = Field(default=5 * 60 * 1000, ge=0)
    auto_cleanup: bool = True


ConfigOverride = Union[TrackerConfig, Mapping[str, Any]]


def _as_partial(override: ConfigOverride) -> dict[str, Any]:
    if isinstance(override, BaseModel):
        # Only what the caller actually set counts as an override.
        return override.model_dump(exclude_unset=True)
    return dict(override)


def _deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in source.items():
        if value is None:
            continue
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            target[key] = _deep_merge(dict(current), value)
        elif isinstance(value, Mapping):
            target[key] = _deep_merge({}, value)
        else:
            target[key] = value
    return target


def merge_config(*overrides: ConfigOverride | None) -> TrackerConfig:
    """
    Fold partial overrides onto the defaults, left to right.

    Each field is taken from the last override that specifies it; ``None`` means
    "not specified". The result is always fully populated and validated.
    """
    merged = TrackerConfig().model_dump()
    for override in overrides:
        if override is None:
            continue
        merged = _deep_merge(merged, _as_partial(override))
    return TrackerConfig.model_validate(merged)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    tracker_max_completed: int | None = Field(default=None, alias="TRACKER_MAX_COMPLETED")
    tracker_max_completed_millis: int | None = Field(default=None, alias="TRACKER_MAX_COMPLETED_MILLIS")
    tracker_auto_cleanup: bool | None = Field(default=None, alias="TRACKER_AUTO_CLEANUP")
    tracker_excluded_paths: list[str] = Field(
        default_factory=lambda: ["/api/requests", "/api/requests/cleanup"],
        alias="TRACKER_EXCLUDED_PATHS",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    enable_status_endpoint: bool = Field(default=True, alias="ENABLE_STATUS_ENDPOINT")

    @property
    def tracker_overrides(self) -> dict[str, Any]:
        # Unset env vars stay None and are skipped by merge_config.
        return {
            "max_completed": self.tracker_max_completed,
            "max_completed_millis": self.tracker_max_completed_millis,
            "auto_cleanup": self.tracker_auto_cleanup,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
