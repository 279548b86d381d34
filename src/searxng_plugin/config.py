"""Application configuration contract."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from searxng_plugin.errors import ConfigError

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_MS = 15_000
DEFAULT_COUNT = 5


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")
    searxng_url: str = Field(alias="SEARXNG_URL", default="")


class PluginConfig(BaseModel):
    """Plugin configuration as supplied by the host runtime."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    base_url: str | None = Field(alias="baseUrl", default=None)
    timeout_ms: int | None = Field(alias="timeoutMs", default=None)
    default_count: int | None = Field(alias="defaultCount", default=None)


@dataclass(frozen=True, slots=True)
class ToolConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    default_count: int = DEFAULT_COUNT

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000


def resolve_tool_config(
    plugin_config: Mapping[str, Any] | PluginConfig | None = None,
    settings: Settings | None = None,
) -> ToolConfig:
    """Layer plugin config over the SEARXNG_URL env var over built-in defaults."""
    if isinstance(plugin_config, PluginConfig):
        cfg = plugin_config
    else:
        try:
            cfg = PluginConfig.model_validate(dict(plugin_config or {}))
        except ValidationError as exc:
            raise ConfigError(f"invalid plugin configuration: {exc}") from exc

    settings = settings or get_settings()
    base_url = (cfg.base_url or "").strip() or settings.searxng_url or DEFAULT_BASE_URL
    return ToolConfig(
        base_url=base_url,
        timeout_ms=DEFAULT_TIMEOUT_MS if cfg.timeout_ms is None else cfg.timeout_ms,
        default_count=DEFAULT_COUNT if cfg.default_count is None else cfg.default_count,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
