"""Unified configuration schema for offline_docs.

Defines Pydantic models for the YAML config structure with dedicated
sections for the remote API and logging, plus an adapter that turns the
``api`` section into the ``load_config`` fallbacks.

Usage:
    from offline_docs.config_schema import build_config, to_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
    config = to_config(unified, overrides={"api_url": "https://..."})
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from .config import Config, load_config

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class ApiSettings(BaseModel):
    """Remote API connection settings.

    All fields are optional so env vars and arguments can supply them at
    runtime instead.
    """

    url: str | None = Field(default=None, description="API base URL")
    timeout: float = Field(
        default=30.0,
        ge=1,
        le=600,
        description="Request timeout in seconds (1-600)",
    )
    insecure: bool = Field(
        default=False,
        description="Disable SSL verification (development only)",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    fence_stale_acks: bool = Field(
        default=True,
        description="Keep documents edited during a sync dirty",
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: "text" or "json".
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: str = Field(default="text", description="text or json")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has defaults, so ``UnifiedConfig()`` is always valid.
    """

    api: ApiSettings = Field(default_factory=ApiSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the dict returned by
    ``load_hierarchical_config()``.

    Missing sections get defaults.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)


def to_config(
    unified: UnifiedConfig,
    overrides: dict | None = None,
) -> Config:
    """Resolve a ``Config`` from explicit overrides, env vars and *unified*.

    Override keys: api_url, timeout, insecure, debug, fence_stale_acks.

    Raises:
        ValueError: If no API URL can be resolved or a value is invalid.
    """
    overrides = overrides or {}
    fallbacks = unified.api.model_dump(exclude_none=True)
    return load_config(
        api_url=overrides.get("api_url"),
        timeout=overrides.get("timeout"),
        insecure=overrides.get("insecure"),
        debug=overrides.get("debug"),
        fence_stale_acks=overrides.get("fence_stale_acks"),
        yaml_fallbacks=fallbacks,
    )
