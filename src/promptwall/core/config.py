# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Application configuration via environment variables, .env and config files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from promptwall.core.constants import (
    DEFAULT_BASELINE_CHARS,
    DEFAULT_FAMILY_DAMPENING,
    DEFAULT_MAX_LENGTH_FACTOR,
    DEFAULT_MIN_LENGTH_FACTOR,
    RISK_THRESHOLD_HIGH,
    RISK_THRESHOLD_MEDIUM,
)
from promptwall.core.exceptions import ConfigurationError
from promptwall.models.score import RiskConfig

# Config-file sections flattened into prefixed setting names.
_SECTIONS = ("llm", "risk")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PROMPTWALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Rules
    rules_dir: Path = Path("rules")

    # Logging
    log_level: str = "WARNING"
    log_format: str = "text"

    # LLM provider
    llm_provider: str = "openai"
    llm_api_key: str = ""
    llm_endpoint: str | None = None
    llm_model: str | None = None
    llm_deployment: str | None = None
    llm_api_version: str | None = None
    llm_timeout_secs: float = 30.0
    llm_max_retries: int = 2
    providers_config: Path = Path("llm_providers.yaml")

    @field_validator("llm_provider", "llm_api_key", mode="before")
    @classmethod
    def _strip(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("llm_max_retries")
    @classmethod
    def _non_negative_retries(cls, v: int) -> int:
        if v < 0:
            msg = "llm_max_retries must not be negative"
            raise ValueError(msg)
        return v

    # Tail mode
    tail_interval: float = 2.0

    # Risk scoring
    risk_family_dampening: float = DEFAULT_FAMILY_DAMPENING
    risk_baseline_chars: int = DEFAULT_BASELINE_CHARS
    risk_min_length_factor: float = DEFAULT_MIN_LENGTH_FACTOR
    risk_max_length_factor: float = DEFAULT_MAX_LENGTH_FACTOR
    risk_medium_threshold: float = RISK_THRESHOLD_MEDIUM
    risk_high_threshold: float = RISK_THRESHOLD_HIGH

    def risk_config(self) -> RiskConfig:
        try:
            return RiskConfig(
                family_dampening=self.risk_family_dampening,
                baseline_chars=self.risk_baseline_chars,
                min_length_factor=self.risk_min_length_factor,
                max_length_factor=self.risk_max_length_factor,
                medium_threshold=self.risk_medium_threshold,
                high_threshold=self.risk_high_threshold,
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid risk configuration: {exc}") from exc


def get_settings() -> Settings:
    return Settings()


def _flatten_config(data: dict[str, Any]) -> dict[str, Any]:
    """Turn ``{"llm": {"model": "x"}}`` into ``{"llm_model": "x"}``."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if key in _SECTIONS and isinstance(value, dict):
            for sub_key, sub_value in value.items():
                flat[f"{key}_{sub_key}"] = sub_value
        else:
            flat[key] = value
    return flat


def load_settings(config_file: Path | None = None) -> Settings:
    """Build settings, layering *config_file* underneath the environment.

    The file may be YAML or JSON.  Values already supplied through
    ``PROMPTWALL_*`` variables or ``.env`` take precedence over the file.
    """
    try:
        env_settings = Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings: {exc}") from exc

    if config_file is None:
        return env_settings

    try:
        raw = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to load configuration file {config_file}: {exc}") from exc

    if raw is None:
        return env_settings
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Expected a mapping at top level in {config_file}, got {type(raw).__name__}"
        )

    explicit = env_settings.model_fields_set
    values = {k: v for k, v in _flatten_config(raw).items() if k not in explicit}
    values.update({name: getattr(env_settings, name) for name in explicit})

    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings in {config_file}: {exc}") from exc
