# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Per-provider credential profiles loaded from ``llm_providers.yaml``."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from promptwall.core.config import Settings
from promptwall.core.exceptions import ConfigurationError

logger = logging.getLogger("promptwall.providers.profiles")

# Profile attribute -> Settings field it fills.
_PROFILE_FIELDS = {
    "api_key": "llm_api_key",
    "endpoint": "llm_endpoint",
    "model": "llm_model",
    "deployment": "llm_deployment",
    "api_version": "llm_api_version",
    "timeout_secs": "llm_timeout_secs",
    "max_retries": "llm_max_retries",
}


class ProviderProfile(BaseModel):
    """Credentials and defaults for one named provider."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    api_key: str | None = None
    endpoint: str | None = None
    model: str | None = None
    deployment: str | None = None
    api_version: str | None = None
    timeout_secs: float | None = Field(default=None, gt=0)
    max_retries: int | None = Field(default=None, ge=0)


class ProviderProfiles:
    """Profiles keyed case-insensitively by provider name."""

    def __init__(self, profiles: Iterable[ProviderProfile] = ()) -> None:
        self._entries = {profile.name.lower(): profile for profile in profiles}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> ProviderProfile | None:
        return self._entries.get(name.strip().lower())

    def names(self) -> list[str]:
        return sorted(profile.name for profile in self._entries.values())

    @classmethod
    def load(cls, path: Path) -> ProviderProfiles:
        """Load profiles from *path*; a missing file yields no profiles.

        The file holds either a top-level ``providers:`` list or a bare list.
        """
        if not path.is_file():
            logger.debug("No provider profile file at %s", path)
            return cls()

        try:
            data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Failed to read provider profiles {path}: {exc}") from exc

        if data is None:
            return cls()
        if isinstance(data, dict):
            data = data.get("providers") or []
        if not isinstance(data, list):
            raise ConfigurationError(
                f"Expected a list of provider profiles in {path}, got {type(data).__name__}"
            )

        try:
            profiles = [ProviderProfile(**item) for item in data]
        except (TypeError, ValidationError) as exc:
            raise ConfigurationError(f"Invalid provider profile in {path}: {exc}") from exc

        logger.info("Loaded %d provider profile(s) from %s", len(profiles), path)
        return cls(profiles)

    def apply(self, settings: Settings, provider: str | None = None) -> Settings:
        """Return *settings* with gaps filled from the profile for *provider*.

        Values the environment or config file set explicitly are kept.
        """
        profile = self.get(provider or settings.llm_provider)
        if profile is None:
            return settings

        explicit = settings.model_fields_set
        updates: dict[str, Any] = {"llm_provider": profile.name}
        for attr, field_name in _PROFILE_FIELDS.items():
            value = getattr(profile, attr)
            if value is not None and field_name not in explicit:
                updates[field_name] = value
        return settings.model_copy(update=updates)
