# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Build a ProviderClient from application settings."""

from __future__ import annotations

import logging
from enum import StrEnum

import httpx

from promptwall.core.config import Settings
from promptwall.core.exceptions import ConfigurationError
from promptwall.providers.anthropic_client import AnthropicProvider
from promptwall.providers.base import NoopProvider, ProviderClient
from promptwall.providers.http import AzureOpenAIProvider, GeminiProvider, OpenAIProvider

logger = logging.getLogger("promptwall.providers.factory")


class ProviderKind(StrEnum):
    NOOP = "noop"
    OPENAI = "openai"
    AZURE = "azure"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


_ALIASES: dict[str, ProviderKind] = {
    "noop": ProviderKind.NOOP,
    "openai": ProviderKind.OPENAI,
    "open-ai": ProviderKind.OPENAI,
    "azure": ProviderKind.AZURE,
    "azure-openai": ProviderKind.AZURE,
    "anthropic": ProviderKind.ANTHROPIC,
    "claude": ProviderKind.ANTHROPIC,
    "gemini": ProviderKind.GEMINI,
    "google": ProviderKind.GEMINI,
    "google-gemini": ProviderKind.GEMINI,
}


def resolve_provider(name: str) -> ProviderKind:
    """Map a provider name or alias (case-insensitive) to a :class:`ProviderKind`."""
    kind = _ALIASES.get(name.strip().lower())
    if kind is None:
        raise ConfigurationError(f"unsupported LLM provider `{name}`")
    return kind


def build_client(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ProviderClient:
    """Create the provider selected by ``settings.llm_provider``.

    Raises
    ------
    ConfigurationError
        For an unknown provider, a missing API key, or an Azure setup without
        endpoint or deployment.
    """
    kind = resolve_provider(settings.llm_provider)
    if kind == ProviderKind.NOOP:
        return NoopProvider()

    if not settings.llm_api_key:
        raise ConfigurationError(
            f"PROMPTWALL_LLM_API_KEY must be set to use the `{kind}` provider"
        )

    common = {
        "api_key": settings.llm_api_key,
        "timeout": settings.llm_timeout_secs,
        "max_retries": settings.llm_max_retries,
    }

    if kind == ProviderKind.OPENAI:
        client: ProviderClient = OpenAIProvider(
            endpoint=settings.llm_endpoint,
            model=settings.llm_model,
            transport=transport,
            **common,
        )
    elif kind == ProviderKind.AZURE:
        if not settings.llm_endpoint:
            raise ConfigurationError("Azure OpenAI requires an endpoint (PROMPTWALL_LLM_ENDPOINT)")
        deployment = settings.llm_deployment or settings.llm_model
        if not deployment:
            raise ConfigurationError(
                "Azure OpenAI requires a deployment (PROMPTWALL_LLM_DEPLOYMENT or PROMPTWALL_LLM_MODEL)"
            )
        client = AzureOpenAIProvider(
            endpoint=settings.llm_endpoint,
            deployment=deployment,
            api_version=settings.llm_api_version,
            transport=transport,
            **common,
        )
    elif kind == ProviderKind.ANTHROPIC:
        client = AnthropicProvider(
            endpoint=settings.llm_endpoint,
            model=settings.llm_model,
            **common,
        )
    else:
        client = GeminiProvider(
            endpoint=settings.llm_endpoint,
            model=settings.llm_model,
            transport=transport,
            **common,
        )

    logger.debug("Built %s provider client", client.name)
    return client
