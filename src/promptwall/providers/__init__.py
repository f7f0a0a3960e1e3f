# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Language-model providers used for verdict enrichment."""

from promptwall.providers.anthropic_client import AnthropicProvider
from promptwall.providers.base import NoopProvider, ProviderClient
from promptwall.providers.factory import ProviderKind, build_client, resolve_provider
from promptwall.providers.http import AzureOpenAIProvider, GeminiProvider, OpenAIProvider
from promptwall.providers.profiles import ProviderProfile, ProviderProfiles

__all__ = [
    "AnthropicProvider",
    "AzureOpenAIProvider",
    "GeminiProvider",
    "NoopProvider",
    "OpenAIProvider",
    "ProviderClient",
    "ProviderKind",
    "ProviderProfile",
    "ProviderProfiles",
    "build_client",
    "resolve_provider",
]
