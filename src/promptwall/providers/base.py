# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract base class for verdict providers."""

from __future__ import annotations

import abc
import json

from promptwall.core.constants import VerdictLabel


class ProviderClient(abc.ABC):
    """Base class for all language-model providers.

    A provider accepts a prompt and returns raw response text.  Timeouts and
    retries are enforced inside :meth:`complete`; once its budget is spent it
    raises :class:`~promptwall.core.exceptions.ProviderError`.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Provider name (e.g. ``'openai'``)."""

    @abc.abstractmethod
    async def complete(self, prompt: str) -> str:
        """Send *prompt* and return the provider's raw text response."""


class NoopProvider(ProviderClient):
    """Stand-in used when no provider is configured."""

    @property
    def name(self) -> str:
        return "noop"

    async def complete(self, prompt: str) -> str:
        return json.dumps(
            {
                "label": VerdictLabel.UNKNOWN.value,
                "rationale": "No language-model provider configured; heuristic-only verdict.",
                "mitigation": "Configure a provider to receive enriched guidance.",
            }
        )
