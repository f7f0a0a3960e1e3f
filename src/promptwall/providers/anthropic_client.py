# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Anthropic Messages API provider built on the official SDK."""

from __future__ import annotations

import logging

import anthropic

from promptwall.core.exceptions import ProviderError
from promptwall.providers.base import ProviderClient
from promptwall.verdict.prompts import SYSTEM_PROMPT

logger = logging.getLogger("promptwall.providers.anthropic")

DEFAULT_ANTHROPIC_MODEL = "claude-3-haiku-20240307"
_TEMPERATURE = 0.1
_MAX_OUTPUT_TOKENS = 200


class AnthropicProvider(ProviderClient):
    """Timeout and retry budget are delegated to the SDK client."""

    def __init__(
        self,
        *,
        api_key: str,
        endpoint: str | None = None,
        model: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 2,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self.model = model or DEFAULT_ANTHROPIC_MODEL
        self._api_key = api_key
        self._endpoint = endpoint
        self._timeout = timeout
        self._max_retries = max_retries
        self._client = client

    @property
    def name(self) -> str:
        return "anthropic"

    def _new_client(self) -> anthropic.AsyncAnthropic:
        return anthropic.AsyncAnthropic(
            api_key=self._api_key,
            base_url=self._endpoint or None,
            timeout=self._timeout,
            max_retries=self._max_retries,
        )

    async def complete(self, prompt: str) -> str:
        # A fresh SDK client per call; each call may run in its own event loop.
        client = self._client or self._new_client()
        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=_MAX_OUTPUT_TOKENS,
                temperature=_TEMPERATURE,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            raise ProviderError(f"anthropic request failed: {exc}") from exc
        finally:
            if self._client is None:
                await client.close()

        response_text = ""
        for block in response.content:
            if block.type == "text":
                response_text += block.text

        logger.debug("Anthropic response: %d chars from %s", len(response_text), self.model)
        return response_text
