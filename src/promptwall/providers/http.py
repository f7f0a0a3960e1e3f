# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""httpx-backed providers: OpenAI, Azure OpenAI and Gemini."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from promptwall.core.exceptions import ProviderError
from promptwall.providers.base import ProviderClient
from promptwall.verdict.prompts import SYSTEM_PROMPT

logger = logging.getLogger("promptwall.providers.http")

_BACKOFF_INITIAL = 0.2  # seconds: 0.2, 0.4, 0.8, ... capped
_BACKOFF_MAX = 5.0
_RETRYABLE_STATUS = frozenset({408, 409, 429})
_TEMPERATURE = 0.1
_MAX_OUTPUT_TOKENS = 200
_USER_AGENT = "promptwall/0.1"

DEFAULT_OPENAI_ENDPOINT = "https://api.openai.com"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_AZURE_API_VERSION = "2024-02-15-preview"
DEFAULT_GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


def _is_retryable(exc: httpx.HTTPError) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status in _RETRYABLE_STATUS or status >= 500
    return True


class HttpProvider(ProviderClient):
    """Shared request/retry loop; subclasses describe the wire format."""

    def __init__(
        self,
        *,
        url: str,
        api_key: str,
        timeout: float,
        max_retries: int,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._timeout = timeout
        self._max_retries = max_retries
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": _USER_AGENT}

    def _payload(self, prompt: str) -> dict[str, Any]:
        raise NotImplementedError

    def _extract_text(self, data: Any) -> str:
        raise NotImplementedError

    async def complete(self, prompt: str) -> str:
        """POST the prompt, retrying transient failures with exponential backoff."""
        payload = self._payload(prompt)
        attempts = self._max_retries + 1
        backoff = _BACKOFF_INITIAL

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            for attempt in range(attempts):
                try:
                    response = await client.post(self._url, json=payload, headers=self._headers())
                    response.raise_for_status()
                except httpx.HTTPError as exc:
                    if attempt < attempts - 1 and _is_retryable(exc):
                        logger.warning(
                            "%s request attempt %d/%d failed (%s), retrying in %.1fs",
                            self.name,
                            attempt + 1,
                            attempts,
                            exc,
                            backoff,
                        )
                        await asyncio.sleep(backoff)
                        backoff = min(backoff * 2, _BACKOFF_MAX)
                        continue
                    raise ProviderError(
                        f"{self.name} request failed after {attempt + 1} attempt(s): {exc}"
                    ) from exc

                try:
                    return self._extract_text(response.json())
                except (ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
                    raise ProviderError(f"{self.name} returned an unexpected payload: {exc}") from exc

        raise ProviderError(f"{self.name} request was not attempted")


# ---------------------------------------------------------------------------
# OpenAI-compatible chat completions
# ---------------------------------------------------------------------------


def _chat_messages(prompt: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


def _chat_content(data: Any) -> str:
    for choice in data["choices"]:
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if content:
            return str(content)
    return ""


class OpenAIProvider(HttpProvider):
    def __init__(
        self,
        *,
        api_key: str,
        endpoint: str | None = None,
        model: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base = (endpoint or DEFAULT_OPENAI_ENDPOINT).rstrip("/")
        super().__init__(
            url=f"{base}/v1/chat/completions",
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
            transport=transport,
        )
        self.model = model or DEFAULT_OPENAI_MODEL

    @property
    def name(self) -> str:
        return "openai"

    def _headers(self) -> dict[str, str]:
        return {**super()._headers(), "Authorization": f"Bearer {self._api_key}"}

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": _chat_messages(prompt),
            "temperature": _TEMPERATURE,
            "max_tokens": _MAX_OUTPUT_TOKENS,
        }

    def _extract_text(self, data: Any) -> str:
        return _chat_content(data)


class AzureOpenAIProvider(HttpProvider):
    """Azure OpenAI deployment; the deployment name selects the model."""

    def __init__(
        self,
        *,
        api_key: str,
        endpoint: str,
        deployment: str,
        api_version: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        version = api_version or DEFAULT_AZURE_API_VERSION
        super().__init__(
            url=(
                f"{endpoint.rstrip('/')}/openai/deployments/{deployment}"
                f"/chat/completions?api-version={version}"
            ),
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
            transport=transport,
        )
        self.deployment = deployment

    @property
    def name(self) -> str:
        return "azure"

    def _headers(self) -> dict[str, str]:
        return {**super()._headers(), "api-key": self._api_key}

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "messages": _chat_messages(prompt),
            "temperature": _TEMPERATURE,
            "max_tokens": _MAX_OUTPUT_TOKENS,
        }

    def _extract_text(self, data: Any) -> str:
        return _chat_content(data)


# ---------------------------------------------------------------------------
# Google Gemini generateContent
# ---------------------------------------------------------------------------


class GeminiProvider(HttpProvider):
    def __init__(
        self,
        *,
        api_key: str,
        endpoint: str | None = None,
        model: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base = (endpoint or DEFAULT_GEMINI_ENDPOINT).rstrip("/")
        self.model = model or DEFAULT_GEMINI_MODEL
        super().__init__(
            url=f"{base}/v1beta/models/{self.model}:generateContent",
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "gemini"

    def _headers(self) -> dict[str, str]:
        # The key travels in a header, never in the URL.
        return {**super()._headers(), "x-goog-api-key": self._api_key}

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": _TEMPERATURE,
                "maxOutputTokens": _MAX_OUTPUT_TOKENS,
            },
        }

    def _extract_text(self, data: Any) -> str:
        for candidate in data.get("candidates") or []:
            content = candidate.get("content") if isinstance(candidate, dict) else None
            parts = content.get("parts") if isinstance(content, dict) else None
            for part in parts or []:
                text = part.get("text") if isinstance(part, dict) else None
                if text:
                    return str(text)
        return ""
