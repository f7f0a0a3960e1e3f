# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Diagnostic logging for promptwall with provider-credential redaction.

Every record is redacted before it is emitted, whichever formatter is active.
Scan results are reported on stdout by the CLI; log records only ever go to
stderr so they never corrupt ``--json`` output.
"""

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import IO, Any

from promptwall.core.exceptions import ConfigurationError

LOG_FORMATS = ("text", "json")

# Provider credentials that can surface in exception messages or URLs.
REDACT_PATTERNS = [
    re.compile(r"(sk-ant-[a-zA-Z0-9\-]{10})[a-zA-Z0-9\-_]*"),
    re.compile(r"(sk-(?:proj-)?[a-zA-Z0-9]{10})[a-zA-Z0-9\-_]*"),
    re.compile(r"(AIza[0-9A-Za-z\-_]{6})[0-9A-Za-z\-_]{29}"),
    re.compile(r"(Bearer\s+[a-zA-Z0-9\-._~+/]{10})[a-zA-Z0-9\-._~+/]*=*"),
    re.compile(r"((?:x-goog-api-key|api-key|x-api-key)[\"']?\s*[:=]\s*[\"']?)[^\s\"',}]+", re.IGNORECASE),
    re.compile(r"((?:api[_-]?key|key)=)[^&\s]+", re.IGNORECASE),
]

# ``extra=`` fields copied into JSON records.
_CONTEXT_FIELDS = ("provider", "risk_band", "risk_score", "findings", "chars", "duration_ms")

# Chatty dependencies that log every request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "anthropic")


def redact_sensitive(text: str) -> str:
    """Mask the tail of every credential-shaped substring in *text*."""
    for pattern in REDACT_PATTERNS:
        text = pattern.sub(r"\1[REDACTED]", text)
    return text


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with scan context lifted from ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_sensitive(record.getMessage()),
        }
        context = {
            name: getattr(record, name) for name in _CONTEXT_FIELDS if hasattr(record, name)
        }
        if context:
            log_entry["context"] = context
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = redact_sensitive(
                f"{type(record.exc_info[1]).__name__}: {record.exc_info[1]}"
            )
        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return redact_sensitive(super().format(record))


def setup_logging(level: str = "WARNING", fmt: str = "text", stream: IO[str] | None = None) -> None:
    """Configure the ``promptwall`` logger hierarchy.

    Parameters
    ----------
    level:
        Level name; unknown names fall back to ``WARNING``.
    fmt:
        ``"text"`` or ``"json"``.
    stream:
        Destination; defaults to stderr.

    Raises
    ------
    ConfigurationError
        If *fmt* is not a supported log format.
    """
    fmt = fmt.strip().lower()
    if fmt not in LOG_FORMATS:
        raise ConfigurationError(
            f"unsupported log format `{fmt}` (expected one of: {', '.join(LOG_FORMATS)})"
        )

    resolved = getattr(logging, level.upper(), logging.WARNING)
    root = logging.getLogger("promptwall")
    root.setLevel(resolved)
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            TextFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
