"""Logging setup: one stream handler, plain or JSON output, token redaction."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, Optional

REDACTED = "[redacted]"

PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
PLAIN_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Record attributes copied into JSON output when present.
CONTEXT_FIELDS = ("request_id", "plan_id", "item_id")

_TOKEN_PATTERNS = (
    re.compile(r"(Bearer\s+)([A-Za-z0-9\-._~+/=]+)", re.IGNORECASE),
    re.compile(r"(api_token=)([^&\s]+)", re.IGNORECASE),
    re.compile(r"(X-API-Key[=:]\s*)([^&\s]+)", re.IGNORECASE),
)

_THIRD_PARTY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class Redactor:
    """Masks auth header patterns and any configured literal secrets."""

    def __init__(self, secrets: Iterable[Optional[str]] = ()) -> None:
        self.secrets = [secret.strip() for secret in secrets if secret and secret.strip()]

    def __call__(self, text: str) -> str:
        for pattern in _TOKEN_PATTERNS:
            text = pattern.sub(r"\1" + REDACTED, text)
        for secret in self.secrets:
            text = text.replace(secret, REDACTED)
        return text


class SensitiveDataFilter(logging.Filter):
    """Rewrites log records so configured secrets never reach a handler."""

    def __init__(self, secrets: Iterable[Optional[str]]):
        super().__init__()
        self.redact = Redactor(secrets)

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - standard interface
        message = record.getMessage()
        cleaned = self.redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = ()
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if isinstance(value, str):
                setattr(record, field, self.redact(value))
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - override
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def build_formatter(fmt: Optional[str]) -> logging.Formatter:
    if (fmt or "plain").lower() == "json":
        return JsonFormatter()
    return logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATEFMT)


def configure_logging(level_name: str, fmt: str, secrets: Iterable[Optional[str]] = ()) -> None:
    """Install a single redacting stream handler on the root logger.

    Uvicorn's loggers are reset to propagate into it so access and error
    lines share the same format.
    """

    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    redaction = SensitiveDataFilter(secrets)

    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(fmt))
    handler.addFilter(redaction)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    logging.captureWarnings(True)

    for name in _THIRD_PARTY_LOGGERS:
        third_party = logging.getLogger(name)
        third_party.handlers = []
        third_party.setLevel(level)
        third_party.propagate = True
        third_party.addFilter(redaction)


__all__ = [
    "REDACTED",
    "Redactor",
    "SensitiveDataFilter",
    "JsonFormatter",
    "build_formatter",
    "configure_logging",
]
