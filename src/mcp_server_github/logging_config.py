"""Structured stderr logging for the MCP GitHub server.

stdout carries the MCP stdio transport, so every log line goes to stderr as a
single JSON object. Call-level context (tool name, request id, timing) and
classified GitHub failures (error kind, HTTP status) are attached through
``extra=`` and surface as top-level JSON keys.
"""

import json
import logging
import re
import sys

# GitHub credential shapes that must never reach a log line
_TOKEN_RE = re.compile(r"\b(?:gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})")
_BEARER_RE = re.compile(r"(?i)\bbearer\s+\S+")

REDACTED = "<redacted>"

# Chatty third-party loggers capped at WARNING
QUIET_LOGGERS = ("asyncio", "aiohttp", "mcp")


def redact_tokens(text: str) -> str:
    """Mask anything that looks like a GitHub token or bearer credential."""
    text = _BEARER_RE.sub(f"Bearer {REDACTED}", text)
    return _TOKEN_RE.sub(REDACTED, text)


class SafeStreamHandler(logging.StreamHandler):
    """
    Stream handler that gracefully handles closed streams during shutdown.
    """

    def handleError(self, record):
        error = sys.exc_info()[1]
        # stderr may already be closed when the stdio transport shuts down
        if isinstance(error, (ValueError, OSError)) and (
            "closed file" in str(error).lower() or "bad file descriptor" in str(error).lower()
        ):
            return
        super().handleError(record)


class StructuredLogFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys: timestamp, level, logger, message, then whichever of
    ``CONTEXT_FIELDS`` the record carries, then ``exception``.
    Messages and tracebacks are passed through ``redact_tokens``.
    """

    CONTEXT_FIELDS = ("tool", "request_id", "duration_ms", "error_kind", "status")

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_tokens(record.getMessage()),
        }
        for field in self.CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value

        exception = None
        if record.exc_info:
            exception = self.formatException(record.exc_info)
        elif record.exc_text:
            exception = record.exc_text
        if exception:
            log_record["exception"] = redact_tokens(exception)
        return json.dumps(log_record, ensure_ascii=False)


def configure_logging(log_level: str = "INFO") -> None:
    """Install the JSON stderr handler on the root logger."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    handler = SafeStreamHandler(sys.stderr)
    handler.setFormatter(StructuredLogFormatter())
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel("WARNING")
