"""
Structured JSON logging for decoding and listing.

Every record carries event_type, level, timestamp and logger. Decoder
events carry the account kind, layout label and layout version
(bind_layout); listing events carry the account address (bind_account).

Imports nothing from stream_mirror; every other module imports this one.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# JSON output by default (LOG_FORMAT=json); human-readable with LOG_FORMAT=console
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog() -> None:
    """Configure structlog once at import: JSON or console, timestamp, level, event_type."""
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if LOG_FORMAT == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

    Log with event_type (first arg) and optional context:
        logger = get_logger(__name__)
        logger.debug("layout_selected", kind="stream", version=1, size=500)
    Output (JSON): {"event_type": "layout_selected", "kind": "stream", "version": 1,
    "size": 500, "timestamp": "...", "level": "debug", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_account(address: str) -> structlog.BoundLogger:
    """Return a logger with account bound to all subsequent log calls."""
    return get_logger("stream_mirror").bind(account=address)


def bind_layout(kind: str, layout: str, version: int) -> structlog.BoundLogger:
    """
    Return a decoder logger with the selected layout bound.

        bind_layout("stream", "stream_v1", 1).debug("layout_selected", size=500)
    """
    return get_logger("stream_mirror.decoder").bind(kind=kind, layout=layout, version=version)
