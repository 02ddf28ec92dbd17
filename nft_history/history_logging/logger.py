"""
Structured logging for the token history service.

Every record carries the event, level, timestamp and module logger name (JSON
renames event to event_type).
Pipeline records add asset_id (via bind_asset) plus counts such as
event_count or address_count. LOG_FORMAT=json (default) emits one JSON
object per line; any other value uses the colored console renderer.

Imports nothing from nft_history so any module can log at import time.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import structlog

# Keys whose values never reach the log output
SECRET_KEYS = frozenset({"api_key", "opensea_api_key", "x-api-key"})


def _stamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _mask_secrets(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in SECRET_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = "***"
    return event_dict


def configure_logging(level: str | None = None, fmt: str | None = None, file: TextIO | None = None) -> None:
    """
    (Re)configure structlog. Defaults come from LOG_LEVEL / LOG_FORMAT.

    Applies to every logger from get_logger, including module-level ones
    created before the call. Output goes to ``file`` (default: sys.stdout).
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    fmt = (fmt or os.getenv("LOG_FORMAT") or "json").strip().lower()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        _stamp,
        _mask_secrets,
    ]
    if fmt == "json":
        processors.append(_event_type)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=file or sys.stdout),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger; the first positional argument is the event_type.

        logger = get_logger(__name__)
        logger.info("timeline_assembled", event_count=7, address_count=4)
    """
    return structlog.get_logger(name, logger=name)


def bind_asset(asset_id: str) -> structlog.BoundLogger:
    """Logger with asset_id ("<contract>/<tokenId>") bound to every record."""
    return get_logger("nft_history.pipeline").bind(asset_id=asset_id)
