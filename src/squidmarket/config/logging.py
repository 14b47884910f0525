"""structlog setup shared by the API process and the maintenance scripts."""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from squidmarket.config.settings import get_settings

# Event keys holding chain addresses, logged in canonical lowercase form
ADDRESS_KEYS = frozenset(
    {"address", "collection", "owner", "seller", "marketplace", "launchpad", "creator"}
)

# Substrings marking a key whose value must never reach the log output
SECRET_KEY_MARKERS = (
    "api_key",
    "supabase_key",
    "private_key",
    "secret",
    "password",
    "authorization",
)


def _is_secret(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SECRET_KEY_MARKERS)


def scrub_event(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Lowercase address values and drop secret-bearing keys."""
    for key in [k for k in event_dict if _is_secret(k)]:
        del event_dict[key]

    for key in ADDRESS_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str) and value.startswith(("0x", "0X")):
            event_dict[key] = value.lower()

    return event_dict


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger."""
    settings = get_settings()
    log_level = getattr(logging, settings.log_level)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.debug
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            scrub_event,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # httpx and supabase log through the stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
