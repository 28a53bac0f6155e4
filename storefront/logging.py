"""
Centralized logging configuration for the storefront client.

Usage:
    from storefront.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Cart hydrated")
    logger.warning("Remote sync failed", exc_info=True)

Environment:
    LOG_LEVEL       - root level name (default INFO)
    STOREFRONT_ENV  - "production" switches to the compact format
"""

import logging
import os
import sys
from functools import cache

# Detailed format for local development
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Compact format for hosted runtimes that add their own timestamps
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Libraries that log every backend request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest", "realtime")


def _get_log_level() -> int:
    """Get log level from environment or default to INFO."""
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _configure_root_logger() -> None:
    """Configure root logger with a stdout handler."""
    root = logging.getLogger()

    # Only configure if the host application has not already done so
    if root.handlers:
        return

    root.setLevel(_get_log_level())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_get_log_level())

    is_production = os.environ.get("STOREFRONT_ENV") == "production"
    formatter = logging.Formatter(LOG_FORMAT_SIMPLE if is_production else LOG_FORMAT)
    handler.setFormatter(formatter)

    root.addHandler(handler)

    # Every cart sync is a PostgREST call; keep request lines out of INFO
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# Configure once on module import
_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """
    Escape characters that could forge log entries (CWE-117).

    Product ids, search terms and emails all come from the shopper, so
    anything we log from them goes through here first.
    """
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")  # Remove null bytes
    )


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    Sanitize a user or product ID for logging.

    Args:
        id_value: ID value to sanitize (can be None)

    Returns:
        First 8 escaped characters, or "N/A" if empty
    """
    if not id_value:
        return "N/A"
    safe_value = _escape_log_injection(str(id_value))
    return safe_value[:8] if len(safe_value) > 8 else safe_value


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """
    Sanitize free text (e.g. a catalog search term) for logging.

    Args:
        value: String value to sanitize (can be None)
        max_length: Maximum length to keep (default: 50)

    Returns:
        Escaped string truncated with "..." past max_length, or "N/A" if empty
    """
    if not value:
        return "N/A"
    safe_value = _escape_log_injection(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
