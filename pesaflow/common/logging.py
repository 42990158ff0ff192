"""
Logging configuration helpers.
Every entrypoint calls `configure_logging` once so engine modules can simply ask for named loggers.
PDF rendering pulls in fpdf2 and fontTools, whose debug output is capped at WARNING here.
"""

from __future__ import annotations

import logging

from pesaflow.common.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
NOISY_LOGGERS = ("fpdf", "fontTools")

_LOGGING_CONFIGURED = False


def configure_logging(level_name: str | None = None) -> None:
    """Configure process-wide logging; an explicit level wins over LOG_LEVEL."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    if level_name is None:
        level_name = get_settings().LOG_LEVEL
    level = getattr(logging, level_name.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    _LOGGING_CONFIGURED = True
