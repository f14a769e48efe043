"""
Logging configuration for the pricing service.

Call ``setup_logging()`` once at startup (main.py does it at import time).

Two knobs:
    LOG_LEVEL          Level for the service as a whole (default: INFO)
    PRICING_LOG_LEVEL  Level for pos_pricing.pricing only. The Rule Resolver
                       logs every multiplier it applies at DEBUG, so this lets
                       one restaurant's prices be traced without turning on
                       SQL echo and access logs too. Defaults to LOG_LEVEL.

Outside DEBUG the SQLAlchemy, uvicorn access and alembic migration loggers
are held at WARNING.
"""
import logging
import os
import sys

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "uvicorn.access",
    "alembic.runtime.migration",
)


def _parse_level(raw: str | None, fallback: str) -> str:
    level = (raw or fallback).strip().upper()
    return level if level in VALID_LEVELS else fallback


def setup_logging(level: str = None) -> None:
    """
    Configure logging for the service.

    Args:
        level: Level name for the service. Falls back to LOG_LEVEL, then INFO.
               Unknown names mean INFO.
    """
    level = _parse_level(level if level is not None else os.getenv("LOG_LEVEL"), "INFO")
    pricing_level = _parse_level(os.getenv("PRICING_LOG_LEVEL"), level)

    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    logging.getLogger("pos_pricing").setLevel(getattr(logging, level))
    logging.getLogger("pos_pricing.pricing").setLevel(getattr(logging, pricing_level))

    if level != "DEBUG":
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured at %s (pricing at %s)", level, pricing_level
    )
