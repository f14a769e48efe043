"""
Pricing Service Wiring.

Builds the process-wide catalog and PricingEngine on first use:

    PricingEngine(CachedCatalog(SqlCatalog(db.SessionLocal)))

The cache layer is skipped when CATALOG_CACHE_ENABLED is false. Both objects
are safe to share across request threads; the engine is stateless and the
cache guards itself with a lock.

Routes get them through the FastAPI dependencies ``get_catalog`` and
``get_pricing_engine`` so tests can swap either with
``app.dependency_overrides``.
"""

import logging
import threading
from typing import Optional

from .. import config
from .. import db
from ..catalog import CachedCatalog, SqlCatalog
from ..pricing import PricingEngine

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_catalog = None
_engine: Optional[PricingEngine] = None


def _new_session():
    # Looked up on every call so a rebound db.SessionLocal is honoured
    return db.SessionLocal()


def build_catalog():
    """Create the catalog stack according to config."""
    catalog = SqlCatalog(_new_session)
    if config.CATALOG_CACHE_ENABLED:
        logger.info("Catalog cache enabled (ttl=%ss)", config.CATALOG_CACHE_TTL_SECONDS)
        return CachedCatalog(catalog, ttl_seconds=config.CATALOG_CACHE_TTL_SECONDS)
    logger.info("Catalog cache disabled")
    return catalog


def get_catalog():
    """FastAPI dependency: the shared catalog."""
    global _catalog
    if _catalog is None:
        with _lock:
            if _catalog is None:
                _catalog = build_catalog()
    return _catalog


def get_pricing_engine() -> PricingEngine:
    """FastAPI dependency: the shared PricingEngine."""
    global _engine
    if _engine is None:
        catalog = get_catalog()
        with _lock:
            if _engine is None:
                _engine = PricingEngine(catalog)
    return _engine


def reset() -> None:
    """Drop the shared catalog and engine (used after config changes and in tests)."""
    global _catalog, _engine
    with _lock:
        _catalog = None
        _engine = None
