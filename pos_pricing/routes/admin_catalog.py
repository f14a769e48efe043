"""
Admin Catalog Routes
====================

Endpoints:
----------
- POST /admin/catalog/cache/invalidate: Drop cached catalog snapshots

Menu edits happen in another system. After an edit, call this endpoint so
the next calculation reads fresh prices instead of waiting for the TTL:

    POST /admin/catalog/cache/invalidate?restaurant_id=<id>

Without ``restaurant_id`` every restaurant's entries are dropped.

Authentication:
---------------
Requires admin HTTP Basic Auth (see auth.py).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..auth import verify_admin_credentials
from ..catalog import CachedCatalog
from ..schemas.pricing import CacheInvalidationResponse
from ..services.pricing_service import get_catalog

logger = logging.getLogger(__name__)

admin_catalog_router = APIRouter(prefix="/admin/catalog", tags=["Admin - Catalog"])


@admin_catalog_router.post("/cache/invalidate", response_model=CacheInvalidationResponse)
def invalidate_catalog_cache(
    restaurant_id: Optional[str] = Query(None, description="Only drop this restaurant's entries"),
    admin: str = Depends(verify_admin_credentials),
    catalog=Depends(get_catalog),
) -> CacheInvalidationResponse:
    """Invalidate cached catalog entries. A no-op when caching is disabled."""
    removed = 0
    if isinstance(catalog, CachedCatalog):
        removed = catalog.invalidate(restaurant_id)
    else:
        logger.info("Catalog cache is disabled, nothing to invalidate")
    logger.info("Admin %s invalidated catalog cache (%d entries)", admin, removed)
    return CacheInvalidationResponse(restaurant_id=restaurant_id, invalidated=removed)
