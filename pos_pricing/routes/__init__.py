"""
Routes Package for the POS Pricing Service
==========================================

API route definitions, one APIRouter per concern.

**Order-Entry Routes:**
- pricing.py: Price calculation for a configured menu item

**Admin Routes (require authentication):**
- admin_catalog.py: Catalog cache invalidation after menu edits

Error Handling:
---------------
Pricing failures map to HTTP status codes:
- 400: Validation error or invalid selection (user correctable)
- 403: Variant missing or owned by another restaurant
- 404: No crust pricing for the requested pizza size/crust
- 500: Breakdown failed its own consistency check
- 503: Catalog unavailable

Usage:
------
    from pos_pricing.routes import pricing_router, admin_catalog_router
    app.include_router(pricing_router)
"""

from .pricing import pricing_router
from .admin_catalog import admin_catalog_router

__all__ = [
    "pricing_router",
    "admin_catalog_router",
]
