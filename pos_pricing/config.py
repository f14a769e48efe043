"""
Configuration Module for the POS Pricing Service
================================================

This module centralizes the configuration settings, environment variables, and
pricing default tables used throughout the pricing service. Values are parsed
and typed at module load time so configuration errors surface at startup.

Configuration Categories:
-------------------------
- **Database**: Connection URL for the menu catalog.

- **Catalog Cache**: TTL and on/off switch for the read-mostly cache that sits
  in front of catalog lookups (customizations, templates, crust prices).

- **Admin Authentication**: Credentials for the admin-only endpoints.

- **CORS Settings**: Cross-Origin Resource Sharing for order-entry frontends.

- **Pricing Defaults**: Restaurant-wide fallback multiplier tables and
  preparation-time constants. Any restaurant can override the multiplier
  tables through ``restaurants.config["pricing"]``.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./pos_pricing.db")
- CATALOG_CACHE_ENABLED: Enable/disable catalog caching (default: "true")
- CATALOG_CACHE_TTL_SECONDS: Cache entry lifetime (default: 300)
- STRICT_TEMPLATE_TIERS: Charge template defaults picked at a different
  amount tier than the template declares (default: "false")
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")
- ADMIN_USERNAME: Admin username (default: "admin")
- ADMIN_PASSWORD: Admin password (required for admin access)

Usage:
------
    from pos_pricing.config import (
        DEFAULT_SIZE_MULTIPLIERS,
        DEFAULT_TIER_MULTIPLIERS,
        CATALOG_CACHE_TTL_SECONDS,
    )
"""

import os
from decimal import Decimal
from typing import Dict, List


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./pos_pricing.db")


# =============================================================================
# Catalog Cache Configuration
# =============================================================================
# Cached entries are immutable snapshots. A stale topping price is a pricing
# bug, so keep the TTL short and invalidate through the admin endpoint after
# menu edits.

CATALOG_CACHE_ENABLED: bool = os.getenv("CATALOG_CACHE_ENABLED", "true").lower() == "true"
CATALOG_CACHE_TTL_SECONDS: int = int(os.getenv("CATALOG_CACHE_TTL_SECONDS", "300"))


# =============================================================================
# CORS Configuration
# =============================================================================

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]


# =============================================================================
# Admin Authentication Configuration
# =============================================================================
# ADMIN_PASSWORD must be set in production for admin access to work.

ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")


# =============================================================================
# Money
# =============================================================================

CURRENCY_PLACES: int = 2


# =============================================================================
# Pricing Default Tables
# =============================================================================
# Restaurant-wide fallbacks used when a customization's own pricing_rules do
# not carry an entry. Multipliers are Decimals so results do not drift.

# Topping size multipliers roughly track pizza area. The catalog uses both
# inch codes and named sizes for the same pies.
DEFAULT_SIZE_MULTIPLIERS: Dict[str, Decimal] = {
    "10in": Decimal("0.865"),
    "12in": Decimal("1.0"),
    "14in": Decimal("1.135"),
    "16in": Decimal("1.351"),
    "small": Decimal("0.865"),
    "medium": Decimal("1.0"),
    "large": Decimal("1.135"),
    "xlarge": Decimal("1.351"),
}

DEFAULT_TIER_MULTIPLIERS: Dict[str, Decimal] = {
    "light": Decimal("1.0"),
    "normal": Decimal("1.0"),
    "extra": Decimal("2.0"),
    "xxtra": Decimal("3.0"),
}

# Placement factors are a lookup table, not geometry: a topping on one
# quarter costs 1.65 where the whole pie costs 1.85.
DEFAULT_PLACEMENT_MULTIPLIERS: Dict[str, Decimal] = {
    "whole": Decimal("1.0"),
    "half": Decimal("1.0"),
    "quarter": Decimal("0.892"),
}

WHITE_MEAT_MULTIPLIERS: Dict[str, int] = {
    "none": 0,
    "normal": 1,
    "extra": 2,
    "xxtra": 3,
}

STRICT_TEMPLATE_TIERS: bool = os.getenv("STRICT_TEMPLATE_TIERS", "false").lower() == "true"


# =============================================================================
# Preparation Time Estimates (minutes)
# =============================================================================

PIZZA_BASE_PREP_MINUTES: int = 15
PIZZA_PREP_MINUTES_PER_SELECTION: Decimal = Decimal("1.5")
PIZZA_PREP_SELECTION_CAP: int = 10

CHICKEN_BASE_PREP_MINUTES: int = 20
CHICKEN_PREP_MINUTES_PER_SELECTION: Decimal = Decimal("2")
CHICKEN_PREP_SELECTION_CAP: int = 8
CHICKEN_WHITE_MEAT_PREP_BONUS: int = 3
CHICKEN_XXTRA_WHITE_MEAT_PREP_BONUS: int = 2

GENERIC_BASE_PREP_MINUTES: int = 10
GENERIC_PREP_MINUTES_PER_SELECTION: Decimal = Decimal("1")
GENERIC_PREP_SELECTION_CAP: int = 5
