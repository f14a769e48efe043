"""
Catalog Accessor
================

Read-only access to the menu catalog for the pricing engine. The engine only
talks to the ``Catalog`` protocol; this module provides:

- **SqlCatalog**: reads the SQLAlchemy catalog tables and converts rows into
  immutable pricing snapshots (pos_pricing.pricing.types). Database failures
  surface as CatalogUnavailable; not-found lookups return None (or are left
  out of the customization mapping) so the engine decides what they mean.

- **CachedCatalog**: wraps any Catalog with a read-mostly TTL cache. Entries
  are immutable snapshots tagged with their restaurant so a menu edit can be
  followed by ``invalidate(restaurant_id)``. Misses are not cached.

Customization lookups return every requested row of the restaurant, including
unavailable ones and ones for other item types, so the engine can say exactly
why a selection is invalid.

Thread Safety:
--------------
CachedCatalog guards its entry map with a threading.Lock. The lock is never
held while the inner catalog is queried.

Usage:
------
    from pos_pricing.catalog import CachedCatalog, SqlCatalog
    from pos_pricing.db import SessionLocal

    catalog = CachedCatalog(SqlCatalog(SessionLocal))
    variant = catalog.get_variant(variant_id)
"""

import logging
import threading
import time
from typing import Callable, Iterable, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import config
from . import models
from .pricing.errors import CatalogUnavailable
from .pricing.money import to_decimal
from .pricing.types import (
    AmountTier,
    CrustPrice,
    Customization,
    PriceType,
    PricingDefaults,
    PricingRules,
    Template,
    TemplateTopping,
    Variant,
    money_or_zero,
)

logger = logging.getLogger(__name__)


class Catalog(Protocol):
    """What the pricing engine needs from the menu catalog."""

    def get_variant(self, variant_id: str) -> Optional[Variant]:
        ...

    def get_crust_pricing(self, restaurant_id: str, size_code: str, crust_type: str) -> Optional[CrustPrice]:
        ...

    def list_customizations(self, restaurant_id: str, ids: Iterable[str]) -> dict[str, Customization]:
        ...

    def get_template(self, template_id: str) -> Optional[Template]:
        ...

    def get_pricing_defaults(self, restaurant_id: str) -> PricingDefaults:
        ...


# =============================================================================
# Row -> snapshot conversion
# =============================================================================

def variant_from_row(row: models.MenuItemVariant) -> Variant:
    menu_item = row.menu_item
    return Variant(
        id=row.id,
        menu_item_id=row.menu_item_id,
        restaurant_id=menu_item.restaurant_id,
        item_type=menu_item.item_type,
        name=row.name,
        menu_item_name=menu_item.name,
        base_price=money_or_zero(row.price),
        size_code=row.size_code,
        crust_type=row.crust_type,
        white_meat_upcharge=money_or_zero(row.white_meat_upcharge),
        prep_time_minutes=row.prep_time_minutes or menu_item.prep_time_minutes,
    )


def crust_from_row(row: models.CrustPricing) -> CrustPrice:
    return CrustPrice(
        restaurant_id=row.restaurant_id,
        size_code=row.size_code,
        crust_type=row.crust_type,
        base_price=money_or_zero(row.base_price),
        upcharge=money_or_zero(row.upcharge),
    )


def customization_from_row(row: models.Customization) -> Customization:
    return Customization(
        id=row.id,
        restaurant_id=row.restaurant_id,
        name=row.name,
        category=row.category,
        base_price=money_or_zero(row.base_price),
        price_type=PriceType((row.price_type or "fixed").lower()),
        rules=PricingRules.from_json(row.pricing_rules),
        applies_to=frozenset(str(item_type).lower() for item_type in (row.applies_to or [])),
        is_available=bool(row.is_available),
    )


def template_from_row(row: models.PizzaTemplate) -> Template:
    toppings = tuple(
        TemplateTopping(
            customization_id=topping.customization_id,
            default_amount=AmountTier((topping.default_amount or "normal").lower()),
            substitution_tier=topping.substitution_tier,
            is_removable=bool(topping.is_removable),
        )
        for topping in row.toppings
    )
    return Template(
        id=row.id,
        restaurant_id=row.restaurant_id,
        menu_item_id=row.menu_item_id,
        name=row.name,
        toppings=toppings,
        credit_limit_percentage=to_decimal(row.credit_limit_percentage),
        is_active=bool(row.is_active),
    )


# =============================================================================
# SQL catalog
# =============================================================================

class SqlCatalog:
    """
    Catalog backed by the SQLAlchemy models.

    Args:
        session_factory: Callable returning a new Session (e.g. SessionLocal)
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _read(self, description: str, reader):
        db = self._session_factory()
        try:
            return reader(db)
        except SQLAlchemyError as e:
            logger.error("Catalog read failed (%s): %s", description, e)
            raise CatalogUnavailable(f"Catalog read failed: {description}") from e
        except ValueError as e:
            # Bad catalog data (negative price, unknown price_type, bad config)
            logger.error("Catalog data invalid (%s): %s", description, e)
            raise CatalogUnavailable(f"Catalog data invalid: {description}") from e
        finally:
            db.close()

    def get_variant(self, variant_id: str) -> Optional[Variant]:
        def reader(db: Session):
            row = db.query(models.MenuItemVariant).filter(models.MenuItemVariant.id == variant_id).one_or_none()
            return variant_from_row(row) if row else None

        return self._read(f"variant {variant_id}", reader)

    def get_crust_pricing(self, restaurant_id: str, size_code: str, crust_type: str) -> Optional[CrustPrice]:
        def reader(db: Session):
            row = (
                db.query(models.CrustPricing)
                .filter(
                    models.CrustPricing.restaurant_id == restaurant_id,
                    models.CrustPricing.size_code == size_code,
                    models.CrustPricing.crust_type == crust_type,
                    models.CrustPricing.is_available.is_(True),
                )
                .one_or_none()
            )
            return crust_from_row(row) if row else None

        return self._read(f"crust pricing {size_code}/{crust_type}", reader)

    def list_customizations(self, restaurant_id: str, ids: Iterable[str]) -> dict[str, Customization]:
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return {}

        def reader(db: Session):
            rows = (
                db.query(models.Customization)
                .filter(
                    models.Customization.restaurant_id == restaurant_id,
                    models.Customization.id.in_(wanted),
                )
                .all()
            )
            return {row.id: customization_from_row(row) for row in rows}

        return self._read(f"{len(wanted)} customizations", reader)

    def get_template(self, template_id: str) -> Optional[Template]:
        def reader(db: Session):
            row = db.query(models.PizzaTemplate).filter(models.PizzaTemplate.id == template_id).one_or_none()
            return template_from_row(row) if row else None

        return self._read(f"template {template_id}", reader)

    def get_pricing_defaults(self, restaurant_id: str) -> PricingDefaults:
        def reader(db: Session):
            row = db.query(models.Restaurant).filter(models.Restaurant.id == restaurant_id).one_or_none()
            overrides = ((row.config or {}).get("pricing") if row else None) or {}
            return PricingDefaults.from_config(overrides)

        return self._read(f"pricing defaults for {restaurant_id}", reader)


# =============================================================================
# Cached catalog
# =============================================================================

class CachedCatalog:
    """
    Read-mostly TTL cache in front of another Catalog.

    Args:
        inner: The catalog to read through to
        ttl_seconds: Entry lifetime
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        inner: Catalog,
        ttl_seconds: int = config.CATALOG_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._inner = inner
        self._ttl = ttl_seconds
        self._clock = clock
        # key -> (restaurant_id, expires_at, value)
        self._entries: dict[tuple, tuple[str, float, object]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _get(self, key: tuple):
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry[1] <= now:
                del self._entries[key]
                return None
            return entry[2]

    def _put(self, key: tuple, restaurant_id: str, value) -> None:
        expires_at = self._clock() + self._ttl
        with self._lock:
            self._entries[key] = (restaurant_id, expires_at, value)

    def invalidate(self, restaurant_id: str | None = None) -> int:
        """
        Drop cached entries.

        Args:
            restaurant_id: Only drop this restaurant's entries; None drops all

        Returns:
            Number of entries removed
        """
        with self._lock:
            if restaurant_id is None:
                removed = len(self._entries)
                self._entries.clear()
            else:
                stale = [key for key, entry in self._entries.items() if entry[0] == restaurant_id]
                for key in stale:
                    del self._entries[key]
                removed = len(stale)
        logger.info("Invalidated %d catalog cache entries (restaurant=%s)", removed, restaurant_id or "all")
        return removed

    def get_variant(self, variant_id: str) -> Optional[Variant]:
        key = ("variant", variant_id)
        cached = self._get(key)
        if cached is not None:
            return cached
        variant = self._inner.get_variant(variant_id)
        if variant is not None:
            self._put(key, variant.restaurant_id, variant)
        return variant

    def get_crust_pricing(self, restaurant_id: str, size_code: str, crust_type: str) -> Optional[CrustPrice]:
        key = ("crust", restaurant_id, size_code, crust_type)
        cached = self._get(key)
        if cached is not None:
            return cached
        crust = self._inner.get_crust_pricing(restaurant_id, size_code, crust_type)
        if crust is not None:
            self._put(key, restaurant_id, crust)
        return crust

    def list_customizations(self, restaurant_id: str, ids: Iterable[str]) -> dict[str, Customization]:
        found: dict[str, Customization] = {}
        missing = []
        for customization_id in dict.fromkeys(ids):
            cached = self._get(("customization", restaurant_id, customization_id))
            if cached is not None:
                found[customization_id] = cached
            else:
                missing.append(customization_id)

        if missing:
            fetched = self._inner.list_customizations(restaurant_id, missing)
            for customization_id, customization in fetched.items():
                self._put(("customization", restaurant_id, customization_id), restaurant_id, customization)
            found.update(fetched)
        return found

    def get_template(self, template_id: str) -> Optional[Template]:
        key = ("template", template_id)
        cached = self._get(key)
        if cached is not None:
            return cached
        template = self._inner.get_template(template_id)
        if template is not None:
            self._put(key, template.restaurant_id, template)
        return template

    def get_pricing_defaults(self, restaurant_id: str) -> PricingDefaults:
        key = ("defaults", restaurant_id)
        cached = self._get(key)
        if cached is not None:
            return cached
        defaults = self._inner.get_pricing_defaults(restaurant_id)
        self._put(key, restaurant_id, defaults)
        return defaults
