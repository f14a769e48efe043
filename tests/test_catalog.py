"""
Tests for the SQL catalog adapter and the TTL catalog cache.
"""
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pos_pricing.catalog import CachedCatalog, SqlCatalog
from pos_pricing.models import Customization as CustomizationRow
from pos_pricing.models import Restaurant
from pos_pricing.pricing.errors import CatalogUnavailable
from pos_pricing.pricing.types import CustomizationKind, ItemKind, PriceType, PricingDefaults
from pos_pricing.seed_demo import (
    ANCHOVIES_ID,
    CHICKEN_DINNER_VARIANT_ID,
    COLESLAW_ID,
    DEMO_RESTAURANT_ID,
    HAM_ID,
    MEAT_LOVERS_TEMPLATE_ID,
    OTHER_PEPPERONI_ID,
    OTHER_RESTAURANT_ID,
    PEPPERONI_ID,
    SAUSAGE_ID,
)


class TestSqlCatalog:
    """Row to snapshot conversion and lookups."""

    def test_variant_carries_owner_and_kind(self, sql_catalog):
        variant = sql_catalog.get_variant(CHICKEN_DINNER_VARIANT_ID)
        assert variant.restaurant_id == DEMO_RESTAURANT_ID
        assert variant.kind == ItemKind.CHICKEN
        assert variant.base_price == Decimal("23.00")
        assert variant.white_meat_upcharge == Decimal("1.20")
        assert variant.menu_item_name == "Fried Chicken Dinner"

    def test_missing_variant(self, sql_catalog):
        assert sql_catalog.get_variant("var-nope") is None

    def test_crust_pricing(self, sql_catalog):
        crust = sql_catalog.get_crust_pricing(DEMO_RESTAURANT_ID, "12in", "double_dough")
        assert (crust.base_price, crust.upcharge) == (Decimal("15.95"), Decimal("1.50"))

    def test_unavailable_crust_is_hidden(self, sql_catalog):
        assert sql_catalog.get_crust_pricing(DEMO_RESTAURANT_ID, "12in", "gluten_free") is None

    def test_customizations_are_restaurant_scoped(self, sql_catalog):
        found = sql_catalog.list_customizations(
            DEMO_RESTAURANT_ID, [PEPPERONI_ID, OTHER_PEPPERONI_ID, ANCHOVIES_ID, COLESLAW_ID]
        )
        assert set(found) == {PEPPERONI_ID, ANCHOVIES_ID, COLESLAW_ID}
        assert found[PEPPERONI_ID].price_type == PriceType.MULTIPLIED
        assert found[PEPPERONI_ID].kind == CustomizationKind.TOPPING
        assert found[ANCHOVIES_ID].is_available is False
        assert found[COLESLAW_ID].kind == CustomizationKind.MODIFIER
        assert found[COLESLAW_ID].applies_to == frozenset({"chicken"})

    def test_empty_id_list(self, sql_catalog):
        assert sql_catalog.list_customizations(DEMO_RESTAURANT_ID, []) == {}

    def test_template_toppings_keep_order(self, sql_catalog):
        template = sql_catalog.get_template(MEAT_LOVERS_TEMPLATE_ID)
        assert [t.customization_id for t in template.toppings] == [PEPPERONI_ID, SAUSAGE_ID, HAM_ID]
        assert template.toppings[2].is_removable is False
        assert template.credit_limit_percentage == Decimal("0.50")

    def test_pricing_defaults_without_overrides(self, sql_catalog):
        defaults = sql_catalog.get_pricing_defaults(DEMO_RESTAURANT_ID)
        expected = PricingDefaults.from_config()
        assert dict(defaults.size_multipliers) == dict(expected.size_multipliers)
        assert dict(defaults.placement_multipliers) == dict(expected.placement_multipliers)
        assert defaults.strict_template_tiers is False

    def test_pricing_defaults_with_restaurant_overrides(self, sql_catalog, session_factory):
        session = session_factory()
        restaurant = session.get(Restaurant, OTHER_RESTAURANT_ID)
        restaurant.config = {"pricing": {"placement_multipliers": {"quarter": 0.75}}}
        session.commit()
        session.close()

        defaults = sql_catalog.get_pricing_defaults(OTHER_RESTAURANT_ID)
        assert defaults.placement_multipliers["quarter"] == Decimal("0.75")
        assert defaults.placement_multipliers["half"] == Decimal("1.0")

    def test_bad_overrides_make_catalog_unavailable(self, sql_catalog, session_factory):
        session = session_factory()
        restaurant = session.get(Restaurant, OTHER_RESTAURANT_ID)
        restaurant.config = {"pricing": {"tier_multipliers": {"extra": -2}}}
        session.commit()
        session.close()

        with pytest.raises(CatalogUnavailable):
            sql_catalog.get_pricing_defaults(OTHER_RESTAURANT_ID)

    def test_negative_price_makes_catalog_unavailable(self, sql_catalog, session_factory):
        session = session_factory()
        session.get(CustomizationRow, PEPPERONI_ID).base_price = -1
        session.commit()
        session.close()

        with pytest.raises(CatalogUnavailable):
            sql_catalog.list_customizations(DEMO_RESTAURANT_ID, [PEPPERONI_ID])

    def test_database_error_makes_catalog_unavailable(self):
        # No tables: every query fails
        engine = create_engine("sqlite:///:memory:", poolclass=StaticPool)
        catalog = SqlCatalog(sessionmaker(bind=engine))
        with pytest.raises(CatalogUnavailable):
            catalog.get_variant(CHICKEN_DINNER_VARIANT_ID)


class CountingCatalog:
    """Wraps a catalog and counts calls per method."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = {}

    def _count(self, name):
        self.calls[name] = self.calls.get(name, 0) + 1

    def get_variant(self, variant_id):
        self._count("get_variant")
        return self.inner.get_variant(variant_id)

    def get_crust_pricing(self, restaurant_id, size_code, crust_type):
        self._count("get_crust_pricing")
        return self.inner.get_crust_pricing(restaurant_id, size_code, crust_type)

    def list_customizations(self, restaurant_id, ids):
        ids = list(ids)
        self._count("list_customizations")
        self.calls.setdefault("customization_ids", []).append(ids)
        return self.inner.list_customizations(restaurant_id, ids)

    def get_template(self, template_id):
        self._count("get_template")
        return self.inner.get_template(template_id)

    def get_pricing_defaults(self, restaurant_id):
        self._count("get_pricing_defaults")
        return self.inner.get_pricing_defaults(restaurant_id)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def counting(sql_catalog):
    return CountingCatalog(sql_catalog)


@pytest.fixture
def cached(counting, clock):
    return CachedCatalog(counting, ttl_seconds=60, clock=clock)


class TestCachedCatalog:
    """TTL cache behaviour."""

    def test_hit_skips_inner_catalog(self, cached, counting):
        first = cached.get_variant(CHICKEN_DINNER_VARIANT_ID)
        second = cached.get_variant(CHICKEN_DINNER_VARIANT_ID)
        assert first is second
        assert counting.calls["get_variant"] == 1

    def test_entries_expire(self, cached, counting, clock):
        cached.get_template(MEAT_LOVERS_TEMPLATE_ID)
        clock.now += 61
        cached.get_template(MEAT_LOVERS_TEMPLATE_ID)
        assert counting.calls["get_template"] == 2

    def test_misses_are_not_cached(self, cached, counting):
        assert cached.get_variant("var-nope") is None
        assert cached.get_variant("var-nope") is None
        assert counting.calls["get_variant"] == 2
        assert len(cached) == 0

    def test_only_missing_customizations_are_fetched(self, cached, counting):
        cached.list_customizations(DEMO_RESTAURANT_ID, [PEPPERONI_ID])
        found = cached.list_customizations(DEMO_RESTAURANT_ID, [PEPPERONI_ID, SAUSAGE_ID])
        assert set(found) == {PEPPERONI_ID, SAUSAGE_ID}
        assert counting.calls["customization_ids"] == [[PEPPERONI_ID], [SAUSAGE_ID]]

    def test_invalidate_one_restaurant(self, cached, counting):
        cached.get_pricing_defaults(DEMO_RESTAURANT_ID)
        cached.get_pricing_defaults(OTHER_RESTAURANT_ID)
        cached.get_crust_pricing(DEMO_RESTAURANT_ID, "12in", "thin")

        assert cached.invalidate(DEMO_RESTAURANT_ID) == 2
        assert len(cached) == 1

        cached.get_pricing_defaults(OTHER_RESTAURANT_ID)
        cached.get_pricing_defaults(DEMO_RESTAURANT_ID)
        assert counting.calls["get_pricing_defaults"] == 3

    def test_invalidate_everything(self, cached):
        cached.get_variant(CHICKEN_DINNER_VARIANT_ID)
        cached.get_pricing_defaults(OTHER_RESTAURANT_ID)
        assert cached.invalidate() == 2
        assert len(cached) == 0

    def test_menu_edit_visible_after_invalidate(self, cached, session_factory):
        assert cached.list_customizations(DEMO_RESTAURANT_ID, [PEPPERONI_ID])[PEPPERONI_ID].base_price == Decimal("1.85")

        session = session_factory()
        session.get(CustomizationRow, PEPPERONI_ID).base_price = 1.95
        session.commit()
        session.close()

        assert cached.list_customizations(DEMO_RESTAURANT_ID, [PEPPERONI_ID])[PEPPERONI_ID].base_price == Decimal("1.85")
        cached.invalidate(DEMO_RESTAURANT_ID)
        assert cached.list_customizations(DEMO_RESTAURANT_ID, [PEPPERONI_ID])[PEPPERONI_ID].base_price == Decimal("1.95")
