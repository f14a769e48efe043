"""
End-to-end tests for PricingEngine against the seeded demo catalog.
"""
import logging
from decimal import Decimal

import pytest

from pos_pricing.models import Customization as CustomizationRow
from pos_pricing.models import Restaurant
from pos_pricing.pricing import PricingEngine, calculate_price
from pos_pricing.pricing.errors import (
    AccessDenied,
    CatalogUnavailable,
    PricingRuleNotFound,
    SelectionInvalid,
    ValidationError,
)
from pos_pricing.pricing.types import LineItemKind, PriceRequest
from pos_pricing.seed_demo import (
    ANCHOVIES_ID,
    CHICKEN_DINNER_VARIANT_ID,
    COLESLAW_ID,
    DEMO_RESTAURANT_ID,
    DOUBLE_MEAT_ID,
    EXTRA_MEAT_ID,
    ADD_CHEESE_ID,
    HAM_ID,
    HONEY_ID,
    INACTIVE_TEMPLATE_ID,
    ITALIAN_SUB_LARGE_VARIANT_ID,
    MEAT_LOVERS_12IN_VARIANT_ID,
    MEAT_LOVERS_TEMPLATE_ID,
    MUSHROOMS_ID,
    OTHER_CHICKEN_VARIANT_ID,
    OTHER_PEPPERONI_ID,
    OTHER_RESTAURANT_ID,
    PEPPERONI_ID,
    PIZZA_12IN_THIN_VARIANT_ID,
    PREMIUM_CHICKEN_ID,
    SAUSAGE_ID,
    WELL_DONE_ID,
)


def pizza_request(selections=(), **overrides):
    request = {
        "restaurant_id": DEMO_RESTAURANT_ID,
        "item_type": "pizza",
        "variant_id": PIZZA_12IN_THIN_VARIANT_ID,
        "size_code": "12in",
        "crust_type": "thin",
        "selections": list(selections),
    }
    request.update(overrides)
    return request


def meat_lovers_request(selections, **overrides):
    return pizza_request(
        selections,
        **{
            "variant_id": MEAT_LOVERS_12IN_VARIANT_ID,
            "template_id": MEAT_LOVERS_TEMPLATE_ID,
            **overrides,
        },
    )


def chicken_request(selections=(), **overrides):
    request = {
        "restaurant_id": DEMO_RESTAURANT_ID,
        "item_type": "chicken",
        "variant_id": CHICKEN_DINNER_VARIANT_ID,
        "selections": list(selections),
    }
    request.update(overrides)
    return request


class ExplodingCatalog:
    """Fails the test if the engine touches the catalog."""

    def __getattr__(self, name):
        raise AssertionError(f"catalog.{name} called before validation finished")


class BrokenCatalog:
    def get_variant(self, variant_id):
        raise CatalogUnavailable("Catalog read failed: variant")


class TestPizzaPricing:
    """Pizza scenarios."""

    def test_whole_pepperoni(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(
            pizza_request([{"customization_id": PEPPERONI_ID, "amount_tier": "normal", "placement": "whole"}])
        )
        assert breakdown.final_price == Decimal("17.80")
        assert breakdown.base_price == Decimal("15.95")
        assert breakdown.topping_cost == Decimal("1.85")
        assert [(line.name, line.price) for line in breakdown.line_items] == [
            ("12IN THIN Base", Decimal("15.95")),
            ("Pepperoni", Decimal("1.85")),
        ]
        assert breakdown.estimated_prep_time == 17
        assert breakdown.size_code == "12in"
        assert breakdown.crust_type == "thin"

    def test_quarter_pepperoni(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(
            pizza_request([{"customization_id": PEPPERONI_ID, "placement": "quarter-1"}])
        )
        assert breakdown.final_price == Decimal("17.60")
        assert breakdown.line_items[1].placement == "quarter-1"

    def test_premium_topping(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(pizza_request([{"customization_id": PREMIUM_CHICKEN_ID}]))
        assert breakdown.final_price == Decimal("19.65")

    def test_bigger_size_scales_toppings(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(
            pizza_request([{"customization_id": PEPPERONI_ID}], size_code="14in")
        )
        # 18.95 + 1.85 x 1.135 (2.10)
        assert breakdown.final_price == Decimal("21.05")

    def test_crust_upcharge_line(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(
            pizza_request([{"customization_id": WELL_DONE_ID}], crust_type="double_dough")
        )
        assert breakdown.crust_upcharge == Decimal("1.50")
        assert breakdown.final_price == Decimal("17.45")
        assert breakdown.line_items[1].kind == LineItemKind.CRUST
        assert breakdown.line_items[2].kind == LineItemKind.MODIFIER

    @pytest.mark.parametrize("placement", ["quarter-1", "left"])
    def test_placement_on_preparation_rejected(self, pricing_engine, placement):
        selections = [
            {"customization_id": PEPPERONI_ID},
            {"customization_id": WELL_DONE_ID, "placement": placement},
        ]
        with pytest.raises(ValidationError) as exc_info:
            pricing_engine.calculate_price(pizza_request(selections))
        assert exc_info.value.field == "placement"
        assert "selections[1]" in exc_info.value.message

    def test_whole_placement_on_preparation_accepted(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(
            pizza_request([{"customization_id": WELL_DONE_ID, "placement": "whole"}])
        )
        assert breakdown.final_price == Decimal("15.95")
        assert breakdown.line_items[-1].placement is None

    def test_unavailable_crust(self, pricing_engine):
        with pytest.raises(PricingRuleNotFound):
            pricing_engine.calculate_price(pizza_request(crust_type="gluten_free"))

    def test_unknown_size(self, pricing_engine):
        with pytest.raises(PricingRuleNotFound):
            pricing_engine.calculate_price(pizza_request(size_code="18in"))

    def test_lines_follow_selection_order(self, pricing_engine):
        selections = [{"customization_id": MUSHROOMS_ID}, {"customization_id": PEPPERONI_ID}]
        breakdown = pricing_engine.calculate_price(pizza_request(selections))
        assert [line.customization_id for line in breakdown.line_items[1:]] == [MUSHROOMS_ID, PEPPERONI_ID]

    def test_same_request_same_breakdown(self, pricing_engine):
        request = pizza_request([
            {"customization_id": PEPPERONI_ID, "amount_tier": "extra", "placement": "left"},
            {"customization_id": MUSHROOMS_ID, "placement": "q2"},
        ])
        assert pricing_engine.calculate_price(request) == pricing_engine.calculate_price(request)


class TestTemplatePricing:
    """Specialty template defaults and substitution credit."""

    def test_defaults_are_free(self, pricing_engine):
        selections = [{"customization_id": cid} for cid in (PEPPERONI_ID, SAUSAGE_ID, HAM_ID)]
        breakdown = pricing_engine.calculate_price(meat_lovers_request(selections))
        assert breakdown.final_price == Decimal("15.95")
        assert breakdown.line_items[1].name == "Meat Lovers - Includes Default Toppings"
        assert all(line.is_default for line in breakdown.line_items[2:])
        assert breakdown.template_info.name == "Meat Lovers"
        assert breakdown.template_info.default_customization_ids == (PEPPERONI_ID, SAUSAGE_ID, HAM_ID)

    def test_substitution_credit(self, pricing_engine):
        selections = [{"customization_id": cid} for cid in (PEPPERONI_ID, HAM_ID, MUSHROOMS_ID)]
        breakdown = pricing_engine.calculate_price(meat_lovers_request(selections))
        # Sausage removed: 1.85 x 0.50 credit against the 1.85 mushrooms
        assert breakdown.substitution_credit == Decimal("0.93")
        assert breakdown.final_price == Decimal("16.87")
        assert breakdown.line_items[-1].kind == LineItemKind.CREDIT
        assert breakdown.line_items[-1].price == Decimal("-0.93")
        assert sum(line.price for line in breakdown.line_items) == breakdown.final_price

    def test_removal_alone_earns_no_credit(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(
            meat_lovers_request([{"customization_id": PEPPERONI_ID}, {"customization_id": HAM_ID}])
        )
        assert breakdown.substitution_credit == Decimal("0.00")
        assert breakdown.final_price == Decimal("15.95")

    def test_tier_mismatch_is_free_by_default(self, pricing_engine):
        selections = [
            {"customization_id": PEPPERONI_ID, "amount_tier": "extra"},
            {"customization_id": SAUSAGE_ID},
            {"customization_id": HAM_ID},
        ]
        breakdown = pricing_engine.calculate_price(meat_lovers_request(selections))
        assert breakdown.final_price == Decimal("15.95")

    def test_strict_tiers_charge_mismatch(self, pricing_engine, session_factory):
        session = session_factory()
        restaurant = session.get(Restaurant, DEMO_RESTAURANT_ID)
        restaurant.config = {"pricing": {"strict_template_tiers": True}}
        session.commit()
        session.close()

        selections = [
            {"customization_id": PEPPERONI_ID, "amount_tier": "extra"},
            {"customization_id": SAUSAGE_ID},
            {"customization_id": HAM_ID},
        ]
        breakdown = pricing_engine.calculate_price(meat_lovers_request(selections))
        assert breakdown.final_price == Decimal("19.65")
        assert breakdown.line_items[2].kind == LineItemKind.TOPPING

    def test_inactive_template_prices_everything(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(
            meat_lovers_request([{"customization_id": PEPPERONI_ID}], template_id=INACTIVE_TEMPLATE_ID)
        )
        assert breakdown.final_price == Decimal("17.80")
        assert breakdown.template_info is None

    def test_template_for_other_item_is_ignored(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(
            pizza_request([{"customization_id": PEPPERONI_ID}], template_id=MEAT_LOVERS_TEMPLATE_ID)
        )
        assert breakdown.final_price == Decimal("17.80")


class TestChickenPricing:
    """Chicken scenarios."""

    def test_extra_white_meat(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(chicken_request(white_meat_tier="extra"))
        assert breakdown.final_price == Decimal("25.40")
        assert breakdown.white_meat_cost == Decimal("2.40")
        assert breakdown.white_meat_upcharge == Decimal("1.20")
        assert breakdown.variant_name == "4 Piece Dinner"
        assert breakdown.estimated_prep_time == 23

    def test_add_ons(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(
            chicken_request([{"customization_id": COLESLAW_ID}, {"customization_id": HONEY_ID}])
        )
        assert breakdown.modifier_cost == Decimal("3.25")
        assert breakdown.final_price == Decimal("26.25")

    def test_placement_rejected(self, pricing_engine):
        with pytest.raises(ValidationError) as exc_info:
            pricing_engine.calculate_price(
                chicken_request([{"customization_id": HONEY_ID, "placement": "left"}])
            )
        assert exc_info.value.field == "placement"


class TestGenericPricing:
    """Sandwich (generic) scenarios."""

    def test_modifiers(self, pricing_engine):
        breakdown = pricing_engine.calculate_price({
            "restaurant_id": DEMO_RESTAURANT_ID,
            "item_type": "sandwich",
            "variant_id": ITALIAN_SUB_LARGE_VARIANT_ID,
            "selections": [{"customization_id": EXTRA_MEAT_ID}, {"customization_id": ADD_CHEESE_ID}],
        })
        assert breakdown.line_items[0].name == "Italian Sub - Large"
        assert breakdown.modifier_cost == Decimal("3.25")
        assert breakdown.final_price == Decimal("14.75")
        assert breakdown.estimated_prep_time == 12

    def test_multiplied_modifier_rejected(self, pricing_engine):
        with pytest.raises(SelectionInvalid):
            pricing_engine.calculate_price({
                "restaurant_id": DEMO_RESTAURANT_ID,
                "item_type": "sandwich",
                "variant_id": ITALIAN_SUB_LARGE_VARIANT_ID,
                "selections": [{"customization_id": DOUBLE_MEAT_ID}],
            })


class TestErrors:
    """Failure modes."""

    @pytest.mark.parametrize("missing", ["restaurant_id", "variant_id", "item_type", "size_code", "crust_type"])
    def test_missing_fields_fail_before_catalog_access(self, missing):
        request = pizza_request()
        request[missing] = None
        with pytest.raises(ValidationError) as exc_info:
            PricingEngine(ExplodingCatalog()).calculate_price(request)
        assert exc_info.value.field == missing

    def test_bad_amount_tier(self):
        with pytest.raises(ValidationError, match="amount_tier"):
            PricingEngine(ExplodingCatalog()).calculate_price(
                pizza_request([{"customization_id": PEPPERONI_ID, "amount_tier": "heaps"}])
            )

    def test_bad_placement(self):
        with pytest.raises(ValidationError, match="placement"):
            PricingEngine(ExplodingCatalog()).calculate_price(
                pizza_request([{"customization_id": PEPPERONI_ID, "placement": "quarter-5"}])
            )

    def test_variant_of_other_restaurant(self, pricing_engine):
        with pytest.raises(AccessDenied):
            pricing_engine.calculate_price(chicken_request(variant_id=OTHER_CHICKEN_VARIANT_ID))

    def test_unknown_variant(self, pricing_engine):
        with pytest.raises(AccessDenied):
            pricing_engine.calculate_price(pizza_request(variant_id="var-nope"))

    def test_item_type_must_match_variant(self, pricing_engine):
        with pytest.raises(ValidationError, match="does not match"):
            pricing_engine.calculate_price(chicken_request(item_type="sandwich"))

    @pytest.mark.parametrize("customization_id,reason", [
        ("cust-nope", "not found"),
        (OTHER_PEPPERONI_ID, "not found"),
        (ANCHOVIES_ID, "not available"),
        (COLESLAW_ID, "does not apply to pizza"),
    ])
    def test_invalid_selection(self, pricing_engine, customization_id, reason):
        selections = [{"customization_id": PEPPERONI_ID}, {"customization_id": customization_id}]
        with pytest.raises(SelectionInvalid) as exc_info:
            pricing_engine.calculate_price(pizza_request(selections))
        assert exc_info.value.index == 1
        assert exc_info.value.customization_id == customization_id
        assert reason in exc_info.value.reason

    def test_catalog_failure_propagates(self):
        with pytest.raises(CatalogUnavailable):
            calculate_price(BrokenCatalog(), chicken_request())

    def test_failures_are_logged(self, pricing_engine, caplog):
        with caplog.at_level(logging.WARNING, logger="pos_pricing"):
            with pytest.raises(AccessDenied):
                pricing_engine.calculate_price(pizza_request(variant_id="var-nope"))
        assert any("access_denied" in record.getMessage() for record in caplog.records)

    def test_accepts_price_request(self, pricing_engine):
        request = PriceRequest.from_dict(pizza_request([{"customization_id": PEPPERONI_ID}]))
        assert pricing_engine.calculate_price(request).final_price == Decimal("17.80")

    def test_other_restaurant_can_price_its_own_variant(self, pricing_engine):
        breakdown = pricing_engine.calculate_price(
            chicken_request(restaurant_id=OTHER_RESTAURANT_ID, variant_id=OTHER_CHICKEN_VARIANT_ID,
                            white_meat_tier="normal")
        )
        assert breakdown.final_price == Decimal("21.00")

    def test_topping_tiers_checked_against_restaurant_tiers(self, pricing_engine, session_factory):
        session = session_factory()
        session.get(Restaurant, DEMO_RESTAURANT_ID).config = {"pricing": {"tier_multipliers": {"extra": 4, "xxtra": 5}}}
        session.get(CustomizationRow, MUSHROOMS_ID).pricing_rules = {"tier_multipliers": {"xxtra": 3.5}}
        session.commit()
        session.close()

        with pytest.raises(CatalogUnavailable, match=MUSHROOMS_ID):
            pricing_engine.calculate_price(pizza_request([{"customization_id": MUSHROOMS_ID}]))

    def test_bad_topping_rules_never_price_at_zero(self, pricing_engine, session_factory):
        session = session_factory()
        session.get(CustomizationRow, MUSHROOMS_ID).pricing_rules = {"size_multipliers": {"12in": -1}}
        session.commit()
        session.close()

        with pytest.raises(CatalogUnavailable):
            pricing_engine.calculate_price(pizza_request([{"customization_id": MUSHROOMS_ID}]))

    def test_quarter_never_costs_more_than_whole(self, pricing_engine, session_factory):
        session = session_factory()
        session.get(CustomizationRow, MUSHROOMS_ID).pricing_rules = {"placement_multipliers": {"quarter": 1.5}}
        session.commit()
        session.close()

        with pytest.raises(CatalogUnavailable):
            pricing_engine.calculate_price(
                pizza_request([{"customization_id": MUSHROOMS_ID, "placement": "quarter-2"}])
            )
