"""
Demo catalog for local development and tests.

Seeds one pizza-and-chicken restaurant with crust pricing, toppings, a
"Meat Lovers" template, a chicken dinner and a sandwich, plus a second
restaurant whose rows must never be reachable from the first.

Ids are fixed strings so requests can be written by hand:

    python -m pos_pricing.seed_demo
    curl -X POST localhost:8000/api/menu/calculate-price -H 'Content-Type: application/json' \\
        -d '{"restaurant_id": "rest-demo", "item_type": "pizza",
             "variant_id": "var-pizza-12-thin", "size_code": "12in", "crust_type": "thin",
             "selections": [{"customization_id": "cust-pepperoni"}]}'
"""

from sqlalchemy.orm import Session

from .db import SessionLocal, init_db
from .models import (
    CrustPricing,
    Customization,
    MenuItem,
    MenuItemVariant,
    PizzaTemplate,
    PizzaTemplateTopping,
    Restaurant,
)

DEMO_RESTAURANT_ID = "rest-demo"
OTHER_RESTAURANT_ID = "rest-other"

PIZZA_ITEM_ID = "item-pizza"
MEAT_LOVERS_ITEM_ID = "item-meat-lovers"
CHICKEN_ITEM_ID = "item-chicken"
SUB_ITEM_ID = "item-italian-sub"
OTHER_CHICKEN_ITEM_ID = "item-other-chicken"

PIZZA_12IN_THIN_VARIANT_ID = "var-pizza-12-thin"
PIZZA_14IN_THIN_VARIANT_ID = "var-pizza-14-thin"
MEAT_LOVERS_12IN_VARIANT_ID = "var-meat-lovers-12"
CHICKEN_DINNER_VARIANT_ID = "var-chicken-dinner"
ITALIAN_SUB_LARGE_VARIANT_ID = "var-italian-sub-large"
OTHER_CHICKEN_VARIANT_ID = "var-other-chicken"

PEPPERONI_ID = "cust-pepperoni"
MUSHROOMS_ID = "cust-mushrooms"
SAUSAGE_ID = "cust-sausage"
HAM_ID = "cust-ham"
PREMIUM_CHICKEN_ID = "cust-premium-chicken"
WELL_DONE_ID = "cust-well-done"
ANCHOVIES_ID = "cust-anchovies"
COLESLAW_ID = "cust-coleslaw"
HONEY_ID = "cust-honey"
EXTRA_MEAT_ID = "cust-extra-meat"
ADD_CHEESE_ID = "cust-add-cheese"
DOUBLE_MEAT_ID = "cust-double-meat"
OTHER_PEPPERONI_ID = "cust-other-pepperoni"

MEAT_LOVERS_TEMPLATE_ID = "tmpl-meat-lovers"
INACTIVE_TEMPLATE_ID = "tmpl-retired"

TOPPING_RULES = {"size_multipliers": {}, "tier_multipliers": {}}


def _topping(customization_id, name, category="topping_normal", base_price=1.85, **kwargs):
    return Customization(
        id=customization_id,
        restaurant_id=kwargs.pop("restaurant_id", DEMO_RESTAURANT_ID),
        name=name,
        category=category,
        base_price=base_price,
        price_type=kwargs.pop("price_type", "multiplied"),
        pricing_rules=kwargs.pop("pricing_rules", dict(TOPPING_RULES)),
        applies_to=kwargs.pop("applies_to", ["pizza"]),
        **kwargs,
    )


def seed_demo_catalog(db: Session) -> None:
    """Insert the demo catalog. Does nothing if the demo restaurant exists."""
    if db.query(Restaurant).filter(Restaurant.id == DEMO_RESTAURANT_ID).count():
        return

    db.add_all([
        Restaurant(id=DEMO_RESTAURANT_ID, name="Demo Pizza & Chicken", slug="demo", config={}),
        Restaurant(id=OTHER_RESTAURANT_ID, name="Other Kitchen", slug="other", config={}),
    ])
    db.flush()

    db.add_all([
        MenuItem(id=PIZZA_ITEM_ID, restaurant_id=DEMO_RESTAURANT_ID, name="Build Your Own Pizza",
                 item_type="pizza", base_price=11.85),
        MenuItem(id=MEAT_LOVERS_ITEM_ID, restaurant_id=DEMO_RESTAURANT_ID, name="Meat Lovers Pizza",
                 item_type="pizza", base_price=15.95),
        MenuItem(id=CHICKEN_ITEM_ID, restaurant_id=DEMO_RESTAURANT_ID, name="Fried Chicken Dinner",
                 item_type="chicken", base_price=23.00, prep_time_minutes=20),
        MenuItem(id=SUB_ITEM_ID, restaurant_id=DEMO_RESTAURANT_ID, name="Italian Sub",
                 item_type="sandwich", base_price=9.50),
        MenuItem(id=OTHER_CHICKEN_ITEM_ID, restaurant_id=OTHER_RESTAURANT_ID, name="Chicken Bucket",
                 item_type="chicken", base_price=19.00),
    ])
    db.flush()

    db.add_all([
        MenuItemVariant(id=PIZZA_12IN_THIN_VARIANT_ID, menu_item_id=PIZZA_ITEM_ID, name="12in Thin",
                        size_code="12in", crust_type="thin", price=15.95),
        MenuItemVariant(id=PIZZA_14IN_THIN_VARIANT_ID, menu_item_id=PIZZA_ITEM_ID, name="14in Thin",
                        size_code="14in", crust_type="thin", price=18.95, sort_order=1),
        MenuItemVariant(id=MEAT_LOVERS_12IN_VARIANT_ID, menu_item_id=MEAT_LOVERS_ITEM_ID, name="12in Meat Lovers",
                        size_code="12in", crust_type="thin", price=15.95),
        MenuItemVariant(id=CHICKEN_DINNER_VARIANT_ID, menu_item_id=CHICKEN_ITEM_ID, name="4 Piece Dinner",
                        serves="1", price=23.00, white_meat_upcharge=1.20, prep_time_minutes=20),
        MenuItemVariant(id=ITALIAN_SUB_LARGE_VARIANT_ID, menu_item_id=SUB_ITEM_ID, name="Large",
                        size_code="large", price=11.50),
        MenuItemVariant(id=OTHER_CHICKEN_VARIANT_ID, menu_item_id=OTHER_CHICKEN_ITEM_ID, name="8 Piece Bucket",
                        price=19.00, white_meat_upcharge=2.00),
    ])

    db.add_all([
        CrustPricing(restaurant_id=DEMO_RESTAURANT_ID, size_code="10in", crust_type="thin", base_price=11.85),
        CrustPricing(restaurant_id=DEMO_RESTAURANT_ID, size_code="12in", crust_type="thin", base_price=15.95),
        CrustPricing(restaurant_id=DEMO_RESTAURANT_ID, size_code="12in", crust_type="double_dough",
                     base_price=15.95, upcharge=1.50),
        CrustPricing(restaurant_id=DEMO_RESTAURANT_ID, size_code="12in", crust_type="gluten_free",
                     base_price=15.95, upcharge=3.00, is_available=False),
        CrustPricing(restaurant_id=DEMO_RESTAURANT_ID, size_code="14in", crust_type="thin", base_price=18.95),
        CrustPricing(restaurant_id=DEMO_RESTAURANT_ID, size_code="16in", crust_type="thin", base_price=21.95),
        CrustPricing(restaurant_id=OTHER_RESTAURANT_ID, size_code="12in", crust_type="thin", base_price=9.99),
    ])

    db.add_all([
        _topping(PEPPERONI_ID, "Pepperoni"),
        _topping(MUSHROOMS_ID, "Mushrooms"),
        _topping(SAUSAGE_ID, "Sausage"),
        _topping(HAM_ID, "Ham"),
        _topping(PREMIUM_CHICKEN_ID, "Premium Chicken", category="topping_premium", base_price=3.70),
        _topping(ANCHOVIES_ID, "Anchovies", is_available=False),
        _topping(WELL_DONE_ID, "Well Done", category="preparation_pizza", base_price=0, price_type="fixed"),
        _topping(OTHER_PEPPERONI_ID, "Pepperoni", restaurant_id=OTHER_RESTAURANT_ID),
        Customization(id=COLESLAW_ID, restaurant_id=DEMO_RESTAURANT_ID, name="Coleslaw",
                      category="sides_chicken_dinner", base_price=2.50, price_type="fixed",
                      pricing_rules={}, applies_to=["chicken"]),
        Customization(id=HONEY_ID, restaurant_id=DEMO_RESTAURANT_ID, name="Honey",
                      category="condiments_chicken", base_price=0.75, price_type="fixed",
                      pricing_rules={}, applies_to=["chicken"]),
        Customization(id=EXTRA_MEAT_ID, restaurant_id=DEMO_RESTAURANT_ID, name="Extra Meat",
                      category="modifier_sandwich", base_price=1.50, price_type="tiered",
                      pricing_rules={"variant_base_prices": {"large": 2.25}}, applies_to=["sandwich"]),
        Customization(id=ADD_CHEESE_ID, restaurant_id=DEMO_RESTAURANT_ID, name="Add Cheese",
                      category="modifier_sandwich", base_price=1.00, price_type="fixed",
                      pricing_rules={}, applies_to=["sandwich"]),
        Customization(id=DOUBLE_MEAT_ID, restaurant_id=DEMO_RESTAURANT_ID, name="Double Meat",
                      category="modifier_sandwich", base_price=2.00, price_type="multiplied",
                      pricing_rules={}, applies_to=["sandwich"]),
    ])
    db.flush()

    meat_lovers = PizzaTemplate(
        id=MEAT_LOVERS_TEMPLATE_ID,
        restaurant_id=DEMO_RESTAURANT_ID,
        menu_item_id=MEAT_LOVERS_ITEM_ID,
        name="Meat Lovers",
        credit_limit_percentage=0.50,
    )
    meat_lovers.toppings = [
        PizzaTemplateTopping(customization_id=PEPPERONI_ID, sort_order=0),
        PizzaTemplateTopping(customization_id=SAUSAGE_ID, sort_order=1),
        PizzaTemplateTopping(customization_id=HAM_ID, is_removable=False, sort_order=2),
    ]
    retired = PizzaTemplate(
        id=INACTIVE_TEMPLATE_ID,
        restaurant_id=DEMO_RESTAURANT_ID,
        menu_item_id=MEAT_LOVERS_ITEM_ID,
        name="Retired Special",
        is_active=False,
    )
    retired.toppings = [PizzaTemplateTopping(customization_id=PEPPERONI_ID)]
    db.add_all([meat_lovers, retired])
    db.commit()


if __name__ == "__main__":
    init_db()
    session = SessionLocal()
    try:
        seed_demo_catalog(session)
    finally:
        session.close()
