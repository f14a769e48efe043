"""
Rule Resolver.

Turns one customization plus a pricing context into a money amount. The
customization's own pricing_rules win; anything they do not cover falls back to
the restaurant-wide PricingDefaults.

Price types:
    fixed       base price, whatever the context
    tiered      pricing_rules.variant_base_prices[variant id or size code],
                else base price
    multiplied  base price x size multiplier x tier multiplier, rounded
                half-up to the cent

Pizza toppings then get a placement factor (whole/half/quarter) applied to the
result and rounded again. Prices never go below zero.
"""

import logging
from decimal import Decimal

from .errors import SelectionInvalid
from .money import ZERO, round_money
from .types import (
    AmountTier,
    Customization,
    Placement,
    PriceContext,
    PriceType,
    PricingDefaults,
)

logger = logging.getLogger(__name__)

ONE = Decimal(1)


def size_multiplier(customization: Customization, size_code: str | None, defaults: PricingDefaults) -> Decimal:
    """Size multiplier from the customization's rules, then the defaults, then 1."""
    if not size_code:
        return ONE
    own = customization.rules.size_multipliers.get(size_code)
    if own is not None:
        return own
    return defaults.size_multipliers.get(size_code, ONE)


def tier_multiplier(customization: Customization, amount: AmountTier, defaults: PricingDefaults) -> Decimal:
    """Amount-tier multiplier from the customization's rules, then the defaults, then 1."""
    own = customization.rules.tier_multipliers.get(amount.value)
    if own is not None:
        return own
    return defaults.tier_multipliers.get(amount.value, ONE)


def placement_multiplier(customization: Customization, placement: Placement, defaults: PricingDefaults) -> Decimal:
    """Placement factor: per topping first, then the restaurant table."""
    key = placement.kind.value
    own = customization.rules.placement_multipliers.get(key)
    if own is not None:
        return own
    return defaults.placement_multipliers.get(key, ONE)


def tiered_price(customization: Customization, context: PriceContext) -> Decimal:
    """Variant-specific absolute price, keyed by variant id first and size code second."""
    prices = customization.rules.variant_base_prices
    for key in (context.variant_id, context.size_code):
        if key and key in prices:
            return prices[key]
    return customization.base_price


def check_selectable(customization: Customization | None, customization_id: str, index: int, item_type: str) -> Customization:
    """
    Make sure a selection may be priced at all.

    Raises:
        SelectionInvalid: If the customization is unknown, unavailable, or
                          does not apply to this item type
    """
    if customization is None:
        raise SelectionInvalid(customization_id, index, "customization not found")
    if not customization.is_available:
        raise SelectionInvalid(customization_id, index, f"{customization.name} is not available")
    if not customization.applies_to_item(item_type):
        raise SelectionInvalid(
            customization_id, index, f"{customization.name} does not apply to {item_type}"
        )
    return customization


def resolve_price(customization: Customization, context: PriceContext, defaults: PricingDefaults) -> Decimal:
    """
    Price one customization in context.

    Args:
        customization: The catalog customization being priced
        context: Item type, size, variant, amount tier and, for pizza
                 toppings only, the placement
        defaults: Restaurant-wide fallback multiplier tables

    Returns:
        Price rounded to the cent, never negative
    """
    if customization.price_type == PriceType.FIXED:
        price = customization.base_price
    elif customization.price_type == PriceType.TIERED:
        price = tiered_price(customization, context)
    else:
        size = size_multiplier(customization, context.size_code, defaults)
        tier = tier_multiplier(customization, context.amount, defaults)
        price = customization.base_price * size * tier
        logger.debug(
            "Multiplied price for %s: %s x size %s x tier %s",
            customization.name, customization.base_price, size, tier,
        )
    price = round_money(price)

    if context.placement is not None:
        factor = placement_multiplier(customization, context.placement, defaults)
        if factor != ONE:
            price = round_money(price * factor)
            logger.debug(
                "Placement %s on %s applies factor %s -> %s",
                context.placement.label, customization.name, factor, price,
            )

    return max(price, ZERO)
