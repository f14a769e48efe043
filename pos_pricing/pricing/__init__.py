"""
Menu Customization Pricing Engine
=================================

Computes the final price of a configured menu item (a pizza size/crust with
toppings, a chicken dinner with white meat, a sandwich with modifiers) together
with an auditable line-item breakdown.

Components:
-----------
- **rules**: Rule Resolver, prices one customization in context
- **templates**: Template Resolver, free inclusions and substitution credit
- **strategies**: Pizza / Chicken / Generic pricing strategies
- **breakdown**: Breakdown Assembler and its sum invariant
- **engine**: PricingEngine, the single entry point

Usage:
------
    from pos_pricing.pricing import PricingEngine

    engine = PricingEngine(catalog)
    breakdown = engine.calculate_price({
        "restaurant_id": "...",
        "item_type": "pizza",
        "variant_id": "...",
        "size_code": "12in",
        "crust_type": "thin",
        "selections": [{"customization_id": "...", "amount_tier": "normal", "placement": "whole"}],
    })
    breakdown.final_price  # Decimal("17.80")
"""

from .engine import PricingEngine, calculate_price
from .errors import (
    AccessDenied,
    AssemblyInvariantViolation,
    CatalogUnavailable,
    PricingError,
    PricingRuleNotFound,
    SelectionInvalid,
    ValidationError,
)
from .types import PriceBreakdown, PriceRequest, Selection

__all__ = [
    "PricingEngine",
    "calculate_price",
    "PriceBreakdown",
    "PriceRequest",
    "Selection",
    "PricingError",
    "ValidationError",
    "SelectionInvalid",
    "PricingRuleNotFound",
    "AccessDenied",
    "CatalogUnavailable",
    "AssemblyInvariantViolation",
]
