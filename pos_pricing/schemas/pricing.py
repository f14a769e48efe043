"""
Price Calculation Schemas
=========================

Request and response bodies for ``POST /api/menu/calculate-price``.

The request schema only checks shapes. Everything that depends on meaning
(required fields per item type, known amount tiers, placement strings) is
validated by the pricing engine so HTTP callers and in-process callers get the
same errors.

Money goes over the wire as floats rounded to the cent, matching the rest of
the menu API.

Usage:
------
    POST /api/menu/calculate-price
    {
        "restaurant_id": "...",
        "item_type": "pizza",
        "variant_id": "...",
        "size_code": "12in",
        "crust_type": "thin",
        "selections": [
            {"customization_id": "...", "amount_tier": "normal", "placement": "whole"}
        ]
    }
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ..pricing.types import PriceBreakdown


def _money(value: Decimal) -> float:
    return float(value)


class SelectionIn(BaseModel):
    """
    One requested customization.

    Attributes:
        customization_id: Customization to add
        amount_tier: light, normal, extra or xxtra (default: normal)
        placement: Pizza only: whole, left, right, quarter-N (default: whole)
    """
    customization_id: str
    amount_tier: Optional[str] = "normal"
    placement: Optional[str] = None


class PriceCalculationRequest(BaseModel):
    """
    Request model for pricing one configured menu item.

    Attributes:
        restaurant_id: Restaurant placing the order
        item_type: Item type of the variant ("pizza", "chicken", "sandwich", ...)
        variant_id: The menu item variant being priced
        size_code: Pizza size code (required for pizza)
        crust_type: Pizza crust type (required for pizza)
        template_id: Specialty template whose defaults are included
        selections: Customizations in display order
        white_meat_tier: Chicken only: none, normal, extra or xxtra
    """
    restaurant_id: Optional[str] = None
    item_type: Optional[str] = None
    variant_id: Optional[str] = None
    size_code: Optional[str] = None
    crust_type: Optional[str] = None
    template_id: Optional[str] = None
    selections: List[SelectionIn] = []
    white_meat_tier: Optional[str] = None

    def to_engine_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class LineItemOut(BaseModel):
    name: str
    price: float
    type: str
    amount: Optional[str] = None
    category: Optional[str] = None
    is_default: bool = False
    placement: Optional[str] = None
    customization_id: Optional[str] = None


class TemplateInfoOut(BaseModel):
    name: str
    default_customization_ids: List[str]
    credit_applied: float


class VariantInfoOut(BaseModel):
    name: Optional[str] = None
    size_code: Optional[str] = None
    crust_type: Optional[str] = None
    white_meat_upcharge: float = 0.0


class PriceCalculationResponse(BaseModel):
    """
    Computed price with its breakdown.

    ``line_items`` always sum to ``final_price``.
    """
    model_config = ConfigDict(from_attributes=True)

    base_price: float
    crust_upcharge: float
    topping_cost: float
    modifier_cost: float
    white_meat_cost: float
    substitution_credit: float
    final_price: float
    line_items: List[LineItemOut]
    estimated_prep_time: int
    template_info: Optional[TemplateInfoOut] = None
    variant_info: VariantInfoOut

    @classmethod
    def from_breakdown(cls, breakdown: PriceBreakdown) -> "PriceCalculationResponse":
        template_info = None
        if breakdown.template_info is not None:
            template_info = TemplateInfoOut(
                name=breakdown.template_info.name,
                default_customization_ids=list(breakdown.template_info.default_customization_ids),
                credit_applied=_money(breakdown.template_info.credit_applied),
            )
        return cls(
            base_price=_money(breakdown.base_price),
            crust_upcharge=_money(breakdown.crust_upcharge),
            topping_cost=_money(breakdown.topping_cost),
            modifier_cost=_money(breakdown.modifier_cost),
            white_meat_cost=_money(breakdown.white_meat_cost),
            substitution_credit=_money(breakdown.substitution_credit),
            final_price=_money(breakdown.final_price),
            line_items=[
                LineItemOut(
                    name=line.name,
                    price=_money(line.price),
                    type=line.kind.value,
                    amount=line.amount,
                    category=line.category,
                    is_default=line.is_default,
                    placement=line.placement,
                    customization_id=line.customization_id,
                )
                for line in breakdown.line_items
            ],
            estimated_prep_time=breakdown.estimated_prep_time,
            template_info=template_info,
            variant_info=VariantInfoOut(
                name=breakdown.variant_name,
                size_code=breakdown.size_code,
                crust_type=breakdown.crust_type,
                white_meat_upcharge=_money(breakdown.white_meat_upcharge),
            ),
        )


class PricingErrorOut(BaseModel):
    """Error body: ``{"detail": {"code": ..., "message": ...}}``."""
    code: str
    message: str
    field: Optional[str] = None
    selection_index: Optional[int] = None


class CacheInvalidationResponse(BaseModel):
    restaurant_id: Optional[str] = None
    invalidated: int
