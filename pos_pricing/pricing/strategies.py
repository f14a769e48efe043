"""
Variant Pricing Strategies.

One stateless function per item kind, all with the same signature so the
engine can dispatch through STRATEGIES:

- Pizza: base and upcharge from the crust pricing table for (size, crust);
  toppings through the Rule Resolver with placement.
- Chicken: base from the variant; white meat is the variant's upcharge times
  the tier multiplier (none=0, normal=1, extra=2, xxtra=3); add-ons are flat
  priced at their base price.
- Generic: base from the variant; fixed and tiered modifiers only.

Each strategy also estimates preparation time:
    base minutes + min(selections x minutes per selection, cap)
with chicken adding time for white meat.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Mapping, Optional

from .. import config
from .errors import PricingRuleNotFound, SelectionInvalid, ValidationError
from .money import ZERO, round_money
from .rules import check_selectable, resolve_price
from .templates import TemplateDefaults, substitution_credit
from .types import (
    WHOLE,
    CrustPrice,
    Customization,
    CustomizationKind,
    ItemKind,
    LineItem,
    LineItemKind,
    PlacementKind,
    PriceContext,
    PriceRequest,
    PriceType,
    PricingDefaults,
    Selection,
    TemplateTopping,
    Variant,
    WhiteMeatTier,
)

logger = logging.getLogger(__name__)


WHITE_MEAT_LINE_NAMES = {
    WhiteMeatTier.NORMAL: "White Meat",
    WhiteMeatTier.EXTRA: "Extra White Meat",
    WhiteMeatTier.XXTRA: "XXtra White Meat",
}


@dataclass
class StrategyResult:
    """What a strategy hands to the Breakdown Assembler."""

    base_price: Decimal
    base_name: str
    line_items: list = field(default_factory=list)
    crust_upcharge: Decimal = ZERO
    crust_name: Optional[str] = None
    credit: Decimal = ZERO
    estimated_prep_time: int = 0


def estimate_prep_time(
    base_minutes: int,
    selection_count: int,
    minutes_per_selection: Decimal,
    cap: int,
    bonus: int = 0,
) -> int:
    """Prep time in whole minutes, half-up."""
    extra = min(Decimal(selection_count) * minutes_per_selection, Decimal(cap))
    total = Decimal(base_minutes) + extra + Decimal(bonus)
    return int(total.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def line_kind_for(customization: Customization) -> LineItemKind:
    if customization.kind == CustomizationKind.TOPPING:
        return LineItemKind.TOPPING
    return LineItemKind.MODIFIER


def price_selections(
    selections: tuple,
    customizations: Mapping[str, Customization],
    template_defaults: TemplateDefaults,
    item_type: str,
    defaults: PricingDefaults,
    price_one: Callable[[Customization, Selection, int], Decimal],
) -> tuple[list, Decimal]:
    """
    Price every selection in caller order.

    Returns:
        (line items, total charged for selections that are not template defaults)

    Raises:
        SelectionInvalid: On the first selection that cannot be priced
        ValidationError: If a non-topping selection carries a placement other than whole
    """
    lines = []
    paid = ZERO
    for index, selection in enumerate(selections):
        customization = check_selectable(
            customizations.get(selection.customization_id),
            selection.customization_id,
            index,
            item_type,
        )
        if customization.kind != CustomizationKind.TOPPING and selection.placement.kind != PlacementKind.WHOLE:
            raise ValidationError(
                f"selections[{index}].placement only applies to pizza toppings, not {customization.name}",
                field="placement",
            )
        placement = selection.placement.label if customization.kind == CustomizationKind.TOPPING else None

        if template_defaults.is_free(selection, defaults.strict_template_tiers):
            logger.debug("Template default %s is included", customization.name)
            lines.append(LineItem(
                name=customization.name,
                price=ZERO,
                kind=LineItemKind.TEMPLATE_DEFAULT,
                amount=selection.amount.value,
                category=customization.category,
                is_default=True,
                placement=placement,
                customization_id=customization.id,
            ))
            continue

        price = round_money(price_one(customization, selection, index))
        paid += price
        logger.debug("Priced %s (%s) at %s", customization.name, selection.amount.value, price)
        lines.append(LineItem(
            name=customization.name,
            price=price,
            kind=line_kind_for(customization),
            amount=selection.amount.value,
            category=customization.category,
            placement=placement,
            customization_id=customization.id,
        ))
    return lines, paid


def template_credit(
    request: PriceRequest,
    template_defaults: TemplateDefaults,
    customizations: Mapping[str, Customization],
    item_type: str,
    paid: Decimal,
    price_default: Callable[[Customization, TemplateTopping], Decimal],
) -> Decimal:
    """Substitution credit for removed template defaults that can still be priced."""

    def value_of(topping: TemplateTopping) -> Optional[Decimal]:
        customization = customizations.get(topping.customization_id)
        if customization is None or not customization.is_available:
            return None
        if not customization.applies_to_item(item_type):
            return None
        return round_money(price_default(customization, topping))

    return substitution_credit(template_defaults, request.selections, paid, value_of)


# =============================================================================
# Pizza
# =============================================================================

def price_pizza(
    request: PriceRequest,
    variant: Variant,
    crust: Optional[CrustPrice],
    customizations: Mapping[str, Customization],
    template_defaults: TemplateDefaults,
    defaults: PricingDefaults,
) -> StrategyResult:
    """
    Price a pizza.

    Raises:
        PricingRuleNotFound: If there is no crust pricing row for the size/crust
        SelectionInvalid: If a topping cannot be priced
    """
    if crust is None:
        raise PricingRuleNotFound(request.size_code, request.crust_type)

    item_type = variant.item_type
    size_code = request.size_code

    def price_one(customization: Customization, selection: Selection, index: int) -> Decimal:
        placement = selection.placement if customization.kind == CustomizationKind.TOPPING else None
        context = PriceContext(
            item_type=item_type,
            size_code=size_code,
            variant_id=variant.id,
            amount=selection.amount,
            placement=placement,
        )
        return resolve_price(customization, context, defaults)

    def price_default(customization: Customization, topping: TemplateTopping) -> Decimal:
        placement = WHOLE if customization.kind == CustomizationKind.TOPPING else None
        context = PriceContext(
            item_type=item_type,
            size_code=size_code,
            variant_id=variant.id,
            amount=topping.default_amount,
            placement=placement,
        )
        return resolve_price(customization, context, defaults)

    lines, paid = price_selections(
        request.selections, customizations, template_defaults, item_type, defaults, price_one
    )
    credit = template_credit(request, template_defaults, customizations, item_type, paid, price_default)

    crust_label = crust.crust_type.replace("_", " ").upper()
    return StrategyResult(
        base_price=crust.base_price,
        base_name=f"{crust.size_code.upper()} {crust_label} Base",
        crust_upcharge=crust.upcharge,
        crust_name=f"{crust_label} Crust Upcharge",
        line_items=lines,
        credit=credit,
        estimated_prep_time=estimate_prep_time(
            variant.prep_time_minutes or config.PIZZA_BASE_PREP_MINUTES,
            len(request.selections),
            config.PIZZA_PREP_MINUTES_PER_SELECTION,
            config.PIZZA_PREP_SELECTION_CAP,
        ),
    )


# =============================================================================
# Chicken
# =============================================================================

def white_meat_cost(variant: Variant, tier: WhiteMeatTier) -> Decimal:
    """Upcharge times the tier multiplier. Exact: the multiplier is an integer."""
    return round_money(variant.white_meat_upcharge * tier.multiplier)


def price_chicken(
    request: PriceRequest,
    variant: Variant,
    crust: Optional[CrustPrice],
    customizations: Mapping[str, Customization],
    template_defaults: TemplateDefaults,
    defaults: PricingDefaults,
) -> StrategyResult:
    """Price a chicken order: base, white meat tier, and flat-priced add-ons."""
    item_type = variant.item_type
    tier = request.white_meat_tier
    lines = []

    white_meat = white_meat_cost(variant, tier)
    if white_meat > ZERO:
        lines.append(LineItem(
            name=WHITE_MEAT_LINE_NAMES[tier],
            price=white_meat,
            kind=LineItemKind.WHITE_MEAT,
            amount=tier.value,
        ))

    def price_one(customization: Customization, selection: Selection, index: int) -> Decimal:
        return customization.base_price

    def price_default(customization: Customization, topping: TemplateTopping) -> Decimal:
        return customization.base_price

    selection_lines, paid = price_selections(
        request.selections, customizations, template_defaults, item_type, defaults, price_one
    )
    lines.extend(selection_lines)
    credit = template_credit(request, template_defaults, customizations, item_type, paid, price_default)

    bonus = 0
    if tier != WhiteMeatTier.NONE:
        bonus += config.CHICKEN_WHITE_MEAT_PREP_BONUS
    if tier == WhiteMeatTier.XXTRA:
        bonus += config.CHICKEN_XXTRA_WHITE_MEAT_PREP_BONUS

    return StrategyResult(
        base_price=variant.base_price,
        base_name=f"{variant.name} Base",
        line_items=lines,
        credit=credit,
        estimated_prep_time=estimate_prep_time(
            variant.prep_time_minutes or config.CHICKEN_BASE_PREP_MINUTES,
            len(request.selections),
            config.CHICKEN_PREP_MINUTES_PER_SELECTION,
            config.CHICKEN_PREP_SELECTION_CAP,
            bonus=bonus,
        ),
    )


# =============================================================================
# Generic (sandwiches, sides, beverages, ...)
# =============================================================================

def price_generic(
    request: PriceRequest,
    variant: Variant,
    crust: Optional[CrustPrice],
    customizations: Mapping[str, Customization],
    template_defaults: TemplateDefaults,
    defaults: PricingDefaults,
) -> StrategyResult:
    """
    Price an item with fixed or tiered modifiers only.

    Raises:
        SelectionInvalid: If a selection uses multiplied pricing
    """
    item_type = variant.item_type

    def context_for(amount) -> PriceContext:
        return PriceContext(
            item_type=item_type,
            size_code=variant.size_code,
            variant_id=variant.id,
            amount=amount,
        )

    def price_one(customization: Customization, selection: Selection, index: int) -> Decimal:
        if customization.price_type == PriceType.MULTIPLIED:
            raise SelectionInvalid(
                customization.id, index, f"{customization.name} uses multiplied pricing, which {item_type} items do not support"
            )
        return resolve_price(customization, context_for(selection.amount), defaults)

    def price_default(customization: Customization, topping: TemplateTopping) -> Decimal:
        return resolve_price(customization, context_for(topping.default_amount), defaults)

    lines, paid = price_selections(
        request.selections, customizations, template_defaults, item_type, defaults, price_one
    )
    credit = template_credit(request, template_defaults, customizations, item_type, paid, price_default)

    return StrategyResult(
        base_price=variant.base_price,
        base_name=f"{variant.menu_item_name} - {variant.name}",
        line_items=lines,
        credit=credit,
        estimated_prep_time=estimate_prep_time(
            variant.prep_time_minutes or config.GENERIC_BASE_PREP_MINUTES,
            len(request.selections),
            config.GENERIC_PREP_MINUTES_PER_SELECTION,
            config.GENERIC_PREP_SELECTION_CAP,
        ),
    )


STRATEGIES = {
    ItemKind.PIZZA: price_pizza,
    ItemKind.CHICKEN: price_chicken,
    ItemKind.GENERIC: price_generic,
}
