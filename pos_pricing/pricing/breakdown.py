"""
Breakdown Assembler.

Builds the ordered, typed breakdown for one item:

    1. base
    2. crust upcharge (only when > 0)
    3. zero-priced template marker (only when a template was applied)
    4. selection lines, in the order the caller sent them
    5. substitution credit as a negative line (only when > 0)

and checks that ``final = base + crust + toppings + modifiers + white meat - credit``
equals the sum of the lines to the cent. A mismatch is a defect in the engine
and raises AssemblyInvariantViolation; it is never patched over.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from .errors import AssemblyInvariantViolation
from .money import ZERO, round_money
from .types import LineItem, LineItemKind, PriceBreakdown, TemplateInfo

logger = logging.getLogger(__name__)

SELECTION_KINDS = {
    LineItemKind.TOPPING,
    LineItemKind.TEMPLATE_DEFAULT,
    LineItemKind.MODIFIER,
    LineItemKind.WHITE_MEAT,
}


def _total(lines: Iterable[LineItem], kind: LineItemKind) -> Decimal:
    return sum((line.price for line in lines if line.kind == kind), ZERO)


def assemble(
    base_price: Decimal,
    crust_upcharge: Decimal,
    line_items: Iterable[LineItem],
    template_name: Optional[str] = None,
    *,
    base_name: str = "Base",
    crust_name: str = "Crust Upcharge",
    credit: Decimal = ZERO,
    template_default_ids: tuple = (),
    estimated_prep_time: int = 0,
    size_code: Optional[str] = None,
    crust_type: Optional[str] = None,
    variant_name: Optional[str] = None,
    white_meat_upcharge: Decimal = ZERO,
) -> PriceBreakdown:
    """
    Assemble a PriceBreakdown.

    Args:
        base_price: Base price of the item
        crust_upcharge: Crust/size upcharge (pizza), zero otherwise
        line_items: Selection lines in caller order
        template_name: Name of the applied template, if any
        credit: Substitution credit to subtract

    Raises:
        AssemblyInvariantViolation: If the lines do not add up to the final price
    """
    selection_lines = list(line_items)
    for line in selection_lines:
        if line.kind not in SELECTION_KINDS:
            raise AssemblyInvariantViolation(
                f"Unexpected line kind {line.kind.value} for {line.name}"
            )

    lines = [LineItem(name=base_name, price=base_price, kind=LineItemKind.BASE)]
    if crust_upcharge > ZERO:
        lines.append(LineItem(name=crust_name, price=crust_upcharge, kind=LineItemKind.CRUST))
    if template_name:
        lines.append(LineItem(
            name=f"{template_name} - Includes Default Toppings",
            price=ZERO,
            kind=LineItemKind.TEMPLATE_DEFAULT,
        ))
    lines.extend(selection_lines)
    if credit > ZERO:
        lines.append(LineItem(name="Substitution Credit", price=-credit, kind=LineItemKind.CREDIT))

    topping_cost = _total(selection_lines, LineItemKind.TOPPING)
    modifier_cost = _total(selection_lines, LineItemKind.MODIFIER)
    white_meat_cost = _total(selection_lines, LineItemKind.WHITE_MEAT)
    final_price = round_money(
        base_price + crust_upcharge + topping_cost + modifier_cost + white_meat_cost - credit
    )

    line_sum = sum((line.price for line in lines), ZERO)
    if line_sum != final_price:
        raise AssemblyInvariantViolation(
            f"Breakdown lines sum to {line_sum} but final price is {final_price}"
        )
    for line in lines:
        if round_money(line.price) != line.price:
            raise AssemblyInvariantViolation(f"Line {line.name} is not rounded to the cent: {line.price}")
    if final_price < ZERO:
        raise AssemblyInvariantViolation(f"Final price is negative: {final_price}")

    template_info = None
    if template_name:
        template_info = TemplateInfo(
            name=template_name,
            default_customization_ids=tuple(template_default_ids),
            credit_applied=credit,
        )

    return PriceBreakdown(
        base_price=base_price,
        crust_upcharge=crust_upcharge,
        topping_cost=topping_cost,
        modifier_cost=modifier_cost,
        white_meat_cost=white_meat_cost,
        substitution_credit=credit,
        final_price=final_price,
        line_items=tuple(lines),
        estimated_prep_time=estimated_prep_time,
        size_code=size_code,
        crust_type=crust_type,
        template_info=template_info,
        variant_name=variant_name,
        white_meat_upcharge=white_meat_upcharge,
    )
