"""
Template Resolver.

Specialty items (a "Meat Lovers" pizza, say) come from a template that lists
the customizations included in the price. A selection of one of those
customizations is a template default and costs nothing. Everything beyond the
template is priced under the normal rules.

Substitution credit:
--------------------
A removable default that the customer took off earns a credit against what
they added. The credit is the removed toppings' value times the template's
credit_limit_percentage, capped at the cost of the paid additions, so removing
toppings never takes the price below the template's base.

Tier mismatch:
--------------
By default a template default is free at any amount tier. With
strict_template_tiers on (config or restaurant override) a default picked at
a tier other than the template's is charged as a normal addition.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional

from .money import ZERO, round_money
from .types import Selection, Template, TemplateTopping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateDefaults:
    """The resolved template (if any) and its default customizations by id."""

    template: Optional[Template] = None
    defaults: Mapping[str, TemplateTopping] = field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        return self.template.name if self.template else None

    @property
    def pairs(self) -> frozenset:
        """The (customization id, default amount) set for this template."""
        return frozenset(
            (customization_id, topping.default_amount)
            for customization_id, topping in self.defaults.items()
        )

    def __bool__(self) -> bool:
        return self.template is not None

    def is_free(self, selection: Selection, strict_tiers: bool = False) -> bool:
        """True if this selection is covered by the template."""
        topping = self.defaults.get(selection.customization_id)
        if topping is None:
            return False
        if strict_tiers and selection.amount != topping.default_amount:
            return False
        return True

    def removed_defaults(self, selections: Iterable[Selection]) -> list[TemplateTopping]:
        """Removable defaults with no selection referencing them, in template order."""
        selected = {selection.customization_id for selection in selections}
        return [
            topping
            for topping in (self.template.toppings if self.template else ())
            if topping.is_removable and topping.customization_id not in selected
        ]


EMPTY_TEMPLATE = TemplateDefaults()


class TemplateResolver:
    """
    Loads template defaults through the catalog.

    A missing, inactive, or foreign template is not an error: the item is
    simply priced without free inclusions.
    """

    def __init__(self, catalog):
        self._catalog = catalog

    def resolve_defaults(
        self,
        template_id: str | None,
        restaurant_id: str | None = None,
        menu_item_id: str | None = None,
    ) -> TemplateDefaults:
        """
        Resolve the default customizations for a template.

        Args:
            template_id: Template to load; None means no template
            restaurant_id: When given, templates of other restaurants are ignored
            menu_item_id: When given, templates owned by other menu items are ignored

        Returns:
            TemplateDefaults (empty when there is nothing to apply)
        """
        if not template_id:
            return EMPTY_TEMPLATE

        template = self._catalog.get_template(template_id)
        if template is None:
            logger.info("Template %s not found, pricing without defaults", template_id)
            return EMPTY_TEMPLATE
        if not template.is_active:
            logger.info("Template %s is inactive, pricing without defaults", template_id)
            return EMPTY_TEMPLATE
        if restaurant_id and template.restaurant_id != restaurant_id:
            logger.warning(
                "Template %s belongs to another restaurant, ignoring it", template_id
            )
            return EMPTY_TEMPLATE
        if menu_item_id and template.menu_item_id != menu_item_id:
            logger.warning(
                "Template %s is not defined for menu item %s, ignoring it",
                template_id, menu_item_id,
            )
            return EMPTY_TEMPLATE

        defaults = {topping.customization_id: topping for topping in template.toppings}
        logger.debug("Template %s loaded with %d defaults", template.name, len(defaults))
        return TemplateDefaults(template=template, defaults=defaults)


def substitution_credit(
    template_defaults: TemplateDefaults,
    selections: Iterable[Selection],
    paid_additions: Decimal,
    value_of: Callable[[TemplateTopping], Optional[Decimal]],
) -> Decimal:
    """
    Credit for removed template defaults.

    Args:
        template_defaults: The resolved template
        selections: What the customer actually picked
        paid_additions: Total charged for selections beyond the template
        value_of: Prices a removed default as if it were added; returns None
                  for defaults that can no longer be priced (they earn nothing)

    Returns:
        The credit, never more than paid_additions
    """
    if not template_defaults or paid_additions <= ZERO:
        return ZERO

    removed_value = ZERO
    for topping in template_defaults.removed_defaults(selections):
        value = value_of(topping)
        if value is None:
            logger.debug("Removed default %s has no price, no credit", topping.customization_id)
            continue
        removed_value += value

    if removed_value <= ZERO:
        return ZERO

    max_credit = round_money(removed_value * template_defaults.template.credit_limit_percentage)
    credit = min(max_credit, paid_additions)
    logger.debug(
        "Substitution credit: removed=%s limit=%s paid=%s -> %s",
        removed_value, max_credit, paid_additions, credit,
    )
    return credit
