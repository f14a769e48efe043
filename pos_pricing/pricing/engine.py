"""
Price Calculation Engine.

The single entry point for pricing a configured menu item. Order entry screens
and cart components call ``PricingEngine.calculate_price`` with a PriceRequest
(or a plain dict in the same shape) and get back a PriceBreakdown or a typed
PricingError.

Flow:
-----
    validate request (no catalog access yet)
    -> variant lookup + restaurant ownership check
    -> pricing defaults for the restaurant
    -> template defaults
    -> customizations for the selections and template defaults
       (tier tables re-checked over the restaurant's)
    -> crust pricing (pizza only)
    -> strategy for the variant's item kind
    -> breakdown assembly

Catalog reads happen up front; after that the calculation is pure. The engine
holds no mutable state and is safe to share between threads. It never retries
a catalog read: a failed read surfaces as CatalogUnavailable.
"""

import logging
from typing import Any, Mapping

from .breakdown import assemble
from .errors import AccessDenied, CatalogUnavailable, PricingError, ValidationError
from .strategies import STRATEGIES
from .templates import TemplateResolver
from .types import (
    Customization,
    ItemKind,
    PlacementKind,
    PriceBreakdown,
    PriceRequest,
    PricingDefaults,
    check_tier_order,
)

logger = logging.getLogger(__name__)


def validate_request(request: PriceRequest) -> None:
    """
    Check the request before any catalog access.

    Raises:
        ValidationError: If a required field is missing or inconsistent
    """
    if not request.restaurant_id:
        raise ValidationError("restaurant_id is required", field="restaurant_id")
    if not request.variant_id:
        raise ValidationError("variant_id is required", field="variant_id")
    if not request.item_type:
        raise ValidationError("item_type is required", field="item_type")

    if request.kind == ItemKind.PIZZA:
        if not request.size_code:
            raise ValidationError("size_code is required for pizza", field="size_code")
        if not request.crust_type:
            raise ValidationError("crust_type is required for pizza", field="crust_type")
    else:
        for index, selection in enumerate(request.selections):
            if selection.placement.kind != PlacementKind.WHOLE:
                raise ValidationError(
                    f"selections[{index}].placement only applies to pizza toppings",
                    field="placement",
                )


def check_customization_tiers(customizations: Mapping[str, Customization], defaults: PricingDefaults) -> None:
    """
    Each customization's own tiers laid over the restaurant's must still grow
    from light to xxtra.

    Raises:
        CatalogUnavailable: If a customization's effective tier table decreases
    """
    for customization in customizations.values():
        if not customization.rules.tier_multipliers:
            continue
        try:
            check_tier_order(defaults.merged_tiers(customization.rules))
        except ValueError as e:
            logger.error("Catalog data invalid (customization %s): %s", customization.id, e)
            raise CatalogUnavailable(f"Catalog data invalid: customization {customization.id}") from e


class PricingEngine:
    """
    Computes prices from a catalog snapshot.

    Args:
        catalog: Any object implementing the Catalog protocol (see
                 pos_pricing.catalog). Wrap it in CachedCatalog to cache
                 lookups across calculations.
    """

    def __init__(self, catalog):
        self._catalog = catalog
        self._templates = TemplateResolver(catalog)

    def calculate_price(self, request: PriceRequest | Mapping[str, Any]) -> PriceBreakdown:
        """
        Price one configured item.

        Args:
            request: PriceRequest, or a mapping with the same keys

        Returns:
            PriceBreakdown whose line items sum to final_price

        Raises:
            ValidationError: Malformed request
            SelectionInvalid: A selection cannot be priced
            PricingRuleNotFound: No crust pricing for a pizza size/crust
            AccessDenied: Variant missing or owned by another restaurant
            CatalogUnavailable: The catalog could not be read
            AssemblyInvariantViolation: Internal defect
        """
        try:
            if not isinstance(request, PriceRequest):
                request = PriceRequest.from_dict(request)
            validate_request(request)
            breakdown = self._calculate(request)
        except PricingError as exc:
            log = logger.warning if exc.user_correctable else logger.error
            log("Price calculation failed (%s): %s", exc.code, exc.message)
            raise

        logger.info(
            "Priced variant %s for restaurant %s: %d selections -> %s",
            request.variant_id, request.restaurant_id, len(request.selections), breakdown.final_price,
        )
        return breakdown

    def _calculate(self, request: PriceRequest) -> PriceBreakdown:
        catalog = self._catalog

        variant = catalog.get_variant(request.variant_id)
        if variant is None or variant.restaurant_id != request.restaurant_id:
            raise AccessDenied(request.variant_id, request.restaurant_id)
        if variant.kind != request.kind:
            raise ValidationError(
                f"item_type '{request.item_type}' does not match variant {variant.id} ({variant.item_type})",
                field="item_type",
            )

        defaults = catalog.get_pricing_defaults(request.restaurant_id)
        template_defaults = self._templates.resolve_defaults(
            request.template_id, request.restaurant_id, variant.menu_item_id
        )

        wanted_ids = []
        for customization_id in [s.customization_id for s in request.selections] + list(template_defaults.defaults):
            if customization_id not in wanted_ids:
                wanted_ids.append(customization_id)
        customizations = catalog.list_customizations(request.restaurant_id, wanted_ids) if wanted_ids else {}
        check_customization_tiers(customizations, defaults)

        crust = None
        if variant.kind == ItemKind.PIZZA:
            crust = catalog.get_crust_pricing(request.restaurant_id, request.size_code, request.crust_type)

        logger.debug(
            "Pricing %s variant %s with %d selections (template=%s)",
            variant.kind.value, variant.id, len(request.selections), template_defaults.name,
        )
        strategy = STRATEGIES[variant.kind]
        result = strategy(request, variant, crust, customizations, template_defaults, defaults)

        return assemble(
            result.base_price,
            result.crust_upcharge,
            result.line_items,
            template_defaults.name,
            base_name=result.base_name,
            crust_name=result.crust_name or "Crust Upcharge",
            credit=result.credit,
            template_default_ids=tuple(template_defaults.defaults),
            estimated_prep_time=result.estimated_prep_time,
            size_code=request.size_code or variant.size_code,
            crust_type=request.crust_type or variant.crust_type,
            variant_name=variant.name,
            white_meat_upcharge=variant.white_meat_upcharge,
        )


def calculate_price(catalog, request: PriceRequest | Mapping[str, Any]) -> PriceBreakdown:
    """Convenience wrapper: price one request against a catalog."""
    return PricingEngine(catalog).calculate_price(request)
