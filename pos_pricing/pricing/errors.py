"""
Pricing error taxonomy.

Every failure of a price calculation is terminal: the engine raises one of
these and never returns a partial price. ``user_correctable`` tells callers
whether to show the message to the person at the register or fall back to a
generic "pricing unavailable, please retry".
"""


class PricingError(Exception):
    """Base class for all price calculation failures."""

    code = "pricing_error"
    user_correctable = False

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(PricingError):
    """The request is missing or has malformed fields. Raised before any catalog access."""

    code = "validation_error"
    user_correctable = True

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class SelectionInvalid(PricingError):
    """A selection references an unknown, unavailable, or inapplicable customization."""

    code = "selection_invalid"
    user_correctable = True

    def __init__(self, customization_id: str, index: int, reason: str):
        self.customization_id = customization_id
        self.index = index
        self.reason = reason
        super().__init__(
            f"Selection {index} ({customization_id}) is invalid: {reason}"
        )


class PricingRuleNotFound(PricingError):
    """No crust/size pricing row exists for a pizza configuration."""

    code = "pricing_rule_not_found"

    def __init__(self, size_code: str, crust_type: str):
        self.size_code = size_code
        self.crust_type = crust_type
        super().__init__(f"No pricing found for {size_code} {crust_type}")


class AccessDenied(PricingError):
    """The variant does not exist for, or does not belong to, the requesting restaurant."""

    code = "access_denied"

    def __init__(self, variant_id: str, restaurant_id: str):
        self.variant_id = variant_id
        self.restaurant_id = restaurant_id
        super().__init__(
            f"Variant {variant_id} not found or access denied for restaurant {restaurant_id}"
        )


class CatalogUnavailable(PricingError):
    """The catalog could not be read."""

    code = "catalog_unavailable"


class AssemblyInvariantViolation(PricingError):
    """The assembled breakdown does not add up. Always an internal defect."""

    code = "assembly_invariant_violation"
