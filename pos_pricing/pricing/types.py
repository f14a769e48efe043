"""
Pricing Domain Types.

Catalog rows are converted into these immutable snapshots once, at the catalog
boundary, so the pricing code never re-parses category strings or JSON rule
maps. A calculation reads snapshots and builds a fresh PriceBreakdown; nothing
here is mutated after construction.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .. import config
from .errors import ValidationError
from .money import ZERO, to_decimal, to_money


# =============================================================================
# Enumerations
# =============================================================================

class ItemKind(str, Enum):
    """Which pricing strategy a menu item uses."""
    PIZZA = "pizza"
    CHICKEN = "chicken"
    GENERIC = "generic"

    @classmethod
    def for_item_type(cls, item_type: str | None) -> "ItemKind":
        """Map a menu item's item_type ("pizza", "sandwich", ...) to a strategy."""
        normalized = (item_type or "").strip().lower()
        if normalized == "pizza":
            return cls.PIZZA
        if normalized == "chicken":
            return cls.CHICKEN
        return cls.GENERIC


class PriceType(str, Enum):
    FIXED = "fixed"
    MULTIPLIED = "multiplied"
    TIERED = "tiered"


class CustomizationKind(str, Enum):
    """Tagged form of the catalog's customization category string."""
    TOPPING = "topping"
    MODIFIER = "modifier"
    PREPARATION = "preparation"
    CONDIMENT = "condiment"

    @classmethod
    def from_category(cls, category: str | None) -> "CustomizationKind":
        """
        Resolve the kind from a category tag.

        Examples:
            "topping_premium" -> TOPPING
            "preparation_pizza" -> PREPARATION
            "condiments_chicken" -> CONDIMENT
            "sides_chicken_dinner" -> MODIFIER
        """
        normalized = (category or "").strip().lower()
        if normalized.startswith("topping"):
            return cls.TOPPING
        if normalized.startswith("preparation"):
            return cls.PREPARATION
        if normalized.startswith("condiment"):
            return cls.CONDIMENT
        return cls.MODIFIER


class AmountTier(str, Enum):
    LIGHT = "light"
    NORMAL = "normal"
    EXTRA = "extra"
    XXTRA = "xxtra"


class WhiteMeatTier(str, Enum):
    NONE = "none"
    NORMAL = "normal"
    EXTRA = "extra"
    XXTRA = "xxtra"

    @property
    def multiplier(self) -> int:
        return config.WHITE_MEAT_MULTIPLIERS[self.value]


class PlacementKind(str, Enum):
    WHOLE = "whole"
    HALF = "half"
    QUARTER = "quarter"


class LineItemKind(str, Enum):
    BASE = "base"
    CRUST = "crust"
    TOPPING = "topping"
    TEMPLATE_DEFAULT = "template_default"
    MODIFIER = "modifier"
    WHITE_MEAT = "white_meat"
    CREDIT = "credit"


def parse_enum(enum_cls, raw: Any, field_name: str, default=None):
    """Parse a request value into an enum member, raising ValidationError."""
    if raw is None or raw == "":
        if default is None:
            raise ValidationError(f"{field_name} is required", field=field_name)
        return default
    if isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {field_name} '{raw}'. Expected one of: {allowed}",
            field=field_name,
        ) from None


# =============================================================================
# Placement
# =============================================================================

_QUARTER_PATTERN = re.compile(r"^(?:quarter-?([1-4])|q([1-4]))$")


@dataclass(frozen=True)
class Placement:
    """Where a pizza topping goes. ``label`` keeps the caller's wording for receipts."""

    kind: PlacementKind
    label: str

    @classmethod
    def parse(cls, raw: str | None) -> "Placement":
        """
        Parse a placement string.

        Accepted forms:
            None, "", "whole"        -> WHOLE
            "left", "right", "half"  -> HALF
            "quarter", "quarter-N", "qN" (N in 1..4) -> QUARTER

        Raises:
            ValidationError: For anything else
        """
        if raw is None:
            return WHOLE
        text = str(raw).strip().lower()
        if text in ("", "whole"):
            return WHOLE
        if text in ("left", "right", "half"):
            return cls(PlacementKind.HALF, text)
        if text == "quarter":
            return cls(PlacementKind.QUARTER, text)
        match = _QUARTER_PATTERN.match(text)
        if match:
            number = match.group(1) or match.group(2)
            return cls(PlacementKind.QUARTER, f"quarter-{number}")
        raise ValidationError(
            f"Invalid placement '{raw}'. Expected whole, left, right, or quarter-N",
            field="placement",
        )


WHOLE = Placement(PlacementKind.WHOLE, "whole")


# =============================================================================
# Pricing rules and defaults
# =============================================================================

def _decimal_map(raw: Mapping[str, Any] | None) -> Mapping[str, Decimal]:
    if not raw:
        return MappingProxyType({})
    return MappingProxyType({str(key): to_decimal(value) for key, value in raw.items()})


def check_multiplier_tables(size: Mapping[str, Decimal], tier: Mapping[str, Decimal], placement: Mapping[str, Decimal]) -> None:
    """
    Range-check multiplier tables.

    Raises:
        ValueError: If a size or tier multiplier is negative, or a placement
                    factor is outside (0, 1]
    """
    for table_name, table in (("size_multipliers", size), ("tier_multipliers", tier)):
        for key, value in table.items():
            if value < 0:
                raise ValueError(f"{table_name}[{key}] must not be negative (got {value})")
    for key, value in placement.items():
        if not (Decimal(0) < value <= Decimal(1)):
            raise ValueError(f"placement_multipliers[{key}] must be in (0, 1] (got {value})")


def check_tier_order(tier: Mapping[str, Decimal]) -> None:
    """
    Amount tiers must not get cheaper as they get bigger.

    Raises:
        ValueError: If light > normal, normal > extra, or extra > xxtra
    """
    previous = None
    for member in AmountTier:
        value = tier.get(member.value)
        if value is None:
            continue
        if previous is not None and value < previous[1]:
            raise ValueError(
                f"tier_multipliers[{member.value}] ({value}) is below "
                f"tier_multipliers[{previous[0]}] ({previous[1]})"
            )
        previous = (member.value, value)


def parse_flag(raw: Any, name: str) -> bool:
    """Read a true/false setting stored as JSON bool or as a string."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in ("true", "false"):
        return raw.strip().lower() == "true"
    raise ValueError(f"{name} must be true or false (got {raw!r})")


@dataclass(frozen=True)
class PricingRules:
    """A customization's own pricing rules (the catalog's pricing_rules JSON)."""

    size_multipliers: Mapping[str, Decimal] = field(default_factory=lambda: MappingProxyType({}))
    tier_multipliers: Mapping[str, Decimal] = field(default_factory=lambda: MappingProxyType({}))
    placement_multipliers: Mapping[str, Decimal] = field(default_factory=lambda: MappingProxyType({}))
    variant_base_prices: Mapping[str, Decimal] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_json(cls, raw: Mapping[str, Any] | None) -> "PricingRules":
        """
        Parse a customization's pricing_rules.

        Own tier multipliers are order-checked over the global tier table,
        since they only replace the tiers they name.

        Raises:
            ValueError: On a negative multiplier or price, a placement factor
                        outside (0, 1], or tiers that get cheaper as they grow
        """
        raw = raw or {}
        rules = cls(
            size_multipliers=_decimal_map(raw.get("size_multipliers")),
            tier_multipliers=_decimal_map(raw.get("tier_multipliers")),
            placement_multipliers=_decimal_map(raw.get("placement_multipliers")),
            variant_base_prices=_decimal_map(raw.get("variant_base_prices")),
        )
        check_multiplier_tables(rules.size_multipliers, rules.tier_multipliers, rules.placement_multipliers)
        if rules.tier_multipliers:
            check_tier_order({**config.DEFAULT_TIER_MULTIPLIERS, **rules.tier_multipliers})
        for key, value in rules.variant_base_prices.items():
            if value < 0:
                raise ValueError(f"variant_base_prices[{key}] must not be negative (got {value})")
        return rules


@dataclass(frozen=True)
class PricingDefaults:
    """Restaurant-wide fallback tables, already merged over the global config."""

    size_multipliers: Mapping[str, Decimal]
    tier_multipliers: Mapping[str, Decimal]
    placement_multipliers: Mapping[str, Decimal]
    strict_template_tiers: bool = False

    @classmethod
    def from_config(cls, overrides: Mapping[str, Any] | None = None) -> "PricingDefaults":
        """
        Build defaults from config.py, applying a restaurant's overrides.

        Args:
            overrides: The "pricing" section of a restaurant's config, e.g.
                {"placement_multipliers": {"quarter": 0.9}, "strict_template_tiers": true}

        Raises:
            ValueError: If a multiplier is negative, a placement factor is
                        outside (0, 1], the tier table decreases, or
                        strict_template_tiers is not a boolean
        """
        overrides = overrides or {}
        size = dict(config.DEFAULT_SIZE_MULTIPLIERS)
        size.update(_decimal_map(overrides.get("size_multipliers")))
        tier = dict(config.DEFAULT_TIER_MULTIPLIERS)
        tier.update(_decimal_map(overrides.get("tier_multipliers")))
        placement = dict(config.DEFAULT_PLACEMENT_MULTIPLIERS)
        placement.update(_decimal_map(overrides.get("placement_multipliers")))

        check_multiplier_tables(size, tier, placement)
        check_tier_order(tier)

        strict = config.STRICT_TEMPLATE_TIERS
        if "strict_template_tiers" in overrides:
            strict = parse_flag(overrides["strict_template_tiers"], "strict_template_tiers")
        return cls(
            size_multipliers=MappingProxyType(size),
            tier_multipliers=MappingProxyType(tier),
            placement_multipliers=MappingProxyType(placement),
            strict_template_tiers=strict,
        )

    def merged_tiers(self, rules: PricingRules) -> Mapping[str, Decimal]:
        """The tier table one customization actually prices with."""
        return {**self.tier_multipliers, **rules.tier_multipliers}


# =============================================================================
# Catalog snapshots
# =============================================================================

@dataclass(frozen=True)
class Variant:
    """One purchasable size/preparation of a menu item, with its owner resolved."""

    id: str
    menu_item_id: str
    restaurant_id: str
    item_type: str
    name: str
    menu_item_name: str
    base_price: Decimal
    size_code: Optional[str] = None
    crust_type: Optional[str] = None
    white_meat_upcharge: Decimal = ZERO
    prep_time_minutes: Optional[int] = None

    @property
    def kind(self) -> ItemKind:
        return ItemKind.for_item_type(self.item_type)


@dataclass(frozen=True)
class CrustPrice:
    restaurant_id: str
    size_code: str
    crust_type: str
    base_price: Decimal
    upcharge: Decimal = ZERO


@dataclass(frozen=True)
class Customization:
    """A restaurant-scoped topping or modifier."""

    id: str
    restaurant_id: str
    name: str
    category: str
    base_price: Decimal
    price_type: PriceType = PriceType.FIXED
    rules: PricingRules = field(default_factory=PricingRules)
    applies_to: frozenset = frozenset()
    is_available: bool = True
    kind: CustomizationKind = field(init=False)

    def __post_init__(self):
        if self.base_price < 0:
            raise ValueError(f"Customization {self.id} has a negative base price")
        object.__setattr__(self, "kind", CustomizationKind.from_category(self.category))

    def applies_to_item(self, item_type: str) -> bool:
        return (item_type or "").strip().lower() in self.applies_to


@dataclass(frozen=True)
class TemplateTopping:
    customization_id: str
    default_amount: AmountTier = AmountTier.NORMAL
    substitution_tier: Optional[str] = None
    is_removable: bool = True


@dataclass(frozen=True)
class Template:
    """A specialty item definition listing the customizations it includes."""

    id: str
    restaurant_id: str
    menu_item_id: str
    name: str
    toppings: tuple = ()
    credit_limit_percentage: Decimal = Decimal("0.50")
    is_active: bool = True


# =============================================================================
# Request
# =============================================================================

@dataclass(frozen=True)
class Selection:
    customization_id: str
    amount: AmountTier = AmountTier.NORMAL
    placement: Placement = WHOLE

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], index: int = 0) -> "Selection":
        if not isinstance(raw, Mapping):
            raise ValidationError(f"selections[{index}] must be an object", field="selections")
        customization_id = raw.get("customization_id")
        if not customization_id:
            raise ValidationError(
                f"selections[{index}].customization_id is required",
                field="customization_id",
            )
        return cls(
            customization_id=str(customization_id),
            amount=parse_enum(AmountTier, raw.get("amount_tier"), "amount_tier", AmountTier.NORMAL),
            placement=Placement.parse(raw.get("placement")),
        )


@dataclass(frozen=True)
class PriceRequest:
    """Input to a price calculation."""

    restaurant_id: Optional[str]
    item_type: Optional[str]
    variant_id: Optional[str]
    size_code: Optional[str] = None
    crust_type: Optional[str] = None
    template_id: Optional[str] = None
    selections: tuple = ()
    white_meat_tier: WhiteMeatTier = WhiteMeatTier.NONE

    @property
    def kind(self) -> ItemKind:
        return ItemKind.for_item_type(self.item_type)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "PriceRequest":
        """
        Build a request from a plain mapping (an HTTP body, a cart line).

        Raises:
            ValidationError: If a selection, tier or placement is malformed
        """
        raw_selections = raw.get("selections") or []
        if not isinstance(raw_selections, (list, tuple)):
            raise ValidationError("selections must be a list", field="selections")
        selections = tuple(
            Selection.from_dict(item, index) for index, item in enumerate(raw_selections)
        )
        return cls(
            restaurant_id=raw.get("restaurant_id") or None,
            item_type=raw.get("item_type") or None,
            variant_id=raw.get("variant_id") or None,
            size_code=raw.get("size_code") or None,
            crust_type=raw.get("crust_type") or None,
            template_id=raw.get("template_id") or None,
            selections=selections,
            white_meat_tier=parse_enum(
                WhiteMeatTier, raw.get("white_meat_tier"), "white_meat_tier", WhiteMeatTier.NONE
            ),
        )


@dataclass(frozen=True)
class PriceContext:
    """What the Rule Resolver needs to know about the item being priced."""

    item_type: str
    size_code: Optional[str] = None
    variant_id: Optional[str] = None
    amount: AmountTier = AmountTier.NORMAL
    placement: Optional[Placement] = None


# =============================================================================
# Output
# =============================================================================

@dataclass(frozen=True)
class LineItem:
    name: str
    price: Decimal
    kind: LineItemKind
    amount: Optional[str] = None
    category: Optional[str] = None
    is_default: bool = False
    placement: Optional[str] = None
    customization_id: Optional[str] = None


@dataclass(frozen=True)
class TemplateInfo:
    name: str
    default_customization_ids: tuple
    credit_applied: Decimal


@dataclass(frozen=True)
class PriceBreakdown:
    """Computed price of one configured item. ``line_items`` sum to ``final_price``."""

    base_price: Decimal
    crust_upcharge: Decimal
    topping_cost: Decimal
    modifier_cost: Decimal
    white_meat_cost: Decimal
    substitution_credit: Decimal
    final_price: Decimal
    line_items: tuple
    estimated_prep_time: int
    size_code: Optional[str] = None
    crust_type: Optional[str] = None
    template_info: Optional[TemplateInfo] = None
    variant_name: Optional[str] = None
    white_meat_upcharge: Decimal = ZERO


def money_or_zero(value: Any) -> Decimal:
    """Money conversion that treats NULL catalog columns as zero."""
    if value is None:
        return ZERO
    return to_money(value)
