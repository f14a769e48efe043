import uuid

from sqlalchemy import (
    Column,
    String,
    Integer,
    Numeric,
    Boolean,
    JSON,
    DateTime,
    ForeignKey,
    Text,
    Index,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class Restaurant(Base):
    """Each menu item and customization is tied to a restaurant (multi-tenant)."""
    __tablename__ = "restaurants"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=True, unique=True)
    # Free-form settings; config["pricing"] overrides the default multiplier tables
    config = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    menu_items = relationship("MenuItem", back_populates="restaurant", cascade="all, delete-orphan")


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    item_type = Column(String, nullable=False, default="standard", index=True)  # 'pizza', 'chicken', 'sandwich', ...
    base_price = Column(Numeric(10, 2), nullable=False, default=0)
    prep_time_minutes = Column(Integer, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)

    restaurant = relationship("Restaurant", back_populates="menu_items")
    variants = relationship("MenuItemVariant", back_populates="menu_item", cascade="all, delete-orphan")
    templates = relationship("PizzaTemplate", back_populates="menu_item", cascade="all, delete-orphan")


class MenuItemVariant(Base):
    """One purchasable size/preparation of a menu item (e.g. 12in thin crust)."""
    __tablename__ = "menu_item_variants"

    id = Column(String(36), primary_key=True, default=_uuid)
    menu_item_id = Column(String(36), ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    size_code = Column(String, nullable=True)
    crust_type = Column(String(50), nullable=True)
    serves = Column(String, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    white_meat_upcharge = Column(Numeric(10, 2), nullable=False, default=0)
    prep_time_minutes = Column(Integer, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    menu_item = relationship("MenuItem", back_populates="variants")


class CrustPricing(Base):
    """Pizza base price and crust upcharge per (restaurant, size, crust)."""
    __tablename__ = "crust_pricing"

    id = Column(String(36), primary_key=True, default=_uuid)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=False)
    size_code = Column(String, nullable=False)
    crust_type = Column(String, nullable=False)
    base_price = Column(Numeric(10, 2), nullable=False)
    upcharge = Column(Numeric(10, 2), nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("restaurant_id", "size_code", "crust_type", name="uix_crust_pricing_size_crust"),
    )


class Customization(Base):
    """A restaurant-scoped topping or modifier."""
    __tablename__ = "customizations"

    id = Column(String(36), primary_key=True, default=_uuid)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=False)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)  # 'topping_normal', 'topping_premium', 'sides', 'preparation', ...
    base_price = Column(Numeric(10, 2), nullable=False, default=0)
    price_type = Column(String, nullable=False, default="fixed")  # 'fixed', 'multiplied', 'tiered'
    # {"size_multipliers": {...}, "tier_multipliers": {...},
    #  "placement_multipliers": {...}, "variant_base_prices": {...}}
    pricing_rules = Column(JSON, nullable=False, default=dict)
    applies_to = Column(JSON, nullable=False, default=list)  # item types, e.g. ["pizza"]
    sort_order = Column(Integer, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)
    description = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_customizations_restaurant_category", "restaurant_id", "category"),
    )


class PizzaTemplate(Base):
    """Specialty item definition: which customizations come included."""
    __tablename__ = "pizza_templates"

    id = Column(String(36), primary_key=True, default=_uuid)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=False, index=True)
    menu_item_id = Column(String(36), ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    markup_type = Column(String, nullable=False, default="additive")
    credit_limit_percentage = Column(Numeric(3, 2), nullable=False, default=0.50)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    menu_item = relationship("MenuItem", back_populates="templates")
    toppings = relationship(
        "PizzaTemplateTopping",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="PizzaTemplateTopping.sort_order",
    )


class PizzaTemplateTopping(Base):
    __tablename__ = "pizza_template_toppings"

    id = Column(String(36), primary_key=True, default=_uuid)
    template_id = Column(String(36), ForeignKey("pizza_templates.id", ondelete="CASCADE"), nullable=False, index=True)
    customization_id = Column(String(36), ForeignKey("customizations.id"), nullable=False)
    default_amount = Column(String, nullable=False, default="normal")
    substitution_tier = Column(String, nullable=True)
    is_removable = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    template = relationship("PizzaTemplate", back_populates="toppings")
