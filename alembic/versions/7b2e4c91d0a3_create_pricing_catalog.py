"""create_pricing_catalog

Revision ID: 7b2e4c91d0a3
Revises:
Create Date: 2026-10-19 09:12:04.118532

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7b2e4c91d0a3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the menu catalog tables read by the pricing engine."""
    op.create_table(
        'restaurants',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=True),
        sa.Column('config', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table(
        'menu_items',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('restaurant_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('item_type', sa.String(), nullable=False, server_default='standard'),
        sa.Column('base_price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('prep_time_minutes', sa.Integer(), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_menu_items_restaurant_id', 'menu_items', ['restaurant_id'], unique=False)
    op.create_index('ix_menu_items_item_type', 'menu_items', ['item_type'], unique=False)

    op.create_table(
        'menu_item_variants',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('menu_item_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('size_code', sa.String(), nullable=True),
        sa.Column('crust_type', sa.String(50), nullable=True),
        sa.Column('serves', sa.String(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('white_meat_upcharge', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('prep_time_minutes', sa.Integer(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.ForeignKeyConstraint(['menu_item_id'], ['menu_items.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_menu_item_variants_menu_item_id', 'menu_item_variants', ['menu_item_id'], unique=False)

    op.create_table(
        'crust_pricing',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('restaurant_id', sa.String(36), nullable=False),
        sa.Column('size_code', sa.String(), nullable=False),
        sa.Column('crust_type', sa.String(), nullable=False),
        sa.Column('base_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('upcharge', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('restaurant_id', 'size_code', 'crust_type', name='uix_crust_pricing_size_crust'),
    )

    op.create_table(
        'customizations',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('restaurant_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('base_price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('price_type', sa.String(), nullable=False, server_default='fixed'),
        sa.Column('pricing_rules', sa.JSON(), nullable=False),
        sa.Column('applies_to', sa.JSON(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('description', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_customizations_restaurant_category', 'customizations', ['restaurant_id', 'category'], unique=False
    )

    op.create_table(
        'pizza_templates',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('restaurant_id', sa.String(36), nullable=False),
        sa.Column('menu_item_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('markup_type', sa.String(), nullable=False, server_default='additive'),
        sa.Column('credit_limit_percentage', sa.Numeric(3, 2), nullable=False, server_default='0.50'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.ForeignKeyConstraint(['menu_item_id'], ['menu_items.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_pizza_templates_restaurant_id', 'pizza_templates', ['restaurant_id'], unique=False)

    op.create_table(
        'pizza_template_toppings',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('template_id', sa.String(36), nullable=False),
        sa.Column('customization_id', sa.String(36), nullable=False),
        sa.Column('default_amount', sa.String(), nullable=False, server_default='normal'),
        sa.Column('substitution_tier', sa.String(), nullable=True),
        sa.Column('is_removable', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['template_id'], ['pizza_templates.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['customization_id'], ['customizations.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_pizza_template_toppings_template_id', 'pizza_template_toppings', ['template_id'], unique=False
    )


def downgrade() -> None:
    """Drop the menu catalog tables."""
    op.drop_index('ix_pizza_template_toppings_template_id', table_name='pizza_template_toppings')
    op.drop_table('pizza_template_toppings')
    op.drop_index('ix_pizza_templates_restaurant_id', table_name='pizza_templates')
    op.drop_table('pizza_templates')
    op.drop_index('ix_customizations_restaurant_category', table_name='customizations')
    op.drop_table('customizations')
    op.drop_table('crust_pricing')
    op.drop_index('ix_menu_item_variants_menu_item_id', table_name='menu_item_variants')
    op.drop_table('menu_item_variants')
    op.drop_index('ix_menu_items_item_type', table_name='menu_items')
    op.drop_index('ix_menu_items_restaurant_id', table_name='menu_items')
    op.drop_table('menu_items')
    op.drop_table('restaurants')
