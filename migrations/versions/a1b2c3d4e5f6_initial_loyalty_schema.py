"""Initial schema: cafes, menu, customers, orders, coffee profiles, loyalty ledger.

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1b2c3d4e5f6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create all Brewline tables."""
    op.create_table(
        'cafes',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(100), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table(
        'categories',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('cafe_id', sa.String(32), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('display_order', sa.Integer(), server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['cafe_id'], ['cafes.id'], ondelete='CASCADE'),
    )

    op.create_table(
        'products',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('cafe_id', sa.String(32), nullable=False),
        sa.Column('category_id', sa.String(32), nullable=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('roast_level', sa.String(20), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['cafe_id'], ['cafes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='SET NULL'),
    )

    op.create_table(
        'customers',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('points_balance', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('lifetime_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('tier', sa.String(20), nullable=False, server_default='BRONZE'),
        sa.Column('lifetime_spend', sa.Numeric(12, 2), server_default='0'),
        sa.Column('total_orders', sa.Integer(), server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'orders',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('order_number', sa.String(20), nullable=True),
        sa.Column('cafe_id', sa.String(32), nullable=False),
        sa.Column('customer_id', sa.String(32), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('subtotal', sa.Numeric(10, 2), server_default='0'),
        sa.Column('total', sa.Numeric(10, 2), server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['cafe_id'], ['cafes.id']),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.String(32), nullable=False),
        sa.Column('product_id', sa.String(32), nullable=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('modifiers', sa.JSON(), nullable=True),
        sa.Column('total', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='SET NULL'),
    )

    op.create_table(
        'coffee_profiles',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('customer_id', sa.String(32), nullable=False),
        sa.Column('profile_type', sa.String(50), nullable=False),
        sa.Column('roast_preference', sa.Float(), nullable=False),
        sa.Column('strength', sa.Float(), nullable=False),
        sa.Column('milk_preference', sa.String(20), nullable=False),
        sa.Column('temperature', sa.Float(), nullable=False),
        sa.Column('sweetness', sa.Float(), nullable=False),
        sa.Column('adventure_score', sa.Float(), nullable=False),
        sa.Column('flavor_notes', sa.JSON(), nullable=True),
        sa.Column('confidence', sa.Float(), nullable=False),
        sa.Column('generated_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('customer_id'),
    )

    op.create_table(
        'point_transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.String(32), nullable=False),
        sa.Column('cafe_id', sa.String(32), nullable=False),
        sa.Column('order_id', sa.String(32), nullable=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('balance_after', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['cafe_id'], ['cafes.id']),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_point_transactions_customer_id', 'point_transactions', ['customer_id'])

    op.create_table(
        'vouchers',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('customer_id', sa.String(32), nullable=False),
        sa.Column('code', sa.String(20), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('value', sa.Numeric(10, 2), nullable=False),
        sa.Column('points_cost', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='ACTIVE'),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('used_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('code'),
    )
    op.create_index('ix_vouchers_customer_id', 'vouchers', ['customer_id'])


def downgrade():
    """Drop all Brewline tables."""
    op.drop_index('ix_vouchers_customer_id', table_name='vouchers')
    op.drop_table('vouchers')
    op.drop_index('ix_point_transactions_customer_id', table_name='point_transactions')
    op.drop_table('point_transactions')
    op.drop_table('coffee_profiles')
    op.drop_table('order_items')
    op.drop_index('ix_orders_created_at', table_name='orders')
    op.drop_index('ix_orders_customer_id', table_name='orders')
    op.drop_table('orders')
    op.drop_table('customers')
    op.drop_table('products')
    op.drop_table('categories')
    op.drop_table('cafes')
