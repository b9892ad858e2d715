"""Initial storefront schema: catalog, orders, users, audit log

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-19 10:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Revision identifiers used by Alembic
revision: str = '3f1c2a9d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PRODUCT_FORMAT = sa.Enum('VINYL_LP', 'VINYL_EP', 'CD_ALBUM', 'TURNTABLE', 'OTHER', name='productformat')
PRODUCT_CONDITION = sa.Enum('SEALED', 'NEAR_MINT', 'VERY_GOOD', 'GOOD', 'FAIR', name='productcondition')
ORDER_STATUS = sa.Enum('PENDING', 'CONFIRMED', 'PROCESSING', 'SHIPPED', 'DELIVERED', 'CANCELLED', name='orderstatus')
PAYMENT_METHOD = sa.Enum('WEBPAY', 'MERCADOPAGO', 'FLOW', 'TRANSFER', name='paymentmethod')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sku', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('artist', sa.String(), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('price', sa.Integer(), sa.CheckConstraint('price >= 0'), nullable=False),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('format', PRODUCT_FORMAT, nullable=False),
        sa.Column('condition', PRODUCT_CONDITION, nullable=False),
        sa.Column('stock', sa.Integer(), sa.CheckConstraint('stock >= 0'), nullable=False),
        sa.Column('min_stock', sa.Integer(), nullable=True),
        sa.Column('release_year', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_sku', 'products', ['sku'], unique=True)
    op.create_index('ix_products_slug', 'products', ['slug'], unique=True)
    op.create_index('ix_products_name', 'products', ['name'])
    op.create_index('ix_products_artist', 'products', ['artist'])
    op.create_index('ix_products_created_at', 'products', ['created_at'])

    op.create_table(
        'addresses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('street', sa.String(), nullable=False),
        sa.Column('number', sa.String(), nullable=False),
        sa.Column('apartment', sa.String(), nullable=True),
        sa.Column('region', sa.String(), nullable=False),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('comuna', sa.String(), nullable=False),
        sa.Column('zip_code', sa.String(), nullable=True),
    )
    op.create_index('ix_addresses_id', 'addresses', ['id'])

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_number', sa.String(), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('customer_email', sa.String(), nullable=False),
        sa.Column('customer_phone', sa.String(), nullable=False),
        sa.Column('status', ORDER_STATUS, nullable=False),
        sa.Column('payment_method', PAYMENT_METHOD, nullable=False),
        sa.Column('subtotal', sa.Integer(), nullable=False),
        sa.Column('shipping', sa.Integer(), nullable=False),
        sa.Column('tax', sa.Integer(), nullable=False),
        sa.Column('total', sa.Integer(), nullable=False),
        sa.Column('address_id', sa.Integer(), sa.ForeignKey('addresses.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_orders_id', 'orders', ['id'])
    op.create_index('ix_orders_order_number', 'orders', ['order_number'], unique=True)
    op.create_index('ix_orders_customer_name', 'orders', ['customer_name'])
    op.create_index('ix_orders_customer_email', 'orders', ['customer_email'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])
    op.create_index('ix_orders_paid_at', 'orders', ['paid_at'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('product_id', sa.String(), nullable=False),
        sa.Column('product_name', sa.String(), nullable=False),
        sa.Column('artist', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
    )
    op.create_index('ix_order_items_id', 'order_items', ['id'])
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_order_items_product_id', 'order_items', ['product_id'])

    op.create_table(
        'order_sequences',
        sa.Column('day', sa.String(length=8), primary_key=True),
        sa.Column('last_value', sa.Integer(), nullable=False),
    )

    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ts', sa.DateTime(), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=True),
        sa.Column('resource', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
    )
    op.create_index('ix_logs_id', 'logs', ['id'])
    op.create_index('ix_logs_ts', 'logs', ['ts'])
    op.create_index('ix_logs_action', 'logs', ['action'])
    op.create_index('ix_logs_resource', 'logs', ['resource'])
    op.create_index('ix_logs_status', 'logs', ['status'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('logs')
    op.drop_table('order_sequences')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('addresses')
    op.drop_table('products')
    op.drop_table('users')
    for enum_type in (PAYMENT_METHOD, ORDER_STATUS, PRODUCT_CONDITION, PRODUCT_FORMAT):
        enum_type.drop(op.get_bind(), checkfirst=True)
