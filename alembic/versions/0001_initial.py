"""Initial dealership schema

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-19

Compatible with both SQLite and PostgreSQL:
- CURRENT_TIMESTAMP instead of now()
- ENUMs stored as VARCHAR (native_enum=False in models)
- Cross-table pointers are plain indexed integers, no foreign keys
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def _money(name: str, nullable: bool = True):
    return sa.Column(name, sa.Numeric(precision=15, scale=2), nullable=nullable)


def upgrade() -> None:
    """Create all tables."""

    # Profiles (dashboard users)
    op.create_table('profiles',
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), server_default='EMPLOYEE', nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_profiles_username'), 'profiles', ['username'], unique=True)

    # Settings key/value store
    op.create_table('settings',
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_settings_key'), 'settings', ['key'], unique=True)

    # Orders
    op.create_table('orders',
        sa.Column('reference_number', sa.String(length=20), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=50), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=True),
        sa.Column('customer_wilaya', sa.String(length=100), nullable=True),
        sa.Column('customer_id_card', sa.String(length=100), nullable=True),
        sa.Column('car_brand', sa.String(length=100), nullable=True),
        sa.Column('car_model', sa.String(length=100), nullable=True),
        sa.Column('car_budget', sa.String(length=100), nullable=True),
        sa.Column('car_custom_budget', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('order_data', sa.JSON(), nullable=False),
        sa.Column('assigned_car_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_orders_reference_number'), 'orders', ['reference_number'], unique=True)
    op.create_index(op.f('ix_orders_status'), 'orders', ['status'], unique=False)
    op.create_index('idx_order_status_created', 'orders', ['status', 'created_at'], unique=False)

    # Car inventory
    op.create_table('car_inventory',
        sa.Column('brand', sa.String(length=100), nullable=False),
        sa.Column('model', sa.String(length=100), nullable=False),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('color', sa.String(length=50), nullable=True),
        sa.Column('mileage', sa.Numeric(precision=12, scale=1), nullable=True),
        sa.Column('vin', sa.String(length=50), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        _money('selling_price'),
        sa.Column('currency', sa.String(length=10), server_default='DZD', nullable=False),
        _money('purchase_price'),
        _money('buying_price_krw'),
        sa.Column('photos_urls', sa.Text(), nullable=True),
        sa.Column('video_url', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='available', nullable=False),
        sa.Column('assigned_to_order', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_car_inventory_vin'), 'car_inventory', ['vin'], unique=False)
    op.create_index(op.f('ix_car_inventory_status'), 'car_inventory', ['status'], unique=False)
    op.create_index(op.f('ix_car_inventory_assigned_to_order'), 'car_inventory', ['assigned_to_order'], unique=False)
    op.create_index('idx_car_status_created', 'car_inventory', ['status', 'created_at'], unique=False)

    # Financial transactions
    op.create_table('financial_transactions',
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        _money('amount', nullable=False),
        sa.Column('currency', sa.String(length=10), server_default='DZD', nullable=False),
        sa.Column('paid_amount', sa.Numeric(precision=15, scale=2), server_default='0', nullable=False),
        sa.Column('payment_status', sa.String(length=20), server_default='Pending', nullable=False),
        sa.Column('payment_method', sa.String(length=20), server_default='cash', nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('transaction_date', sa.Date(), nullable=False),
        _money('seller_commission'),
        _money('buyer_commission'),
        _money('bureau_commission'),
        sa.Column('seller_name', sa.String(length=255), nullable=True),
        sa.Column('buyer_name', sa.String(length=255), nullable=True),
        sa.Column('car_brand', sa.String(length=100), nullable=True),
        sa.Column('car_model', sa.String(length=100), nullable=True),
        sa.Column('car_year', sa.String(length=10), nullable=True),
        sa.Column('car_vin', sa.String(length=50), nullable=True),
        sa.Column('car_color', sa.String(length=50), nullable=True),
        sa.Column('car_mileage', sa.Numeric(precision=12, scale=1), nullable=True),
        _money('car_buying_price'),
        _money('shipping_price'),
        sa.Column('buying_currency', sa.String(length=10), nullable=True),
        _money('original_buying_price'),
        sa.Column('exchange_rate_dzd_usdt', sa.Numeric(precision=18, scale=8), nullable=True),
        sa.Column('exchange_rate_usdt_krw', sa.Numeric(precision=18, scale=8), nullable=True),
        sa.Column('is_paid_in_korea', sa.Boolean(), server_default='0', nullable=False),
        sa.Column('paid_in_korea_date', sa.DateTime(), nullable=True),
        sa.Column('customer_name', sa.String(length=255), nullable=True),
        sa.Column('customer_phone', sa.String(length=50), nullable=True),
        sa.Column('customer_email', sa.String(length=255), nullable=True),
        sa.Column('customer_address', sa.Text(), nullable=True),
        sa.Column('customer_postal_code', sa.String(length=20), nullable=True),
        sa.Column('customer_id_card', sa.String(length=100), nullable=True),
        sa.Column('passport_number', sa.String(length=100), nullable=True),
        sa.Column('passport_photo_url', sa.Text(), nullable=True),
        sa.Column('id_card_url', sa.Text(), nullable=True),
        sa.Column('id_card_back_url', sa.Text(), nullable=True),
        sa.Column('vehicle_photos_urls', sa.Text(), nullable=True),
        sa.Column('related_order_id', sa.Integer(), nullable=True),
        sa.Column('related_car_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_financial_transactions_category'), 'financial_transactions', ['category'], unique=False)
    op.create_index(op.f('ix_financial_transactions_car_vin'), 'financial_transactions', ['car_vin'], unique=False)
    op.create_index('idx_financial_transaction_date', 'financial_transactions', ['transaction_date'], unique=False)
    op.create_index('idx_financial_transaction_type_status', 'financial_transactions', ['type', 'payment_status'], unique=False)
    op.create_index('idx_financial_transaction_car_order', 'financial_transactions', ['related_car_id', 'related_order_id'], unique=False)

    # Shipping forms
    op.create_table('shipping_forms',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('passport_number', sa.String(length=100), nullable=True),
        sa.Column('id_card_number', sa.String(length=100), nullable=True),
        sa.Column('code_postal', sa.String(length=20), nullable=True),
        sa.Column('zip_number', sa.String(length=100), nullable=True),
        sa.Column('vehicle_model', sa.String(length=255), nullable=False),
        sa.Column('vin_number', sa.String(length=50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('pdf_url', sa.Text(), nullable=True),
        sa.Column('passport_photo_url', sa.Text(), nullable=True),
        sa.Column('id_card_url', sa.Text(), nullable=True),
        sa.Column('id_card_back_url', sa.Text(), nullable=True),
        sa.Column('vehicle_photos_urls', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('shipment_month', sa.String(length=7), nullable=True),
        sa.Column('related_transaction_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_shipping_forms_vin_number'), 'shipping_forms', ['vin_number'], unique=False)
    op.create_index(op.f('ix_shipping_forms_related_transaction_id'), 'shipping_forms', ['related_transaction_id'], unique=False)
    op.create_index('idx_shipping_form_status_month', 'shipping_forms', ['status', 'shipment_month'], unique=False)


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('shipping_forms')
    op.drop_table('financial_transactions')
    op.drop_table('car_inventory')
    op.drop_table('orders')
    op.drop_table('settings')
    op.drop_table('profiles')
