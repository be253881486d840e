"""Settlement core tables

Revision ID: 001_settlement_core
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '001_settlement_core'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Enum columns are stored as VARCHAR(50) holding the member value

    # Accounts
    op.create_table(
        'accounts',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('kind', sa.String(50), nullable=False),
        sa.Column('balance', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('account_number', sa.String(100), nullable=True),
        sa.Column('bank_name', sa.String(200), nullable=True),
        sa.Column('branch', sa.String(200), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_accounts_company_id', 'accounts', ['company_id'])
    op.create_index('idx_accounts_company_name_kind', 'accounts', ['company_id', 'name', 'kind'])

    # Transactions
    op.create_table(
        'transactions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('kind', sa.String(50), nullable=False),
        sa.Column('category', sa.String(100), nullable=False, server_default='General'),
        sa.Column('transaction_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='pending'),
        sa.Column('account_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('accounts.id'), nullable=True),
        sa.Column('reference', sa.String(100), nullable=True),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_transactions_company_id', 'transactions', ['company_id'])
    op.create_index('ix_transactions_status', 'transactions', ['status'])
    op.create_index('ix_transactions_reference', 'transactions', ['reference'])

    # Stock items
    op.create_table(
        'stock_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('sku', sa.String(100), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reorder_level', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unit_price', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('cost_price', sa.Numeric(18, 2), nullable=False, server_default='0'),
        *_timestamps(),
        sa.UniqueConstraint('company_id', 'sku', name='uq_stock_items_company_sku'),
        sa.CheckConstraint('quantity >= 0', name='check_stock_quantity_non_negative'),
    )
    op.create_index('ix_stock_items_company_id', 'stock_items', ['company_id'])

    # Sales orders
    op.create_table(
        'orders',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('order_number', sa.String(100), nullable=False),
        sa.Column('customer_name', sa.String(200), nullable=False),
        sa.Column('order_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='Processing'),
        sa.Column('total_amount', sa.Numeric(18, 2), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_orders_company_id', 'orders', ['company_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])

    op.create_table(
        'order_lines',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('stock_item_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stock_items.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(18, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('quantity > 0', name='check_order_line_quantity_positive'),
    )

    # Payroll
    op.create_table(
        'payroll_runs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('employee_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('employee_name', sa.String(200), nullable=True),
        sa.Column('month', sa.String(20), nullable=False),
        sa.Column('basic_salary', sa.Numeric(18, 2), nullable=False),
        sa.Column('net_salary', sa.Numeric(18, 2), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='Pending'),
        sa.Column('payment_date', sa.Date(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_payroll_runs_company_id', 'payroll_runs', ['company_id'])
    op.create_index('ix_payroll_runs_status', 'payroll_runs', ['status'])

    # Procurement
    op.create_table(
        'purchase_orders',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('order_number', sa.String(100), nullable=False),
        sa.Column('supplier', sa.String(200), nullable=False),
        sa.Column('total_amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='Pending'),
        *_timestamps(),
    )
    op.create_index('ix_purchase_orders_company_id', 'purchase_orders', ['company_id'])
    op.create_index('ix_purchase_orders_status', 'purchase_orders', ['status'])

    # Team invites
    op.create_table(
        'team_invites',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), nullable=False, server_default='member'),
        sa.Column('status', sa.String(50), nullable=False, server_default='Pending'),
        *_timestamps(),
    )
    op.create_index('ix_team_invites_company_id', 'team_invites', ['company_id'])
    op.create_index('ix_team_invites_status', 'team_invites', ['status'])

    # Gateway payments
    op.create_table(
        'payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('reference', sa.String(100), nullable=False, unique=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('currency', sa.String(10), nullable=False, server_default='ETB'),
        sa.Column('status', sa.String(50), nullable=False, server_default='pending'),
        sa.Column('purpose', sa.String(50), nullable=False, server_default='order'),
        sa.Column('payment_method', sa.String(50), nullable=False, server_default='chapa'),
        sa.Column('phone_number', sa.String(30), nullable=True),
        sa.Column('metadata', postgresql.JSON(), nullable=False, server_default='{}'),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        sa.Column('transaction_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('transactions.id'), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_payments_company_id', 'payments', ['company_id'])
    op.create_index('ix_payments_user_id', 'payments', ['user_id'])
    op.create_index('ix_payments_status', 'payments', ['status'])

    op.create_table(
        'subscriptions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False, unique=True),
        sa.Column('plan', sa.String(50), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='active'),
        sa.Column('billing_cycle', sa.String(20), nullable=False, server_default='monthly'),
        sa.Column('renewal_date', sa.DateTime(), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table('subscriptions')
    op.drop_table('payments')
    op.drop_table('team_invites')
    op.drop_table('purchase_orders')
    op.drop_table('payroll_runs')
    op.drop_table('order_lines')
    op.drop_table('orders')
    op.drop_table('stock_items')
    op.drop_table('transactions')
    op.drop_table('accounts')
