"""create_ledger_tables

Revision ID: 3b7e1c2d9a40
Revises:
Create Date: 2026-10-18 10:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b7e1c2d9a40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Les colonnes Enum stockent le nom du membre (DIRECT, INSTALLMENT, ...)
payment_type = sa.Enum('DIRECT', 'INSTALLMENT', 'POINTS', name='paymenttype')
transaction_type = sa.Enum('REVENUE', 'EXPENSE', name='transactiontype')
transaction_status = sa.Enum('COMPLETED', 'PENDING', 'CANCELLED', name='transactionstatus')
booking_status = sa.Enum('CONFIRMED', 'PENDING', 'CANCELLED', 'PAID', 'SHIPPED', name='bookingstatus')
contract_status = sa.Enum('SIGNED', 'SENT', 'PENDING', 'ARCHIVED', name='contractstatus')
contract_payment_status = sa.Enum('PAID', 'UNPAID', name='contractpaymentstatus')
user_role = sa.Enum('ADMIN', 'MANAGER', 'STAFF', name='userrole')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'clients',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('loyalty_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('loyalty_points >= 0', name='ck_clients_loyalty_points_positive'),
    )
    op.create_index('ix_clients_name', 'clients', ['name'])
    op.create_index('ix_clients_phone', 'clients', ['phone'])

    op.create_table(
        'activity_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('point_cost', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unit_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('icon', sa.String(), nullable=False, server_default='dollar'),
        sa.Column('color', sa.String(), nullable=False, server_default='gray'),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('point_cost >= 0', name='ck_activity_categories_point_cost_positive'),
        sa.CheckConstraint('unit_price >= 0', name='ck_activity_categories_unit_price_positive'),
    )
    op.create_index('ix_activity_categories_name', 'activity_categories', ['name'], unique=True)

    op.create_table(
        'activities',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('client_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('client_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('paid_amount', sa.Float(), nullable=False),
        sa.Column('remaining_amount', sa.Float(), nullable=False),
        sa.Column('payment_type', payment_type, nullable=False),
        sa.Column('start_time', sa.String(), nullable=True),
        sa.Column('end_time', sa.String(), nullable=True),
        sa.Column('duration', sa.String(), nullable=True),
        sa.Column('booking_id', sa.Integer(), nullable=True),
        sa.Column('contract_id', sa.Integer(), nullable=True),
        sa.Column('checkout_ref', sa.String(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    for column in ('client_name', 'phone', 'client_id', 'category', 'payment_type',
                   'booking_id', 'contract_id', 'checkout_ref', 'date'):
        op.create_index(f'ix_activities_{column}', 'activities', [column])
    op.create_index('ix_activities_payment_type_remaining', 'activities', ['payment_type', 'remaining_amount'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', transaction_type, nullable=False),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('status', transaction_status, nullable=False),
        sa.Column('reference_number', sa.String(), nullable=True),
        sa.Column('activity_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    for column in ('date', 'type', 'category', 'reference_number', 'activity_id'):
        op.create_index(f'ix_transactions_{column}', 'transactions', [column])

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('client_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('service', sa.String(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('status', booking_status, nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_bookings_status', 'bookings', ['status'])

    op.create_table(
        'contracts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('client_name', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('status', contract_status, nullable=False),
        sa.Column('payment_status', contract_payment_status, nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_contracts_payment_status', 'contracts', ['payment_status'])


def downgrade() -> None:
    for table in ('contracts', 'bookings', 'transactions', 'activities',
                  'activity_categories', 'clients', 'users'):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (contract_payment_status, contract_status, booking_status,
                      transaction_status, transaction_type, payment_type, user_role):
        enum_type.drop(bind, checkfirst=True)
