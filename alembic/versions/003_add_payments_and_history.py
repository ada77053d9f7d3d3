"""add payment orders and domain history

Revision ID: 003_add_payments_and_history
Revises: 002_add_analyzed_domains
Create Date: 2025-09-10 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '003_add_payments_and_history'
down_revision = '002_add_analyzed_domains'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'payment_orders',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('order_id', sa.String(64), nullable=False, unique=True),  # ID da order no PayPal
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('credits', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('status', sa.String(32), nullable=False, server_default='CREATED'),
        sa.Column('capture_id', sa.String(64), nullable=True),
        sa.Column('credited_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_payment_orders_id', 'payment_orders', ['id'])
    op.create_index('ix_payment_orders_order_id', 'payment_orders', ['order_id'])
    op.create_index('ix_payment_orders_account_id', 'payment_orders', ['account_id'])

    op.create_table(
        'domain_history',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('domain_name', sa.String(255), nullable=False),
        sa.Column('price', sa.String(80), nullable=False, server_default='0'),
        sa.Column('analyzed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_domain_history_id', 'domain_history', ['id'])
    op.create_index('ix_domain_history_account_id', 'domain_history', ['account_id'])
    op.create_index('ix_domain_history_analyzed_at', 'domain_history', ['analyzed_at'])


def downgrade():
    op.drop_index('ix_domain_history_analyzed_at', table_name='domain_history')
    op.drop_index('ix_domain_history_account_id', table_name='domain_history')
    op.drop_index('ix_domain_history_id', table_name='domain_history')
    op.drop_table('domain_history')
    op.drop_index('ix_payment_orders_account_id', table_name='payment_orders')
    op.drop_index('ix_payment_orders_order_id', table_name='payment_orders')
    op.drop_index('ix_payment_orders_id', table_name='payment_orders')
    op.drop_table('payment_orders')
