"""create accounts and credit ledger

Revision ID: 001_accounts_and_credits
Revises: 
Create Date: 2025-09-02 10:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_accounts_and_credits'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create accounts table
    op.create_table(
        'accounts',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('wallet_address', sa.String(64), nullable=False, unique=True),
        sa.Column('display_name', sa.String(255), nullable=False, server_default=''),
        sa.Column('email', sa.String(255), nullable=False, server_default=''),
        sa.Column('avatar_url', sa.String(1024), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('last_login', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_accounts_id', 'accounts', ['id'])
    op.create_index('ix_accounts_wallet_address', 'accounts', ['wallet_address'])

    # Create credit_balances table (uma linha por conta)
    op.create_table(
        'credit_balances',
        sa.Column('account_id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('balance', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_purchased', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.CheckConstraint('balance >= 0', name='ck_credit_balances_balance_non_negative'),
    )

    # Create credit_transactions table (append-only)
    op.create_table(
        'credit_transactions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('balance_after', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(500), nullable=False, server_default=''),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_credit_transactions_id', 'credit_transactions', ['id'])
    op.create_index('ix_credit_transactions_account_id', 'credit_transactions', ['account_id'])
    op.create_index('ix_credit_transactions_type', 'credit_transactions', ['type'])
    op.create_index('ix_credit_transactions_created_at', 'credit_transactions', ['created_at'])

    # Create credit_packages table
    op.create_table(
        'credit_packages',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('credits', sa.Integer(), nullable=False),
        sa.Column('base_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('final_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('is_popular', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_credit_packages_id', 'credit_packages', ['id'])
    op.create_index('ix_credit_packages_sort_order', 'credit_packages', ['sort_order'])


def downgrade() -> None:
    op.drop_index('ix_credit_packages_sort_order', table_name='credit_packages')
    op.drop_index('ix_credit_packages_id', table_name='credit_packages')
    op.drop_table('credit_packages')
    op.drop_index('ix_credit_transactions_created_at', table_name='credit_transactions')
    op.drop_index('ix_credit_transactions_type', table_name='credit_transactions')
    op.drop_index('ix_credit_transactions_account_id', table_name='credit_transactions')
    op.drop_index('ix_credit_transactions_id', table_name='credit_transactions')
    op.drop_table('credit_transactions')
    op.drop_table('credit_balances')
    op.drop_index('ix_accounts_wallet_address', table_name='accounts')
    op.drop_index('ix_accounts_id', table_name='accounts')
    op.drop_table('accounts')
