"""add domain of the day

Revision ID: 004_add_domain_of_the_day
Revises: 003_add_payments_and_history
Create Date: 2025-09-18 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '004_add_domain_of_the_day'
down_revision = '003_add_payments_and_history'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'domain_of_the_day',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('domain_name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('valuation', sa.Float(), nullable=False, server_default='0'),
        sa.Column('market_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('seo_value', sa.String(100), nullable=False, server_default=''),
        sa.Column('growth_potential', sa.String(100), nullable=False, server_default=''),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('featured_date', sa.Date(), nullable=False),
        sa.Column('created_by', sa.String(255), nullable=False),  # sub do JWT Supabase
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_domain_of_the_day_id', 'domain_of_the_day', ['id'])
    op.create_index('ix_domain_of_the_day_featured_date', 'domain_of_the_day', ['featured_date'])
    op.create_index('ix_domain_of_the_day_created_by', 'domain_of_the_day', ['created_by'])


def downgrade():
    op.drop_index('ix_domain_of_the_day_created_by', table_name='domain_of_the_day')
    op.drop_index('ix_domain_of_the_day_featured_date', table_name='domain_of_the_day')
    op.drop_index('ix_domain_of_the_day_id', table_name='domain_of_the_day')
    op.drop_table('domain_of_the_day')
