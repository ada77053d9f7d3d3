"""add analyzed domains cache and analysis claims

Revision ID: 002_add_analyzed_domains
Revises: 001_accounts_and_credits
Create Date: 2025-09-04 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '002_add_analyzed_domains'
down_revision = '001_accounts_and_credits'
branch_labels = None
depends_on = None


def upgrade():
    """
    Cria o cache de análises (uma linha por conta + domínio) e a tabela de
    claims usada para impedir duas análises pagas simultâneas do mesmo domínio.
    """
    op.create_table(
        'analyzed_domains',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('domain_name', sa.String(255), nullable=False),
        sa.Column('price', sa.String(80), nullable=False, server_default='0'),  # wei
        sa.Column('analysis_data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('account_id', 'domain_name', name='uq_analyzed_domains_account_domain'),
    )
    op.create_index('ix_analyzed_domains_id', 'analyzed_domains', ['id'])
    op.create_index('ix_analyzed_domains_account_id', 'analyzed_domains', ['account_id'])
    op.create_index('ix_analyzed_domains_domain_name', 'analyzed_domains', ['domain_name'])

    op.create_table(
        'analysis_claims',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('domain_name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('account_id', 'domain_name', name='uq_analysis_claims_account_domain'),
    )


def downgrade():
    """Remove cache de análises e claims"""
    op.drop_table('analysis_claims')
    op.drop_index('ix_analyzed_domains_domain_name', table_name='analyzed_domains')
    op.drop_index('ix_analyzed_domains_account_id', table_name='analyzed_domains')
    op.drop_index('ix_analyzed_domains_id', table_name='analyzed_domains')
    op.drop_table('analyzed_domains')
