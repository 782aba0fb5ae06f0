"""create tenants, transactions, splits and import review tables

Revision ID: 202601050900
Revises:
Create Date: 2026-01-05 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '202601050900'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('key', sa.Uuid(), nullable=False, unique=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_tenants_id', 'tenants', ['id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('key', sa.Uuid(), nullable=False, unique=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('payee', sa.String(length=255), nullable=False),
        sa.Column('memo', sa.String(length=1000), nullable=True),
        sa.Column('source', sa.String(length=200), nullable=True),
        sa.Column('external_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_transactions_id', 'transactions', ['id'])
    op.create_index('ix_transactions_tenant_date', 'transactions', ['tenant_id', 'date'])
    op.create_index('ix_transactions_tenant_external_id', 'transactions', ['tenant_id', 'external_id'])

    op.create_table(
        'splits',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('transaction_id', sa.Integer(), sa.ForeignKey('transactions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('category', sa.String(length=200), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
    )
    op.create_index('ix_splits_id', 'splits', ['id'])
    op.create_index('ix_splits_transaction_id', 'splits', ['transaction_id'])

    op.create_table(
        'import_review_transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('key', sa.Uuid(), nullable=False, unique=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('payee', sa.String(length=255), nullable=False),
        sa.Column('memo', sa.String(length=1000), nullable=True),
        sa.Column('source', sa.String(length=200), nullable=True),
        sa.Column('external_id', sa.String(length=255), nullable=True),
        sa.Column('duplicate_status', sa.String(length=19), nullable=False),
        sa.Column('duplicate_of_key', sa.Uuid(), nullable=True),
        sa.Column('is_selected', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_import_review_transactions_id', 'import_review_transactions', ['id'])
    op.create_index('ix_import_review_transactions_tenant_id', 'import_review_transactions', ['tenant_id'])
    op.create_index(
        'ix_import_review_tenant_external_id',
        'import_review_transactions',
        ['tenant_id', 'external_id'],
    )


def downgrade() -> None:
    op.drop_table('import_review_transactions')
    op.drop_table('splits')
    op.drop_table('transactions')
    op.drop_table('tenants')
