"""link tenant records to tenant-role accounts

Revision ID: 0002_tenant_accounts
Revises: 0001_initial_schema
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = "0002_tenant_accounts"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('tenants') as batch:
        batch.add_column(sa.Column('account_user_id', sa.String(length=36), nullable=True))
        batch.add_column(sa.Column('invite_code', sa.String(length=36), nullable=True))
        batch.add_column(sa.Column('invite_expires_at', sa.DateTime(), nullable=True))
        batch.create_foreign_key(
            'fk_tenants_account_user_id', 'users', ['account_user_id'], ['id'], ondelete='SET NULL',
        )
        batch.create_index('ix_tenants_account_user_id', ['account_user_id'])
        batch.create_index('ix_tenants_invite_code', ['invite_code'], unique=True)


def downgrade():
    with op.batch_alter_table('tenants') as batch:
        batch.drop_index('ix_tenants_invite_code')
        batch.drop_index('ix_tenants_account_user_id')
        batch.drop_constraint('fk_tenants_account_user_id', type_='foreignkey')
        batch.drop_column('invite_expires_at')
        batch.drop_column('invite_code')
        batch.drop_column('account_user_id')
