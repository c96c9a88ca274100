"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _owner():
    return sa.Column(
        "user_id", sa.String(length=36),
        sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('profile_photo_url', sa.String(length=500), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='landlord'),
        sa.Column('company_name', sa.String(length=200), nullable=True),
        sa.Column('business_email', sa.String(length=255), nullable=True),
        sa.Column('business_address', sa.String(length=500), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('properties',
        sa.Column('id', sa.String(length=36), nullable=False),
        _owner(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.String(length=512), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('state', sa.String(length=50), nullable=False),
        sa.Column('zip_code', sa.String(length=20), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('units', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('occupied_units', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('monthly_rent', sa.Float(), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('occupied_units >= 0 AND occupied_units <= units', name='ck_properties_occupancy'),
    )

    op.create_table('tenants',
        sa.Column('id', sa.String(length=36), nullable=False),
        _owner(),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, index=True),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('property_id', sa.String(length=36), nullable=False, index=True),
        sa.Column('unit', sa.String(length=50), nullable=True),
        sa.Column('lease_start', sa.Date(), nullable=False),
        sa.Column('lease_end', sa.Date(), nullable=False),
        sa.Column('rent_amount', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('payments',
        sa.Column('id', sa.String(length=36), nullable=False),
        _owner(),
        sa.Column('tenant_id', sa.String(length=36), nullable=False, index=True),
        sa.Column('property_id', sa.String(length=36), nullable=False, index=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('paid_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending', index=True),
        sa.Column('method', sa.String(length=30), nullable=True),
        sa.Column('reference', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('payment_history',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('payment_id', sa.String(length=36),
                  sa.ForeignKey('payments.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('method', sa.String(length=30), nullable=True),
        sa.Column('reference', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('maintenance_requests',
        sa.Column('id', sa.String(length=36), nullable=False),
        _owner(),
        sa.Column('property_id', sa.String(length=36), nullable=False, index=True),
        sa.Column('tenant_id', sa.String(length=36), nullable=True, index=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='new'),
        sa.Column('assigned_to', sa.String(length=200), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('expenses',
        sa.Column('id', sa.String(length=36), nullable=False),
        _owner(),
        sa.Column('property_id', sa.String(length=36),
                  sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=True, index=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('category', sa.String(length=80), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('paid_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('frequency', sa.String(length=20), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=False, index=True),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending', index=True),
        sa.Column('payment_method', sa.String(length=30), nullable=True),
        sa.Column('reference', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade():
    op.drop_table('expenses')
    op.drop_table('maintenance_requests')
    op.drop_table('payment_history')
    op.drop_table('payments')
    op.drop_table('tenants')
    op.drop_table('properties')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
