"""marketplace_baseline

Revision ID: 3f9c1a2b7d10
Revises: 
Create Date: 2026-10-16 09:12:44.381202

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the marketplace tables (baseline schema)."""

    # Catalog tables first (referenced by users and ads)
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon_url', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'membership_packages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('max_ads', sa.Integer(), nullable=False),
        sa.Column('boost_credits', sa.Integer(), nullable=False),
        sa.Column('features', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('price > 0', name='ck_membership_packages_price_positive'),
        sa.CheckConstraint('duration_days > 0', name='ck_membership_packages_duration_positive'),
        sa.CheckConstraint('max_ads > 0', name='ck_membership_packages_max_ads_positive'),
        sa.CheckConstraint('boost_credits >= 0', name='ck_membership_packages_boost_credits_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )

    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=64), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('membership_id', sa.Integer(), nullable=True),
        sa.Column('boost_credits', sa.Integer(), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('boost_credits >= 0', name='ck_users_boost_credits_non_negative'),
        sa.ForeignKeyConstraint(['membership_id'], ['membership_packages.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Ads table
    op.create_table(
        'ads',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('contact_info', sa.String(length=255), nullable=False),
        sa.Column('images', sa.Text(), nullable=False),
        sa.Column('is_boosted', sa.Boolean(), nullable=False),
        sa.Column('boost_expires_at', sa.DateTime(), nullable=True),
        sa.Column('view_count', sa.Integer(), nullable=False),
        sa.Column('contact_count', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('price > 0', name='ck_ads_price_positive'),
        sa.CheckConstraint('view_count >= 0', name='ck_ads_view_count_non_negative'),
        sa.CheckConstraint('contact_count >= 0', name='ck_ads_contact_count_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_ads_user_id', 'ads', ['user_id'], unique=False)
    op.create_index('ix_ads_category_id', 'ads', ['category_id'], unique=False)
    op.create_index('ix_ads_status_created_at', 'ads', ['status', 'created_at'], unique=False)

    # Payments table
    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('membership_id', sa.Integer(), nullable=True),
        sa.Column('ad_id', sa.Integer(), nullable=True),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('transaction_id', sa.String(length=64), nullable=True),
        sa.Column('gateway_response', sa.Text(), nullable=True),
        sa.Column('entitlement_applied_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount > 0', name='ck_payments_amount_positive'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['membership_id'], ['membership_packages.id']),
        sa.ForeignKeyConstraint(['ad_id'], ['ads.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_payments_user_id', 'payments', ['user_id'], unique=False)
    op.create_index('ix_payments_transaction_id', 'payments', ['transaction_id'], unique=True)


def downgrade() -> None:
    """Drop the marketplace tables."""
    op.drop_index('ix_payments_transaction_id', table_name='payments')
    op.drop_index('ix_payments_user_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_ads_status_created_at', table_name='ads')
    op.drop_index('ix_ads_category_id', table_name='ads')
    op.drop_index('ix_ads_user_id', table_name='ads')
    op.drop_table('ads')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.drop_table('membership_packages')
    op.drop_table('categories')
