"""baseline_migration

Revision ID: 3c1f0a7d9b21
Revises:
Create Date: 2026-10-18 10:12:44.517203

Production-safe migration: only creates tables that do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '3c1f0a7d9b21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def _timestamps(with_updated: bool = True):
    columns = [
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    ]
    if with_updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False)
        )
    return columns


def upgrade() -> None:
    # Create users table
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('user_type', sa.String(), nullable=False),
            *_timestamps(with_updated=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    # Create parent_profiles table
    if not table_exists('parent_profiles'):
        op.create_table('parent_profiles',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('first_name', sa.String(), nullable=False),
            sa.Column('last_name', sa.String(), nullable=False),
            sa.Column('state', sa.String(), nullable=False),
            sa.Column('town', sa.String(), nullable=False),
            sa.Column('zip_code', sa.String(), nullable=False),
            sa.Column('service_categories', sa.JSON(), nullable=False),
            sa.Column('financing_type', sa.JSON(), nullable=False),
            sa.Column('service_period_start', sa.Date(), nullable=True),
            sa.Column('service_period_end', sa.Date(), nullable=True),
            sa.Column('preferred_languages', sa.JSON(), nullable=False),
            sa.Column('desired_days', sa.JSON(), nullable=False),
            sa.Column('desired_start_time', sa.Time(), nullable=True),
            sa.Column('desired_end_time', sa.Time(), nullable=True),
            sa.Column('accepted_terms', sa.Boolean(), nullable=False),
            sa.Column('subscription_active', sa.Boolean(), nullable=False),
            *_timestamps(),
            sa.CheckConstraint(
                'service_period_end IS NULL OR service_period_start IS NULL '
                'OR service_period_end >= service_period_start',
                name='ck_parent_service_period'
            ),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_parent_profiles_id'), 'parent_profiles', ['id'], unique=False)
        op.create_index(op.f('ix_parent_profiles_user_id'), 'parent_profiles', ['user_id'], unique=True)
        op.create_index(op.f('ix_parent_profiles_state'), 'parent_profiles', ['state'], unique=False)
        op.create_index(op.f('ix_parent_profiles_subscription_active'), 'parent_profiles', ['subscription_active'], unique=False)

    # Create doula_profiles table
    if not table_exists('doula_profiles'):
        op.create_table('doula_profiles',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('first_name', sa.String(), nullable=False),
            sa.Column('last_name', sa.String(), nullable=False),
            sa.Column('state', sa.String(), nullable=False),
            sa.Column('town', sa.String(), nullable=False),
            sa.Column('zip_code', sa.String(), nullable=False),
            sa.Column('drive_distance', sa.Integer(), nullable=False),
            sa.Column('payment_preferences', sa.JSON(), nullable=False),
            sa.Column('spoken_languages', sa.JSON(), nullable=False),
            sa.Column('hourly_rate_min', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('hourly_rate_max', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('service_categories', sa.JSON(), nullable=False),
            sa.Column('certifications', sa.JSON(), nullable=False),
            sa.Column('profile_picture_url', sa.String(), nullable=True),
            sa.Column('certification_documents', sa.JSON(), nullable=False),
            sa.Column('referees', sa.JSON(), nullable=False),
            sa.Column('accepted_terms', sa.Boolean(), nullable=False),
            sa.Column('subscription_active', sa.Boolean(), nullable=False),
            sa.Column('rating', sa.Numeric(precision=3, scale=2), nullable=False),
            sa.Column('review_count', sa.Integer(), nullable=False),
            *_timestamps(),
            sa.CheckConstraint('drive_distance BETWEEN 1 AND 70', name='ck_doula_drive_distance'),
            sa.CheckConstraint('hourly_rate_min >= 0 AND hourly_rate_max >= hourly_rate_min', name='ck_doula_hourly_rates'),
            sa.CheckConstraint('rating >= 0 AND rating <= 5', name='ck_doula_rating'),
            sa.CheckConstraint('review_count >= 0', name='ck_doula_review_count'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_doula_profiles_id'), 'doula_profiles', ['id'], unique=False)
        op.create_index(op.f('ix_doula_profiles_user_id'), 'doula_profiles', ['user_id'], unique=True)
        op.create_index(op.f('ix_doula_profiles_state'), 'doula_profiles', ['state'], unique=False)
        op.create_index(op.f('ix_doula_profiles_subscription_active'), 'doula_profiles', ['subscription_active'], unique=False)

    # Create contracts table
    if not table_exists('contracts'):
        op.create_table('contracts',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('parent_id', sa.Integer(), nullable=False),
            sa.Column('doula_id', sa.Integer(), nullable=False),
            sa.Column('start_date', sa.DateTime(), nullable=False),
            sa.Column('end_date', sa.DateTime(), nullable=True),
            sa.Column('status', sa.String(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(['parent_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['doula_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_contract_parent_doula', 'contracts', ['parent_id', 'doula_id'], unique=False)
        op.create_index(op.f('ix_contracts_id'), 'contracts', ['id'], unique=False)
        op.create_index(op.f('ix_contracts_parent_id'), 'contracts', ['parent_id'], unique=False)
        op.create_index(op.f('ix_contracts_doula_id'), 'contracts', ['doula_id'], unique=False)

    # Create comments table
    if not table_exists('comments'):
        op.create_table('comments',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('contract_id', sa.Integer(), nullable=False),
            sa.Column('parent_id', sa.Integer(), nullable=False),
            sa.Column('doula_id', sa.Integer(), nullable=False),
            sa.Column('parent_name', sa.String(), nullable=False),
            sa.Column('comment', sa.String(length=160), nullable=False),
            *_timestamps(with_updated=False),
            sa.ForeignKeyConstraint(['contract_id'], ['contracts.id'], ),
            sa.ForeignKeyConstraint(['parent_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['doula_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('contract_id', 'parent_id', name='uq_comment_contract_parent')
        )
        op.create_index(op.f('ix_comments_id'), 'comments', ['id'], unique=False)
        op.create_index(op.f('ix_comments_contract_id'), 'comments', ['contract_id'], unique=False)
        op.create_index(op.f('ix_comments_doula_id'), 'comments', ['doula_id'], unique=False)
        op.create_index(op.f('ix_comments_created_at'), 'comments', ['created_at'], unique=False)

    # Create subscriptions table
    if not table_exists('subscriptions'):
        op.create_table('subscriptions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('plan_type', sa.String(), nullable=False),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('provider_customer_id', sa.String(), nullable=True),
            sa.Column('provider_subscription_id', sa.String(), nullable=True),
            sa.Column('provider_checkout_id', sa.String(), nullable=True),
            sa.Column('current_period_start', sa.DateTime(), nullable=True),
            sa.Column('current_period_end', sa.DateTime(), nullable=True),
            *_timestamps(),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id')
        )
        op.create_index(op.f('ix_subscriptions_id'), 'subscriptions', ['id'], unique=False)
        op.create_index(op.f('ix_subscriptions_provider_subscription_id'), 'subscriptions', ['provider_subscription_id'], unique=False)

    # Create email_otps table
    if not table_exists('email_otps'):
        op.create_table('email_otps',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('otp_code', sa.String(length=6), nullable=False),
            sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('expires_at', sa.DateTime(), nullable=False),
            sa.Column('verified', sa.Boolean(), nullable=False),
            sa.Column('attempt_count', sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_email_otps_id'), 'email_otps', ['id'], unique=False)
        op.create_index(op.f('ix_email_otps_email'), 'email_otps', ['email'], unique=False)
        op.create_index(op.f('ix_email_otps_expires_at'), 'email_otps', ['expires_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_email_otps_expires_at'), table_name='email_otps')
    op.drop_index(op.f('ix_email_otps_email'), table_name='email_otps')
    op.drop_index(op.f('ix_email_otps_id'), table_name='email_otps')
    op.drop_table('email_otps')

    op.drop_index(op.f('ix_subscriptions_provider_subscription_id'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_id'), table_name='subscriptions')
    op.drop_table('subscriptions')

    op.drop_index(op.f('ix_comments_created_at'), table_name='comments')
    op.drop_index(op.f('ix_comments_doula_id'), table_name='comments')
    op.drop_index(op.f('ix_comments_contract_id'), table_name='comments')
    op.drop_index(op.f('ix_comments_id'), table_name='comments')
    op.drop_table('comments')

    op.drop_index(op.f('ix_contracts_doula_id'), table_name='contracts')
    op.drop_index(op.f('ix_contracts_parent_id'), table_name='contracts')
    op.drop_index(op.f('ix_contracts_id'), table_name='contracts')
    op.drop_index('idx_contract_parent_doula', table_name='contracts')
    op.drop_table('contracts')

    op.drop_index(op.f('ix_doula_profiles_subscription_active'), table_name='doula_profiles')
    op.drop_index(op.f('ix_doula_profiles_state'), table_name='doula_profiles')
    op.drop_index(op.f('ix_doula_profiles_user_id'), table_name='doula_profiles')
    op.drop_index(op.f('ix_doula_profiles_id'), table_name='doula_profiles')
    op.drop_table('doula_profiles')

    op.drop_index(op.f('ix_parent_profiles_subscription_active'), table_name='parent_profiles')
    op.drop_index(op.f('ix_parent_profiles_state'), table_name='parent_profiles')
    op.drop_index(op.f('ix_parent_profiles_user_id'), table_name='parent_profiles')
    op.drop_index(op.f('ix_parent_profiles_id'), table_name='parent_profiles')
    op.drop_table('parent_profiles')

    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
