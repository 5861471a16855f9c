"""add user_id and service_name indexes to subscriptions

Revision ID: b2c3d4e5f6g7
Revises: a1b2c3d4e5f6
Create Date: 2025-07-02
"""
from alembic import op


revision = 'b2c3d4e5f6g7'
down_revision = 'a1b2c3d4e5f6'
branch_labels = None
depends_on = None


def upgrade():
    op.create_index('ix_subscriptions_user_id', 'subscriptions', ['user_id'])
    op.create_index('ix_subscriptions_service_name', 'subscriptions', ['service_name'])


def downgrade():
    op.drop_index('ix_subscriptions_service_name', table_name='subscriptions')
    op.drop_index('ix_subscriptions_user_id', table_name='subscriptions')
