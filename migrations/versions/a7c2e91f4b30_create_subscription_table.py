"""create subscription table

Revision ID: a7c2e91f4b30
Revises:
Create Date: 2025-09-01
"""
from alembic import op
import sqlalchemy as sa


revision = 'a7c2e91f4b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'subscription',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('service_name', sa.String(255), nullable=False),
        sa.Column('price', sa.BigInteger(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_subscription_user_id', 'subscription', ['user_id'])
    op.create_unique_constraint(
        'uq_subscription_user_service_start', 'subscription',
        ['user_id', 'service_name', 'start_date'],
    )


def downgrade():
    op.drop_table('subscription')
