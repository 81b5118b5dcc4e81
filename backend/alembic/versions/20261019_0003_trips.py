"""Add trips table

Revision ID: 20261019_0003
Revises: 20261019_0002
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_0003'
down_revision = '20261019_0002'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'trips',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('cover_image_url', sa.String(1024), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            'start_date IS NULL OR end_date IS NULL OR end_date >= start_date',
            name='ck_trips_date_order',
        ),
    )
    op.create_index('ix_trips_user_id', 'trips', ['user_id'])


def downgrade():
    op.drop_index('ix_trips_user_id', table_name='trips')
    op.drop_table('trips')
