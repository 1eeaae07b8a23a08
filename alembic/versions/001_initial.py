"""Initial migration

Revision ID: 001
Revises: 
Create Date: 2026-09-14

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'properties',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('property_type', sa.String(length=50), nullable=False),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Integer(), nullable=False),
        sa.Column('square_feet', sa.Integer(), nullable=True),
        sa.Column('lot_size', sa.Integer(), nullable=True),
        sa.Column('year_built', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=50), server_default='PENDING', nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=255), nullable=False),
        sa.Column('state', sa.String(length=255), nullable=False),
        sa.Column('postal_code', sa.String(length=50), nullable=False),
        sa.Column('country', sa.String(length=255), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('has_garage', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('has_pool', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('has_basement', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('has_fireplace', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('parking_spaces', sa.Integer(), nullable=True),
        sa.Column('heating_type', sa.String(length=50), server_default='NONE', nullable=False),
        sa.Column('cooling_type', sa.String(length=50), server_default='NONE', nullable=False),
        # JSON-массивы ссылок хранятся текстом
        sa.Column('image_urls', sa.Text(), server_default='[]', nullable=False),
        sa.Column('video_url', sa.String(length=1000), nullable=True),
        sa.Column('floor_plans', sa.Text(), server_default='[]', nullable=False),
        sa.Column('agent_id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_properties_property_type'), 'properties', ['property_type'], unique=False)
    op.create_index(op.f('ix_properties_city'), 'properties', ['city'], unique=False)
    op.create_index(op.f('ix_properties_status'), 'properties', ['status'], unique=False)
    op.create_index(op.f('ix_properties_agent_id'), 'properties', ['agent_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_properties_agent_id'), table_name='properties')
    op.drop_index(op.f('ix_properties_status'), table_name='properties')
    op.drop_index(op.f('ix_properties_city'), table_name='properties')
    op.drop_index(op.f('ix_properties_property_type'), table_name='properties')
    op.drop_table('properties')
