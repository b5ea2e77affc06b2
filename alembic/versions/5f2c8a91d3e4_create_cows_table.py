"""Create cows table

Revision ID: 5f2c8a91d3e4
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5f2c8a91d3e4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the herd table with lactation flags and ordered AI dates."""
    op.create_table(
        'cows',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('tag_number', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('breed', sa.String(length=255), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('lactating', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('dry', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('in_calf', sa.Boolean(), server_default='false', nullable=False),
        sa.Column(
            'ai_dates',
            postgresql.ARRAY(sa.Date()),
            server_default='{}',
            nullable=False,
        ),
        sa.Column('expected_delivery_date', sa.Date(), nullable=True),
        sa.Column('health_status', sa.String(length=64), nullable=True),
        sa.Column('insurance', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('purchase_price', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tag_number', name='ux_cows_tag_number'),
    )
    op.create_index('ix_cows_position', 'cows', ['position'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_cows_position', table_name='cows')
    op.drop_table('cows')
