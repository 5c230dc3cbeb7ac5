"""create_flag_tables

Revision ID: 0001_create_flag_tables
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_create_flag_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_FLAG_TYPES = ['like', 'follow', 'favorite', 'bookmark', 'upvote', 'downvote']


def upgrade() -> None:
    """Create the flag vocabulary, link and flag tables and seed flag types."""
    flag_types = op.create_table(
        'flag_types',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sqlite_autoincrement=True,
    )

    op.create_table(
        'flag_targets',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
    )

    op.create_table(
        'flag_links',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('flag_type_id', sa.Integer(), sa.ForeignKey('flag_types.id'), nullable=False),
        sa.Column('flag_target_id', sa.Integer(), sa.ForeignKey('flag_targets.id'), nullable=False),
        sa.UniqueConstraint('flag_type_id', 'flag_target_id', name='uq_flag_links_type_target'),
    )

    op.create_table(
        'flags',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('flag_link_id', sa.Integer(), sa.ForeignKey('flag_links.id'), nullable=False),
        sa.Column('flagger_type', sa.String(255), nullable=False),
        sa.Column('flagger_id', sa.BigInteger(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            'flag_link_id', 'flagger_type', 'flagger_id', name='uq_flags_link_flagger'
        ),
    )

    op.create_index('ix_flags_flagger', 'flags', ['flagger_type', 'flagger_id'])

    op.bulk_insert(flag_types, [{'name': name} for name in DEFAULT_FLAG_TYPES])


def downgrade() -> None:
    """Drop flag tables in reverse dependency order."""
    op.drop_index('ix_flags_flagger', 'flags')
    op.drop_table('flags')
    op.drop_table('flag_links')
    op.drop_table('flag_targets')
    op.drop_table('flag_types')
