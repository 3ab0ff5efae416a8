"""Create catalog_lists table.

Revision ID: 001
Revises:
Create Date: 2026-10-18

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
    """Create catalog_lists table."""
    op.create_table(
        'catalog_lists',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('list_kind', sa.String(300), nullable=False),
        sa.Column('category', sa.String(50), nullable=False, index=True),
        sa.Column('brand', sa.String(200), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('excluded_items', sa.JSON(), nullable=False),
        sa.Column('refresh_interval', sa.String(20), nullable=False, server_default='quarterly'),
        sa.Column('last_generated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('next_refresh_at', sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # One list per kind: brands:<category> or models:<category>:<brand>
    op.create_unique_constraint(
        'uq_catalog_lists_list_kind',
        'catalog_lists',
        ['list_kind'],
    )


def downgrade() -> None:
    """Drop catalog_lists table."""
    op.drop_table('catalog_lists')
