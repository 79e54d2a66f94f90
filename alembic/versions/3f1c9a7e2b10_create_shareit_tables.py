"""create shareit tables

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


bookingstatus_enum = sa.Enum('WAITING', 'APPROVED', 'REJECTED', name='bookingstatus')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(512), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('requestor_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created', sa.TIMESTAMP(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_requests_id', 'requests', ['id'])
    op.create_index('ix_requests_requestor_id', 'requests', ['requestor_id'])

    op.create_table(
        'items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('available', sa.Boolean(), nullable=False),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('request_id', sa.Integer(), sa.ForeignKey('requests.id'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_items_id', 'items', ['id'])
    op.create_index('ix_items_owner_id', 'items', ['owner_id'])
    op.create_index('ix_items_request_id', 'items', ['request_id'])

    # The ENUM type is created together with the table that uses it
    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('start', sa.TIMESTAMP(), nullable=False),
        sa.Column('end', sa.TIMESTAMP(), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('items.id'), nullable=False),
        sa.Column('booker_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('status', bookingstatus_enum, nullable=False, server_default='WAITING'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('"end" > start', name='check_booking_end_after_start'),
    )
    op.create_index('ix_bookings_id', 'bookings', ['id'])
    op.create_index('ix_bookings_booker_start', 'bookings', ['booker_id', 'start'])
    op.create_index('ix_bookings_item_start', 'bookings', ['item_id', 'start'])

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('items.id'), nullable=False),
        sa.Column('author_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created', sa.TIMESTAMP(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_comments_id', 'comments', ['id'])
    op.create_index('ix_comments_item_id', 'comments', ['item_id'])


def downgrade() -> None:
    """Downgrade schema."""
    # --- Drop dependents first ---
    op.drop_table('comments')
    op.drop_table('bookings')
    op.drop_table('items')
    op.drop_table('requests')
    op.drop_table('users')

    # --- Then, drop the ENUM type ---
    bookingstatus_enum.drop(op.get_bind(), checkfirst=True)
