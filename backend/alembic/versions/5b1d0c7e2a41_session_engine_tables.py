"""store entries, routine days, session records

Revision ID: 5b1d0c7e2a41
Revises:
Create Date: 2026-10-19 10:12:03.418251

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1d0c7e2a41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) key/value store behind the session engine
    op.create_table(
        'store_entries',
        sa.Column('key', sa.String(length=255), primary_key=True),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # 2) prescribed exercises per routine day
    op.create_table(
        'routine_days',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('template_id', sa.String(length=64), nullable=False, index=True),
        sa.Column('day_number', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('planned_sets', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('planned_reps', sa.String(length=64), nullable=False, server_default=''),
        sa.Column('category_id', sa.String(length=64), nullable=True),
        sa.Column('exercise_ref', sa.String(length=64), nullable=True),
    )

    # 3) session records
    op.create_table(
        'session_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False, index=True),
        sa.Column('day_reference', sa.String(length=64), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completion_percentage', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # 4) one row per planned set of a recorded session
    op.create_table(
        'session_set_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('session_record_id', sa.Integer(), sa.ForeignKey('session_records.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.String(length=64), nullable=False),
        sa.Column('set_index', sa.Integer(), nullable=False),
        sa.Column('performed_reps', sa.String(length=64), nullable=False, server_default=''),
    )


def downgrade() -> None:
    op.drop_table('session_set_records')
    op.drop_table('session_records')
    op.drop_table('routine_days')
    op.drop_table('store_entries')
