"""clients, exercise library and workout tracking tables

Revision ID: 4b1f0c2d9e77
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

muscle_group = sa.Enum(
    'chest', 'shoulders', 'triceps', 'back', 'biceps', 'legs', 'core', 'cardio', 'full_body',
    name='muscle_group',
)


# revision identifiers, used by Alembic.
revision: str = '4b1f0c2d9e77'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade() -> None:
    # 1) reference data
    op.create_table(
        'clients',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False, index=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=40), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('gym_time', sa.String(length=60), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'exercises',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('muscle_group', muscle_group, nullable=False, index=True),
        sa.Column('is_bodyweight', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('default_rest_seconds', sa.Integer(), nullable=True),
        *_timestamps(),
    )

    # 2) sessions and their clients
    op.create_table(
        'workout_sessions',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('started_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False, index=True),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True, index=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        'workout_session_clients',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('workout_session_id', sa.String(length=36), sa.ForeignKey('workout_sessions.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('client_id', sa.String(length=36), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.UniqueConstraint('workout_session_id', 'client_id', name='uq_session_client'),
    )

    # 3) exercises performed and their sets
    op.create_table(
        'workout_exercises',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('workout_session_id', sa.String(length=36), sa.ForeignKey('workout_sessions.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('client_id', sa.String(length=36), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.String(length=36), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'exercise_sets',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('workout_exercise_id', sa.String(length=36), sa.ForeignKey('workout_exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('set_number', sa.Integer(), nullable=False),
        sa.Column('reps', sa.Integer(), nullable=True),
        sa.Column('weight_kg', sa.Float(), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('workout_exercise_id', 'set_number', name='uq_set_number'),
    )


def downgrade() -> None:
    # drop child tables in reverse order
    op.drop_table('exercise_sets')
    op.drop_table('workout_exercises')
    op.drop_table('workout_session_clients')
    op.drop_table('workout_sessions')
    op.drop_table('exercises')
    op.drop_table('clients')

    # finally drop enum type
    muscle_group.drop(op.get_bind(), checkfirst=True)
