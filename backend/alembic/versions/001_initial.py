"""Initial migration - sessions, goals, strava_connections

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create sessions table
    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('distance', sa.Float(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('external_activity_id', sa.BigInteger(), unique=True, nullable=True),
        sa.Column('source', sa.String(16), nullable=False, server_default='manual'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_sessions_date', 'sessions', ['date'])

    # Create goals table
    op.create_table(
        'goals',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('target_distance', sa.Float(), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    # Create strava_connections table
    op.create_table(
        'strava_connections',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('strava_athlete_id', sa.BigInteger(), nullable=False),
        sa.Column('access_token', sa.Text(), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=False),
        sa.Column('token_expires_at', sa.Integer(), nullable=False),
        sa.Column('connected_at', sa.DateTime(), nullable=True),
        sa.Column('last_sync_at', sa.DateTime(), nullable=True),
    )
    op.create_index(
        'ix_strava_connections_strava_athlete_id',
        'strava_connections',
        ['strava_athlete_id'],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index('ix_strava_connections_strava_athlete_id', 'strava_connections')
    op.drop_table('strava_connections')
    op.drop_table('goals')
    op.drop_index('ix_sessions_date', 'sessions')
    op.drop_table('sessions')
