"""initial_schema

Revision ID: 20261017_0900_initial
Revises: None
Create Date: 2026-10-17 09:00:00

Adds: participants, matching_nights, matchboxes, penalties, broadcast_notes,
probability_cache, meta
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261017_0900_initial'
down_revision = None
branch_labels = None
depends_on = None

# Identity tables use AUTOINCREMENT on SQLite so sqlite_sequence can be reset
AUTOINCREMENT = {'sqlite_autoincrement': True}


def upgrade() -> None:
    """
    Create the entity tables and the meta watermark table.
    Participant-name references carry no foreign keys.
    """
    op.create_table(
        'participants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('gender', sa.String(length=1), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('known_from', sa.String(length=255), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('photo_url', sa.Text(), nullable=True),
        sa.Column('source', sa.String(length=255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('social_media_account', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        **AUTOINCREMENT
    )
    op.create_index('ix_participants_name', 'participants', ['name'])

    op.create_table(
        'matching_nights',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('pairs', sa.JSON(), nullable=False),
        sa.Column('total_lights', sa.Integer(), nullable=False),
        sa.Column('ausstrahlungsdatum', sa.String(length=50), nullable=True),
        sa.Column('ausstrahlungszeit', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        **AUTOINCREMENT
    )
    op.create_index('ix_matching_nights_date', 'matching_nights', ['date'])

    op.create_table(
        'matchboxes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('woman', sa.String(length=255), nullable=False),
        sa.Column('man', sa.String(length=255), nullable=False),
        sa.Column('match_type', sa.String(length=50), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('buyer', sa.String(length=255), nullable=True),
        sa.Column('sold_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ausstrahlungsdatum', sa.String(length=50), nullable=True),
        sa.Column('ausstrahlungszeit', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        **AUTOINCREMENT
    )
    op.create_index('ix_matchboxes_woman', 'matchboxes', ['woman'])
    op.create_index('ix_matchboxes_man', 'matchboxes', ['man'])

    op.create_table(
        'penalties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('participant_name', sa.String(length=255), nullable=False),
        sa.Column('reason', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('date', sa.String(length=10), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        **AUTOINCREMENT
    )
    op.create_index('ix_penalties_participant_name', 'penalties', ['participant_name'])
    op.create_index('ix_penalties_date', 'penalties', ['date'])

    op.create_table(
        'broadcast_notes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('date', sa.String(length=10), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        **AUTOINCREMENT
    )
    op.create_index('ix_broadcast_notes_date', 'broadcast_notes', ['date'], unique=True)

    op.create_table(
        'probability_cache',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('data_hash', sa.String(length=255), nullable=False),
        sa.Column('results', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        **AUTOINCREMENT
    )
    op.create_index('ix_probability_cache_data_hash', 'probability_cache', ['data_hash'], unique=True)

    op.create_table(
        'meta',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('key', sa.String(length=255), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_meta_key', 'meta', ['key'], unique=True)


def downgrade() -> None:
    """
    Drop all tables.
    """
    op.drop_index('ix_meta_key', table_name='meta')
    op.drop_table('meta')
    op.drop_index('ix_probability_cache_data_hash', table_name='probability_cache')
    op.drop_table('probability_cache')
    op.drop_index('ix_broadcast_notes_date', table_name='broadcast_notes')
    op.drop_table('broadcast_notes')
    op.drop_index('ix_penalties_date', table_name='penalties')
    op.drop_index('ix_penalties_participant_name', table_name='penalties')
    op.drop_table('penalties')
    op.drop_index('ix_matchboxes_man', table_name='matchboxes')
    op.drop_index('ix_matchboxes_woman', table_name='matchboxes')
    op.drop_table('matchboxes')
    op.drop_index('ix_matching_nights_date', table_name='matching_nights')
    op.drop_table('matching_nights')
    op.drop_index('ix_participants_name', table_name='participants')
    op.drop_table('participants')
