"""create game and score tables

Revision ID: 1a7c3e9b2d40
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a7c3e9b2d40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    tables = set(insp.get_table_names())

    if 'game' not in tables:
        op.create_table(
            'game',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('hex_id', sa.String(length=6), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.Column('deleted_at', sa.DateTime(), nullable=True),
        )
        op.create_index('ix_game_hex_id', 'game', ['hex_id'], unique=True)
        op.create_index('ix_game_created_at', 'game', ['created_at'])

    if 'score' not in tables:
        op.create_table(
            'score',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_hex_id', sa.String(length=6), sa.ForeignKey('game.hex_id'), nullable=False),
            sa.Column('score', sa.String(length=255), nullable=False),
            sa.Column('score_val', sa.Float(), nullable=False),
            sa.Column('user_name', sa.String(length=100), nullable=False),
            sa.Column('user_name_key', sa.String(length=300), nullable=False),
            sa.Column('user_id', sa.String(length=255), nullable=False),
            sa.Column('extra', sa.JSON(), nullable=True),
            sa.Column('submitted_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.Column('deleted_at', sa.DateTime(), nullable=True),
        )
        op.create_index('ix_score_user_id', 'score', ['user_id'])
        op.create_index('ix_score_game_score_val', 'score', ['game_hex_id', 'score_val', 'id'])
        op.create_index('ix_score_game_submitted_at', 'score', ['game_hex_id', 'submitted_at', 'id'])
        op.create_index('ix_score_game_user_name_key', 'score', ['game_hex_id', 'user_name_key', 'id'])


def downgrade():
    op.drop_index('ix_score_game_user_name_key', table_name='score')
    op.drop_index('ix_score_game_submitted_at', table_name='score')
    op.drop_index('ix_score_game_score_val', table_name='score')
    op.drop_index('ix_score_user_id', table_name='score')
    op.drop_table('score')
    op.drop_index('ix_game_created_at', table_name='game')
    op.drop_index('ix_game_hex_id', table_name='game')
    op.drop_table('game')
