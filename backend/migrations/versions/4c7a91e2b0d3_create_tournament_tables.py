"""create tournament, player, round and match tables

Revision ID: 4c7a91e2b0d3
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c7a91e2b0d3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'tournament' not in existing_tables:
        op.create_table(
            'tournament',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('total_rounds', sa.Integer(), nullable=False),
            sa.Column('current_round', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='CREATED'),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_tournament_name', 'tournament', ['name'], unique=True)

    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('tournament_id', sa.Integer(), nullable=False),
            sa.Column('score', sa.Float(), nullable=False, server_default='0'),
            sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(['tournament_id'], ['tournament.id']),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_player_tournament_id', 'player', ['tournament_id'])

    if 'round' not in existing_tables:
        op.create_table(
            'round',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('tournament_id', sa.Integer(), nullable=False),
            sa.Column('round_number', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='PENDING'),
            sa.Column('bye_player_id', sa.Integer(), nullable=True),
            sa.Column('bye_points', sa.Float(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(['tournament_id'], ['tournament.id']),
            sa.ForeignKeyConstraint(['bye_player_id'], ['player.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('tournament_id', 'round_number', name='uq_round_tournament_number'),
        )
        op.create_index('ix_round_tournament_id', 'round', ['tournament_id'])

    if 'match' not in existing_tables:
        op.create_table(
            'match',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('round_id', sa.Integer(), nullable=False),
            sa.Column('player1_id', sa.Integer(), nullable=False),
            sa.Column('player2_id', sa.Integer(), nullable=False),
            sa.Column('result', sa.String(length=16), nullable=False, server_default='PENDING'),
            sa.Column('winner_id', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
            sa.CheckConstraint('player1_id <> player2_id', name='ck_match_distinct_players'),
            sa.ForeignKeyConstraint(['round_id'], ['round.id']),
            sa.ForeignKeyConstraint(['player1_id'], ['player.id']),
            sa.ForeignKeyConstraint(['player2_id'], ['player.id']),
            sa.ForeignKeyConstraint(['winner_id'], ['player.id']),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_match_round_id', 'match', ['round_id'])
        op.create_index('ix_match_player1_id', 'match', ['player1_id'])
        op.create_index('ix_match_player2_id', 'match', ['player2_id'])


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    # Children first
    for table in ('match', 'round', 'player', 'tournament'):
        if table in existing_tables:
            op.drop_table(table)
