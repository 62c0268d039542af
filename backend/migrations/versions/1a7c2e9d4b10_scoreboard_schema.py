"""scoreboard schema: teams, players, tournaments, rounds, matches, scores, stats

Revision ID: 1a7c2e9d4b10
Revises:
Create Date: 2025-05-08 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a7c2e9d4b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'teams',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('short_name', sa.String(length=32), nullable=False, unique=True),
        sa.Column('color_code', sa.String(length=16), nullable=False),
    )
    op.create_table(
        'players',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('team_id', sa.Integer(), sa.ForeignKey('teams.id'), nullable=False),
        sa.Column('wins', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('losses', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('ties', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=64), nullable=True),
        sa.Column('handicap_index', sa.Float(), nullable=True),
    )
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('passcode_hash', sa.String(length=128), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('needs_password_change', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('players.id'), nullable=True),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False, unique=True),
        sa.Column('location', sa.String(length=128), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('course_rating', sa.Float(), nullable=True),
        sa.Column('slope_rating', sa.Integer(), nullable=True),
        sa.Column('par', sa.Integer(), nullable=True),
    )
    op.create_table(
        'holes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('courses.id'), nullable=False),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('par', sa.Integer(), nullable=False),
        sa.Column('handicap_rank', sa.Integer(), nullable=True),
        sa.UniqueConstraint('course_id', 'number', name='uq_holes_course_number'),
    )
    op.create_table(
        'tournament',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('aviator_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('producer_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('end_date', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'rounds',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tournament_id', sa.Integer(), sa.ForeignKey('tournament.id'), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('match_type', sa.String(length=64), nullable=False),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('courses.id'), nullable=True),
        sa.Column('course_name', sa.String(length=128), nullable=True),
        sa.Column('date', sa.String(length=32), nullable=True),
        sa.Column('start_time', sa.String(length=32), nullable=True),
        sa.Column('aviator_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('producer_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('pending_aviator_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('pending_producer_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('is_complete', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_rounds_tournament_id', 'rounds', ['tournament_id'])
    op.create_table(
        'matches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('round_id', sa.Integer(), sa.ForeignKey('rounds.id'), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='upcoming'),
        sa.Column('current_hole', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('leading_team', sa.String(length=16), nullable=True),
        sa.Column('lead_amount', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('result', sa.String(length=16), nullable=True),
        sa.Column('locked', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_matches_round_id', 'matches', ['round_id'])
    op.create_table(
        'match_participants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('match_id', sa.Integer(), sa.ForeignKey('matches.id'), nullable=False),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('players.id'), nullable=False),
        sa.Column('team', sa.String(length=16), nullable=False),
        sa.Column('result', sa.String(length=8), nullable=True),
        sa.UniqueConstraint('match_id', 'player_id', name='uq_match_participants_match_player'),
    )
    op.create_index('ix_match_participants_match_id', 'match_participants', ['match_id'])
    op.create_index('ix_match_participants_player_id', 'match_participants', ['player_id'])
    op.create_table(
        'scores',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('match_id', sa.Integer(), sa.ForeignKey('matches.id'), nullable=False),
        sa.Column('hole_number', sa.Integer(), nullable=False),
        sa.Column('aviator_score', sa.Integer(), nullable=True),
        sa.Column('producer_score', sa.Integer(), nullable=True),
        sa.Column('winning_team', sa.String(length=16), nullable=True),
        sa.Column('match_status', sa.String(length=8), nullable=True),
        sa.UniqueConstraint('match_id', 'hole_number', name='uq_scores_match_hole'),
    )
    op.create_index('ix_scores_match_id', 'scores', ['match_id'])
    op.create_table(
        'tournament_player_stats',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tournament_id', sa.Integer(), sa.ForeignKey('tournament.id'), nullable=False),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('players.id'), nullable=False),
        sa.Column('wins', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('losses', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('ties', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('points', sa.Float(), nullable=False, server_default='0'),
        sa.Column('matches_played', sa.Integer(), nullable=False, server_default='0'),
        sa.UniqueConstraint('tournament_id', 'player_id', name='uq_tournament_player_stats'),
    )
    op.create_table(
        'player_career_stats',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('players.id'), nullable=False, unique=True),
        sa.Column('total_wins', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_losses', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_ties', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_points', sa.Float(), nullable=False, server_default='0'),
        sa.Column('tournaments_played', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('matches_played', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_updated', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'tournament_history',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tournament_id', sa.Integer(), sa.ForeignKey('tournament.id'), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('tournament_name', sa.String(length=128), nullable=False),
        sa.Column('winning_team', sa.String(length=16), nullable=True),
        sa.Column('aviator_score', sa.Float(), nullable=True),
        sa.Column('producer_score', sa.Float(), nullable=True),
        sa.Column('location', sa.String(length=128), nullable=True),
    )


def downgrade():
    for table in (
        'tournament_history',
        'player_career_stats',
        'tournament_player_stats',
        'scores',
        'match_participants',
        'matches',
        'rounds',
        'tournament',
        'holes',
        'courses',
        'users',
        'players',
        'teams',
    ):
        op.drop_table(table)
