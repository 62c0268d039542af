from flask import Blueprint, jsonify, request
from scoreboard import db
from scoreboard.context import current_tournament
from scoreboard.main import admin_required
from scoreboard.models import (
    MatchParticipant,
    Player,
    PlayerCareerStat,
    Team,
    TournamentPlayerStat,
)
from scoreboard.services.scoring.errors import NotFoundError, ScoreValidationError
from scoreboard.services.scoring.stats import reconcile_player_stats
from scoreboard.services.tournaments import active_tournament


players = Blueprint('players', __name__)


@players.route('/teams', methods=['GET'])
def list_teams():
    return jsonify([t.to_dict(include_players=True) for t in Team.query.order_by(Team.id).all()])


@players.route('/players', methods=['GET'])
def list_players():
    return jsonify([p.to_dict() for p in Player.query.order_by(Player.name).all()])


@players.route('/players', methods=['POST'])
@admin_required
def add_player():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        raise ScoreValidationError('Player name is required')
    team = Team.query.filter_by(short_name=(data.get('team') or '').strip().lower()).first()
    if team is None and data.get('team_id') is not None:
        team = db.session.get(Team, data.get('team_id'))
    if team is None:
        raise ScoreValidationError('A valid team is required')
    player = Player(name=name, team_id=team.id, wins=0, losses=0, ties=0,
                    handicap_index=data.get('handicap_index'), status=data.get('status'))
    db.session.add(player)
    db.session.commit()
    return jsonify(player.to_dict()), 201


@players.route('/players/<int:player_id>', methods=['DELETE'])
@admin_required
def delete_player(player_id):
    player = db.session.get(Player, player_id)
    if player is None:
        raise NotFoundError(f'Player {player_id} not found')
    if MatchParticipant.query.filter_by(player_id=player.id).first():
        return jsonify({'error': 'Player is part of a match and cannot be deleted'}), 409
    TournamentPlayerStat.query.filter_by(player_id=player.id).delete()
    PlayerCareerStat.query.filter_by(player_id=player.id).delete()
    db.session.delete(player)
    db.session.commit()
    return jsonify({'message': 'Player deleted'})


@players.route('/players/<int:player_id>/stats', methods=['GET'])
def player_stats(player_id):
    player = db.session.get(Player, player_id)
    if player is None:
        raise NotFoundError(f'Player {player_id} not found')
    career = PlayerCareerStat.query.filter_by(player_id=player.id).first()
    per_tournament = TournamentPlayerStat.query.filter_by(player_id=player.id).order_by(
        TournamentPlayerStat.tournament_id).all()
    return jsonify({
        'player': player.to_dict(),
        'career': career.to_dict() if career else None,
        'tournaments': [s.to_dict() for s in per_tournament],
    })


@players.route('/tournaments/<int:tournament_id>/stats', methods=['GET'])
def tournament_stats(tournament_id):
    tournament = current_tournament()
    rows = TournamentPlayerStat.query.filter_by(tournament_id=tournament.id).order_by(
        TournamentPlayerStat.points.desc(), TournamentPlayerStat.wins.desc()).all()
    return jsonify([r.to_dict() for r in rows])


@players.route('/admin/reconcile', methods=['POST'])
@admin_required
def reconcile():
    return jsonify(reconcile_player_stats(tournament=active_tournament()))
