from flask import Blueprint, jsonify, request
from scoreboard import db
from scoreboard.main import admin_required
from scoreboard.models import Match, Score
from scoreboard.services.scoring.errors import NotFoundError, ScoreValidationError
from scoreboard.services.scoring.repository import ScoreRepository
from scoreboard.services.scoring.roster import create_match
from scoreboard.services.scoring.score_entry import (
    force_result,
    record_hole_score,
    remove_match,
    side_score,
    unlock_match,
)
from scoreboard.socketio_events import broadcast, broadcast_score_change


matches = Blueprint('matches', __name__)


def _int_arg(name):
    raw = request.args.get(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ScoreValidationError(f'{name} must be a number')


def _match_or_404(match_id):
    match = db.session.get(Match, match_id)
    if match is None:
        raise NotFoundError(f'Match {match_id} not found')
    return match


@matches.route('/matches', methods=['GET'])
def list_matches():
    round_id = _int_arg('round_id')
    query = Match.query
    if round_id is not None:
        query = query.filter_by(round_id=round_id)
    return jsonify([m.to_dict() for m in query.order_by(Match.id).all()])


@matches.route('/matches/<int:match_id>', methods=['GET'])
def get_match(match_id):
    match = _match_or_404(match_id)
    payload = match.to_dict()
    payload['scores'] = [s.to_dict() for s in match.scores]
    return jsonify(payload)


@matches.route('/matches', methods=['POST'])
@admin_required
def add_match():
    data = request.get_json(silent=True) or {}
    if data.get('round_id') is None:
        raise ScoreValidationError('round_id is required')
    round_ = ScoreRepository().get_round(data['round_id'])
    match = create_match(
        round_,
        data.get('name'),
        data.get('aviator_player_ids', []),
        data.get('producer_player_ids', []),
    )
    broadcast('match-updated', match.to_dict(), round_.tournament_id)
    broadcast('round-updated', round_.to_dict(), round_.tournament_id)
    return jsonify(match.to_dict()), 201


@matches.route('/matches/<int:match_id>', methods=['DELETE'])
@admin_required
def delete_match(match_id):
    match = _match_or_404(match_id)
    round_ = match.round
    remove_match(match.id)
    broadcast('round-updated', round_.to_dict(), round_.tournament_id)
    broadcast('tournament-updated', round_.tournament.to_dict(), round_.tournament_id)
    return jsonify({'message': 'Match deleted'})


@matches.route('/matches/<int:match_id>/override', methods=['POST'])
@admin_required
def override_match(match_id):
    data = request.get_json(silent=True) or {}
    entry = force_result(match_id, data.get('result'), data.get('winning_team'))
    broadcast_score_change(entry)
    return jsonify({'match': entry.match.to_dict(), 'stats_applied': entry.stats_applied})


@matches.route('/matches/<int:match_id>/unlock', methods=['POST'])
@admin_required
def unlock(match_id):
    entry = unlock_match(match_id)
    broadcast_score_change(entry)
    return jsonify({'match': entry.match.to_dict()})


# ---- Scores ----

@matches.route('/scores', methods=['GET'])
def list_scores():
    match_id = _int_arg('match_id')
    query = Score.query
    if match_id is not None:
        query = query.filter_by(match_id=match_id)
    return jsonify([s.to_dict() for s in query.order_by(Score.match_id, Score.hole_number).all()])


@matches.route('/scores', methods=['POST'])
@admin_required
def submit_score():
    data = request.get_json(silent=True) or {}
    match_id = data.get('match_id')
    if match_id is None:
        raise ScoreValidationError('match_id is required')
    entry = record_hole_score(
        match_id,
        data.get('hole_number'),
        side_score(data.get('aviator_score'), data.get('aviator_player_scores'), 'aviator'),
        side_score(data.get('producer_score'), data.get('producer_player_scores'), 'producer'),
    )
    broadcast_score_change(entry)
    return jsonify({
        'score': entry.score.to_dict(),
        'match': entry.match.to_dict(),
        'round': entry.round.to_dict(),
        'tournament': entry.tournament.to_dict(),
        'completed_now': entry.completed_now,
        'stats_applied': entry.stats_applied,
    })
