from flask import Blueprint, jsonify, request
from scoreboard import db
from scoreboard.context import current_tournament, select_tournament
from scoreboard.main import admin_required
from scoreboard.models import Course, Hole, Round, Tournament, TournamentHistory
from scoreboard.services.scoring.errors import NotFoundError, ScoreValidationError
from scoreboard.services.scoring.formats import MatchType
from scoreboard.services.scoring.repository import ScoreRepository
from scoreboard.services.scoring.rollup import recompute_tournament
from scoreboard.services.tournaments import activate_tournament, conclude_tournament, create_tournament
from scoreboard.socketio_events import broadcast


tournaments = Blueprint('tournaments', __name__)

ROUND_FIELDS = ('name', 'match_type', 'course_id', 'course_name', 'date', 'start_time')


def _get_or_404(model, object_id):
    if object_id is None:
        raise ScoreValidationError(f"{model.__name__.lower()} id is required")
    obj = db.session.get(model, object_id)
    if obj is None:
        raise NotFoundError(f'{model.__name__} {object_id} not found')
    return obj


def _round_payload(data):
    fields = {k: data[k] for k in ROUND_FIELDS if k in data}
    if 'match_type' in fields:
        fields['match_type'] = MatchType.from_label(fields['match_type']).label
    if fields.get('course_id') is not None:
        course = _get_or_404(Course, fields['course_id'])
        fields.setdefault('course_name', course.name)
    return fields


# ---- Tournaments ----

@tournaments.route('/tournament', methods=['GET'])
def get_current_tournament():
    return jsonify(current_tournament().to_dict())


@tournaments.route('/tournaments', methods=['GET'])
def list_tournaments():
    rows = Tournament.query.order_by(Tournament.year.desc(), Tournament.id.desc()).all()
    return jsonify([t.to_dict() for t in rows])


@tournaments.route('/tournaments', methods=['POST'])
@admin_required
def add_tournament():
    data = request.get_json(silent=True) or {}
    tournament = create_tournament(data.get('name'), data.get('year'), activate=bool(data.get('activate')))
    return jsonify(tournament.to_dict()), 201


@tournaments.route('/tournaments/select', methods=['POST'])
def choose_tournament():
    data = request.get_json(silent=True) or {}
    tournament = _get_or_404(Tournament, data.get('tournament_id'))
    select_tournament(tournament)
    return jsonify(tournament.to_dict())


@tournaments.route('/tournaments/<int:tournament_id>/activate', methods=['POST'])
@admin_required
def activate(tournament_id):
    tournament = _get_or_404(Tournament, tournament_id)
    activate_tournament(tournament)
    db.session.commit()
    return jsonify(tournament.to_dict())


@tournaments.route('/tournaments/<int:tournament_id>/conclude', methods=['POST'])
@admin_required
def conclude(tournament_id):
    tournament = _get_or_404(Tournament, tournament_id)
    if TournamentHistory.query.filter_by(tournament_id=tournament.id).first():
        return jsonify({'error': 'Tournament has already been concluded'}), 409
    data = request.get_json(silent=True) or {}
    history = conclude_tournament(tournament, location=data.get('location'))
    broadcast('tournament-updated', tournament.to_dict(), tournament.id)
    return jsonify(history.to_dict()), 201


@tournaments.route('/tournaments/history', methods=['GET'])
def tournament_history():
    rows = TournamentHistory.query.order_by(TournamentHistory.year.desc(), TournamentHistory.id.desc()).all()
    return jsonify([h.to_dict() for h in rows])


# ---- Rounds ----

@tournaments.route('/rounds', methods=['GET'])
def list_rounds():
    tournament = current_tournament()
    return jsonify([r.to_dict() for r in tournament.rounds])


@tournaments.route('/rounds/<int:round_id>', methods=['GET'])
def get_round(round_id):
    round_ = _get_or_404(Round, round_id)
    payload = round_.to_dict()
    payload['matches'] = [m.to_dict() for m in round_.matches]
    return jsonify(payload)


@tournaments.route('/rounds', methods=['POST'])
@admin_required
def add_round():
    data = request.get_json(silent=True) or {}
    tournament = current_tournament()
    fields = _round_payload(data)
    if not fields.get('name') or not fields.get('match_type'):
        raise ScoreValidationError('Round name and match_type are required')
    round_ = Round(tournament_id=tournament.id, aviator_score=0.0, producer_score=0.0,
                   pending_aviator_score=0.0, pending_producer_score=0.0, is_complete=False, **fields)
    db.session.add(round_)
    db.session.commit()
    return jsonify(round_.to_dict()), 201


@tournaments.route('/rounds/<int:round_id>', methods=['PUT'])
@admin_required
def update_round(round_id):
    round_ = _get_or_404(Round, round_id)
    data = request.get_json(silent=True) or {}
    fields = _round_payload(data)
    if 'match_type' in fields and fields['match_type'] != round_.match_type and round_.matches:
        return jsonify({'error': 'Cannot change the format of a round that already has matches'}), 409
    repo = ScoreRepository()
    repo.update_round(round_, **fields)
    db.session.commit()
    return jsonify(round_.to_dict())


@tournaments.route('/rounds/<int:round_id>', methods=['DELETE'])
@admin_required
def delete_round(round_id):
    round_ = _get_or_404(Round, round_id)
    if round_.matches:
        return jsonify({'error': 'Delete the matches in this round first'}), 409
    tournament = round_.tournament
    db.session.delete(round_)
    db.session.flush()
    recompute_tournament(tournament)
    db.session.commit()
    broadcast('tournament-updated', tournament.to_dict(), tournament.id)
    return jsonify({'message': 'Round deleted'})


# ---- Courses ----

@tournaments.route('/courses', methods=['GET'])
def list_courses():
    return jsonify([c.to_dict(include_holes=True) for c in Course.query.order_by(Course.name).all()])


@tournaments.route('/courses', methods=['POST'])
@admin_required
def add_course():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        raise ScoreValidationError('Course name is required')
    if Course.query.filter_by(name=name).first():
        return jsonify({'error': 'Course already exists'}), 409
    course = Course(
        name=name,
        location=data.get('location'),
        description=data.get('description'),
        course_rating=data.get('course_rating'),
        slope_rating=data.get('slope_rating'),
        par=data.get('par'),
    )
    holes = data.get('holes') or []
    numbers = set()
    for hole in holes:
        number, par = hole.get('number'), hole.get('par')
        if not isinstance(number, int) or not isinstance(par, int) or number in numbers:
            raise ScoreValidationError('Each hole needs a unique number and a par')
        numbers.add(number)
        course.holes.append(Hole(number=number, par=par, handicap_rank=hole.get('handicap_rank')))
    if course.par is None and holes:
        course.par = sum(h['par'] for h in holes)
    db.session.add(course)
    db.session.commit()
    return jsonify(course.to_dict(include_holes=True)), 201
