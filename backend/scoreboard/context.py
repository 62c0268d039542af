"""Per-request tournament selection.

Routes ask for the tournament they are working on here and pass it on to
the services explicitly. The choice comes from the request itself, then the
viewer's session, then the single active tournament.
"""

from flask import request, session

from scoreboard import db
from scoreboard.models import Tournament
from scoreboard.services.scoring.errors import NotFoundError, ScoreValidationError
from scoreboard.services.tournaments import active_tournament

SESSION_KEY = 'tournament_id'


def _requested_id():
    raw = request.view_args.get('tournament_id') if request.view_args else None
    if raw is None:
        raw = request.args.get('tournament_id')
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ScoreValidationError('tournament_id must be a number')


def current_tournament(required=True):
    """Tournament this request is working on."""
    tournament = None
    tournament_id = _requested_id()
    if tournament_id is None:
        tournament_id = session.get(SESSION_KEY)
        if tournament_id is not None:
            tournament = db.session.get(Tournament, tournament_id)
            if tournament is None:
                # Selection points at a deleted tournament
                session.pop(SESSION_KEY, None)
    else:
        tournament = db.session.get(Tournament, tournament_id)
        if tournament is None:
            raise NotFoundError(f'Tournament {tournament_id} not found')

    if tournament is None:
        tournament = active_tournament()
    if tournament is None and required:
        raise NotFoundError("No active tournament")
    return tournament


def select_tournament(tournament):
    session[SESSION_KEY] = tournament.id
