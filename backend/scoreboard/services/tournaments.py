"""Tournament lifecycle: creation, activation and conclusion."""

from datetime import datetime

from flask import current_app

from scoreboard import db
from scoreboard.models import Tournament, TournamentHistory
from scoreboard.services.scoring.errors import ScoreValidationError
from scoreboard.services.scoring.repository import ScoreRepository
from scoreboard.services.scoring.rollup import leading_side, recompute_tournament


def active_tournament():
    return Tournament.query.filter_by(is_active=True).order_by(Tournament.id.desc()).first()


def create_tournament(name, year, activate=False):
    if not name or not str(name).strip():
        raise ScoreValidationError('Tournament name is required')
    if isinstance(year, bool) or not isinstance(year, int):
        raise ScoreValidationError('Tournament year must be a number')
    tournament = Tournament(name=str(name).strip(), year=year, aviator_score=0.0,
                            producer_score=0.0, is_active=False)
    db.session.add(tournament)
    db.session.flush()
    if activate:
        activate_tournament(tournament)
    db.session.commit()
    return tournament


def activate_tournament(tournament):
    """Make ``tournament`` the single active one and point the Player counters at it (no commit)."""
    Tournament.query.filter(Tournament.id != tournament.id).update({Tournament.is_active: False})
    tournament.is_active = True
    db.session.add(tournament)
    db.session.flush()
    ScoreRepository().sync_player_records(tournament.id)
    current_app.logger.info(f"[tournament] activated id={tournament.id}")
    return tournament


def conclude_tournament(tournament, location=None):
    """Freeze final scores into the history table and retire the tournament."""
    tally = recompute_tournament(tournament)
    history = TournamentHistory(
        tournament_id=tournament.id,
        year=tournament.year,
        tournament_name=tournament.name,
        winning_team=leading_side(tally),
        aviator_score=tally.aviators.confirmed,
        producer_score=tally.producers.confirmed,
        location=location,
    )
    tournament.is_active = False
    tournament.end_date = tournament.end_date or datetime.utcnow()
    db.session.add(history)
    db.session.add(tournament)
    db.session.commit()
    current_app.logger.info(
        f"[tournament] concluded id={tournament.id} winner={history.winning_team} "
        f"score={history.aviator_score}-{history.producer_score}"
    )
    return history
