"""Match creation and roster validation."""

from flask import current_app

from scoreboard.models import Match, MatchParticipant, Player

from .errors import ScoreValidationError
from .formats import AVIATORS, PRODUCERS, UPCOMING
from .repository import ScoreRepository
from .rollup import recompute_tournament


def _player_ids(value, side):
    if not isinstance(value, (list, tuple)):
        raise ScoreValidationError(f'{side} must be a list of player ids')
    ids = []
    for pid in value:
        if isinstance(pid, bool) or not isinstance(pid, int):
            raise ScoreValidationError(f'{side} must contain player ids')
        ids.append(pid)
    return ids


def validate_roster(round_, aviator_ids, producer_ids, repo=None, exclude_match_id=None):
    """Each side fields the format's player count; a player plays once per round."""
    repo = repo or ScoreRepository()
    match_type = round_.format
    required = match_type.players_per_side
    for side, ids in ((AVIATORS, aviator_ids), (PRODUCERS, producer_ids)):
        if len(ids) != required:
            raise ScoreValidationError(
                f'{match_type.label} needs {required} player(s) per side; {side} has {len(ids)}'
            )

    everyone = list(aviator_ids) + list(producer_ids)
    if len(set(everyone)) != len(everyone):
        raise ScoreValidationError('A player cannot appear twice in the same match')

    players = {p.id: p for p in Player.query.filter(Player.id.in_(everyone)).all()}
    missing = [pid for pid in everyone if pid not in players]
    if missing:
        raise ScoreValidationError(f"Unknown player id(s): {', '.join(str(m) for m in missing)}")

    for match in repo.list_matches_by_round(round_.id):
        if match.id == exclude_match_id:
            continue
        for participant in repo.list_participants(match.id):
            if participant.player_id in players:
                name = players[participant.player_id].name
                raise ScoreValidationError(
                    f'{name} is already playing in {match.name} this round'
                )
    return players


def create_match(round_, name, aviator_ids, producer_ids, repo=None):
    repo = repo or ScoreRepository()
    if not name or not str(name).strip():
        raise ScoreValidationError('Match name is required')
    aviator_ids = _player_ids(aviator_ids, AVIATORS)
    producer_ids = _player_ids(producer_ids, PRODUCERS)
    validate_roster(round_, aviator_ids, producer_ids, repo)

    try:
        match = Match(round_id=round_.id, name=str(name).strip(), status=UPCOMING,
                      current_hole=1, lead_amount=0, locked=False)
        repo.session.add(match)
        repo.flush()
        for side, ids in ((AVIATORS, aviator_ids), (PRODUCERS, producer_ids)):
            for pid in ids:
                repo.session.add(MatchParticipant(match_id=match.id, player_id=pid, team=side))
        repo.flush()
        recompute_tournament(round_.tournament, repo)
        repo.commit()
    except Exception:
        repo.rollback()
        raise
    current_app.logger.info(f"[match-create] round={round_.id} match={match.id} name={match.name!r}")
    return match
