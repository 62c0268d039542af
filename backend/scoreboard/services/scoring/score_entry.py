"""Hole score entry, admin overrides and unlocks."""

from dataclasses import dataclass
from typing import Optional

from flask import current_app

from .errors import MatchLockedError, MatchNotLockedError, ScoreValidationError
from .formats import (
    ALL_SQUARE,
    COMPLETED,
    IN_PROGRESS,
    UPCOMING,
    normalize_result,
    result_margin,
    validate_side,
)
from .match_state import MatchState, compute_match_state, ordered_outcomes, team_hole_score
from .repository import ScoreRepository
from .rollup import TeamTally, recompute_tournament
from .stats import reconcile_player_stats, record_match_completion


@dataclass
class ScoreEntryResult:
    score: object
    match: object
    round: object
    tournament: object
    tally: TeamTally
    completed_now: bool = False
    stats_applied: Optional[bool] = None


def _holes_per_match():
    return int(current_app.config.get('HOLES_PER_MATCH', 18))


def _player_scope(tournament):
    # Player counters only mirror the active tournament
    return tournament if tournament.is_active else None


def _validate_strokes(value, side):
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ScoreValidationError(f'{side} score must be a whole number of strokes')
    if value < 1:
        raise ScoreValidationError(f'{side} score must be at least 1')
    return value


def side_score(team_score=None, player_scores=None, side='aviator'):
    """Resolve a side's hole score from a team score or per-player scores (best ball)."""
    if player_scores is not None:
        if team_score is not None:
            raise ScoreValidationError(f'Send either {side}_score or {side}_player_scores, not both')
        if not isinstance(player_scores, (list, tuple)):
            raise ScoreValidationError(f'{side}_player_scores must be a list')
        return team_hole_score(_validate_strokes(s, side) for s in player_scores)
    return _validate_strokes(team_score, side)


def refresh_match(match, repo=None, holes_per_match=None) -> MatchState:
    """Recompute a match and its score rows from the entered holes; locks on completion."""
    repo = repo or ScoreRepository()
    holes = holes_per_match or _holes_per_match()
    pairs = ordered_outcomes(repo.list_scores_by_match(match.id), holes)
    played = [(score, outcome) for score, outcome in pairs if outcome is not None]
    state = compute_match_state([outcome for _, outcome in played], holes)

    for index, (score, outcome) in enumerate(played):
        if index < state.holes_played:
            hole = state.holes[index]
            repo.update_score(score, winning_team=hole.winning_team, match_status=hole.match_status)
        else:
            # Played after the match had already closed
            repo.update_score(score, winning_team=outcome, match_status=None)
    for score, outcome in pairs:
        if outcome is None:
            repo.update_score(score, winning_team=None, match_status=None)

    repo.update_match(match, locked=state.locked, **state.as_fields())
    current_app.logger.info(
        f"[match-state] match={match.id} status={state.status} hole={state.current_hole} "
        f"leader={state.leading_team} lead={state.lead_amount} result={state.result}"
    )
    return state


def record_hole_score(match_id, hole_number, aviator_score=None, producer_score=None, repo=None) -> ScoreEntryResult:
    repo = repo or ScoreRepository()
    holes = _holes_per_match()
    match = repo.get_match(match_id)
    if match.locked:
        raise MatchLockedError(f'Match {match.id} is locked; scores can no longer be changed')
    if isinstance(hole_number, bool) or not isinstance(hole_number, int) or not 1 <= hole_number <= holes:
        raise ScoreValidationError(f'Hole number must be between 1 and {holes}')
    aviator_score = _validate_strokes(aviator_score, 'aviator')
    producer_score = _validate_strokes(producer_score, 'producer')
    if aviator_score is None and producer_score is None:
        raise ScoreValidationError('At least one side needs a score')

    try:
        score = repo.upsert_score(match.id, hole_number, aviator_score, producer_score)
        repo.flush()
        state = refresh_match(match, repo, holes)
        tournament = match.round.tournament
        tally = recompute_tournament(tournament, repo, holes)
        repo.commit()
    except Exception:
        repo.rollback()
        raise

    result = ScoreEntryResult(score, match, match.round, tournament, tally, completed_now=state.locked)
    if state.locked:
        result.stats_applied = record_match_completion(match, repo)
    return result


def force_result(match_id, result, winning_team=None, repo=None) -> ScoreEntryResult:
    """Admin override: complete a match with an explicit result."""
    repo = repo or ScoreRepository()
    match = repo.get_match(match_id)
    if match.locked:
        raise MatchLockedError(f'Match {match.id} is already locked; unlock it first')
    result = normalize_result(result)
    lead, _ = result_margin(result)
    if result == ALL_SQUARE:
        winning_team = None
    else:
        winning_team = validate_side(winning_team)

    try:
        repo.update_match(match, status=COMPLETED, result=result, leading_team=winning_team,
                          lead_amount=lead, locked=True)
        tournament = match.round.tournament
        tally = recompute_tournament(tournament, repo)
        repo.commit()
    except Exception:
        repo.rollback()
        raise
    current_app.logger.info(f"[override] match={match.id} result={result} winner={winning_team}")

    entry = ScoreEntryResult(None, match, match.round, tournament, tally, completed_now=True)
    entry.stats_applied = record_match_completion(match, repo)
    return entry


def unlock_match(match_id, repo=None) -> ScoreEntryResult:
    """Reopen a locked match and take its result back out of every rollup."""
    repo = repo or ScoreRepository()
    holes = _holes_per_match()
    match = repo.get_match(match_id)
    if not match.locked:
        raise MatchNotLockedError(f'Match {match.id} is not locked')
    pairs = ordered_outcomes(repo.list_scores_by_match(match.id), holes)
    state = compute_match_state([o for _, o in pairs if o is not None], holes)
    try:
        # Hole scores stay; the match stays open until the next entry recomputes it
        repo.update_match(
            match,
            status=IN_PROGRESS if state.holes_played else UPCOMING,
            current_hole=min(state.holes_played + 1, holes),
            leading_team=state.leading_team,
            lead_amount=state.lead_amount,
            result=None,
            locked=False,
        )
        tournament = match.round.tournament
        tally = recompute_tournament(tournament, repo)
        repo.commit()
    except Exception:
        repo.rollback()
        raise
    current_app.logger.info(f"[unlock] match={match.id}")
    reconcile_player_stats(repo, _player_scope(tournament))
    return ScoreEntryResult(None, match, match.round, tournament, tally)


def remove_match(match_id, repo=None) -> TeamTally:
    repo = repo or ScoreRepository()
    match = repo.get_match(match_id)
    was_completed = match.status == COMPLETED
    tournament = match.round.tournament
    try:
        repo.delete_match(match)
        repo.flush()
        tally = recompute_tournament(tournament, repo)
        repo.commit()
    except Exception:
        repo.rollback()
        raise
    current_app.logger.info(f"[delete] match={match_id}")
    if was_completed:
        reconcile_player_stats(repo, _player_scope(tournament))
    return tally
