"""Player win/loss/tie records, bumped once per completed match."""

from flask import current_app

from .formats import ALL_SQUARE
from .repository import ScoreRepository


def participant_outcome(match, team):
    if match.result == ALL_SQUARE or match.leading_team is None:
        return 'tie'
    return 'win' if match.leading_team == team else 'loss'


def apply_match_result(match, repo=None, on_player=True):
    """Add a completed match to each participant's records (no commit)."""
    repo = repo or ScoreRepository()
    tournament_id = match.round.tournament_id
    for participant in repo.list_participants(match.id):
        outcome = participant_outcome(match, participant.team)
        repo.update_participant(participant, result=outcome)
        repo.update_player_stats(participant.player_id, tournament_id, outcome, on_player=on_player)


def record_match_completion(match, repo=None):
    """Returns False when the update failed; reconcile repairs it later."""
    repo = repo or ScoreRepository()
    try:
        # Player counters follow the active tournament only
        apply_match_result(match, repo, on_player=bool(match.round.tournament.is_active))
        repo.commit()
    except Exception:
        repo.rollback()
        current_app.logger.exception(
            f"[stats-failed] match={match.id} stats not applied; run reconcile"
        )
        return False
    current_app.logger.info(f"[stats] match={match.id} result={match.result} winner={match.leading_team}")
    return True


def reconcile_player_stats(repo=None, tournament=None):
    """Replay every completed match; Player counters follow ``tournament`` when given."""
    repo = repo or ScoreRepository()
    try:
        repo.reset_player_stats()
        matches = repo.list_completed_matches()
        for match in matches:
            apply_match_result(match, repo, on_player=False)
        if tournament is not None:
            repo.flush()
            repo.sync_player_records(tournament.id)
        repo.commit()
    except Exception:
        repo.rollback()
        raise
    current_app.logger.info(
        f"[reconcile] replayed {len(matches)} completed matches "
        f"players={tournament.id if tournament is not None else '-'}"
    )
    return {'matches_replayed': len(matches)}
