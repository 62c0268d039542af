from typing import List

from scoreboard import db
from scoreboard.models import (
    Match,
    MatchParticipant,
    Player,
    PlayerCareerStat,
    Round,
    Score,
    Tournament,
    TournamentPlayerStat,
)

from .errors import NotFoundError, ScoreValidationError
from .formats import COMPLETED

# Increments applied per participant for each outcome: (wins, losses, ties, points)
_OUTCOME_DELTAS = {
    'win': (1, 0, 0, 1.0),
    'loss': (0, 1, 0, 0.0),
    'tie': (0, 0, 1, 0.5),
}


def _apply(obj, fields):
    for key, value in fields.items():
        setattr(obj, key, value)
    db.session.add(obj)
    return obj


class ScoreRepository:
    def __init__(self, session=None):
        self.session = session or db.session

    # ---- lookups ----
    def get_match(self, match_id) -> Match:
        match = self.session.get(Match, match_id)
        if match is None:
            raise NotFoundError(f'Match {match_id} not found')
        return match

    def get_round(self, round_id) -> Round:
        round_ = self.session.get(Round, round_id)
        if round_ is None:
            raise NotFoundError(f'Round {round_id} not found')
        return round_

    def list_matches_by_round(self, round_id) -> List[Match]:
        return Match.query.filter_by(round_id=round_id).order_by(Match.id).all()

    def list_rounds_by_tournament(self, tournament_id) -> List[Round]:
        return Round.query.filter_by(tournament_id=tournament_id).order_by(Round.id).all()

    def list_scores_by_match(self, match_id) -> List[Score]:
        return Score.query.filter_by(match_id=match_id).order_by(Score.hole_number).all()

    def list_participants(self, match_id) -> List[MatchParticipant]:
        return MatchParticipant.query.filter_by(match_id=match_id).order_by(MatchParticipant.id).all()

    def list_completed_matches(self) -> List[Match]:
        return Match.query.filter_by(status=COMPLETED).order_by(Match.id).all()

    # ---- writes ----
    def upsert_score(self, match_id, hole_number, aviator_score, producer_score) -> Score:
        score = Score.query.filter_by(match_id=match_id, hole_number=hole_number).first()
        if score is None:
            score = Score(match_id=match_id, hole_number=hole_number)
        return _apply(score, {'aviator_score': aviator_score, 'producer_score': producer_score})

    def update_score(self, score, **fields) -> Score:
        return _apply(score, fields)

    def update_match(self, match, **fields) -> Match:
        return _apply(match, fields)

    def update_round(self, round_, **fields) -> Round:
        return _apply(round_, fields)

    def update_tournament(self, tournament, **fields) -> Tournament:
        return _apply(tournament, fields)

    def update_participant(self, participant, **fields) -> MatchParticipant:
        return _apply(participant, fields)

    def update_player_stats(self, player_id, tournament_id, outcome, on_player=True) -> None:
        # Player counters track the active tournament only
        try:
            wins, losses, ties, points = _OUTCOME_DELTAS[outcome]
        except KeyError:
            raise ScoreValidationError(f'Unknown match outcome: {outcome!r}')

        player = self.session.get(Player, player_id)
        if player is None:
            raise NotFoundError(f'Player {player_id} not found')
        if on_player:
            player.wins = (player.wins or 0) + wins
            player.losses = (player.losses or 0) + losses
            player.ties = (player.ties or 0) + ties
            self.session.add(player)

        career = PlayerCareerStat.query.filter_by(player_id=player_id).first()
        if career is None:
            career = PlayerCareerStat(player_id=player_id, total_wins=0, total_losses=0,
                                      total_ties=0, total_points=0.0, tournaments_played=0,
                                      matches_played=0)
            self.session.add(career)

        stat = TournamentPlayerStat.query.filter_by(tournament_id=tournament_id, player_id=player_id).first()
        if stat is None:
            stat = TournamentPlayerStat(tournament_id=tournament_id, player_id=player_id, wins=0,
                                        losses=0, ties=0, points=0.0, matches_played=0)
            career.tournaments_played = (career.tournaments_played or 0) + 1
            self.session.add(stat)
        stat.wins += wins
        stat.losses += losses
        stat.ties += ties
        stat.points += points
        stat.matches_played += 1

        career.total_wins += wins
        career.total_losses += losses
        career.total_ties += ties
        career.total_points += points
        career.matches_played += 1

    def reset_player_stats(self) -> None:
        TournamentPlayerStat.query.delete()
        PlayerCareerStat.query.delete()
        MatchParticipant.query.update({MatchParticipant.result: None})
        # Bulk updates bypass the identity map
        self.session.expire_all()

    def sync_player_records(self, tournament_id) -> None:
        """Copy one tournament's stat rows onto the Player counters (zero when absent)."""
        rows = {s.player_id: s for s in TournamentPlayerStat.query.filter_by(tournament_id=tournament_id)}
        for player in Player.query.all():
            stat = rows.get(player.id)
            player.wins = stat.wins if stat else 0
            player.losses = stat.losses if stat else 0
            player.ties = stat.ties if stat else 0
            self.session.add(player)

    def delete_match(self, match) -> None:
        for row in list(match.scores) + list(match.participants):
            self.session.delete(row)
        self.session.delete(match)

    def flush(self):
        self.session.flush()

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
