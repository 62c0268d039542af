"""Round and tournament rollups, always rebuilt from every match."""

from dataclasses import dataclass, field

from flask import current_app

from .errors import ConsistencyError
from .formats import ALL_SQUARE, AVIATORS, COMPLETED, IN_PROGRESS, PRODUCERS, SIDES
from .repository import ScoreRepository


@dataclass(frozen=True)
class ScoreTally:
    confirmed: float = 0.0
    pending: float = 0.0

    def __add__(self, other):
        return ScoreTally(self.confirmed + other.confirmed, self.pending + other.pending)


@dataclass(frozen=True)
class TeamTally:
    aviators: ScoreTally = field(default_factory=ScoreTally)
    producers: ScoreTally = field(default_factory=ScoreTally)

    def __add__(self, other):
        return TeamTally(self.aviators + other.aviators, self.producers + other.producers)

    def round_fields(self):
        return {
            'aviator_score': self.aviators.confirmed,
            'producer_score': self.producers.confirmed,
            'pending_aviator_score': self.aviators.pending,
            'pending_producer_score': self.producers.pending,
        }

    def to_dict(self):
        return self.round_fields()


def _split(team, confirmed, pending):
    if team is None:
        half = ScoreTally(confirmed / 2, pending / 2)
        return TeamTally(half, half)
    tally = ScoreTally(confirmed, pending)
    if team == AVIATORS:
        return TeamTally(aviators=tally)
    return TeamTally(producers=tally)


def check_match_consistency(match, holes_per_match=18):
    """Raise ConsistencyError for stored match state no hole sequence can produce."""
    problem = None
    lead = match.lead_amount or 0
    if lead < 0 or lead > holes_per_match:
        problem = f'lead of {lead} in a {holes_per_match}-hole match'
    elif match.leading_team is not None and match.leading_team not in SIDES:
        problem = f'unknown leading team {match.leading_team!r}'
    elif (match.leading_team is None) != (lead == 0):
        problem = f'leading team {match.leading_team!r} with lead {lead}'
    elif match.status == COMPLETED and not match.result:
        problem = 'completed without a result'
    elif match.status == COMPLETED and match.result == ALL_SQUARE and match.leading_team is not None:
        problem = f'result AS with {match.leading_team} ahead'
    if problem:
        current_app.logger.error(f"[consistency] match={match.id} round={match.round_id} {problem}")
        raise ConsistencyError(f'Match {match.id} is inconsistent: {problem}')


def match_points(match) -> TeamTally:
    """One confirmed point to the winner (half each if halved); one pending point to a live leader."""
    if match.status == COMPLETED:
        winner = None if match.result == ALL_SQUARE else match.leading_team
        return _split(winner, 1.0, 0.0)
    if match.status == IN_PROGRESS and match.leading_team is not None:
        return _split(match.leading_team, 0.0, 1.0)
    return TeamTally()


def tally_matches(matches, holes_per_match=18) -> TeamTally:
    total = TeamTally()
    for match in matches:
        check_match_consistency(match, holes_per_match)
        total = total + match_points(match)
    return total


def recompute_round(round_, repo=None, holes_per_match=None) -> TeamTally:
    repo = repo or ScoreRepository()
    holes = holes_per_match or current_app.config.get('HOLES_PER_MATCH', 18)
    matches = repo.list_matches_by_round(round_.id)
    tally = tally_matches(matches, holes)
    is_complete = bool(matches) and all(m.status == COMPLETED for m in matches)
    repo.update_round(round_, is_complete=is_complete, **tally.round_fields())
    current_app.logger.info(
        f"[rollup] round={round_.id} aviators={tally.aviators.confirmed}(+{tally.aviators.pending}) "
        f"producers={tally.producers.confirmed}(+{tally.producers.pending}) complete={is_complete}"
    )
    return tally


def recompute_tournament(tournament, repo=None, holes_per_match=None) -> TeamTally:
    # Pending totals are returned, not stored; the tournament sums them from its rounds
    repo = repo or ScoreRepository()
    total = TeamTally()
    for round_ in repo.list_rounds_by_tournament(tournament.id):
        total = total + recompute_round(round_, repo, holes_per_match)
    repo.update_tournament(
        tournament,
        aviator_score=total.aviators.confirmed,
        producer_score=total.producers.confirmed,
    )
    current_app.logger.info(
        f"[rollup] tournament={tournament.id} aviators={total.aviators.confirmed} "
        f"producers={total.producers.confirmed}"
    )
    return total


def leading_side(tally: TeamTally):
    if tally.aviators.confirmed > tally.producers.confirmed:
        return AVIATORS
    if tally.producers.confirmed > tally.aviators.confirmed:
        return PRODUCERS
    return None
