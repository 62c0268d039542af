"""Match score aggregation from hole outcomes. Pure functions only."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import ScoreValidationError
from .formats import (
    AVIATORS,
    COMPLETED,
    HALVED,
    IN_PROGRESS,
    PRODUCERS,
    UPCOMING,
    closed_out,
    leader_for,
    status_label,
    up_result,
)


@dataclass(frozen=True)
class HoleState:
    winning_team: str
    differential: int

    @property
    def match_status(self) -> str:
        return status_label(self.differential)


@dataclass(frozen=True)
class MatchState:
    status: str
    current_hole: int
    leading_team: Optional[str]
    lead_amount: int
    result: Optional[str]
    holes: Tuple[HoleState, ...] = ()

    @property
    def locked(self) -> bool:
        return self.status == COMPLETED

    @property
    def holes_played(self) -> int:
        return len(self.holes)

    def as_fields(self) -> dict:
        return {
            'status': self.status,
            'current_hole': self.current_hole,
            'leading_team': self.leading_team,
            'lead_amount': self.lead_amount,
            'result': self.result,
        }


def hole_outcome(aviator_strokes: Optional[int], producer_strokes: Optional[int]) -> Optional[str]:
    """Winner of a hole from stroke counts (low score wins), None until both sides post."""
    if aviator_strokes is None or producer_strokes is None:
        return None
    if aviator_strokes < producer_strokes:
        return AVIATORS
    if producer_strokes < aviator_strokes:
        return PRODUCERS
    return HALVED


def team_hole_score(strokes: Iterable[Optional[int]]) -> Optional[int]:
    posted = [s for s in strokes if s is not None]
    return min(posted) if posted else None


def compute_match_state(outcomes: Sequence[str], total_holes: int = 18) -> MatchState:
    """Fold hole outcomes into a MatchState; outcomes after the closing hole are ignored."""
    if total_holes < 1:
        raise ScoreValidationError('A match needs at least one hole')
    if len(outcomes) > total_holes:
        raise ScoreValidationError(
            f'{len(outcomes)} hole results recorded for a {total_holes}-hole match'
        )

    differential = 0
    holes: List[HoleState] = []
    for played, outcome in enumerate(outcomes, start=1):
        if outcome == AVIATORS:
            differential += 1
        elif outcome == PRODUCERS:
            differential -= 1
        elif outcome != HALVED:
            raise ScoreValidationError(f'Unknown hole outcome: {outcome!r}')
        holes.append(HoleState(outcome, differential))

        lead = abs(differential)
        remaining = total_holes - played
        if remaining == 0:
            return MatchState(COMPLETED, played, leader_for(differential), lead,
                              up_result(lead), tuple(holes))
        if lead and lead >= remaining:
            return MatchState(COMPLETED, played, leader_for(differential), lead,
                              closed_out(lead, remaining), tuple(holes))

    if not holes:
        return MatchState(UPCOMING, 1, None, 0, None)
    return MatchState(IN_PROGRESS, len(holes) + 1, leader_for(differential),
                      abs(differential), None, tuple(holes))


def ordered_outcomes(scores, total_holes: int = 18) -> List[Tuple[object, Optional[str]]]:
    """Score rows paired with their outcomes in hole order; played holes must run 1..k with no gaps."""
    seen = set()
    for score in scores:
        number = score.hole_number
        if not isinstance(number, int) or not 1 <= number <= total_holes:
            raise ScoreValidationError(
                f'Hole number must be between 1 and {total_holes}, got {number!r}'
            )
        if number in seen:
            raise ScoreValidationError(f'Hole {number} was entered more than once')
        seen.add(number)
    pairs = [
        (score, hole_outcome(score.aviator_score, score.producer_score))
        for score in sorted(scores, key=lambda s: s.hole_number)
    ]
    expected = 1
    for score, outcome in pairs:
        if outcome is None:
            continue
        if score.hole_number != expected:
            raise ScoreValidationError(
                f'Hole {expected} needs both scores before hole {score.hole_number} can count'
            )
        expected += 1
    return pairs
