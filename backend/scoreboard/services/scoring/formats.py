"""Sides, match statuses, match formats and match-play result notation."""

import re
from enum import Enum
from typing import Optional, Tuple

from .errors import ScoreValidationError

AVIATORS = 'aviators'
PRODUCERS = 'producers'
SIDES = (AVIATORS, PRODUCERS)
# Winning-team value stored on a halved hole
HALVED = 'tie'

UPCOMING = 'upcoming'
IN_PROGRESS = 'in_progress'
COMPLETED = 'completed'

ALL_SQUARE = 'AS'

_SIDE_PREFIX = {AVIATORS: 'A', PRODUCERS: 'P'}
_CLOSED_RE = re.compile(r'^(\d+)&(\d+)$')
_UP_RE = re.compile(r'^(\d+)UP$')
_MAN_PREFIX = re.compile(r'^\d+-man ')


class MatchType(Enum):
    SINGLES = ('Singles', 1)
    TWO_MAN_SCRAMBLE = ('2-man Team Scramble', 2)
    FOUR_MAN_SCRAMBLE = ('4-man Team Scramble', 4)
    SHAMBLE = ('2-man Team Shamble', 2)
    BEST_BALL = ('2-man Team Best Ball', 2)
    ALTERNATE_SHOT = ('Alternate Shot', 2)

    def __init__(self, label, players_per_side):
        self.label = label
        self.players_per_side = players_per_side

    @classmethod
    def from_label(cls, label: Optional[str]) -> 'MatchType':
        key = _normalize_label(label)
        for match_type in cls:
            if _normalize_label(match_type.label) == key:
                return match_type
        # Bare format names ("Shamble", "Best Ball") mean the smallest side size
        for match_type in cls:
            if _MAN_PREFIX.sub('', _normalize_label(match_type.label)) == key:
                return match_type
        raise ScoreValidationError(f'Unknown match type: {label!r}')


def _normalize_label(label):
    # "2-man Scramble", "2-man Team Scramble" and "Singles Match" style labels
    words = (label or '').lower().replace('_', ' ').split()
    return ' '.join(w for w in words if w not in ('team', 'match'))


def other_side(side: str) -> str:
    if side == AVIATORS:
        return PRODUCERS
    if side == PRODUCERS:
        return AVIATORS
    raise ScoreValidationError(f'Unknown team side: {side!r}')


def validate_side(side: Optional[str]) -> str:
    normalized = (side or '').strip().lower()
    if normalized not in SIDES:
        raise ScoreValidationError(f"Team must be one of {', '.join(SIDES)}")
    return normalized


def leader_for(differential: int) -> Optional[str]:
    """Side ahead for a running differential (positive means aviators)."""
    if differential > 0:
        return AVIATORS
    if differential < 0:
        return PRODUCERS
    return None


def status_label(differential: int) -> str:
    side = leader_for(differential)
    if side is None:
        return ALL_SQUARE
    return f'{_SIDE_PREFIX[side]}{abs(differential)}'


def closed_out(lead: int, holes_remaining: int) -> str:
    return f'{lead}&{holes_remaining}'


def up_result(lead: int) -> str:
    return f'{lead}UP' if lead else ALL_SQUARE


def normalize_result(result: Optional[str]) -> str:
    """Canonicalise an admin-entered result ("3 & 2", "2 up", "all square")."""
    text = (result or '').strip().upper().replace(' ', '')
    if text in (ALL_SQUARE, 'ALLSQUARE', 'HALVED'):
        return ALL_SQUARE
    closed = _CLOSED_RE.match(text)
    if closed:
        lead, remaining = int(closed.group(1)), int(closed.group(2))
        if remaining < 1 or lead < remaining:
            raise ScoreValidationError(f'Impossible match result: {result!r}')
        return closed_out(lead, remaining)
    up = _UP_RE.match(text)
    if up and int(up.group(1)) >= 1:
        return up_result(int(up.group(1)))
    raise ScoreValidationError(f'Invalid match result: {result!r}')


def result_margin(result: str) -> Tuple[int, Optional[int]]:
    """Split canonical notation into (lead, holes remaining); AS is (0, None)."""
    if result == ALL_SQUARE:
        return 0, None
    closed = _CLOSED_RE.match(result)
    if closed:
        return int(closed.group(1)), int(closed.group(2))
    up = _UP_RE.match(result)
    if up:
        return int(up.group(1)), 0
    raise ScoreValidationError(f'Invalid match result: {result!r}')
