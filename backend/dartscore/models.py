from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional, Tuple
import random
import string

IN_OUT_MODES = ('open', 'master', 'double')

MISS_LABEL = 'MISS'
SINGLE_BULL_LABEL = 'S25'
DOUBLE_BULL_LABEL = 'D25'


class Phase(str, Enum):
    INTRO = 'intro'
    AWAITING_THROW = 'awaiting_throw'
    TURN_RESOLVING = 'turn_resolving'
    GAME_OVER = 'game_over'


class Achievement(str, Enum):
    BUST = 'bust'
    WIN = 'win'
    TON80 = 'ton80'
    THREE_IN_BLACK = 'threeInBlack'
    SHANGHAI = 'shanghai'
    WHITE_HORSE = 'whiteHorse'
    HAT_TRICK = 'hatTrick'
    THREE_IN_BED = 'threeInBed'
    HIGH_TON = 'highTon'
    LOW_TON = 'lowTon'

    @property
    def label(self) -> str:
        return ACHIEVEMENT_LABELS[self]


ACHIEVEMENT_LABELS = {
    Achievement.WIN: 'GAME!',
    Achievement.BUST: 'BUST!',
    Achievement.HAT_TRICK: 'HAT TRICK!',
    Achievement.THREE_IN_BLACK: '3 IN THE BLACK!',
    Achievement.TON80: 'TON 80!',
    Achievement.THREE_IN_BED: '3 IN A BED!',
    Achievement.WHITE_HORSE: 'WHITE HORSE!',
    Achievement.SHANGHAI: 'SHANGHAI!',
    Achievement.HIGH_TON: 'HIGH TON!',
    Achievement.LOW_TON: 'LOW TON!',
}


@dataclass(frozen=True)
class Dart:
    """A recorded dart.

    ``score`` is what the dart contributed (0 for a miss, or for a dart thrown
    before the player opened), ``multiplier`` is 0 for a miss.
    """

    segment: str
    score: int
    multiplier: int

    @property
    def number(self) -> Optional[int]:
        """Board number of the segment (1-20, 25 for bull), None for a miss."""
        if self.segment == MISS_LABEL or len(self.segment) < 2:
            return None
        try:
            return int(self.segment[1:])
        except ValueError:
            return None

    @property
    def is_miss(self) -> bool:
        return self.multiplier == 0

    @property
    def is_double(self) -> bool:
        return self.multiplier == 2

    @property
    def is_triple(self) -> bool:
        return self.multiplier == 3

    @property
    def is_bull(self) -> bool:
        return self.segment in (SINGLE_BULL_LABEL, DOUBLE_BULL_LABEL)

    def to_dict(self):
        return asdict(self)


MISS = Dart(segment=MISS_LABEL, score=0, multiplier=0)


@dataclass(frozen=True)
class GameConfig:
    start_score: int = 501
    in_mode: str = 'open'
    out_mode: str = 'double'
    split_bull: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.start_score, int) or self.start_score <= 1:
            raise ValueError('start_score must be an integer greater than 1')
        if self.in_mode not in IN_OUT_MODES:
            raise ValueError(f'in_mode must be one of {", ".join(IN_OUT_MODES)}')
        if self.out_mode not in IN_OUT_MODES:
            raise ValueError(f'out_mode must be one of {", ".join(IN_OUT_MODES)}')

    @property
    def format_label(self) -> str:
        """Short banner text, e.g. ``DOUBLE IN/OUT`` or ``MASTER OUT``."""
        in_mode, out_mode = self.in_mode, self.out_mode
        if in_mode == out_mode:
            if in_mode == 'open':
                return 'OPEN'
            return f'{in_mode.upper()} IN/OUT'
        parts = []
        if in_mode != 'open':
            parts.append(f'{in_mode.upper()} IN')
        if out_mode != 'open':
            parts.append(f'{out_mode.upper()} OUT')
        return ' / '.join(parts)

    @property
    def bull_label(self) -> str:
        return 'SPLIT' if self.split_bull else 'FULL'

    def to_dict(self):
        payload = asdict(self)
        payload['format'] = self.format_label
        payload['bull'] = self.bull_label
        return payload


@dataclass
class PlayerState:
    score: int
    darts_thrown: int = 0
    has_started: bool = False
    frozen_ppr: Optional[float] = None

    def to_dict(self):
        return asdict(self)


@dataclass
class TurnState:
    active_player: str
    darts: List[Dart] = field(default_factory=list)
    round_score: int = 0

    @property
    def darts_remaining(self) -> int:
        return max(0, 3 - len(self.darts))

    def to_dict(self):
        return {
            'active_player': self.active_player,
            'darts': [d.to_dict() for d in self.darts],
            'round_score': self.round_score,
        }


@dataclass(frozen=True)
class Snapshot:
    """Scoring state captured immediately before a dart is applied."""

    players: Tuple[Tuple[str, PlayerState], ...]
    turn: TurnState
    round: int
    threw_this_round: Tuple[str, ...]


def format_dart(dart: Dart, split_bull: bool = False) -> str:
    """Display text for a recorded dart."""
    if dart.segment == MISS_LABEL:
        return 'MISS'
    if dart.is_bull:
        if not split_bull:
            return 'BULL'
        return 'DBULL' if dart.segment == DOUBLE_BULL_LABEL else 'BULL'
    return dart.segment


def generate_match_code(taken, length=4):
    """Generate a unique, short match code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in taken:
            return code


def player_scores(players: Dict[str, PlayerState]) -> Dict[str, int]:
    return {pid: p.score for pid, p in players.items()}
