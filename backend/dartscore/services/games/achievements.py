from typing import Callable, List, Optional, Sequence, Tuple

from dartscore.models import Achievement, Dart, DOUBLE_BULL_LABEL

CRICKET_NUMBERS = frozenset(range(15, 21))


def _all_segments(darts, segment):
    return all(d.segment == segment for d in darts)


def _is_ton80(darts, turn_score, game):
    return _all_segments(darts, 'T20')


def _is_three_in_black(darts, turn_score, game):
    return _all_segments(darts, DOUBLE_BULL_LABEL)


def _is_shanghai(darts, turn_score, game):
    if game != '01':
        return False
    numbers = {d.number for d in darts}
    if len(numbers) != 1:
        return False
    number = numbers.pop()
    if number is None or not 1 <= number <= 20:
        return False
    return {d.segment[0] for d in darts} == {'S', 'D', 'T'}


def _is_white_horse(darts, turn_score, game):
    if game != 'cricket':
        return False
    triples = [d.segment for d in darts if d.is_triple]
    return len(triples) == 3 and len(set(triples)) == 3


def _is_hat_trick(darts, turn_score, game):
    return all(d.is_bull for d in darts)


def _is_three_in_bed(darts, turn_score, game):
    if not all(d.is_triple for d in darts):
        return False
    if len({d.segment for d in darts}) != 1:
        return False
    if game == 'cricket':
        return darts[0].number in CRICKET_NUMBERS
    return True


def _is_high_ton(darts, turn_score, game):
    return turn_score >= 150


def _is_low_ton(darts, turn_score, game):
    return 100 <= turn_score < 150


# First match wins; bust and win are handled ahead of this list.
PATTERNS: List[Tuple[Achievement, Callable]] = [
    (Achievement.TON80, _is_ton80),
    (Achievement.THREE_IN_BLACK, _is_three_in_black),
    (Achievement.SHANGHAI, _is_shanghai),
    (Achievement.WHITE_HORSE, _is_white_horse),
    (Achievement.HAT_TRICK, _is_hat_trick),
    (Achievement.THREE_IN_BED, _is_three_in_bed),
    (Achievement.HIGH_TON, _is_high_ton),
    (Achievement.LOW_TON, _is_low_ton),
]


def classify(darts: Sequence[Dart], turn_score: int, is_bust: bool = False,
             is_win: bool = False, game: str = '01') -> Optional[Achievement]:
    """Name the pattern of a finished turn, or None.

    Pattern achievements need three darts; a shorter turn can only be a bust
    or a win.
    """
    if is_bust:
        return Achievement.BUST
    if is_win:
        return Achievement.WIN
    if len(darts) != 3:
        return None
    for achievement, matches in PATTERNS:
        if matches(darts, turn_score, game):
            return achievement
    return None
