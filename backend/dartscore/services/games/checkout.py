"""Checkout suggestions for 01 games.

Searches one, two and three dart finishes over the board and returns the
preferred route as a tuple of labels (``('T20', 'T20', 'BULL')``). Purely
advisory: nothing here touches match state.
"""

from collections import namedtuple
from functools import lru_cache
from typing import Optional, Tuple

CHECKOUT_MAX_SCORE = 149

Option = namedtuple('Option', 'label score is_double is_triple is_bull')


def _multiplier(option: Option) -> int:
    if option.is_triple:
        return 3
    return 2 if option.is_double else 1


def _board(split_bull: bool) -> Tuple[Option, ...]:
    darts = []
    for n in range(1, 21):
        darts.append(Option(f'S{n}', n, False, False, False))
        darts.append(Option(f'D{n}', n * 2, True, False, False))
        darts.append(Option(f'T{n}', n * 3, False, True, False))
    if split_bull:
        darts.append(Option('BULL25', 25, False, False, True))
        darts.append(Option('BULL50', 50, True, False, True))
    else:
        darts.append(Option('S25', 25, False, False, True))
        darts.append(Option('BULL', 50, True, False, True))
    return tuple(darts)


def _finishes(option: Option, out_mode: str) -> bool:
    if out_mode == 'double':
        return option.is_double
    if out_mode == 'master':
        return option.is_double or option.is_triple or option.is_bull
    return True


def _rank(route):
    # fewer darts first, then the heaviest opening darts, then the widest beds
    return (len(route), tuple(-o.score for o in route), tuple(_multiplier(o) for o in route))


@lru_cache(maxsize=4096)
def _solve(score: int, darts: int, out_mode: str, split_bull: bool):
    board = _board(split_bull)
    finishers = {}
    for option in board:
        if _finishes(option, out_mode):
            finishers.setdefault(option.score, []).append(option)

    best = None

    def consider(route):
        nonlocal best
        if best is None or _rank(route) < _rank(best):
            best = route

    for last in finishers.get(score, ()):
        consider((last,))
    if darts >= 2 and best is None:
        for first in board:
            for last in finishers.get(score - first.score, ()):
                consider((first, last))
    if darts >= 3 and best is None:
        for first in board:
            for second in board:
                for last in finishers.get(score - first.score - second.score, ()):
                    consider((first, second, last))
    if best is None:
        return None
    return tuple(o.label for o in best)


def suggest(remaining: int, darts_remaining: int, out_mode: str = 'double',
            split_bull: bool = False, max_score: int = CHECKOUT_MAX_SCORE) -> Optional[Tuple[str, ...]]:
    """Suggest a finishing route for ``remaining`` within ``darts_remaining`` darts.

    Returns None when no legal finish exists under ``out_mode``, when fewer
    than one dart is left, or when ``remaining`` is above ``max_score``.
    """
    if darts_remaining < 1 or remaining <= 1 or remaining > max_score:
        return None
    if out_mode not in ('open', 'master', 'double'):
        return None
    return _solve(int(remaining), min(int(darts_remaining), 3), out_mode, bool(split_bull))


def format_checkout(route) -> Optional[str]:
    if not route:
        return None
    return ' '.join(route)
