from typing import Optional

from dartscore.models import (
    Dart, MISS, SINGLE_BULL_LABEL, DOUBLE_BULL_LABEL,
)

BUTTON = 'BUTTON'

_ALIASES = {
    'SINGLE': 'SINGLE_INNER',
    'DOUBLE_BULL': 'DBL_BULL',
    'BULLSEYE': 'DBL_BULL',
    'SINGLE_BULL': 'BULL',
    'BTN': BUTTON,
}

# segment type -> (label prefix, multiplier)
_RING = {
    'SINGLE_INNER': ('S', 1),
    'SINGLE_OUTER': ('S', 1),
    'DOUBLE': ('D', 2),
    'TRIPLE': ('T', 3),
}


def normalize_segment_type(segment_type) -> str:
    tag = str(segment_type or '').strip().upper().replace('-', '_').replace(' ', '_')
    return _ALIASES.get(tag, tag)


def is_button(segment_type) -> bool:
    return normalize_segment_type(segment_type) == BUTTON


def classify_hit(segment_type, base_value=0, multiplier=None) -> Optional[Dart]:
    """Map a raw board hit to a canonical :class:`Dart`.

    The segment type decides the multiplier; the ``multiplier`` reported by
    the board is accepted for interface symmetry only. Returns ``None`` for the
    hardware button, which is not a dart. Anything unrecognized is a miss.
    """
    tag = normalize_segment_type(segment_type)
    if tag == BUTTON:
        return None
    if tag == 'BULL':
        return Dart(segment=SINGLE_BULL_LABEL, score=25, multiplier=1)
    if tag == 'DBL_BULL':
        return Dart(segment=DOUBLE_BULL_LABEL, score=50, multiplier=2)
    if tag not in _RING:
        return MISS
    try:
        value = int(base_value)
    except (TypeError, ValueError):
        return MISS
    if not 1 <= value <= 20:
        return MISS
    prefix, mult = _RING[tag]
    return Dart(segment=f'{prefix}{value}', score=value * mult, multiplier=mult)
