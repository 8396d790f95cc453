from typing import Dict

from dartscore.models import PlayerState

FREEZE_THRESHOLDS = {501: 100, 301: 50}


def freeze_threshold(start_score: int) -> int:
    """Remaining score at which scoring-rate stats stop updating.

    Roughly the 80% mark: 100 left in 501, 50 left in 301.
    """
    return FREEZE_THRESHOLDS.get(start_score, start_score // 5)


def points_per_round(player: PlayerState, start_score: int) -> float:
    """Points scored per dart, scaled to a three-dart round."""
    if player.darts_thrown <= 0:
        return 0.0
    return (start_score - player.score) / player.darts_thrown * 3


def display_ppr(player: PlayerState, start_score: int) -> float:
    if player.frozen_ppr is not None:
        return player.frozen_ppr
    return points_per_round(player, start_score)


def freeze_if_crossed(players: Dict[str, PlayerState], start_score: int) -> bool:
    """Capture every player's PPR the first time anyone reaches the threshold.

    Returns True when the freeze happened on this call.
    """
    if any(p.frozen_ppr is not None for p in players.values()):
        return False
    threshold = freeze_threshold(start_score)
    if not any(p.score <= threshold for p in players.values()):
        return False
    for p in players.values():
        p.frozen_ppr = points_per_round(p, start_score)
    return True
