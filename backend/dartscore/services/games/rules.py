from dataclasses import dataclass

from dartscore.models import Dart, GameConfig, PlayerState, TurnState


@dataclass(frozen=True)
class RuleOutcome:
    effective_score: int
    is_bust: bool
    is_valid_out: bool
    starts_player: bool
    projected_score: int

    @property
    def is_win(self) -> bool:
        return self.projected_score == 0 and not self.is_bust


def qualifies(dart: Dart, mode: str) -> bool:
    """Whether ``dart`` satisfies an in/out ``mode``.

    open: anything; master: double, triple or any bull; double: the double
    ring or the double bull.
    """
    if mode == 'open':
        return True
    if mode == 'master':
        return dart.is_double or dart.is_triple or dart.is_bull
    if mode == 'double':
        return dart.is_double
    return False


def is_valid_in(dart: Dart, in_mode: str) -> bool:
    return dart.score > 0 and qualifies(dart, in_mode)


def is_valid_out(dart: Dart, out_mode: str) -> bool:
    return qualifies(dart, out_mode)


def apply(dart: Dart, player: PlayerState, turn: TurnState, config: GameConfig) -> RuleOutcome:
    """Evaluate one dart for the throwing player. Nothing is mutated."""
    starts_player = False
    effective = dart.score
    if not player.has_started:
        if is_valid_in(dart, config.in_mode):
            starts_player = True
        else:
            effective = 0

    projected = player.score - effective
    valid_out = is_valid_out(dart, config.out_mode)
    bust = projected < 0 or projected == 1 or (projected == 0 and not valid_out)
    return RuleOutcome(
        effective_score=effective,
        is_bust=bust,
        is_valid_out=valid_out,
        starts_player=starts_player,
        projected_score=projected,
    )
