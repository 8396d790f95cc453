"""Turn/round state machine for two-player 01 matches.

``reduce(state, event)`` never mutates ``state``; it returns the next state
together with the output events the transition produced. Refused input
(throws outside ``AWAITING_THROW``, duplicate throw ids, undo with nothing
left) yields an unchanged state and no events.

Phases::

    INTRO -> AWAITING_THROW -> TURN_RESOLVING -> AWAITING_THROW ...
                           \\-> GAME_OVER (winning dart)

``TURN_RESOLVING`` is left by a ``ResolveTurn`` carrying the current
resolution token, normally fired by the scheduler after the display delay.
"""

import copy
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional, Tuple

from dartscore.models import (
    Achievement, Dart, GameConfig, MISS, Phase, PlayerState, Snapshot, TurnState,
    format_dart, player_scores,
)
from . import rules
from .achievements import classify
from .checkout import CHECKOUT_MAX_SCORE, format_checkout, suggest
from .classifier import classify_hit, is_button
from .history import MAX_UNDOS, UndoHistory
from .scoring import display_ppr, freeze_if_crossed, freeze_threshold, points_per_round

DEDUPE_WINDOW = 64


# ---- input events ----

@dataclass(frozen=True)
class IntroComplete:
    pass


@dataclass(frozen=True)
class Throw:
    segment_type: str
    base_value: int = 0
    multiplier: int = 0
    throw_id: Optional[str] = None


@dataclass(frozen=True)
class EndTurn:
    throw_id: Optional[str] = None


@dataclass(frozen=True)
class ResolveTurn:
    # None resolves whatever is pending
    token: Optional[int] = None


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Rematch:
    pass


# ---- output events ----

@dataclass(frozen=True)
class TurnChanged:
    name: ClassVar[str] = 'turn_changed'
    player: str
    previous: Optional[str]
    round: int

    def to_dict(self):
        return {'player': self.player, 'previous': self.previous, 'round': self.round}


@dataclass(frozen=True)
class AchievementDetected:
    name: ClassVar[str] = 'achievement'
    kind: Achievement
    player: str

    def to_dict(self):
        return {'kind': self.kind.value, 'label': self.kind.label, 'player': self.player}


@dataclass(frozen=True)
class GameOver:
    name: ClassVar[str] = 'game_over'
    winner: str
    scores: Dict[str, int]

    def to_dict(self):
        return {'winner': self.winner, 'scores': dict(self.scores)}


@dataclass
class MatchState:
    config: GameConfig
    player_ids: Tuple[str, str]
    starting_player: str
    players: Dict[str, PlayerState]
    turn: TurnState
    history: UndoHistory
    phase: Phase = Phase.INTRO
    round: int = 1
    threw_this_round: List[str] = field(default_factory=list)
    resolution_token: int = 0
    last_achievement: Optional[Achievement] = None
    winner: Optional[str] = None
    recent_throw_ids: List[str] = field(default_factory=list)

    @property
    def active_player(self) -> str:
        return self.turn.active_player

    def opponent(self, player_id: str) -> str:
        first, second = self.player_ids
        return second if player_id == first else first


def new_match(config: GameConfig, player_ids=('p1', 'p2'), starting_player=None,
              max_undos: int = MAX_UNDOS) -> MatchState:
    player_ids = tuple(player_ids)
    if len(player_ids) != 2 or player_ids[0] == player_ids[1]:
        raise ValueError('a match needs exactly two distinct players')
    starting_player = starting_player or player_ids[0]
    if starting_player not in player_ids:
        raise ValueError(f'unknown starting player {starting_player!r}')
    return MatchState(
        config=config,
        player_ids=player_ids,
        starting_player=starting_player,
        players={pid: PlayerState(score=config.start_score) for pid in player_ids},
        turn=TurnState(active_player=starting_player),
        history=UndoHistory(max_undos),
    )


def reduce(state: MatchState, event) -> Tuple[MatchState, list]:
    handler = _HANDLERS.get(type(event))
    if handler is None:
        return state, []
    throw_id = getattr(event, 'throw_id', None)
    if throw_id is not None and throw_id in state.recent_throw_ids:
        return state, []
    state = copy.deepcopy(state)
    if throw_id is not None:
        state.recent_throw_ids.append(throw_id)
        del state.recent_throw_ids[:-DEDUPE_WINDOW]
    events: list = []
    state = handler(state, event, events)
    return state, events


# ---- handlers ----

def _on_intro_complete(state, event, events):
    if state.phase == Phase.INTRO:
        state.phase = Phase.AWAITING_THROW
        events.append(TurnChanged(player=state.active_player, previous=None, round=state.round))
    return state


def _on_throw(state, event, events):
    if is_button(event.segment_type):
        return _on_end_turn(state, event, events)
    dart = classify_hit(event.segment_type, event.base_value, event.multiplier)
    if state.phase != Phase.AWAITING_THROW or len(state.turn.darts) >= 3:
        return state
    _apply_dart(state, dart, events)
    return state


def _apply_dart(state: MatchState, dart: Dart, events: list) -> None:
    pid = state.active_player
    player = state.players[pid]
    turn = state.turn
    state.history.push(_snapshot(state))

    outcome = rules.apply(dart, player, turn, state.config)
    turn.darts.append(Dart(segment=dart.segment, score=outcome.effective_score,
                           multiplier=dart.multiplier))
    player.darts_thrown += 1

    if outcome.is_bust:
        achievement = classify(turn.darts, turn.round_score + outcome.effective_score, is_bust=True)
        _begin_resolution(state, achievement, events)
        return

    player.score = outcome.projected_score
    turn.round_score += outcome.effective_score
    if outcome.starts_player:
        player.has_started = True
    freeze_if_crossed(state.players, state.config.start_score)

    if outcome.is_win:
        state.last_achievement = classify(turn.darts, turn.round_score, is_win=True)
        state.winner = pid
        state.phase = Phase.GAME_OVER
        events.append(AchievementDetected(kind=state.last_achievement, player=pid))
        events.append(GameOver(winner=pid, scores=player_scores(state.players)))
        return

    if len(turn.darts) == 3:
        _begin_resolution(state, classify(turn.darts, turn.round_score), events)


def _begin_resolution(state: MatchState, achievement: Optional[Achievement], events: list) -> None:
    state.last_achievement = achievement
    if achievement is not None:
        events.append(AchievementDetected(kind=achievement, player=state.active_player))
    state.phase = Phase.TURN_RESOLVING
    state.resolution_token += 1


def _on_end_turn(state, event, events):
    if state.phase != Phase.AWAITING_THROW:
        return state
    turn = state.turn
    missing = turn.darts_remaining
    turn.darts.extend([MISS] * missing)
    state.players[turn.active_player].darts_thrown += missing
    _begin_resolution(state, classify(turn.darts, turn.round_score), events)
    return state


def _on_resolve_turn(state, event, events):
    if state.phase != Phase.TURN_RESOLVING:
        return state
    if event.token is not None and event.token != state.resolution_token:
        return state
    previous = state.active_player
    if previous not in state.threw_this_round:
        state.threw_this_round.append(previous)
    if all(pid in state.threw_this_round for pid in state.player_ids):
        state.round += 1
        state.threw_this_round = []
    nxt = state.opponent(previous)
    state.turn = TurnState(active_player=nxt)
    state.last_achievement = None
    state.phase = Phase.AWAITING_THROW
    events.append(TurnChanged(player=nxt, previous=previous, round=state.round))
    return state


def _on_undo(state, event, events):
    if state.phase not in (Phase.AWAITING_THROW, Phase.TURN_RESOLVING):
        return state
    snap = state.history.pop()
    if snap is None:
        return state
    previous = state.active_player
    state.players = {pid: copy.deepcopy(p) for pid, p in snap.players}
    state.turn = copy.deepcopy(snap.turn)
    state.round = snap.round
    state.threw_this_round = list(snap.threw_this_round)
    state.last_achievement = None
    state.phase = Phase.AWAITING_THROW
    # invalidate any pending resolution timer
    state.resolution_token += 1
    if state.active_player != previous:
        events.append(TurnChanged(player=state.active_player, previous=previous, round=state.round))
    return state


def _on_rematch(state, event, events):
    return new_match(state.config, state.player_ids, state.starting_player,
                     max_undos=state.history.max_undos)


_HANDLERS = {
    IntroComplete: _on_intro_complete,
    Throw: _on_throw,
    EndTurn: _on_end_turn,
    ResolveTurn: _on_resolve_turn,
    Undo: _on_undo,
    Rematch: _on_rematch,
}


def _snapshot(state: MatchState) -> Snapshot:
    return Snapshot(
        players=tuple((pid, copy.deepcopy(p)) for pid, p in state.players.items()),
        turn=copy.deepcopy(state.turn),
        round=state.round,
        threw_this_round=tuple(state.threw_this_round),
    )


# ---- read side ----

def checkout_for(state: MatchState, max_score: int = CHECKOUT_MAX_SCORE):
    """Live checkout route for the active player, or None."""
    if state.phase != Phase.AWAITING_THROW:
        return None
    player = state.players[state.active_player]
    if not player.has_started and state.config.in_mode != 'open':
        return None
    return suggest(player.score, state.turn.darts_remaining, state.config.out_mode,
                   state.config.split_bull, max_score=max_score)


def to_dict(state: MatchState, max_score: int = CHECKOUT_MAX_SCORE):
    start = state.config.start_score
    route = checkout_for(state, max_score)
    players = {}
    for pid, p in state.players.items():
        entry = p.to_dict()
        entry['ppr'] = round(display_ppr(p, start), 2)
        entry['live_ppr'] = round(points_per_round(p, start), 2)
        players[pid] = entry
    turn = state.turn.to_dict()
    turn['labels'] = [format_dart(d, state.config.split_bull) for d in state.turn.darts]
    return {
        'config': state.config.to_dict(),
        'phase': state.phase.value,
        'player_ids': list(state.player_ids),
        'starting_player': state.starting_player,
        'active_player': state.active_player,
        'players': players,
        'turn': turn,
        'round': state.round,
        'stats_frozen': any(p.frozen_ppr is not None for p in state.players.values()),
        'freeze_threshold': freeze_threshold(start),
        'undos_remaining': state.history.remaining,
        'can_undo': state.history.can_undo,
        'resolution_token': state.resolution_token,
        'last_achievement': state.last_achievement.value if state.last_achievement else None,
        'winner': state.winner,
        'checkout': format_checkout(route),
        'checkout_route': list(route) if route else None,
    }
