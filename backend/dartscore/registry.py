"""In-memory registry of live matches, keyed by match code.

Match history is not persisted. Matches idle for longer than the configured
TTL are pruned whenever a new match is created.
"""

import threading
import time
from typing import Dict, List, Optional

from dartscore.models import GameConfig, generate_match_code
from dartscore.services.games import engine

_matches: Dict[str, 'Match'] = {}
_registry_lock = threading.Lock()


class Match:
    def __init__(self, code: str, state: engine.MatchState, names: Dict[str, str]):
        self.code = code
        self.state = state
        self.names = names
        self.lock = threading.RLock()
        self.last_active = time.time()
        # bumped on rematch so stale timers can tell
        self.generation = 0
        # client-visible deadline of the running display delay
        self.deadline: Optional[float] = None

    def dispatch(self, event) -> list:
        with self.lock:
            previous_phase = self.state.phase
            self.state, events = engine.reduce(self.state, event)
            self.last_active = time.time()
            if isinstance(event, engine.Rematch):
                self.generation += 1
            if self.state.phase != previous_phase:
                self.deadline = None
            return events

    def to_dict(self, max_score=engine.CHECKOUT_MAX_SCORE):
        with self.lock:
            payload = engine.to_dict(self.state, max_score)
            payload['match_code'] = self.code
            payload['names'] = dict(self.names)
            payload['deadline'] = self.deadline
            return payload


def create_match(config: GameConfig, names=None, starting_player=None, max_undos=3) -> Match:
    names = list(names or [])
    player_ids = ('p1', 'p2')
    labels = {pid: (names[i] if i < len(names) and names[i] else f'PLAYER{i + 1}')
              for i, pid in enumerate(player_ids)}
    state = engine.new_match(config, player_ids, starting_player, max_undos=max_undos)
    with _registry_lock:
        code = generate_match_code(_matches)
        match = Match(code, state, labels)
        _matches[code] = match
    return match


def get_match(code: str) -> Optional[Match]:
    if not code:
        return None
    return _matches.get(code.upper())


def remove_match(code: str) -> None:
    with _registry_lock:
        _matches.pop((code or '').upper(), None)


def prune(ttl_sec: float, now: Optional[float] = None) -> List[str]:
    """Drop matches with no activity for ``ttl_sec`` seconds; returns their codes."""
    if ttl_sec <= 0:
        return []
    now = time.time() if now is None else now
    with _registry_lock:
        stale = [code for code, match in _matches.items() if now - match.last_active > ttl_sec]
    for code in stale:
        remove_match(code)
    return stale


def clear() -> None:
    with _registry_lock:
        _matches.clear()
