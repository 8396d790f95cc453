import copy
from typing import List, Optional

from dartscore.models import Snapshot

MAX_UNDOS = 3


class UndoHistory:
    """Bounded stack of pre-throw snapshots.

    ``remaining`` starts at ``max_undos`` and only ever goes down during a
    game. The stack never holds more snapshots than undos left to spend.
    """

    def __init__(self, max_undos: int = MAX_UNDOS):
        self.max_undos = max(0, int(max_undos))
        self.remaining = self.max_undos
        self._stack: List[Snapshot] = []

    def __len__(self):
        return len(self._stack)

    def __eq__(self, other):
        if not isinstance(other, UndoHistory):
            return NotImplemented
        return (self.max_undos, self.remaining, self._stack) == (other.max_undos, other.remaining, other._stack)

    @property
    def can_undo(self) -> bool:
        return bool(self._stack) and self.remaining > 0

    def push(self, snapshot: Snapshot) -> None:
        if self.remaining <= 0:
            return
        self._stack.append(copy.deepcopy(snapshot))
        del self._stack[:-self.remaining]

    def pop(self) -> Optional[Snapshot]:
        if not self.can_undo:
            return None
        self.remaining -= 1
        return self._stack.pop()

    def to_dict(self):
        return {'undos_remaining': self.remaining, 'history_depth': len(self._stack)}
