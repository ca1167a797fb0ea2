"""In-process conversation store.

Turns live only for the lifetime of the controller that owns them; nothing
is written to disk. The presentation layer receives tuple snapshots and
never the underlying list.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from agent.core.models import Turn


class Conversation:
    """Append-only, chronologically ordered list of turns."""

    def __init__(self) -> None:
        self._turns: List[Turn] = []

    def append(self, turn: Turn) -> Turn:
        self._turns.append(turn)
        return turn

    def snapshot(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    def last(self) -> Optional[Turn]:
        return self._turns[-1] if self._turns else None

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
